from dataclasses import replace

import pytest

from guionbd.fusion import derive_key, merge_records, reconcile


def snapshot(records):
    return [(r.id, r.title, r.writer, r.date_added, r.status) for r in records]


def test_derive_key(record_factory):
    rec = record_factory(title="Cambio climático en la región", writer="Ana Pérez")
    assert derive_key(rec) == "2024 01 05|CAMBIO CLIMATICO EN LA REGION|ANA PEREZ"


def test_key_ignores_id_status_and_time(record_factory):
    a = record_factory(title="Salud")
    b = replace(a, id="otro", status="inactive", advisor="Nadie",
                date_added=a.date_added.replace(hour=23, minute=59))
    assert derive_key(a) == derive_key(b)
    assert derive_key(a) != derive_key(replace(a, writer="Luis Mora"))
    assert derive_key(a) != derive_key(replace(a, date_added=a.date_added.replace(day=6)))


def test_merge_overwrites_and_appends(record_factory):
    existing = [record_factory(title="Cambio climático", id="e1", advisor="Viejo")]
    incoming = [
        record_factory(title="CAMBIO CLIMATICO", id="n1", advisor="Nuevo"),
        record_factory(title="Otro tema", id="n2"),
    ]
    result = reconcile(existing, incoming)
    assert result.total == 2
    assert (result.added, result.updated) == (1, 1)
    first, second = result.records
    assert first.title == "CAMBIO CLIMATICO"
    assert first.advisor == "Nuevo"
    assert first.id == "e1"
    assert second.title == "Otro tema"


def test_merge_with_custom_key(record_factory):
    by_day = lambda r: r.date_added.date().isoformat()
    existing = [record_factory(title="A", day=(2024, 1, 1))]
    incoming = [record_factory(title="B", day=(2024, 1, 1)), record_factory(title="C", day=(2024, 1, 2))]
    result = reconcile(existing, incoming, key=by_day)
    assert [r.title for r in result.records] == ["B", "C"]


def test_preserve_ids_false_takes_incoming_id(record_factory):
    existing = [record_factory(title="A", id="viejo")]
    incoming = [record_factory(title="A", id="nuevo")]
    assert merge_records(existing, incoming, preserve_ids=False)[0].id == "nuevo"
    assert merge_records(existing, incoming)[0].id == "viejo"


def test_merge_order(record_factory):
    existing = [record_factory(title=t) for t in ("A", "B", "C")]
    incoming = [record_factory(title=t) for t in ("D", "B")]
    assert [r.title for r in merge_records(existing, incoming)] == ["A", "C", "D", "B"]


@pytest.mark.parametrize("preserve_ids", [True, False])
def test_merge_is_idempotent(record_factory, preserve_ids):
    existing = [record_factory(title=t, id=f"e-{t}") for t in ("A", "B")]
    incoming = [record_factory(title=t, id=f"n-{t}", advisor="Otro") for t in ("B", "C", "B")]
    once = merge_records(existing, incoming, preserve_ids)
    twice = merge_records(once, incoming, preserve_ids)
    assert snapshot(twice) == snapshot(once)


def test_inputs_are_not_mutated(record_factory):
    existing = [record_factory(title="A", id="e")]
    incoming = [record_factory(title="A", id="n")]
    merge_records(existing, incoming)
    assert existing[0].id == "e"
    assert incoming[0].id == "n"


def test_duplicates_inside_incoming_last_wins(record_factory):
    incoming = [record_factory(title="A", advisor="Uno"), record_factory(title="A", advisor="Dos")]
    result = reconcile([], incoming)
    assert [r.advisor for r in result.records] == ["Dos"]
    assert result.added == 1


def test_repeated_incoming_key_counts_one_update(record_factory):
    existing = [record_factory(title="A", id="e")]
    incoming = [record_factory(title="A", advisor="Uno"), record_factory(title="A", advisor="Dos")]
    result = reconcile(existing, incoming)
    assert (result.added, result.updated, result.total) == (0, 1, 1)
    assert result.records[0].advisor == "Dos"
    assert result.records[0].id == "e"
