# -*- coding: utf-8 -*-

"""
Clave de identidad y fusión (upsert) de colecciones
---------------------------------------------------

Las exportaciones no traen un identificador fiable, así que "el mismo
guion" se reconoce por una clave derivada:

    normalize(día) | normalize(tema) | normalize(escritor)

El `id` asignado NO interviene: los lotes entrantes no conocen los ids ya
asignados.

Fusión: se insertan primero los existentes y luego los entrantes, y el
último en llegar gana. El orden del resultado es:

    claves solo existentes (orden original) + claves tocadas por el lote
    entrante (orden del lote)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Callable, Dict, Iterable, List

from .normalizar import normalize_text
from .registros import Record

log = logging.getLogger("guionbd.fusion")

KeyFunc = Callable[[Record], str]


def derive_key(record: Record) -> str:
    day = record.date_added.date().isoformat()
    return "|".join((
        normalize_text(day),
        normalize_text(record.title),
        normalize_text(record.writer),
    ))


@dataclass(slots=True)
class MergeResult:
    records: List[Record]
    added: int = 0
    updated: int = 0

    @property
    def total(self) -> int:
        return len(self.records)


def reconcile(
    existing: Iterable[Record],
    incoming: Iterable[Record],
    preserve_ids: bool = True,
    key: KeyFunc = derive_key,
) -> MergeResult:
    """Combina `existing` con `incoming`; el entrante sobrescribe.

    Con preserve_ids=True el registro sobrescrito conserva el id existente
    (las ediciones manuales se refieren a él). Con False se toma el
    registro entrante tal cual, id incluido. Las entradas no se modifican.
    """
    index: Dict[str, Record] = {}
    for rec in existing:
        k = key(rec)
        index.pop(k, None)
        index[k] = rec

    existing_keys = set(index)
    touched = set()
    added = updated = 0
    for rec in incoming:
        k = key(rec)
        previous = index.pop(k, None)
        if previous is None:
            added += 1
        else:
            if k in existing_keys and k not in touched:
                updated += 1
            if preserve_ids and previous.id != rec.id:
                rec = replace(rec, id=previous.id)
        touched.add(k)
        index[k] = rec

    result = MergeResult(list(index.values()), added=added, updated=updated)
    log.debug("Fusión: %d nuevos, %d actualizados, %d en total", added, updated, result.total)
    return result


def merge_records(
    existing: Iterable[Record],
    incoming: Iterable[Record],
    preserve_ids: bool = True,
) -> List[Record]:
    return reconcile(existing, incoming, preserve_ids=preserve_ids).records
