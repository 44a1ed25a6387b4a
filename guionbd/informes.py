# -*- coding: utf-8 -*-

"""
Informes tabulares sobre colecciones de guiones
-----------------------------------------------

  - programas      Guiones por programa
  - repetidas      Temáticas (etiquetas) que aparecen más de una vez
  - ano-atras      Temas del año anterior
  - meses          Temas por meses
  - por-programa   Temas por programa
  - balance        Campos que faltan en cada guion

Cada informe es una tabla (cabeceras + filas) que se puede volcar a CSV o
JSON.
"""

from __future__ import annotations

import csv
import json
import os
from collections import Counter
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Callable, Dict, Iterable, List, Optional

from .busqueda import matches_date, one_year_ago, sort_newest_first
from .fechas import format_date_es, format_date_short, month_name_es
from .registros import Record, missing_fields


@dataclass(slots=True)
class Report:
    title: str
    headers: List[str]
    rows: List[List[Any]] = field(default_factory=list)

    def as_dicts(self) -> List[Dict[str, Any]]:
        return [dict(zip(self.headers, row)) for row in self.rows]


# ============================================================
#                   INFORMES
# ============================================================

def count_by_program(records: Iterable[Record]) -> Report:
    counts = Counter(r.program for r in records)
    rows = sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))
    return Report("Guiones por Programa", ["Programa", "Guiones"], [list(r) for r in rows])


def repeated_themes(records: Iterable[Record]) -> Report:
    records = list(records)
    counts = Counter(t for r in records for t in r.tags)
    hits = [
        (t, r) for r in records for t in r.tags
        if counts[t] > 1
    ]
    hits.sort(key=lambda tr: (tr[0].lower(), tr[1].date_added))
    rows = [[format_date_short(r.date_added), r.program, t] for t, r in hits]
    return Report("Informe de Temáticas Repetidas", ["Fecha", "Programa", "Temática"], rows)


def themes_one_year_ago(records: Iterable[Record], today: Optional[date] = None) -> Report:
    today = today or datetime.now().date()
    target = today.year - 1
    rows = [
        [r.date_added.day, r.program, r.title]
        for r in sorted(one_year_ago(records, today), key=lambda r: r.date_added)
    ]
    return Report(f"Temas Año {target}", ["Día", "Programa", "Tema"], rows)


def themes_by_month(records: Iterable[Record]) -> Report:
    ordered = sorted(records, key=lambda r: (-r.date_added.year, r.date_added.month, r.date_added.day))
    rows = [
        [month_name_es(r.date_added.month).capitalize(), r.date_added.year, r.program, r.title]
        for r in ordered
    ]
    return Report("Informe de Temas por Meses", ["Mes", "Año", "Programa", "Temática"], rows)


def themes_by_program(records: Iterable[Record]) -> Report:
    ordered = sorted(records, key=lambda r: (r.program, r.date_added))
    rows = [[r.program, format_date_short(r.date_added), r.title] for r in ordered]
    return Report("Informe de Temas por Programa", ["Programa", "Fecha", "Temática"], rows)


def balance(records: Iterable[Record], date_query: str = "") -> Report:
    """Balance de programas: qué le falta a cada guion (Escritor, Asesor, Tema)."""
    rows = []
    for r in sort_newest_first(records):
        if date_query and not matches_date(r, date_query):
            continue
        missing = missing_fields(r)
        estado = "; ".join(f"Falta {m}" for m in missing) if missing else "Completo"
        rows.append([format_date_es(r.date_added), r.program, r.title, estado])
    return Report("Balance de Programas", ["Fecha", "Programa", "Tema", "Estado"], rows)


REPORTS: Dict[str, Callable[..., Report]] = {
    "programas": count_by_program,
    "repetidas": repeated_themes,
    "ano-atras": themes_one_year_ago,
    "meses": themes_by_month,
    "por-programa": themes_by_program,
    "balance": balance,
}


# ============================================================
#                   ESCRITURA
# ============================================================

def write_csv(report: Report, path: str) -> None:
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", newline="", encoding="utf-8") as f:
        w = csv.writer(f)
        w.writerow(report.headers)
        w.writerows(report.rows)


def write_json(report: Report, path: str) -> None:
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", encoding="utf-8") as fh:
        json.dump({"title": report.title, "rows": report.as_dicts()}, fh, ensure_ascii=False, indent=2)


def write_report(report: Report, path: str) -> None:
    if path.lower().endswith(".json"):
        write_json(report, path)
    else:
        write_csv(report, path)
