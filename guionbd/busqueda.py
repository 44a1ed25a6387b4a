# -*- coding: utf-8 -*-

"""
Búsqueda y filtros sobre colecciones de guiones.

La coincidencia es por subcadena normalizada (sin acentos ni mayúsculas)
sobre tema, etiquetas, escritor, asesor, programa y fecha ("2024-01-05",
"5/1/2024" o "5 de enero de 2024"). Opcionalmente se añade una
coincidencia difusa sobre el tema con rapidfuzz.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, List, Optional

from rapidfuzz import fuzz

from .fechas import format_date_es, format_date_short
from .normalizar import normalize_text
from .registros import Record


def date_strings(d: datetime) -> List[str]:
    return [d.date().isoformat(), format_date_short(d), format_date_es(d)]


def _contains(values: Iterable[str], query: str) -> bool:
    q = normalize_text(query)
    raw_q = query.strip()
    for value in values:
        # La fecha corta lleva "/" y se compara también sin normalizar
        if (q and q in normalize_text(value)) or (raw_q and raw_q in value):
            return True
    return False


def matches_date(rec: Record, query: str) -> bool:
    return not query.strip() or _contains(date_strings(rec.date_added), query)


def matches(rec: Record, query: str, fuzzy_threshold: Optional[int] = None) -> bool:
    if not query.strip():
        return True
    fields = [rec.title, rec.writer, rec.advisor, rec.program, *rec.tags]
    if _contains(fields + date_strings(rec.date_added), query):
        return True
    q = normalize_text(query)
    if q and fuzzy_threshold is not None:
        return fuzz.partial_ratio(q, normalize_text(rec.title)) >= fuzzy_threshold
    return False


def sort_newest_first(records: Iterable[Record]) -> List[Record]:
    return sorted(records, key=lambda r: r.date_added, reverse=True)


def filter_by_year(records: Iterable[Record], year: Optional[int]) -> List[Record]:
    if year is None:
        return list(records)
    return [r for r in records if r.date_added.year == int(year)]


def filter_by_status(records: Iterable[Record], status: Optional[str]) -> List[Record]:
    if not status:
        return list(records)
    return [r for r in records if r.status == status]


def search_records(
    records: Iterable[Record],
    query: str = "",
    year: Optional[int] = None,
    fuzzy_threshold: Optional[int] = None,
) -> List[Record]:
    """Filtra por consulta y año; resultado ordenado de más reciente a más antiguo."""
    found = [r for r in filter_by_year(records, year) if matches(r, query, fuzzy_threshold)]
    return sort_newest_first(found)


def one_year_ago(records: Iterable[Record], today: Optional[date] = None) -> List[Record]:
    """Guiones del año anterior al actual ("Hace un año")."""
    today = today or datetime.now().date()
    return sort_newest_first(filter_by_year(records, today.year - 1))
