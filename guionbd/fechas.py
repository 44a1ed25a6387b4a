# -*- coding: utf-8 -*-

"""
Resolución de fechas en castellano
----------------------------------

Formatos admitidos:
  - "<día> de <Mes> de <año>" (con puntos o comas opcionales)
  - "<día>/<mes>/<año>" (siempre D/M/Y)

Las fechas se fijan a las 12:00 hora local para que ninguna conversión de
zona horaria las mueva de día. Si nada funciona se devuelve "ahora": los
consumidores necesitan siempre alguna fecha.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime
from typing import Dict, Mapping, Optional

from .normalizar import normalize_text

log = logging.getLogger("guionbd.fechas")


# ============================================================
#                   MESES
# ============================================================

MONTHS: Dict[str, int] = {
    "ENERO": 1, "FEBRERO": 2, "MARZO": 3, "ABRIL": 4, "MAYO": 5, "JUNIO": 6,
    "JULIO": 7, "AGOSTO": 8, "SEPTIEMBRE": 9, "OCTUBRE": 10, "NOVIEMBRE": 11,
    "DICIEMBRE": 12,
    # Erratas vistas en las exportaciones
    "ANERO": 1,
    "SETIEMBRE": 9,
}

MONTH_DISPLAY = [
    "enero", "febrero", "marzo", "abril", "mayo", "junio",
    "julio", "agosto", "septiembre", "octubre", "noviembre", "diciembre",
]

NOON = 12

STRIP_RE = re.compile(r"[.,]")
SLASH_RE = re.compile(r"(?<!\d)(\d{1,2})\s*/\s*(\d{1,2})\s*/\s*(\d{1,4})(?!\d)")
MAX_NUMBER_LEN = 4


# ============================================================
#                   RESOLUCIÓN
# ============================================================

def _build(year: int, month: int, day: int) -> Optional[datetime]:
    try:
        return datetime(year, month, day, NOON)
    except ValueError:
        return None


def _scan_tokens(raw: str, month_names: Mapping[str, int]) -> Optional[datetime]:
    text = STRIP_RE.sub(" ", raw)
    tokens = [t for t in text.split() if t.upper() != "DE"]

    day = month = year = None
    for tok in tokens:
        # Más de 4 cifras no es día ni año
        if tok.isdecimal() and len(tok) <= MAX_NUMBER_LEN:
            n = int(tok)
            if n > 31:
                year = n
            elif day is None:
                day = n
            continue
        if month is None:
            up = normalize_text(tok)
            for name, num in month_names.items():
                if name in up:
                    month = num
                    break

    if day is None or month is None or year is None:
        return None
    return _build(year, month, day)


def _scan_slash(raw: str) -> Optional[datetime]:
    m = SLASH_RE.search(raw)
    if not m:
        return None
    day, month, year = (int(g) for g in m.groups())
    return _build(year, month, day)


def parse_date(raw: Optional[str], month_names: Optional[Mapping[str, int]] = None) -> Optional[datetime]:
    """Igual que resolve_date pero devuelve None si no se reconoce la fecha."""
    if not raw or not raw.strip():
        return None
    months = MONTHS if month_names is None else month_names
    return _scan_tokens(raw, months) or _scan_slash(raw)


def resolve_date(
    raw: Optional[str],
    month_names: Optional[Mapping[str, int]] = None,
    now: Optional[datetime] = None,
) -> datetime:
    """Convierte un fragmento de fecha en un datetime a mediodía.

    Nunca lanza excepción: si la fecha no se reconoce se registra un aviso
    y se devuelve `now` (o el instante actual).
    """
    d = parse_date(raw, month_names)
    if d is not None:
        return d
    log.warning("Fecha no reconocida %r; se usa la fecha actual", raw)
    return now if now is not None else datetime.now()


# ============================================================
#                   PRESENTACIÓN
# ============================================================

def month_name_es(month: int) -> str:
    return MONTH_DISPLAY[month - 1]


def format_date_es(d: datetime) -> str:
    """5 de enero de 2024"""
    return f"{d.day} de {month_name_es(d.month)} de {d.year}"


def format_date_short(d: datetime) -> str:
    return f"{d.day}/{d.month}/{d.year}"
