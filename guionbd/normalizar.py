# -*- coding: utf-8 -*-

"""
Normalización de textos para comparación
----------------------------------------

Solo se usa para construir claves y comparar; nunca para transformar
datos que se muestran o se guardan tal cual.
"""

from __future__ import annotations

import re
from typing import Optional

from unidecode import unidecode


# ============================================================
#                   PARÁMETROS GLOBALES
# ============================================================

PUNCT_TABLE = str.maketrans({c: " " for c in ",.;:!?/'\"()[]{}<>-&_=+*#@$%^`~|\\"})
NON_ALNUM_RE = re.compile(r"[^A-Z0-9 ]+")
PAREN_SUFFIX_RE = re.compile(r"\s*\([^)]*\)")


# ============================================================
#                   NORMALIZACIÓN
# ============================================================

def normalize_text(s: Optional[str]) -> str:
    """Quita diacríticos y puntuación, colapsa espacios y pasa a mayúsculas.

    Idempotente: normalize_text(normalize_text(x)) == normalize_text(x).
    """
    s = unidecode(s or "").upper().translate(PUNCT_TABLE)
    s = NON_ALNUM_RE.sub(" ", s)
    return " ".join(s.split())


def normalize_program_name(s: Optional[str]) -> str:
    """Como normalize_text, pero agrupa variantes: "Show (A)" → "SHOW"."""
    return normalize_text(PAREN_SUFFIX_RE.sub(" ", s or ""))


def initials(s: Optional[str]) -> str:
    return "".join(w[0] for w in normalize_text(s).split())


def compact(s: Optional[str]) -> str:
    """Forma normalizada sin espacios ("B.D.B" → "BDB")."""
    return normalize_text(s).replace(" ", "")


# ============================================================
#                   MARCAS DE "NO ESPECIFICADO"
# ============================================================

# Subcadena, no palabra: cubre "NO ESPECIFICADO" y variantes truncadas
# por OCR o erratas ("PECIFICADO").
UNSPECIFIED_MARK = "PECIFICADO"


def is_unspecified(value: Optional[str]) -> bool:
    """True si el valor está vacío o marcado como no especificado."""
    norm = normalize_text(value)
    return not norm or UNSPECIFIED_MARK in norm.replace(" ", "")
