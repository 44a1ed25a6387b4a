# -*- coding: utf-8 -*-

"""
Segmentación de exportaciones de texto en bloques (uno por guion).

Cada fuente usa su propio separador:
  - ">>>"               (carga global)
  - "____" (4+ "_")     (cargas por programa)
  - "-----" (5+ "-")    (exportaciones antiguas)
"""

from __future__ import annotations

import re
from enum import Enum
from typing import List, Union


class DelimiterStyle(Enum):
    MARKER = "marker"
    UNDERSCORE = "underscore"
    HYPHEN = "hyphen"
    AUTO = "auto"


DELIMITER_PATTERNS = {
    DelimiterStyle.MARKER: re.compile(r">>>"),
    DelimiterStyle.UNDERSCORE: re.compile(r"_{4,}"),
    DelimiterStyle.HYPHEN: re.compile(r"-{5,}"),
}

# Desempate para AUTO: gana el separador con más apariciones y, a igualdad,
# el primero de esta lista
AUTO_ORDER = (DelimiterStyle.MARKER, DelimiterStyle.UNDERSCORE, DelimiterStyle.HYPHEN)

ALIASES = {
    ">>>": DelimiterStyle.MARKER,
    "____": DelimiterStyle.UNDERSCORE,
    "-----": DelimiterStyle.HYPHEN,
}


def coerce_style(style: Union[DelimiterStyle, str, None]) -> DelimiterStyle:
    """Acepta el enum, su valor ("marker") o el propio separador (">>>")."""
    if style is None:
        return DelimiterStyle.AUTO
    if isinstance(style, DelimiterStyle):
        return style
    key = str(style).strip()
    if key in ALIASES:
        return ALIASES[key]
    try:
        return DelimiterStyle(key.lower())
    except ValueError:
        raise ValueError(f"Estilo de separador desconocido: {style!r}") from None


def detect_style(text: str) -> DelimiterStyle:
    """Separador más frecuente del texto.

    Un ">>>" suelto dentro de un tema no cambia el estilo de una
    exportación separada por "____".
    """
    counts = {st: len(DELIMITER_PATTERNS[st].findall(text)) for st in AUTO_ORDER}
    best = max(AUTO_ORDER, key=counts.__getitem__)
    return best if counts[best] else DelimiterStyle.AUTO


def segment(text: str, style: Union[DelimiterStyle, str, None] = DelimiterStyle.AUTO) -> List[str]:
    """Divide `text` en bloques recortados, descartando los vacíos.

    Función pura: no lanza con entradas mal formadas. Si el separador no
    aparece, el texto completo es un único bloque.
    """
    if not text:
        return []
    st = coerce_style(style)
    if st is DelimiterStyle.AUTO:
        st = detect_style(text)

    pattern = DELIMITER_PATTERNS.get(st)
    pieces = pattern.split(text) if pattern else [text]
    return [p.strip() for p in pieces if p.strip()]
