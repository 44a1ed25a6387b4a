# -*- coding: utf-8 -*-

"""
Extracción de campos etiquetados de un bloque de guion
------------------------------------------------------

Etiquetas reconocidas (sin distinguir mayúsculas, seguidas de ":"):

    Programa | Fecha | Escritor/Escribe | Asesor/Asesora | Tema
    Archivo  | Emisión (solo delimitan; Emisión se descarta)

El bloque se tokeniza en texto/etiqueta y se recorre con una pequeña
máquina de estados:

    SEEKING_LABEL ──etiqueta──▶ IN_FIELD(campo) ──etiqueta──▶ IN_FIELD(otro)
          ▲                            │
          └────── fin de línea ────────┘   (salvo campos multilínea: Tema)

Un campo termina en la siguiente etiqueta. El Tema continúa en las líneas
sin etiqueta que le siguen. La extracción nunca falla: los campos ausentes
quedan como "".
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Dict, FrozenSet, Iterator, List, Mapping, Optional, Tuple

from .normalizar import is_unspecified, normalize_text
from .programas import default_aliases, infer_program

if TYPE_CHECKING:
    from .config import ParserConfig


LABEL_RE = re.compile(
    r"\b(PROGRAMA|FECHA|ESCRITORA?|ESCRIBE|ASESORA?|TEMA|ARCHIVO|EMISI[OÓ]N)\s*:",
    re.IGNORECASE,
)

LABEL_FIELDS: Dict[str, Optional[str]] = {
    "PROGRAMA": "program",
    "FECHA": "date_raw",
    "ESCRITOR": "writer",
    "ESCRITORA": "writer",
    "ESCRIBE": "writer",
    "ASESOR": "advisor",
    "ASESORA": "advisor",
    "TEMA": "title",
    "ARCHIVO": "archive",
    "EMISION": None,
}

FIELD_NAMES = ("program", "date_raw", "writer", "advisor", "title", "archive")
DISCARD = "_discard"

# "es Jane Doe, quien también..." / "por Juan Gómez Ruiz"
NAME_WORD = r"[A-ZÁÉÍÓÚÑÜ][\wÁÉÍÓÚÑÜáéíóúñü'-]+"
ADVISOR_NAME_RE = re.compile(rf"\b(?i:por|es)\s+({NAME_WORD}(?:\s+{NAME_WORD}){{1,2}})")
ADVISOR_CUT_RE = re.compile(r"[,.]")
ADVISOR_CONNECTORS = frozenset({
    "ES", "POR", "LA", "EL", "SU", "FUE", "ESTA", "ASESOR", "ASESORA", "ASESORADO",
})

PROGRAM_PREFIX_RE = re.compile(r"^(?:\d{1,2}\s*[.)-]\s*(?=[^\d\s])|PROG(?:RAMA)?\b\.?\s*:?\s*)+", re.IGNORECASE)
TRAILING_PUNCT = " \t.,;:-"


class State(Enum):
    SEEKING_LABEL = "seeking_label"
    IN_FIELD = "in_field"


@dataclass(slots=True)
class ExtractedFields:
    program: str = ""
    date_raw: str = ""
    writer: str = ""
    advisor: str = ""
    title: str = ""
    archive: str = ""
    header: str = ""


# ============================================================
#                   TOKENIZADOR
# ============================================================

def tokenize_line(line: str) -> Iterator[Tuple[str, str]]:
    """Produce ("text", trozo) y ("label", campo) en orden de aparición."""
    pos = 0
    for m in LABEL_RE.finditer(line):
        if m.start() > pos:
            yield "text", line[pos:m.start()]
        label = normalize_text(m.group(1))
        yield "label", LABEL_FIELDS.get(label) or DISCARD
        pos = m.end()
    if pos < len(line):
        yield "text", line[pos:]


class FieldScanner:
    """Máquina de estados SEEKING_LABEL / IN_FIELD(campo)."""

    def __init__(self, multiline_fields: FrozenSet[str] = frozenset({"title"})):
        self.multiline_fields = multiline_fields
        self.state = State.SEEKING_LABEL
        self.current: Optional[str] = None
        self.parts: Dict[str, List[str]] = {name: [] for name in FIELD_NAMES}

    def _has_value(self, name: str) -> bool:
        return any(p.strip() for p in self.parts[name])

    def open_field(self, name: str) -> None:
        # La primera aparición no vacía de una etiqueta manda
        if name != DISCARD and self._has_value(name):
            name = DISCARD
        self.state = State.IN_FIELD
        self.current = name

    def feed_text(self, text: str) -> None:
        if self.state is State.IN_FIELD and self.current != DISCARD:
            self.parts[self.current].append(text)

    def end_line(self) -> None:
        if self.state is State.IN_FIELD and self.current not in self.multiline_fields:
            self.state = State.SEEKING_LABEL
            self.current = None

    def scan(self, block: str) -> Dict[str, str]:
        for line in block.splitlines():
            for kind, value in tokenize_line(line):
                if kind == "label":
                    self.open_field(value)
                else:
                    self.feed_text(value)
            self.end_line()
        return {name: " ".join(" ".join(parts).split()) for name, parts in self.parts.items()}


# ============================================================
#                   LIMPIEZA DE CAMPOS
# ============================================================

def clean_advisor(value: str) -> str:
    """Extrae solo el nombre de un texto de asesor con narrativa."""
    value = " ".join((value or "").split())
    if not value:
        return ""
    m = ADVISOR_NAME_RE.search(value)
    if m:
        return m.group(1).strip()

    head = ADVISOR_CUT_RE.split(value, maxsplit=1)[0]
    words = head.split()
    while len(words) > 1 and normalize_text(words[0]) in ADVISOR_CONNECTORS:
        words.pop(0)
    return " ".join(words).strip(TRAILING_PUNCT)


def clean_program(value: str) -> str:
    value = " ".join((value or "").split())
    value = PROGRAM_PREFIX_RE.sub("", value)
    return value.strip(TRAILING_PUNCT)


def clean_person(value: str) -> str:
    return " ".join((value or "").split()).strip(TRAILING_PUNCT)


def first_line(block: str) -> str:
    for line in block.splitlines():
        if line.strip():
            return line.strip()
    return ""


# ============================================================
#                   EXTRACCIÓN
# ============================================================

def extract_fields(block: str, config: Optional["ParserConfig"] = None) -> ExtractedFields:
    if not block:
        return ExtractedFields()

    multiline = config.multiline_fields if config is not None else frozenset({"title"})
    aliases: Mapping[str, str] = config.program_aliases if config is not None else default_aliases()

    raw = FieldScanner(multiline).scan(block)
    header = first_line(block)

    program = clean_program(raw["program"])
    if is_unspecified(program):
        program = infer_program(header, aliases)

    return ExtractedFields(
        program=program,
        date_raw=raw["date_raw"],
        writer=clean_person(raw["writer"]),
        advisor=clean_advisor(raw["advisor"]),
        title=raw["title"].strip(TRAILING_PUNCT),
        archive=raw["archive"],
        header=header,
    )
