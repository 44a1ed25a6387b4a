# -*- coding: utf-8 -*-

"""
Registros de guion: construcción, etiquetas, validez y forma JSON.
"""

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .campos import ExtractedFields
from .config import (
    DEFAULT_CONFIG,
    FALLBACK_TAG,
    FALLBACK_TITLE,
    FALLBACK_TITLES,
    ParserConfig,
    STATUS_ACTIVE,
    check_status,
)
from .fechas import resolve_date
from .normalizar import is_unspecified, normalize_text

TAG_SPLIT_RE = re.compile(r"[^\w]+")


# ============================================================
#                  ESTRUCTURA
# ============================================================

@dataclass(slots=True)
class Record:
    id: str
    program: str
    date_added: datetime
    writer: str = ""
    advisor: str = ""
    title: str = FALLBACK_TITLE
    tags: List[str] = field(default_factory=lambda: [FALLBACK_TAG])
    status: str = STATUS_ACTIVE
    raw_content: str = ""
    word_count: int = 0
    archive: str = ""

    @property
    def summary(self) -> str:
        return f"Escritor: {self.writer or 'No especificado'} | Asesor: {self.advisor or 'No especificado'}"

    @property
    def missing_fields(self) -> List[str]:
        return missing_fields(self)

    @property
    def valid(self) -> bool:
        return is_valid(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "program": self.program,
            "dateAdded": self.date_added.isoformat(timespec="seconds"),
            "writer": self.writer,
            "advisor": self.advisor,
            "title": self.title,
            "tags": list(self.tags),
            "status": self.status,
            "rawContent": self.raw_content,
            "wordCount": self.word_count,
            "archive": self.archive,
            "summary": self.summary,
            "valid": self.valid,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], config: ParserConfig = DEFAULT_CONFIG) -> "Record":
        """Lee la forma JSON almacenada o remota.

        Acepta también los nombres antiguos (genre, themes, content) y
        completa id, etiquetas y recuento de palabras si faltan.
        """
        if not isinstance(data, Mapping):
            raise TypeError(f"Se esperaba un objeto JSON, no {type(data).__name__}")

        raw = str(data.get("rawContent", data.get("content", "")) or "")
        title = str(data.get("title") or "").strip() or FALLBACK_TITLE
        tags = data.get("tags", data.get("themes"))
        status = str(data.get("status") or config.default_status)

        return cls(
            id=str(data.get("id") or new_id()),
            program=str(data.get("program", data.get("genre", "")) or "").strip() or config.default_program,
            date_added=parse_iso(data.get("dateAdded")),
            writer=str(data.get("writer") or "").strip(),
            advisor=str(data.get("advisor") or "").strip(),
            title=title,
            tags=[str(t) for t in tags] if tags else extract_tags(title, config),
            status=check_status(status),
            raw_content=raw,
            word_count=int(data.get("wordCount") or count_words(raw)),
            archive=str(data.get("archive") or ""),
        )


def new_id() -> str:
    return str(uuid.uuid4())


def parse_iso(value: Any) -> datetime:
    """ISO 8601 (con o sin "Z"); las fechas con zona pasan a hora local."""
    if isinstance(value, datetime):
        d = value
    elif isinstance(value, str) and value.strip():
        try:
            d = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            d = resolve_date(value)
    else:
        d = resolve_date(None if value is None else str(value))
    if d.tzinfo is not None:
        d = d.astimezone().replace(tzinfo=None)
    return d


# ============================================================
#                  DERIVADOS
# ============================================================

def count_words(text: str) -> int:
    return len((text or "").split())


def extract_tags(title: str, config: ParserConfig = DEFAULT_CONFIG) -> List[str]:
    """Palabras clave del tema para búsquedas (no es contenido autoritativo)."""
    tags: List[str] = []
    seen = set()
    for word in TAG_SPLIT_RE.split(title or ""):
        word = word.strip("_")
        if len(word) < config.min_tag_length:
            continue
        norm = normalize_text(word)
        if norm in config.stopwords or norm in seen or norm.isdigit():
            continue
        seen.add(norm)
        tags.append(word)
        if len(tags) >= config.max_tags:
            break
    return tags or [FALLBACK_TAG]


def build_record(
    fields: ExtractedFields,
    raw_block: str,
    default_status: Optional[str] = None,
    config: ParserConfig = DEFAULT_CONFIG,
    now: Optional[datetime] = None,
) -> Record:
    status = check_status(default_status or config.default_status)
    topic = fields.title.strip()

    return Record(
        id=new_id(),
        program=fields.program.strip() or config.default_program,
        date_added=resolve_date(fields.date_raw, config.month_names, now=now),
        writer=fields.writer,
        advisor=fields.advisor,
        title=topic or FALLBACK_TITLE,
        tags=extract_tags(topic, config),
        status=status,
        raw_content=raw_block,
        word_count=count_words(raw_block),
        archive=fields.archive,
    )


# ============================================================
#                  FILTRO DE VALIDEZ
# ============================================================

def is_specified(value: Optional[str]) -> bool:
    return not is_unspecified(value)


def missing_fields(record: Record) -> List[str]:
    """Campos esenciales vacíos o "no especificado" (Escritor, Asesor, Tema)."""
    missing = []
    if not is_specified(record.writer):
        missing.append("Escritor")
    if not is_specified(record.advisor):
        missing.append("Asesor")
    if record.title.strip() in FALLBACK_TITLES or not is_specified(record.title):
        missing.append("Tema")
    return missing


def is_valid(record: Record) -> bool:
    return not missing_fields(record)


def only_valid(records: Iterable[Record]) -> List[Record]:
    return [r for r in records if is_valid(r)]
