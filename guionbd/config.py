# -*- coding: utf-8 -*-

"""
Configuración del analizador
----------------------------

Las distintas variantes históricas del analizador (separadores, filtro de
validez, palabras vacías, tabla de meses) se expresan como una única
configuración explícita en lugar de copias divergentes del código.

Se puede sobrescribir desde un JSON:

    {
      "delimiter_style": "marker",
      "drop_invalid": true,
      "stopwords": ["DE", "LA", ...],
      "month_names": {"ANERO": 1},
      "program_aliases": {"BDB": "BUENOS DÍAS BAYAMO"}
    }

"month_names" y "program_aliases" se añaden a los valores por defecto;
"stopwords" los reemplaza.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, FrozenSet, Mapping, Optional

from .fechas import MONTHS
from .normalizar import normalize_text
from .programas import default_aliases
from .segmentar import DelimiterStyle, coerce_style


STATUS_ACTIVE = "active"
STATUS_INACTIVE = "inactive"
STATUSES = (STATUS_ACTIVE, STATUS_INACTIVE)

DEFAULT_PROGRAM = "Desconocido"
FALLBACK_TITLE = "Sin Título"
FALLBACK_TITLES = ("Sin Título", "Sin Tema")
FALLBACK_TAG = "General"

STOPWORDS: FrozenSet[str] = frozenset({
    "DE", "LA", "EL", "EN", "Y", "LOS", "LAS", "DEL", "UN", "UNA", "UNO",
    "UNOS", "UNAS", "PARA", "POR", "CON", "SIN", "SOBRE", "ESTA", "ESTE",
    "ESTAS", "ESTOS", "COMO", "QUE", "CUAL", "DONDE", "CUANDO", "ENTRE",
    "DESDE", "HASTA", "HACIA", "CONTRA", "SEGUN", "TRAS", "DURANTE", "PERO",
    "SUS", "MAS", "MUY", "TODO", "TODOS", "TODAS", "NUESTRO", "NUESTRA",
    "NUESTROS", "NUESTRAS", "ANTE", "BAJO", "CADA", "OTRO", "OTRA",
})


@dataclass(frozen=True, slots=True)
class ParserConfig:
    delimiter_style: DelimiterStyle = DelimiterStyle.AUTO
    drop_invalid: bool = False
    stopwords: FrozenSet[str] = STOPWORDS
    month_names: Mapping[str, int] = field(default_factory=lambda: dict(MONTHS))
    program_aliases: Mapping[str, str] = field(default_factory=default_aliases)
    multiline_fields: FrozenSet[str] = frozenset({"title"})
    default_program: str = DEFAULT_PROGRAM
    default_status: str = STATUS_ACTIVE
    max_tags: int = 5
    min_tag_length: int = 4

    def with_overrides(self, **overrides: Any) -> "ParserConfig":
        """Copia con los valores dados; ignora los que son None."""
        clean = {k: v for k, v in overrides.items() if v is not None}
        if "delimiter_style" in clean:
            clean["delimiter_style"] = coerce_style(clean["delimiter_style"])
        if "default_status" in clean:
            check_status(clean["default_status"])
        return replace(self, **clean)


DEFAULT_CONFIG = ParserConfig()


def check_status(status: str) -> str:
    if status not in STATUSES:
        raise ValueError(f"Estado desconocido: {status!r} (válidos: {', '.join(STATUSES)})")
    return status


def config_from_dict(data: Mapping[str, Any], base: Optional[ParserConfig] = None) -> ParserConfig:
    base = base or DEFAULT_CONFIG
    known = {f.name for f in fields(ParserConfig)}
    unknown = set(data) - known
    if unknown:
        raise ValueError(f"Claves de configuración desconocidas: {', '.join(sorted(unknown))}")

    kw: Dict[str, Any] = {}
    for key, value in data.items():
        if key == "stopwords":
            kw[key] = frozenset(normalize_text(w) for w in value)
        elif key == "multiline_fields":
            kw[key] = frozenset(value)
        elif key == "month_names":
            months = dict(base.month_names)
            months.update({normalize_text(k): int(v) for k, v in value.items()})
            kw[key] = months
        elif key == "program_aliases":
            aliases = dict(base.program_aliases)
            aliases.update(value)
            kw[key] = aliases
        else:
            kw[key] = value
    return base.with_overrides(**kw)


def load_config(path: str) -> ParserConfig:
    with open(path, encoding="utf-8") as fh:
        data = json.load(fh)
    if not isinstance(data, dict):
        raise ValueError(f"{path}: la configuración debe ser un objeto JSON")
    return config_from_dict(data)
