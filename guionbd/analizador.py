# -*- coding: utf-8 -*-

"""
Analizador de exportaciones de guiones
--------------------------------------

texto → bloques → [campos → registro → filtro de validez] → registros

Función pura y reentrante: no hay estado compartido entre llamadas, así
que quien llama puede trocear la entrada (iter_entries) sin cambiar el
resultado.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterator, List, Optional, Union

from .campos import extract_fields
from .config import DEFAULT_CONFIG, ParserConfig, check_status
from .registros import Record, build_record, is_valid
from .segmentar import DelimiterStyle, segment

log = logging.getLogger("guionbd.analizador")


def parse_block(
    block: str,
    default_status: Optional[str] = None,
    config: ParserConfig = DEFAULT_CONFIG,
    now: Optional[datetime] = None,
) -> Record:
    fields = extract_fields(block, config)
    return build_record(fields, block, default_status, config, now=now)


def iter_entries(
    raw_text: str,
    delimiter_style: Union[DelimiterStyle, str, None] = None,
    default_status: Optional[str] = None,
    drop_invalid: Optional[bool] = None,
    config: Optional[ParserConfig] = None,
    now: Optional[datetime] = None,
) -> Iterator[Record]:
    """Versión perezosa de parse_entries.

    Los argumentos explícitos tienen prioridad sobre `config`.
    """
    if not isinstance(raw_text, str):
        raise TypeError(f"raw_text debe ser str, no {type(raw_text).__name__}")

    cfg = (config or DEFAULT_CONFIG).with_overrides(
        delimiter_style=delimiter_style,
        default_status=default_status,
        drop_invalid=drop_invalid,
    )
    check_status(cfg.default_status)

    blocks = segment(raw_text, cfg.delimiter_style)
    log.debug("%d bloques detectados (separador %s)", len(blocks), cfg.delimiter_style.value)

    dropped = 0
    for block in blocks:
        rec = parse_block(block, cfg.default_status, cfg, now=now)
        if cfg.drop_invalid and not is_valid(rec):
            dropped += 1
            log.info("Descartado registro incompleto (%s): %s",
                     ", ".join(rec.missing_fields), rec.title)
            continue
        yield rec

    if dropped:
        log.info("%d de %d bloques descartados por el filtro de validez", dropped, len(blocks))


def parse_entries(
    raw_text: str,
    delimiter_style: Union[DelimiterStyle, str, None] = None,
    default_status: Optional[str] = None,
    drop_invalid: Optional[bool] = None,
    config: Optional[ParserConfig] = None,
    now: Optional[datetime] = None,
) -> List[Record]:
    """Convierte una exportación de texto en registros.

    drop_invalid=True excluye los registros sin Escritor/Asesor/Tema;
    con False (por defecto) se conservan y quedan marcados
    (Record.valid / Record.missing_fields) para que la vista los filtre.
    Texto vacío o sin bloques → [].
    """
    return list(iter_entries(raw_text, delimiter_style, default_status, drop_invalid, config, now))
