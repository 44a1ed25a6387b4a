# -*- coding: utf-8 -*-

"""
Configuración de logs
---------------------

- Consola: formato legible (solo el mensaje).
- Fichero (opcional): formato técnico con fecha y nivel, en <dir>/guionbd.log.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

ROOT_LOGGER = "guionbd"
LOG_FILE = "guionbd.log"

FMT_TECHNICAL = logging.Formatter(
    fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
FMT_HUMAN = logging.Formatter(fmt="%(message)s")


def setup_logging(log_dir: Optional[str] = None, verbose: bool = False) -> logging.Logger:
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    # Evitar duplicar handlers si se llama más de una vez
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()

    console = logging.StreamHandler()
    console.setLevel(logging.DEBUG if verbose else logging.INFO)
    console.setFormatter(FMT_HUMAN)
    logger.addHandler(console)

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        handler = logging.FileHandler(os.path.join(log_dir, LOG_FILE), mode="a", encoding="utf-8")
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(FMT_TECHNICAL)
        logger.addHandler(handler)

    return logger
