# -*- coding: utf-8 -*-

"""
Catálogo de programas de la emisora y asignación de nombres libres
------------------------------------------------------------------

Reglas de asignación (por orden de precedencia, sobre todo el catálogo):
  1. Igualdad normalizada
  2. Contención normalizada en cualquier sentido (parte contenida > 3 car.)
  3. Iniciales: "B.D.B" → BUENOS DÍAS BAYAMO

Lo que no encaja se descarta de la distribución o va al cubo "OTRO",
según decida quien llama.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from .normalizar import compact, initials, normalize_program_name, normalize_text

if TYPE_CHECKING:
    from .registros import Record

log = logging.getLogger("guionbd.programas")


STORAGE_PREFIX = "guionbd_data_"
OTHER_BUCKET = "OTRO"
MIN_CONTAINED_LEN = 3


@dataclass(frozen=True, slots=True)
class Program:
    name: str
    file: str


PROGRAMS: List[Program] = [
    Program("BUENOS DÍAS BAYAMO", "bdias.json"),
    Program("TODOS EN CASA", "casa.json"),
    Program("RCM NOTICIAS", "noticias.json"),
    Program("ARTE BAYAMO", "arte.json"),
    Program("PARADA JOVEN", "joven.json"),
    Program("HABLANDO CON JUANA", "juana.json"),
    Program("SIGUE A TU RITMO", "ritmo.json"),
    Program("AL SON DE LA RADIO", "son.json"),
    Program("CÓMPLICES", "complices.json"),
    Program("ESTACIÓN 95.3", "estacion.json"),
    Program("PALCO DE DOMINGO", "domingo.json"),
    Program("COLOREANDO MELODÍAS", "melodias.json"),
    Program("ALBA Y CRISOL", "alba.json"),
    Program("DESDE EL BARRIO", "barrio.json"),
    Program("MÚSICA DESDE MI CIUDAD", "musica.json"),
]

# Abreviaturas que aparecen en las cabeceras de las exportaciones
EXTRA_ALIASES: Dict[str, str] = {
    "RCM": "RCM NOTICIAS",
    "NOTICIERO": "RCM NOTICIAS",
    "ESTACION": "ESTACIÓN 95.3",
    "95.3": "ESTACIÓN 95.3",
    "JUANA": "HABLANDO CON JUANA",
    "PALCO": "PALCO DE DOMINGO",
}


def default_aliases(catalog: Sequence[Program] = PROGRAMS) -> Dict[str, str]:
    aliases = {}
    for p in catalog:
        ini = initials(p.name)
        if len(ini) >= 2:
            aliases[ini] = p.name
    aliases.update(EXTRA_ALIASES)
    return aliases


# ============================================================
#                   INFERENCIA DESDE CABECERA
# ============================================================

def infer_program(header: str, aliases: Mapping[str, str]) -> str:
    """Busca una abreviatura conocida en la línea de cabecera de un bloque.

    Acepta tanto "BDB" como "B.D.B" (letras separadas). Devuelve "" si no
    hay coincidencia.
    """
    h = normalize_text(header)
    if not h:
        return ""
    padded = f" {h} "
    for abbr, full in aliases.items():
        a = normalize_text(abbr)
        if not a:
            continue
        if f" {a} " in padded:
            return full
        if " " not in a and len(a) > 1 and f" {' '.join(a)} " in padded:
            return full
    return ""


# ============================================================
#                   ASIGNACIÓN AL CATÁLOGO
# ============================================================

def match_program(raw_name: Optional[str], catalog: Sequence[Program] = PROGRAMS) -> Optional[Program]:
    norm = normalize_program_name(raw_name)
    if not norm:
        return None
    names = [(p, normalize_program_name(p.name)) for p in catalog]

    for p, pn in names:
        if pn == norm:
            return p

    for p, pn in names:
        shorter = pn if len(pn) <= len(norm) else norm
        if len(shorter) > MIN_CONTAINED_LEN and (pn in norm or norm in pn):
            return p

    raw_compact = compact(re.sub(r"\([^)]*\)", " ", raw_name or ""))
    for p, pn in names:
        if len(raw_compact) > 1 and raw_compact == initials(pn):
            return p

    return None


def find_program(name: str, catalog: Sequence[Program] = PROGRAMS) -> Optional[Program]:
    norm = normalize_text(name)
    for p in catalog:
        if normalize_text(p.name) == norm:
            return p
    return None


def storage_key(program: Union[Program, str], catalog: Sequence[Program] = PROGRAMS) -> str:
    """Clave de colección: guionbd_data_<fichero>.

    Los nombres fuera del catálogo usan "<nombre_en_minúsculas>.json".
    """
    if isinstance(program, str):
        found = find_program(program, catalog)
        if found is None:
            file = re.sub(r"\s+", "_", program.strip()).lower() + ".json"
            return STORAGE_PREFIX + file
        program = found
    return STORAGE_PREFIX + program.file


def distribute(
    records: Iterable["Record"],
    catalog: Sequence[Program] = PROGRAMS,
    unmatched: str = "drop",
) -> Dict[str, List["Record"]]:
    """Agrupa registros por clave de colección.

    Los registros asignados adoptan el nombre oficial del programa.
    unmatched="drop" descarta los no asignados; "other" los agrupa bajo
    la colección del cubo OTRO.
    """
    if unmatched not in ("drop", "other"):
        raise ValueError(f"Política desconocida para no asignados: {unmatched!r}")

    grouped: Dict[str, List["Record"]] = {}
    ignored = 0
    for rec in records:
        prog = match_program(rec.program, catalog)
        if prog is not None:
            grouped.setdefault(storage_key(prog), []).append(replace(rec, program=prog.name))
        elif unmatched == "other":
            grouped.setdefault(storage_key(OTHER_BUCKET, catalog), []).append(rec)
        else:
            ignored += 1
            log.info("Programa no registrado, se ignora: %r", rec.program)

    if ignored:
        log.info("%d registros ignorados (programas no registrados)", ignored)
    return grouped
