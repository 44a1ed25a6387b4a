# -*- coding: utf-8 -*-

"""
Almacén por programa y sincronización
-------------------------------------

Cada programa tiene su colección bajo la clave guionbd_data_<fichero>,
guardada como un array JSON en <directorio>/<clave>.

Los registros remotos llegan ya estructurados (array JSON) y pasan
directamente a la fusión, sin el analizador de texto.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, replace
from typing import Callable, Dict, List, Optional, Sequence

import requests

from .analizador import parse_entries
from .config import DEFAULT_CONFIG, ParserConfig, check_status
from .fusion import MergeResult, reconcile
from .programas import PROGRAMS, STORAGE_PREFIX, Program, distribute, find_program, storage_key
from .registros import Record

log = logging.getLogger("guionbd.almacen")

DEFAULT_DATA_DIR = "datos"
REMOTE_TIMEOUT = 30


# ============================================================
#                   PERSISTENCIA JSON
# ============================================================

class JsonStore:
    def __init__(self, base_dir: str = DEFAULT_DATA_DIR, config: ParserConfig = DEFAULT_CONFIG):
        self.base_dir = base_dir
        self.config = config

    def path(self, key: str) -> str:
        if os.sep in key or (os.altsep and os.altsep in key) or key in ("", ".", ".."):
            raise ValueError(f"Clave de colección no válida: {key!r}")
        return os.path.join(self.base_dir, key)

    def load(self, key: str) -> List[Record]:
        path = self.path(key)
        if not os.path.exists(path):
            return []
        with open(path, encoding="utf-8") as fh:
            data = json.load(fh)
        if not isinstance(data, list):
            raise ValueError(f"{path}: se esperaba un array JSON")
        return [Record.from_dict(d, self.config) for d in data]

    def save(self, key: str, records: Sequence[Record]) -> None:
        os.makedirs(self.base_dir, exist_ok=True)
        path = self.path(key)
        tmp = path + ".tmp"
        try:
            with open(tmp, "w", encoding="utf-8") as fh:
                json.dump([r.to_dict() for r in records], fh, ensure_ascii=False, indent=2)
            os.replace(tmp, path)
        except BaseException:
            if os.path.exists(tmp):
                os.remove(tmp)
            raise
        log.debug("Guardados %d registros en %s", len(records), path)

    def delete(self, key: str) -> None:
        path = self.path(key)
        if os.path.exists(path):
            os.remove(path)

    def keys(self) -> List[str]:
        if not os.path.isdir(self.base_dir):
            return []
        return sorted(
            f for f in os.listdir(self.base_dir)
            if f.startswith(STORAGE_PREFIX) and f.endswith(".json")
        )

    def load_all(self) -> List[Record]:
        records: List[Record] = []
        for key in self.keys():
            records.extend(self.load(key))
        return records

    def merge_into(self, key: str, incoming: Sequence[Record], preserve_ids: bool = True) -> MergeResult:
        """Carga la colección, fusiona el lote y guarda el resultado."""
        result = reconcile(self.load(key), incoming, preserve_ids=preserve_ids)
        self.save(key, result.records)
        log.info("%s: %d nuevos, %d actualizados (%d en total)",
                 key, result.added, result.updated, result.total)
        return result

    # ------------------ Ciclo de vida de un guion ------------------

    def update_record(
        self,
        record_id: str,
        change: Callable[[Record], Optional[Record]],
        keys: Optional[Sequence[str]] = None,
    ) -> Optional[Record]:
        """Aplica `change` al guion con ese id y guarda su colección.

        `change` devuelve el registro nuevo, o None para eliminarlo. Una
        colección que se queda vacía se borra. Devuelve el registro tal
        como estaba, o None si el id no aparece.
        """
        for key in (self.keys() if keys is None else keys):
            records = self.load(key)
            for i, rec in enumerate(records):
                if rec.id != record_id:
                    continue
                new = change(rec)
                if new is None:
                    del records[i]
                else:
                    records[i] = new
                if records:
                    self.save(key, records)
                else:
                    self.delete(key)
                return rec
        return None

    def set_status(self, record_id: str, status: str, keys: Optional[Sequence[str]] = None) -> Optional[Record]:
        """Archiva ("inactive") o restaura ("active") un guion."""
        check_status(status)
        found = self.update_record(record_id, lambda r: replace(r, status=status), keys)
        if found is not None:
            log.info("%s: estado %s -> %s", record_id, found.status, status)
        return found

    def remove(self, record_id: str, keys: Optional[Sequence[str]] = None) -> Optional[Record]:
        found = self.update_record(record_id, lambda r: None, keys)
        if found is not None:
            log.info("%s: eliminado (%s, %s)", record_id, found.program, found.title)
        return found


# ============================================================
#                   FUENTES ESTRUCTURADAS
# ============================================================

def records_from_json(data, config: ParserConfig = DEFAULT_CONFIG) -> List[Record]:
    if not isinstance(data, list):
        raise ValueError("Se esperaba un array JSON de registros")
    return [Record.from_dict(d, config) for d in data]


def read_records_json(path: str, config: ParserConfig = DEFAULT_CONFIG) -> List[Record]:
    with open(path, encoding="utf-8") as fh:
        return records_from_json(json.load(fh), config)


def fetch_remote_records(
    url: str,
    timeout: int = REMOTE_TIMEOUT,
    config: ParserConfig = DEFAULT_CONFIG,
    session: Optional[requests.Session] = None,
) -> List[Record]:
    http = session or requests
    r = http.get(url, timeout=timeout, headers={"Accept": "application/json"})
    r.raise_for_status()
    records = records_from_json(r.json(), config)
    log.info("Recibidos %d registros de %s", len(records), url)
    return records


# ============================================================
#                   FLUJOS DE CARGA
# ============================================================

@dataclass(slots=True)
class UploadSummary:
    parsed: int = 0
    ignored: int = 0
    collections: Dict[str, MergeResult] = field(default_factory=dict)

    @property
    def saved(self) -> int:
        return sum(r.added + r.updated for r in self.collections.values())


def load_into_program(
    store: JsonStore,
    program: str,
    text: str,
    config: ParserConfig = DEFAULT_CONFIG,
    catalog: Sequence[Program] = PROGRAMS,
) -> MergeResult:
    """Carga una exportación en la colección de un programa concreto."""
    prog = find_program(program, catalog)
    name = prog.name if prog is not None else program.strip()
    records = [replace(r, program=name) for r in parse_entries(text, config=config)]
    return store.merge_into(storage_key(program, catalog), records)


def upload_text(
    store: JsonStore,
    text: str,
    config: ParserConfig = DEFAULT_CONFIG,
    catalog: Sequence[Program] = PROGRAMS,
    unmatched: str = "drop",
) -> UploadSummary:
    """Carga global: analiza, reparte por programa y fusiona cada colección."""
    records = parse_entries(text, config=config)
    grouped = distribute(records, catalog, unmatched=unmatched)

    summary = UploadSummary(parsed=len(records))
    summary.ignored = len(records) - sum(len(v) for v in grouped.values())
    for key, batch in grouped.items():
        summary.collections[key] = store.merge_into(key, batch)
    return summary


def sync_records(
    store: JsonStore,
    records: Sequence[Record],
    program: Optional[str] = None,
    catalog: Sequence[Program] = PROGRAMS,
    unmatched: str = "drop",
) -> UploadSummary:
    """Fusiona registros ya estructurados (remotos o de un JSON)."""
    summary = UploadSummary(parsed=len(records))
    if program:
        key = storage_key(program, catalog)
        summary.collections[key] = store.merge_into(key, records)
        return summary

    grouped = distribute(records, catalog, unmatched=unmatched)
    summary.ignored = len(records) - sum(len(v) for v in grouped.values())
    for key, batch in grouped.items():
        summary.collections[key] = store.merge_into(key, batch)
    return summary
