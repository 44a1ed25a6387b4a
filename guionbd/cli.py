#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
GuionBD: catálogo de guiones radiales por programa
--------------------------------------------------

Uso:

    guionbd cargar export.txt --global
    guionbd cargar export.txt --programa "RCM NOTICIAS" --delimitador ____
    guionbd sincronizar --url https://.../guiones.json
    guionbd buscar "medio ambiente" --anio 2024
    guionbd informe repetidas --salida informes/repetidas.csv
    guionbd balance --programa "PARADA JOVEN" --fecha junio
    guionbd archivar 3f2c...  /  guionbd restaurar 3f2c...  /  guionbd eliminar 3f2c...
    guionbd programas
"""

from __future__ import annotations

import argparse
import logging
import sys
from contextlib import nullcontext
from typing import List, Optional

import requests

from .almacen import DEFAULT_DATA_DIR, JsonStore, fetch_remote_records, load_into_program, read_records_json, sync_records, upload_text
from .busqueda import filter_by_status, search_records
from .config import DEFAULT_CONFIG, STATUS_ACTIVE, STATUS_INACTIVE, STATUSES, load_config
from .fechas import format_date_short
from .informes import REPORTS, balance, write_report
from .logs import setup_logging
from .monitor import PerfMonitor
from .programas import PROGRAMS, storage_key
from .registros import Record, only_valid
from .segmentar import DelimiterStyle

log = logging.getLogger("guionbd.cli")


# ============================================================
#   UTILIDADES
# ============================================================

def build_config(args):
    cfg = load_config(args.config) if args.config else DEFAULT_CONFIG
    return cfg.with_overrides(
        delimiter_style=getattr(args, "delimitador", None),
        drop_invalid=True if getattr(args, "descartar_invalidos", False) else None,
        default_status=getattr(args, "estado", None),
    )


def open_store(args) -> JsonStore:
    return JsonStore(args.datos, build_config(args))


def load_scope(store: JsonStore, program: Optional[str]) -> List[Record]:
    if program:
        return store.load(storage_key(program))
    return store.load_all()


def scope_keys(program: Optional[str]) -> Optional[List[str]]:
    return [storage_key(program)] if program else None


def read_text(path: str) -> str:
    with open(path, encoding="utf-8", errors="replace") as fh:
        return fh.read()


def print_records(records: List[Record], limit: int) -> None:
    for r in records[:limit]:
        flag = "" if r.valid else "  [incompleto]"
        print(f"{format_date_short(r.date_added):>10}  {r.program[:24]:24}  {r.title[:60]}{flag}")
        print(f"{'':12}{r.summary}  [id {r.id}]")
    if len(records) > limit:
        print(f"... y {len(records) - limit} más")


# ============================================================
#   COMANDOS
# ============================================================

def cmd_cargar(args):
    store = open_store(args)
    monitor = PerfMonitor() if args.monitor else None

    with monitor.phase("lectura", "Lectura del fichero de texto") if monitor else nullcontext():
        text = read_text(args.fichero)

    with monitor.phase("carga", "Análisis y fusión") if monitor else nullcontext():
        if args.programa:
            result = load_into_program(store, args.programa, text, store.config)
            log.info("Proceso completado: %d nuevos, %d actualizados, %d en total.",
                     result.added, result.updated, result.total)
            return 0

        unmatched = "other" if args.no_asignados == "otro" else "drop"
        summary = upload_text(store, text, store.config, unmatched=unmatched)

    if summary.parsed == 0:
        log.warning("No se encontraron registros válidos. Verifica el separador del archivo.")
        return 1

    log.info("Proceso completado:")
    log.info("  - %d guiones cargados.", summary.saved)
    log.info("  - %d registros ignorados (programas no registrados).", summary.ignored)
    return 0


def cmd_sincronizar(args):
    store = open_store(args)
    if args.url:
        records = fetch_remote_records(args.url, timeout=args.timeout, config=store.config)
    else:
        records = read_records_json(args.json, store.config)

    unmatched = "other" if args.no_asignados == "otro" else "drop"
    summary = sync_records(store, records, program=args.programa, unmatched=unmatched)
    for key, res in summary.collections.items():
        print(f"{key:32} +{res.added:<5} ~{res.updated:<5} total={res.total}")
    if summary.ignored:
        print(f"{summary.ignored} registros ignorados (programas no registrados)")
    return 0


def cmd_buscar(args):
    store = open_store(args)
    records = load_scope(store, args.programa)
    records = filter_by_status(records, None if args.filtro_estado == "todos" else args.filtro_estado)
    found = search_records(records, args.consulta, year=args.anio, fuzzy_threshold=args.difuso)
    if args.solo_validos:
        found = only_valid(found)
    if not found:
        print("No se encontraron registros.")
        return 0
    print(f"\n=== {len(found)} RESULTADOS ===\n")
    print_records(found, args.limite)
    return 0


def cmd_informe(args):
    store = open_store(args)
    records = load_scope(store, args.programa)
    if not records:
        print("No hay datos suficientes para generar informes.")
        return 0

    report = REPORTS[args.tipo](records)
    if args.salida:
        write_report(report, args.salida)
        log.info("Informe '%s' escrito en %s (%d filas)", report.title, args.salida, len(report.rows))
    else:
        print(f"\n=== {report.title.upper()} ===\n")
        print(" | ".join(report.headers))
        for row in report.rows:
            print(" | ".join(str(c) for c in row))
    return 0


def cmd_balance(args):
    store = open_store(args)
    report = balance(load_scope(store, args.programa), args.fecha or "")
    incompletos = sum(1 for row in report.rows if row[-1] != "Completo")
    print(f"\n=== BALANCE DE PROGRAMAS ({incompletos}/{len(report.rows)} incompletos) ===\n")
    for fecha, programa, tema, estado in report.rows:
        print(f"{fecha:>24}  {programa[:24]:24}  {tema[:50]:50}  {estado}")
    return 0


def cmd_estado(args):
    store = open_store(args)
    found = store.set_status(args.id, args.nuevo_estado, scope_keys(args.programa))
    if found is None:
        log.warning("No existe ningún guion con id %s", args.id)
        return 1
    print(f"{found.title} ({found.program}): {found.status} -> {args.nuevo_estado}")
    return 0


def cmd_eliminar(args):
    store = open_store(args)
    found = store.remove(args.id, scope_keys(args.programa))
    if found is None:
        log.warning("No existe ningún guion con id %s", args.id)
        return 1
    print(f"Eliminado: {found.title} ({found.program})")
    return 0


def cmd_programas(args):
    store = open_store(args)
    print(f"\n{'Programa':32} {'Clave':32} {'Registros':>9}")
    print("-" * 75)
    for p in PROGRAMS:
        key = storage_key(p)
        print(f"{p.name:32} {key:32} {len(store.load(key)):9d}")
    return 0


# ============================================================
#   MAIN / ARGPARSE
# ============================================================

def build_parser():
    parser = argparse.ArgumentParser(
        prog="guionbd",
        description="Catálogo de guiones radiales por programa",
    )
    parser.add_argument("--datos", default=DEFAULT_DATA_DIR,
                        help=f"directorio de colecciones JSON (por defecto {DEFAULT_DATA_DIR})")
    parser.add_argument("--config", help="fichero JSON con la configuración del analizador")
    parser.add_argument("--log-dir", help="directorio para el log técnico")
    parser.add_argument("-v", "--verbose", action="store_true", help="mostrar mensajes de depuración")

    sub = parser.add_subparsers(dest="cmd", required=True)

    p_load = sub.add_parser("cargar", help="cargar una exportación de texto")
    p_load.add_argument("fichero", help="fichero .txt con los guiones")
    target = p_load.add_mutually_exclusive_group(required=True)
    target.add_argument("--programa", help="cargar todo en este programa")
    target.add_argument("--global", dest="global_", action="store_true",
                        help="repartir cada guion a su programa (carga global)")
    p_load.add_argument("--delimitador",
                        choices=[s.value for s in DelimiterStyle] + [">>>", "____", "-----"],
                        help="separador de guiones (por defecto: el más frecuente del fichero; "
                             "a igualdad >>>, luego ____, luego -----)")
    p_load.add_argument("--estado", choices=STATUSES, help="estado de los guiones cargados")
    p_load.add_argument("--descartar-invalidos", action="store_true",
                        help="no guardar guiones sin escritor, asesor o tema")
    p_load.add_argument("--no-asignados", choices=["descartar", "otro"], default="descartar",
                        help="qué hacer con programas que no están en el catálogo")
    p_load.add_argument("--monitor", action="store_true", help="registrar tiempo y memoria por fase")
    p_load.set_defaults(func=cmd_cargar)

    p_sync = sub.add_parser("sincronizar", help="fusionar registros JSON remotos o locales")
    src = p_sync.add_mutually_exclusive_group(required=True)
    src.add_argument("--url", help="URL que devuelve un array JSON de guiones")
    src.add_argument("--json", help="fichero JSON local con un array de guiones")
    p_sync.add_argument("--programa", help="fusionar todo en este programa")
    p_sync.add_argument("--no-asignados", choices=["descartar", "otro"], default="descartar")
    p_sync.add_argument("--timeout", type=int, default=30)
    p_sync.set_defaults(func=cmd_sincronizar)

    p_find = sub.add_parser("buscar", help="buscar por fecha, tema, escritor o asesor")
    p_find.add_argument("consulta")
    p_find.add_argument("--programa")
    p_find.add_argument("--anio", type=int)
    p_find.add_argument("--difuso", type=int, metavar="UMBRAL",
                        help="añadir coincidencia difusa sobre el tema (0-100)")
    p_find.add_argument("--estado", dest="filtro_estado", choices=[*STATUSES, "todos"], default=STATUS_ACTIVE,
                        help="pestaña de guiones (por defecto: active)")
    p_find.add_argument("--solo-validos", action="store_true", help="ocultar guiones incompletos")
    p_find.add_argument("--limite", type=int, default=50)
    p_find.set_defaults(func=cmd_buscar)

    p_rep = sub.add_parser("informe", help="generar un informe tabular")
    p_rep.add_argument("tipo", choices=sorted(REPORTS))
    p_rep.add_argument("--programa")
    p_rep.add_argument("--salida", help="fichero .csv o .json (por defecto: pantalla)")
    p_rep.set_defaults(func=cmd_informe)

    p_bal = sub.add_parser("balance", help="guiones con campos sin especificar")
    p_bal.add_argument("--programa")
    p_bal.add_argument("--fecha", help="filtrar por fecha (ej: 27 de junio, 2024, junio)")
    p_bal.set_defaults(func=cmd_balance)

    for name, status, text in (("archivar", STATUS_INACTIVE, "archivar un guion"),
                               ("restaurar", STATUS_ACTIVE, "restaurar un guion archivado")):
        p_state = sub.add_parser(name, help=text)
        p_state.add_argument("id")
        p_state.add_argument("--programa", help="buscar el id solo en este programa")
        p_state.set_defaults(func=cmd_estado, nuevo_estado=status)

    p_del = sub.add_parser("eliminar", help="eliminar un guion")
    p_del.add_argument("id")
    p_del.add_argument("--programa", help="buscar el id solo en este programa")
    p_del.set_defaults(func=cmd_eliminar)

    p_prog = sub.add_parser("programas", help="listar el catálogo de programas")
    p_prog.set_defaults(func=cmd_programas)

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_dir, args.verbose)

    try:
        return args.func(args)
    except (OSError, ValueError, requests.RequestException) as e:
        log.error("ERROR: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
