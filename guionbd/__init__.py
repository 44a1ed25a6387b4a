"""Catálogo de guiones radiales: análisis de exportaciones de texto y fusión por clave derivada."""
from .analizador import iter_entries, parse_block, parse_entries
from .campos import ExtractedFields, extract_fields
from .config import DEFAULT_CONFIG, ParserConfig, load_config
from .fechas import resolve_date
from .fusion import MergeResult, derive_key, merge_records, reconcile
from .normalizar import normalize_program_name, normalize_text
from .programas import PROGRAMS, Program, distribute, match_program, storage_key
from .registros import Record, build_record, is_valid, missing_fields
from .segmentar import DelimiterStyle, segment

__version__ = "1.0.0"
