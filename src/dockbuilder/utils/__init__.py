from .logger import setup_logger, normalize_module_name, parse_module_levels
from .timing import now_ms, format_duration, format_duration_till

__all__ = [
    'setup_logger',
    'normalize_module_name',
    'parse_module_levels',
    'now_ms',
    'format_duration',
    'format_duration_till',
]
