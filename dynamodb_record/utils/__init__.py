from .naming import pluralize, snake_case, table_name_for
from .timezone import format_iso, parse_iso, to_utc, utcnow

__all__ = [
    "format_iso",
    "parse_iso",
    "pluralize",
    "snake_case",
    "table_name_for",
    "to_utc",
    "utcnow",
]
