from .filters import FilterClause, ScanFilter
from .operators import COMPARISON_OPERATORS, ComparisonOperator, resolve_operator
from .record_query import ONLY_TRASHED, WITH_TRASHED, WITHOUT_TRASHED, RecordQuery

__all__ = [
    "COMPARISON_OPERATORS",
    "ComparisonOperator",
    "FilterClause",
    "ONLY_TRASHED",
    "RecordQuery",
    "ScanFilter",
    "WITH_TRASHED",
    "WITHOUT_TRASHED",
    "resolve_operator",
]
