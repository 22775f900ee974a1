"""Comparison operators of the legacy DynamoDB ScanFilter API."""

from enum import Enum
from typing import Any, Dict

from ..exceptions import InvalidOperatorError


class ComparisonOperator(str, Enum):
    """DynamoDB ScanFilter ComparisonOperator values."""
    EQ = "EQ"
    NE = "NE"
    LE = "LE"
    LT = "LT"
    GE = "GE"
    GT = "GT"
    CONTAINS = "CONTAINS"
    NOT_CONTAINS = "NOT_CONTAINS"
    NULL = "NULL"
    NOT_NULL = "NOT_NULL"
    IN = "IN"
    BETWEEN = "BETWEEN"
    BEGINS_WITH = "BEGINS_WITH"


# Tokens accepted by where(column, operator, value)
COMPARISON_OPERATORS: Dict[str, ComparisonOperator] = {
    '=': ComparisonOperator.EQ,
    '!=': ComparisonOperator.NE,
    '<>': ComparisonOperator.NE,
    '<=': ComparisonOperator.LE,
    '<': ComparisonOperator.LT,
    '>=': ComparisonOperator.GE,
    '>': ComparisonOperator.GT,
    'like': ComparisonOperator.CONTAINS,
    'not like': ComparisonOperator.NOT_CONTAINS,
}

# Number of comparison values each operator takes; None means one or more
OPERATOR_ARITY: Dict[ComparisonOperator, Any] = {
    ComparisonOperator.NULL: 0,
    ComparisonOperator.NOT_NULL: 0,
    ComparisonOperator.IN: None,
    ComparisonOperator.BETWEEN: 2,
}


def resolve_operator(token: Any) -> ComparisonOperator:
    """Translate a where() operator token to its ComparisonOperator.

    Raises:
        InvalidOperatorError: If the token is not one of COMPARISON_OPERATORS
    """
    try:
        return COMPARISON_OPERATORS[token]
    except (KeyError, TypeError):
        raise InvalidOperatorError(token, list(COMPARISON_OPERATORS)) from None
