"""Scan filter map built by the where* methods."""

from typing import Any, Dict, Iterator, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from ..core.marshaler import Marshaler
from ..exceptions import ValidationError
from .operators import OPERATOR_ARITY, ComparisonOperator


class FilterClause(BaseModel):
    """One column condition: operator plus its native comparison values."""

    model_config = ConfigDict(frozen=True)

    column: str
    operator: ComparisonOperator
    values: List[Any] = Field(default_factory=list)

    def to_condition(self, marshaler: Marshaler) -> Dict[str, Any]:
        """Render the clause as a legacy ScanFilter condition."""
        condition: Dict[str, Any] = {'ComparisonOperator': self.operator.value}
        if OPERATOR_ARITY.get(self.operator, 1) != 0:
            condition['AttributeValueList'] = [marshaler.marshal_value(v) for v in self.values]
        return condition


class ScanFilter:
    """
    Column -> FilterClause map.

    DynamoDB ANDs every condition of a ScanFilter, and the map holds at most
    one condition per column: adding a clause for a column replaces the
    previous one.
    """

    def __init__(self, clauses: Optional[Dict[str, FilterClause]] = None):
        self._clauses: Dict[str, FilterClause] = dict(clauses or {})

    def add(self, column: str, operator: ComparisonOperator, values: Sequence[Any] = ()) -> FilterClause:
        """Add or replace the clause for ``column``.

        Raises:
            ValidationError: If the number of values does not fit the operator
        """
        values = list(values)
        arity = OPERATOR_ARITY.get(operator, 1)
        if arity is None:
            if not values:
                raise ValidationError(
                    f"{operator.value} on '{column}' requires at least one value",
                    errors={column: "empty value list"}
                )
        elif len(values) != arity:
            raise ValidationError(
                f"{operator.value} on '{column}' takes {arity} value(s), got {len(values)}",
                errors={column: f"expected {arity} value(s)"}
            )

        clause = FilterClause(column=column, operator=operator, values=values)
        self._clauses[column] = clause
        return clause

    def get(self, column: str) -> Optional[FilterClause]:
        return self._clauses.get(column)

    def copy(self) -> 'ScanFilter':
        return ScanFilter(self._clauses)

    def to_request(self, marshaler: Marshaler) -> Dict[str, Dict[str, Any]]:
        """Build the ScanFilter request parameter."""
        return {column: clause.to_condition(marshaler) for column, clause in self._clauses.items()}

    def __contains__(self, column: str) -> bool:
        return column in self._clauses

    def __iter__(self) -> Iterator[FilterClause]:
        return iter(self._clauses.values())

    def __len__(self) -> int:
        return len(self._clauses)

    def __repr__(self) -> str:
        return f"ScanFilter({list(self._clauses.values())!r})"
