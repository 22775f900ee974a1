"""
Record Query

A RecordQuery describes a set of items of one record type by filters, the
not-yet-materialized counterpart of a Record instance. Reads run a Scan with
the accumulated ScanFilter; bulk delete/restore/force_delete materialize the
set and apply the per-record operation to each record in turn.
"""

import logging
from typing import TYPE_CHECKING, Any, Dict, Generic, List, Optional, Sequence, Type, TypeVar, Union

from ..core.table_gateway import is_successful
from ..exceptions import BulkOperationError, DynamoDBRecordError, RecordNotFoundError
from .filters import ScanFilter
from .operators import ComparisonOperator, resolve_operator

if TYPE_CHECKING:
    from ..models.record import Record

T = TypeVar('T', bound='Record')

logger = logging.getLogger(__name__)

# Soft-delete visibility of a query
WITHOUT_TRASHED = "without"
WITH_TRASHED = "with"
ONLY_TRASHED = "only"


class _Unset:
    def __repr__(self) -> str:
        return "<unset>"


UNSET: Any = _Unset()

Columns = Optional[Union[str, Sequence[str]]]


def attributes_to_get(columns: Columns) -> Optional[List[str]]:
    """Normalize a column selection; None means every attribute."""
    if columns is None:
        return None
    if isinstance(columns, str):
        columns = [columns]
    columns = list(columns)
    if not columns or '*' in columns:
        return None
    return columns


class RecordQuery(Generic[T]):
    """
    Filter builder and fetcher for one record type.

    Every where* method returns the query itself so calls can be chained:

        Order.where("status", "paid").where("total", ">", 100).get()
    """

    def __init__(self, model: Type[T]):
        self.model = model
        self.filters = ScanFilter()
        self.trashed = WITHOUT_TRASHED

    def __repr__(self) -> str:
        return f"RecordQuery({self.model.__name__}, {self.filters!r}, trashed={self.trashed!r})"

    # -------------------------------------------------------------------------
    # Query building
    # -------------------------------------------------------------------------

    def where(self, column: str, operator: Any, value: Any = UNSET) -> 'RecordQuery[T]':
        """Add a basic comparison clause.

        ``where(column, value)`` compares for equality;
        ``where(column, operator, value)`` uses one of COMPARISON_OPERATORS.

        Raises:
            InvalidOperatorError: If the operator token is not recognized
        """
        if value is UNSET:
            value, operator = operator, '='
        self.filters.add(column, resolve_operator(operator), [value])
        return self

    def where_null(self, column: str, not_: bool = False) -> 'RecordQuery[T]':
        """Add an "attribute is absent" (or present, with ``not_``) clause."""
        operator = ComparisonOperator.NOT_NULL if not_ else ComparisonOperator.NULL
        self.filters.add(column, operator)
        return self

    def where_not_null(self, column: str) -> 'RecordQuery[T]':
        return self.where_null(column, not_=True)

    def where_in(self, column: str, values: Sequence[Any]) -> 'RecordQuery[T]':
        self.filters.add(column, ComparisonOperator.IN, values)
        return self

    def where_between(self, column: str, values: Sequence[Any]) -> 'RecordQuery[T]':
        """Add an inclusive range clause; ``values`` is ``[low, high]``."""
        self.filters.add(column, ComparisonOperator.BETWEEN, values)
        return self

    def where_begins_with(self, column: str, value: Any) -> 'RecordQuery[T]':
        self.filters.add(column, ComparisonOperator.BEGINS_WITH, [value])
        return self

    def with_trashed(self) -> 'RecordQuery[T]':
        """Include soft-deleted records in reads."""
        self.model.require_soft_deletes()
        self.trashed = WITH_TRASHED
        return self

    def only_trashed(self) -> 'RecordQuery[T]':
        """Read soft-deleted records only."""
        self.model.require_soft_deletes()
        self.trashed = ONLY_TRASHED
        return self

    # -------------------------------------------------------------------------
    # Fetching
    # -------------------------------------------------------------------------

    def get(self, columns: Columns = None) -> List[T]:
        """Execute the scan and materialize every matching record.

        Args:
            columns: Attributes to project, None or ``["*"]`` for all

        Returns:
            Records in scan order
        """
        return self._scan(columns, self.trashed)

    def first(self, columns: Columns = None) -> Optional[T]:
        records = self.get(columns)
        return records[0] if records else None

    def last(self, columns: Columns = None) -> Optional[T]:
        records = self.get(columns)
        return records[-1] if records else None

    def first_or_fail(self, columns: Columns = None) -> T:
        """Get the first matching record.

        Raises:
            RecordNotFoundError: If nothing matches
        """
        record = self.first(columns)
        if record is None:
            raise RecordNotFoundError(self.model.__name__, self.model.gateway().table_name)
        return record

    def find(self, key: Any, columns: Columns = None) -> Optional[T]:
        """Look up one record by primary key with GetItem.

        Filters and soft-delete visibility do not apply to key lookups.

        Returns:
            The record, or None when the item does not exist
        """
        gateway = self.model.gateway()
        response = gateway.get_item(self.model.build_key(key), attributes_to_get(columns))

        if is_successful(response) and 'Item' in response:
            return self.model.from_item(response['Item'])
        return None

    def find_or_fail(self, key: Any, columns: Columns = None) -> T:
        """Look up one record by primary key.

        Raises:
            RecordNotFoundError: If the item does not exist, carrying the key
        """
        record = self.find(key, columns)
        if record is None:
            raise RecordNotFoundError(self.model.__name__, self.model.gateway().table_name, key)
        return record

    def first_or_create(self, attributes: Dict[str, Any], values: Optional[Dict[str, Any]] = None) -> T:
        """Get the first record matching ``attributes`` or create it.

        A created record holds ``values`` overlaid with ``attributes``.
        """
        for field, value in attributes.items():
            self.where(field, '=', value)

        record = self.first()
        if record is None:
            record = self.model(**{**(values or {}), **attributes})
            record.save()
        return record

    # -------------------------------------------------------------------------
    # Bulk persistence
    # -------------------------------------------------------------------------

    def delete(self) -> bool:
        """Delete every matching record (soft delete for soft-delete types).

        Raises:
            BulkOperationError: If any record failed; every record is attempted
        """
        return self._each("delete", self.get())

    def force_delete(self) -> bool:
        """Hard delete every matching record."""
        return self._each("force_delete", self.get())

    def restore(self) -> bool:
        """Restore every matching soft-deleted record.

        Reads trashed records only, unless with_trashed() was requested.
        """
        self.model.require_soft_deletes()
        trashed = ONLY_TRASHED if self.trashed == WITHOUT_TRASHED else self.trashed
        return self._each("restore", self._scan(None, trashed))

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _scoped_filters(self, trashed: str) -> ScanFilter:
        soft_deletes = self.model.soft_deletes
        if soft_deletes is None:
            return self.filters
        return soft_deletes.apply_scope(self.filters, trashed)

    def _scan(self, columns: Columns, trashed: str) -> List[T]:
        gateway = self.model.gateway()
        scan_filter = self._scoped_filters(trashed).to_request(self.model.marshaler)
        projection = attributes_to_get(columns)

        records: List[T] = []
        start_key = None
        while True:
            response = gateway.scan(
                scan_filter=scan_filter,
                attributes_to_get=projection,
                exclusive_start_key=start_key
            )
            records.extend(self.model.from_item(item) for item in response.get('Items', []))

            start_key = response.get('LastEvaluatedKey')
            if not start_key:
                break

        logger.info(f"Scan returned {len(records)} records from {gateway.table_name}")
        return records

    def _each(self, operation: str, records: List[T]) -> bool:
        table_name = self.model.gateway().table_name
        succeeded: List[Any] = []
        failed: Dict[Any, Optional[Exception]] = {}

        for record in records:
            key = record.get_key()
            try:
                ok = getattr(record, operation)()
            except DynamoDBRecordError as e:
                logger.warning(f"Bulk {operation} failed for {key} in {table_name}: {e}")
                failed[key] = e
                continue

            if ok:
                succeeded.append(key)
            else:
                logger.warning(f"Bulk {operation} was not acknowledged for {key} in {table_name}")
                failed[key] = None

        if failed:
            raise BulkOperationError(operation, table_name, succeeded, failed)

        logger.info(f"Bulk {operation} processed {len(succeeded)} records in {table_name}")
        return True
