"""
Soft-delete capability.

A record type opts in by composing the capability:

    class Order(Record):
        soft_deletes = SoftDeletes()                    # stamps deleted_at
        # soft_deletes = SoftDeletes(column="archived_at")

With the capability, Record.delete() stamps the column instead of removing the
item, reads hide stamped records unless with_trashed()/only_trashed() is used,
and restore() removes the stamp again.
"""

import logging
from typing import TYPE_CHECKING

from ..core.table_gateway import is_successful
from ..query.filters import ScanFilter
from ..query.operators import ComparisonOperator
from ..query.record_query import ONLY_TRASHED, WITHOUT_TRASHED
from ..utils.timezone import format_iso, utcnow

if TYPE_CHECKING:
    from .record import Record

logger = logging.getLogger(__name__)


class SoftDeletes:
    """Deletion-timestamp strategy for one record type."""

    def __init__(self, column: str = "deleted_at"):
        """
        Args:
            column: Attribute holding the deletion timestamp
        """
        self.column = column

    def __repr__(self) -> str:
        return f"SoftDeletes(column={self.column!r})"

    def apply_scope(self, filters: ScanFilter, trashed: str) -> ScanFilter:
        """Return ``filters`` with the visibility clause for ``trashed`` applied.

        The query's own filter map is left untouched.
        """
        if trashed == WITHOUT_TRASHED:
            scoped = filters.copy()
            scoped.add(self.column, ComparisonOperator.NULL)
            return scoped
        if trashed == ONLY_TRASHED:
            scoped = filters.copy()
            scoped.add(self.column, ComparisonOperator.NOT_NULL)
            return scoped
        return filters

    def delete(self, record: 'Record') -> bool:
        """Stamp the deletion timestamp on an existing record."""
        stamp = format_iso(utcnow())
        response = record.gateway().update_item(
            record.build_key(record.get_key()),
            {self.column: {'Action': 'PUT', 'Value': record.marshaler.marshal_value(stamp)}}
        )
        if not is_successful(response):
            return False

        record._sync_attribute(self.column, stamp)
        logger.info(f"Soft deleted {type(record).__name__} {record.get_key()}")
        return True

    def restore(self, record: 'Record') -> bool:
        """Remove the deletion timestamp from an existing record."""
        response = record.gateway().update_item(
            record.build_key(record.get_key()),
            {self.column: {'Action': 'DELETE'}}
        )
        if not is_successful(response):
            return False

        record._sync_attribute(self.column, None)
        logger.info(f"Restored {type(record).__name__} {record.get_key()}")
        return True

    def is_trashed(self, record: 'Record') -> bool:
        return getattr(record, self.column, None) is not None
