"""
Active-record base model.

Record types subclass Record, optionally declaring typed attributes. Items are
schemaless, so undeclared attributes are accepted and persisted as well:

    class Order(Record):
        table_name = "orders"                  # default: derived from class name
        mutators = {"email": str.lower}        # applied on save()
        accessors = {"total": Decimal}         # applied when loading items
        soft_deletes = SoftDeletes()

        status: str = "pending"

    order = Order(status="paid", total=12.5)
    order.save()                               # PutItem, assigns id + created_at
    order.status = "shipped"
    order.save()                               # UpdateItem, stamps updated_at

    Order.where("status", "paid").get()        # Scan with ScanFilter
    Order.find(order.id)                       # GetItem

Persistence requests use the legacy item API through the record type's
TableGateway; query methods delegate to RecordQuery.
"""

import logging
import uuid
from datetime import datetime
from typing import Any, Callable, ClassVar, Dict, List, Optional, Sequence, Type, TypeVar

from pydantic import BaseModel, ConfigDict, PrivateAttr, field_validator
from pydantic import ValidationError as PydanticValidationError

from ..config import DynamoDBConfig
from ..core.connection import get_gateway
from ..core.marshaler import Marshaler
from ..core.table_gateway import TableGateway, is_successful
from ..exceptions import SoftDeleteNotEnabledError, ValidationError
from ..query.record_query import UNSET, Columns, RecordQuery
from ..utils.naming import table_name_for
from ..utils.timezone import parse_iso, utcnow
from .soft_deletes import SoftDeletes

R = TypeVar('R', bound='Record')

logger = logging.getLogger(__name__)


class Record(BaseModel):
    """Base class for DynamoDB-backed record types."""

    model_config = ConfigDict(extra='allow')

    # Table binding; None derives snake_case(plural(class name))
    table_name: ClassVar[Optional[str]] = None
    primary_key: ClassVar[str] = "id"

    timestamps: ClassVar[bool] = True
    CREATED_AT: ClassVar[str] = "created_at"
    UPDATED_AT: ClassVar[str] = "updated_at"

    # Field name -> transform; mutators run on save(), accessors on load
    mutators: ClassVar[Dict[str, Callable[[Any], Any]]] = {}
    accessors: ClassVar[Dict[str, Callable[[Any], Any]]] = {}

    soft_deletes: ClassVar[Optional[SoftDeletes]] = None

    # Per-type configuration, falls back to dynamodb_record.configure()
    dynamodb_config: ClassVar[Optional[DynamoDBConfig]] = None

    marshaler: ClassVar[Marshaler] = Marshaler()

    id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    _exists: bool = PrivateAttr(default=False)
    _original: Dict[str, Any] = PrivateAttr(default_factory=dict)

    @field_validator('created_at', 'updated_at', mode='before')
    @classmethod
    def parse_timestamps(cls, v):
        """Parse stored ISO strings into UTC datetimes."""
        if isinstance(v, str):
            try:
                return parse_iso(v)
            except ValueError as e:
                raise ValueError(f"Invalid datetime format: {v}. Expected ISO format.") from e
        return v

    # -------------------------------------------------------------------------
    # Table binding
    # -------------------------------------------------------------------------

    @classmethod
    def get_table(cls) -> str:
        """Table name bound to this record type, before any configured prefix."""
        return cls.table_name or table_name_for(cls.__name__)

    @classmethod
    def gateway(cls) -> TableGateway:
        return get_gateway(cls.get_table(), cls.dynamodb_config)

    @classmethod
    def build_key(cls, value: Any) -> Dict[str, Any]:
        """Marshaled primary key map for ``value``."""
        return {cls.primary_key: cls.marshaler.marshal_value(value)}

    @classmethod
    def from_item(cls: Type[R], item: Dict[str, Any]) -> R:
        """Materialize a record from a raw DynamoDB item.

        Raises:
            ValidationError: If the item does not validate against the record type
        """
        attributes = cls.marshaler.unmarshal_item(item)
        for name, accessor in cls.accessors.items():
            if name in attributes:
                attributes[name] = accessor(attributes[name])

        try:
            record = cls.model_validate(attributes)
        except PydanticValidationError as e:
            logger.error(f"Failed to convert DynamoDB item to {cls.__name__}: {e}")
            raise ValidationError(
                f"Failed to convert DynamoDB item to {cls.__name__}: {e}",
                original_error=e
            ) from e

        record._exists = True
        record._sync_original()
        return record

    @classmethod
    def require_soft_deletes(cls) -> SoftDeletes:
        """
        Raises:
            SoftDeleteNotEnabledError: If the record type has no soft-delete capability
        """
        if cls.soft_deletes is None:
            raise SoftDeleteNotEnabledError(cls.__name__)
        return cls.soft_deletes

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @classmethod
    def query(cls: Type[R]) -> RecordQuery[R]:
        return RecordQuery(cls)

    @classmethod
    def where(cls: Type[R], column: str, operator: Any, value: Any = UNSET) -> RecordQuery[R]:
        return cls.query().where(column, operator, value)

    @classmethod
    def where_null(cls: Type[R], column: str) -> RecordQuery[R]:
        return cls.query().where_null(column)

    @classmethod
    def where_not_null(cls: Type[R], column: str) -> RecordQuery[R]:
        return cls.query().where_not_null(column)

    @classmethod
    def where_in(cls: Type[R], column: str, values: Sequence[Any]) -> RecordQuery[R]:
        return cls.query().where_in(column, values)

    @classmethod
    def where_between(cls: Type[R], column: str, values: Sequence[Any]) -> RecordQuery[R]:
        return cls.query().where_between(column, values)

    @classmethod
    def where_begins_with(cls: Type[R], column: str, value: Any) -> RecordQuery[R]:
        return cls.query().where_begins_with(column, value)

    @classmethod
    def with_trashed(cls: Type[R]) -> RecordQuery[R]:
        return cls.query().with_trashed()

    @classmethod
    def only_trashed(cls: Type[R]) -> RecordQuery[R]:
        return cls.query().only_trashed()

    @classmethod
    def all(cls: Type[R], columns: Columns = None) -> List[R]:
        """Get every record of the table (soft-deleted ones excluded)."""
        return cls.query().get(columns)

    @classmethod
    def find(cls: Type[R], key: Any, columns: Columns = None) -> Optional[R]:
        return cls.query().find(key, columns)

    @classmethod
    def find_or_fail(cls: Type[R], key: Any, columns: Columns = None) -> R:
        return cls.query().find_or_fail(key, columns)

    @classmethod
    def first(cls: Type[R], columns: Columns = None) -> Optional[R]:
        return cls.query().first(columns)

    @classmethod
    def first_or_fail(cls: Type[R], columns: Columns = None) -> R:
        return cls.query().first_or_fail(columns)

    @classmethod
    def last(cls: Type[R], columns: Columns = None) -> Optional[R]:
        return cls.query().last(columns)

    @classmethod
    def first_or_create(cls: Type[R], attributes: Dict[str, Any], values: Optional[Dict[str, Any]] = None) -> R:
        return cls.query().first_or_create(attributes, values)

    # -------------------------------------------------------------------------
    # Attributes
    # -------------------------------------------------------------------------

    @property
    def exists(self) -> bool:
        """Whether the record was loaded from or persisted to DynamoDB."""
        return self._exists

    def get_key(self) -> Any:
        return getattr(self, self.primary_key, None)

    def fill(self: R, **attributes: Any) -> R:
        for name, value in attributes.items():
            setattr(self, name, value)
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Attributes of the record, without unset (None) values."""
        return self.model_dump(exclude_none=True)

    def get_original(self, name: Optional[str] = None, default: Any = None) -> Any:
        """Last persisted state, or one attribute of it."""
        if name is None:
            return dict(self._original)
        return self._original.get(name, default)

    def get_dirty(self) -> Dict[str, Any]:
        """Attributes changed since the record was last loaded or saved."""
        return {
            name: value
            for name, value in self.model_dump().items()
            if name not in self._original or self._original[name] != value
        }

    def is_dirty(self, *names: str) -> bool:
        dirty = self.get_dirty()
        if not names:
            return bool(dirty)
        return any(name in dirty for name in names)

    def trashed(self) -> bool:
        """Whether the record carries a soft-delete stamp."""
        return self.require_soft_deletes().is_trashed(self)

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def save(self) -> bool:
        """Insert a new record or update an existing one.

        Returns:
            True when DynamoDB acknowledged the write with status 200
        """
        self._apply_mutators()

        if self._exists:
            response = self._perform_update()
        else:
            response = self._perform_insert()

        return is_successful(response)

    def delete(self) -> bool:
        """Delete the record; soft-delete types get a deletion stamp instead.

        A record that was never persisted has nothing to delete and returns False.
        """
        if not self._exists:
            logger.warning(f"delete() called on unsaved {type(self).__name__}; nothing to delete")
            return False

        if self.soft_deletes is not None:
            return self.soft_deletes.delete(self)
        return self._perform_delete()

    def force_delete(self) -> bool:
        """Hard delete the record, bypassing soft deletes."""
        if not self._exists:
            logger.warning(f"force_delete() called on unsaved {type(self).__name__}; nothing to delete")
            return False
        return self._perform_delete()

    def restore(self) -> bool:
        """Remove the soft-delete stamp.

        Raises:
            SoftDeleteNotEnabledError: If the record type has no soft-delete capability
        """
        soft_deletes = self.require_soft_deletes()
        if not self._exists:
            return False
        return soft_deletes.restore(self)

    def _apply_mutators(self) -> None:
        for name, mutator in self.mutators.items():
            value = getattr(self, name, None)
            if value is not None:
                setattr(self, name, mutator(value))

    def _perform_insert(self) -> Dict[str, Any]:
        setattr(self, self.primary_key, str(uuid.uuid4()))
        if self.timestamps:
            setattr(self, self.CREATED_AT, utcnow())

        item = self.model_dump(exclude_none=True)
        response = self.gateway().put_item(self.marshaler.marshal_item(item))

        self._sync_original()
        self._exists = True
        return response

    def _perform_update(self) -> Dict[str, Any]:
        if self.timestamps:
            setattr(self, self.UPDATED_AT, utcnow())

        immutable = {self.primary_key}
        if self.timestamps:
            immutable.add(self.CREATED_AT)

        attribute_updates = {}
        for name, value in self._persisted_attributes().items():
            if name in immutable:
                continue
            if value is None:
                attribute_updates[name] = {'Action': 'DELETE'}
            else:
                attribute_updates[name] = {'Action': 'PUT', 'Value': self.marshaler.marshal_value(value)}

        response = self.gateway().update_item(self.build_key(self.get_key()), attribute_updates)

        self._sync_original()
        return response

    def _perform_delete(self) -> bool:
        response = self.gateway().delete_item(self.build_key(self.get_key()))
        return is_successful(response)

    def _persisted_attributes(self) -> Dict[str, Any]:
        # Declared fields only count once loaded or assigned; undeclared
        # attributes exist only when they were.
        declared = type(self).model_fields
        return {
            name: value
            for name, value in self.model_dump().items()
            if name not in declared or name in self.model_fields_set
        }

    def _sync_original(self) -> None:
        self._original = self.model_dump()

    def _sync_attribute(self, name: str, value: Any) -> None:
        """Record a single-attribute write made outside save()."""
        if value is not None:
            setattr(self, name, value)
            self._original[name] = value
        elif name in type(self).model_fields:
            setattr(self, name, None)
            self._original[name] = None
        else:
            if self.__pydantic_extra__ is not None:
                self.__pydantic_extra__.pop(name, None)
            self._original.pop(name, None)
