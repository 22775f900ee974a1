"""
Item marshaling between native Python values and DynamoDB AttributeValues.

Built on boto3's TypeSerializer/TypeDeserializer, with the conversions those
refuse to do on their own:
- datetime -> UTC ISO string
- float -> Decimal (DynamoDB Number)
- Enum -> its value
- tuple -> list

Numbers come back as Decimal, as boto3 returns them.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict

from boto3.dynamodb.types import TypeDeserializer, TypeSerializer

from ..utils.timezone import format_iso


class Marshaler:
    """Converts record attributes to and from DynamoDB's typed wire format."""

    def __init__(self):
        self._serializer = TypeSerializer()
        self._deserializer = TypeDeserializer()

    def marshal_value(self, value: Any) -> Dict[str, Any]:
        """Marshal a single native value, e.g. ``'paid'`` -> ``{'S': 'paid'}``."""
        return self._serializer.serialize(self._prepare(value))

    def marshal_item(self, item: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
        """Marshal a mapping of attribute name to native value."""
        return {name: self.marshal_value(value) for name, value in item.items()}

    def unmarshal_value(self, value: Dict[str, Any]) -> Any:
        return self._deserializer.deserialize(value)

    def unmarshal_item(self, item: Dict[str, Dict[str, Any]]) -> Dict[str, Any]:
        return {name: self.unmarshal_value(value) for name, value in item.items()}

    def _prepare(self, value: Any) -> Any:
        """Recursively convert Python objects to types TypeSerializer accepts."""
        if isinstance(value, dict):
            return {k: self._prepare(v) for k, v in value.items()}
        elif isinstance(value, (list, tuple)):
            return [self._prepare(v) for v in value]
        elif isinstance(value, (set, frozenset)):
            return {self._prepare(v) for v in value}
        elif isinstance(value, datetime):
            return format_iso(value)
        elif isinstance(value, Enum):
            return self._prepare(value.value)
        elif isinstance(value, float):
            # str() keeps the short repr, Decimal(0.1) would not
            return Decimal(str(value))
        return value
