# Base exception class
from .base import DynamoDBRecordError

from .domain_exceptions import (
    BulkOperationError,
    ConnectionError,
    InvalidOperatorError,
    RecordNotFoundError,
    RetryableError,
    SoftDeleteNotEnabledError,
    ValidationError,
)

__all__ = [
    # Base exception
    "DynamoDBRecordError",

    # Domain exceptions (alphabetically ordered)
    "BulkOperationError",
    "ConnectionError",
    "InvalidOperatorError",
    "RecordNotFoundError",
    "RetryableError",
    "SoftDeleteNotEnabledError",
    "ValidationError",
]
