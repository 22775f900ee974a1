"""
DynamoDB Record

An active-record layer over AWS DynamoDB built on boto3 and Pydantic. Record
types are Pydantic models bound to a table; queries are built fluently and
executed as Scans, key lookups use GetItem, and writes use the item API.
"""

from .config import DynamoDBConfig
from .core import (
    Marshaler,
    TableGateway,
    configure,
    create_table_gateway,
    get_config,
    reset_connections,
)
from .exceptions import (
    BulkOperationError,
    ConnectionError,
    DynamoDBRecordError,
    InvalidOperatorError,
    RecordNotFoundError,
    RetryableError,
    SoftDeleteNotEnabledError,
    ValidationError,
)
from .models import Record, SoftDeletes
from .query import COMPARISON_OPERATORS, ComparisonOperator, RecordQuery, ScanFilter

__version__ = "0.1.0"
__all__ = [
    # Configuration
    "DynamoDBConfig",
    "configure",
    "get_config",
    "reset_connections",

    # Exceptions
    "BulkOperationError",
    "ConnectionError",
    "DynamoDBRecordError",
    "InvalidOperatorError",
    "RecordNotFoundError",
    "RetryableError",
    "SoftDeleteNotEnabledError",
    "ValidationError",

    # Records
    "Record",
    "SoftDeletes",

    # Queries
    "COMPARISON_OPERATORS",
    "ComparisonOperator",
    "RecordQuery",
    "ScanFilter",

    # Infrastructure
    "Marshaler",
    "TableGateway",
    "create_table_gateway",
]
