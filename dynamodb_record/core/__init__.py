"""
Core infrastructure components for DynamoDB operations.

- TableGateway: Thin wrapper over the boto3 DynamoDB item API
- Marshaler: native value <-> AttributeValue conversion
- Connection registry: default configuration and gateway cache
"""

from .connection import configure, get_config, get_gateway, reset_connections
from .marshaler import Marshaler
from .table_gateway import TableGateway, create_table_gateway, is_successful, map_dynamodb_error

__all__ = [
    "Marshaler",
    "TableGateway",
    "configure",
    "create_table_gateway",
    "get_config",
    "get_gateway",
    "is_successful",
    "map_dynamodb_error",
    "reset_connections",
]
