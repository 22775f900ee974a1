"""Process-wide connection settings.

Record types share one default DynamoDBConfig unless they pin their own, and
one TableGateway (and so one boto3 client) per (config, table) pair.
"""

from typing import Dict, Optional, Tuple

from ..config import DynamoDBConfig
from .table_gateway import TableGateway, create_table_gateway

_default_config: Optional[DynamoDBConfig] = None
_gateways: Dict[Tuple[int, str], TableGateway] = {}


def configure(config: DynamoDBConfig) -> None:
    """Install the default configuration and drop cached gateways.

    Args:
        config: Configuration used by every record type without its own
    """
    global _default_config
    _default_config = config
    _gateways.clear()


def get_config() -> DynamoDBConfig:
    """Get the default configuration, reading the environment on first use."""
    global _default_config
    if _default_config is None:
        _default_config = DynamoDBConfig.from_env()
    return _default_config


def get_gateway(table_name: str, config: Optional[DynamoDBConfig] = None) -> TableGateway:
    """Get the cached gateway for a record table.

    Args:
        table_name: Table name bound to the record type, before prefixing
        config: Record-specific configuration, defaults to get_config()
    """
    config = config or get_config()
    cache_key = (id(config), table_name)
    gateway = _gateways.get(cache_key)
    if gateway is None:
        gateway = create_table_gateway(config, table_name)
        _gateways[cache_key] = gateway
    return gateway


def reset_connections() -> None:
    """Forget every cached gateway; clients are recreated on next use."""
    _gateways.clear()
