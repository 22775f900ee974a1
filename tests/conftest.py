"""
Test configuration and fixtures for dynamodb_record.

Provides a moto-backed DynamoDB with the tables of the record types in
tests/helpers/models.py, and a mocked TableGateway for request-shape tests.
"""

import sys
from pathlib import Path
from unittest.mock import Mock, patch

# Add parent directory to path so we can import dynamodb_record and tests.helpers
sys.path.insert(0, str(Path(__file__).parent.parent))

import boto3
import pytest
from moto import mock_aws

from dynamodb_record import DynamoDBConfig, configure, reset_connections
from tests.helpers.tables import RECORD_TABLES, create_record_table

OK = {'ResponseMetadata': {'HTTPStatusCode': 200}}


@pytest.fixture
def mock_dynamodb_config():
    """DynamoDB configuration for mocked testing."""
    return DynamoDBConfig(
        aws_access_key_id="test_key",
        aws_secret_access_key="test_secret",
        region_name="us-east-1",
        endpoint_url=None,  # Use default AWS endpoint for moto
        table_prefix=""
    )


@pytest.fixture
def mock_dynamodb_client():
    """Mock DynamoDB client."""
    with mock_aws():
        yield boto3.client('dynamodb', region_name='us-east-1')


@pytest.fixture
def record_tables(mock_dynamodb_client, mock_dynamodb_config):
    """Create every record table and install the mocked configuration.

    Gateways are dropped before and after the test so boto3 clients are
    always created inside the moto context.
    """
    for table_name in RECORD_TABLES:
        create_record_table(mock_dynamodb_client, table_name)

    configure(mock_dynamodb_config)
    yield mock_dynamodb_client
    reset_connections()


@pytest.fixture
def mock_gateway(mock_dynamodb_config):
    """TableGateway double returned for every record type.

    Every write is acknowledged and scans return no items unless a test
    sets its own return values.
    """
    configure(mock_dynamodb_config)

    gateway = Mock()
    gateway.table_name = "orders"
    gateway.scan.return_value = {'Items': [], **OK}
    gateway.get_item.return_value = dict(OK)
    gateway.put_item.return_value = dict(OK)
    gateway.update_item.return_value = dict(OK)
    gateway.delete_item.return_value = dict(OK)

    with patch('dynamodb_record.models.record.get_gateway', return_value=gateway):
        yield gateway

    reset_connections()


# Sample Data Fixtures

@pytest.fixture
def sample_order_item():
    """Raw DynamoDB item of a persisted order."""
    return {
        'id': {'S': 'order-1'},
        'status': {'S': 'paid'},
        'email': {'S': 'buyer@example.com'},
        'quantity': {'N': '3'},
        'total': {'N': '42.5'},
        'created_at': {'S': '2024-01-15T10:30:00+00:00'},
    }
