"""
DynamoDB Table Gateway

Thin wrapper around the low-level boto3 DynamoDB client for a single table.
Records and queries build the request bodies; the gateway:

1. Creates the boto3 session/client lazily from DynamoDBConfig
2. Injects the table name into every request
3. Maps botocore errors to dynamodb_record exceptions
4. Logs writes, and request parameters when debug logging is enabled

Only the legacy item API is exposed (Scan with ScanFilter, GetItem, PutItem,
UpdateItem with AttributeUpdates, DeleteItem). Responses are returned raw so
callers can read ``ResponseMetadata.HTTPStatusCode``.
"""

import logging
from typing import Any, Dict, List, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from ..config import DynamoDBConfig
from ..exceptions import ConnectionError, RetryableError, ValidationError

logger = logging.getLogger(__name__)


def map_dynamodb_error(
    error: ClientError,
    operation: str,
    table_name: str,
    resource_id: Optional[Any] = None
) -> Exception:
    """Map DynamoDB ClientError to dynamodb_record exceptions.

    Args:
        error: The boto3 ClientError
        operation: The operation that failed (e.g., "GetItem", "PutItem")
        table_name: The DynamoDB table name
        resource_id: Optional primary key value for context

    Returns:
        ValidationError for rejected requests, RetryableError for throttling
        and temporary service failures, ConnectionError for everything else
    """
    error_code = error.response['Error']['Code']
    error_message = error.response['Error']['Message']

    context = f"{operation} on {table_name}"
    if resource_id is not None:
        context += f" (resource: {resource_id})"

    full_message = f"{context}: {error_message}"

    if error_code == 'ValidationException':
        return ValidationError(f"Validation failed - {full_message}", original_error=error)

    elif error_code in ['ProvisionedThroughputExceededException', 'RequestLimitExceeded',
                        'ThrottlingException', 'TooManyRequestsException']:
        return RetryableError(f"Throttling - {full_message}", original_error=error)

    elif error_code in ['InternalServerError', 'ServiceUnavailable', 'ServiceUnavailableException',
                        'RequestTimeoutException']:
        return RetryableError(f"Service unavailable - {full_message}", original_error=error)

    elif error_code == 'ResourceNotFoundException':
        return ConnectionError(f"Table not found - {full_message}", original_error=error)

    elif error_code in ['UnrecognizedClientException', 'AccessDeniedException',
                        'InvalidSignatureException', 'ExpiredTokenException']:
        return ConnectionError(f"Authentication/authorization failed - {full_message}", original_error=error)

    logger.warning(f"Unknown DynamoDB error code '{error_code}' mapped to ConnectionError")
    return ConnectionError(f"DynamoDB operation failed - {full_message}", original_error=error)


class TableGateway:
    """
    Gateway for the DynamoDB item API of one table.

    Every method returns the raw client response. Key and item arguments are
    already marshaled AttributeValue maps.
    """

    def __init__(self, config: DynamoDBConfig, table_name: str):
        """Initialize table gateway.

        Args:
            config: DynamoDB configuration
            table_name: Full name of the DynamoDB table
        """
        self.config = config
        self.table_name = table_name
        self._client = None

    @property
    def client(self):
        """Lazy initialization of the low-level DynamoDB client."""
        if self._client is None:
            try:
                session = boto3.Session(
                    aws_access_key_id=self.config.aws_access_key_id,
                    aws_secret_access_key=self.config.aws_secret_access_key,
                    region_name=self.config.region_name
                )

                client_kwargs = {
                    'region_name': self.config.region_name
                }

                if self.config.endpoint_url:
                    client_kwargs['endpoint_url'] = self.config.endpoint_url

                client_kwargs['config'] = Config(
                    retries={'max_attempts': self.config.retries},
                    max_pool_connections=self.config.max_pool_connections,
                    read_timeout=self.config.timeout_seconds,
                    connect_timeout=self.config.timeout_seconds
                )

                self._client = session.client('dynamodb', **client_kwargs)
            except Exception as e:
                logger.error(f"Failed to create DynamoDB client: {e}")
                raise ConnectionError(f"Failed to connect to DynamoDB: {e}", e) from e
        return self._client

    def _call(self, operation: str, method: str, resource_id: Optional[Any] = None, **kwargs) -> Dict[str, Any]:
        request = {'TableName': self.table_name, **kwargs}
        if self.config.enable_debug_logging:
            logger.debug(f"{operation} request: {request}")
        try:
            return getattr(self.client, method)(**request)
        except ClientError as e:
            raise map_dynamodb_error(e, operation, self.table_name, resource_id) from e
        except BotoCoreError as e:
            logger.error(f"{operation} on {self.table_name} could not reach DynamoDB: {e}")
            raise ConnectionError(f"{operation} on {self.table_name} failed: {e}", e) from e

    def scan(
        self,
        scan_filter: Optional[Dict[str, Any]] = None,
        attributes_to_get: Optional[List[str]] = None,
        exclusive_start_key: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        Execute one page of a DynamoDB Scan.

        Args:
            scan_filter: Legacy ScanFilter map (column -> condition)
            attributes_to_get: Attribute names to project
            exclusive_start_key: LastEvaluatedKey of the previous page

        Returns:
            Raw DynamoDB response
        """
        kwargs = {}
        if scan_filter:
            kwargs['ScanFilter'] = scan_filter
        if attributes_to_get:
            kwargs['AttributesToGet'] = attributes_to_get
        if exclusive_start_key:
            kwargs['ExclusiveStartKey'] = exclusive_start_key
        return self._call("Scan", "scan", **kwargs)

    def get_item(self, key: Dict[str, Any], attributes_to_get: Optional[List[str]] = None) -> Dict[str, Any]:
        """Fetch one item by primary key."""
        kwargs = {'Key': key}
        if attributes_to_get:
            kwargs['AttributesToGet'] = attributes_to_get
        return self._call("GetItem", "get_item", _resource_id(key), **kwargs)

    def put_item(self, item: Dict[str, Any]) -> Dict[str, Any]:
        """Write a full item, replacing any item with the same key."""
        response = self._call("PutItem", "put_item", Item=item)
        logger.info(f"Put item in {self.table_name}: {item}")
        return response

    def update_item(self, key: Dict[str, Any], attribute_updates: Dict[str, Any]) -> Dict[str, Any]:
        """
        Update attributes of one item.

        Args:
            key: Primary key of item to update
            attribute_updates: Legacy AttributeUpdates map, e.g.
                ``{'status': {'Action': 'PUT', 'Value': {'S': 'paid'}}}``
        """
        response = self._call(
            "UpdateItem", "update_item", _resource_id(key),
            Key=key, AttributeUpdates=attribute_updates
        )
        logger.info(f"Updated item in {self.table_name}: {key} {sorted(attribute_updates)}")
        return response

    def delete_item(self, key: Dict[str, Any]) -> Dict[str, Any]:
        """Delete one item by primary key."""
        response = self._call("DeleteItem", "delete_item", _resource_id(key), Key=key)
        logger.info(f"Deleted item from {self.table_name}: {key}")
        return response


def is_successful(response: Dict[str, Any]) -> bool:
    """Whether a raw DynamoDB response reports HTTP status 200."""
    return response.get('ResponseMetadata', {}).get('HTTPStatusCode') == 200


def _resource_id(key: Dict[str, Any]) -> Optional[Any]:
    for value in key.values():
        return next(iter(value.values()), None)
    return None


def create_table_gateway(config: DynamoDBConfig, table_name: str) -> TableGateway:
    """
    Factory function to create a TableGateway instance.

    Args:
        config: DynamoDB configuration
        table_name: Table name bound to the record type (prefix is applied here)

    Returns:
        Configured TableGateway instance
    """
    full_table_name = config.get_table_name(table_name)
    return TableGateway(config, full_table_name)
