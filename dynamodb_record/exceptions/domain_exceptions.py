"""
Domain-Specific Exceptions for dynamodb_record

Organized by category:
1. Query Building Errors
2. Lookup Errors
3. Data Validation Errors
4. Bulk Operation Errors
5. Infrastructure and Retry Errors
"""

from typing import Any, Dict, List, Optional, Sequence

from .base import DynamoDBRecordError


# =============================================================================
# Query Building Errors
# =============================================================================

class InvalidOperatorError(DynamoDBRecordError):
    """Raised when a where clause receives an unknown comparison operator.

    Always raised while building the query, never by DynamoDB.
    """

    def __init__(self, operator: Any, valid_operators: Sequence[str]):
        """Initialize invalid operator error.

        Args:
            operator: The rejected operator token
            valid_operators: Every token the query builder accepts
        """
        self.operator = operator
        self.valid_operators = list(valid_operators)
        message = (
            f"Value {operator} is invalid comparison operator: "
            f"Member must satisfy value set: [{', '.join(self.valid_operators)}]"
        )
        super().__init__(message)


class SoftDeleteNotEnabledError(DynamoDBRecordError):
    """Raised when a soft-delete operation is used on a record type without the capability."""

    def __init__(self, model: str):
        self.model = model
        super().__init__(f"Record [{model}] does not use soft deletes", context={'model': model})


# =============================================================================
# Lookup Errors
# =============================================================================

class RecordNotFoundError(DynamoDBRecordError):
    """Raised by the ``*_or_fail`` family when no record matches.

    Plain lookups (``find``, ``first``) return ``None`` instead.
    """

    def __init__(self, model: str, table_name: str, key: Any = None):
        """Initialize record not found error.

        Args:
            model: Name of the record type that was looked up
            table_name: Name of the DynamoDB table
            key: Primary key value for key lookups, None for filtered lookups
        """
        self.model = model
        self.table_name = table_name
        self.key = key
        message = f"No query results for record [{model}]"
        if key is not None:
            message += f" {key}"
        context = {'table_name': table_name}
        if key is not None:
            context['key'] = key
        super().__init__(message, context=context)


# =============================================================================
# Data Validation Errors
# =============================================================================

class ValidationError(DynamoDBRecordError):
    """Raised when data validation fails.

    Used for:
    - where clauses with the wrong number of values
    - DynamoDB items that do not validate against the record type
    - ValidationException responses from DynamoDB
    """

    def __init__(self, message: str, errors: Optional[Dict[str, Any]] = None, original_error: Optional[Exception] = None):
        """Initialize validation error.

        Args:
            message: Human-readable error message
            errors: Dictionary of field-level validation errors
            original_error: The original exception that caused this error
        """
        self.errors = errors or {}
        context = {}
        if self.errors:
            context['validation_errors'] = self.errors
        super().__init__(message, original_error, context)


# =============================================================================
# Bulk Operation Errors
# =============================================================================

class BulkOperationError(DynamoDBRecordError):
    """Raised when a delete/restore/force_delete over a filtered set partially fails.

    The whole set is always attempted; this error reports the outcome per key.
    """

    def __init__(
        self,
        operation: str,
        table_name: str,
        succeeded: List[Any],
        failed: Dict[Any, Optional[Exception]]
    ):
        """Initialize bulk operation error.

        Args:
            operation: Name of the per-record operation (e.g. "delete")
            table_name: Name of the DynamoDB table
            succeeded: Keys of records that were processed successfully
            failed: Keys of records that failed, mapped to the raised error
                or None when the store reported a non-200 status
        """
        self.operation = operation
        self.table_name = table_name
        self.succeeded = list(succeeded)
        self.failed = dict(failed)
        message = (
            f"Bulk {operation} on {table_name} failed for {len(self.failed)} of "
            f"{len(self.failed) + len(self.succeeded)} records"
        )
        context = {
            'failed_keys': list(self.failed)
        }
        first_error = next((e for e in self.failed.values() if e is not None), None)
        super().__init__(message, first_error, context)


# =============================================================================
# Infrastructure and Retry Errors
# =============================================================================

class ConnectionError(DynamoDBRecordError):
    """Raised when DynamoDB cannot be reached or refuses the caller.

    Used for:
    - Client/session creation failures
    - Authentication/authorization failures
    - Missing tables
    - Unrecognized service errors
    """

    def __init__(self, message: str, original_error: Optional[Exception] = None, context: Optional[Dict[str, Any]] = None):
        super().__init__(message, original_error, context)


class RetryableError(DynamoDBRecordError):
    """Raised when an operation fails for a temporary reason and may be retried.

    Used for:
    - ProvisionedThroughputExceededException
    - RequestLimitExceeded and throttling errors
    - Temporary service unavailability
    """

    def __init__(self, message: str, retry_after_seconds: Optional[int] = None, original_error: Optional[Exception] = None):
        self.retry_after_seconds = retry_after_seconds
        context = {}
        if retry_after_seconds:
            context['retry_after_seconds'] = retry_after_seconds
        super().__init__(message, original_error, context)
