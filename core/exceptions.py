"""
Custom exceptions for the traffic index ETL with structured error context.

Every failure in a run is terminal, so the hierarchy exists to tell callers
(and the process exit code) which stage failed rather than to drive retries.
Each exception includes context information for debugging and monitoring.

Exception Hierarchy:
    ETLException (base)                 exit code 1
    ├── ConfigurationError              exit code 2
    ├── RunLockError                    exit code 7
    ├── ExtractionError                 exit code 3
    │   └── APIExtractionError
    │       ├── NetworkError
    │       ├── HTTPStatusError
    │       └── ResponseReadError
    ├── SnapshotWriteError              exit code 4
    ├── TransformationError             exit code 5
    │   ├── DataFormatError
    │   └── SchemaValidationError
    └── LoadError                       exit code 6
        ├── DatabaseConnectionError
        ├── TransactionError
        ├── DatabaseError
        └── InsertError
"""

from typing import Optional, Dict, Any
from datetime import datetime, timezone


class ETLException(Exception):
    """
    Base exception for all ETL-related errors.

    Attributes:
        message: Human-readable error message
        context: Additional context information (url, path, stage, etc.)
        original_exception: The original exception that was caught (if any)
        exit_code: Process exit code reported by scripts/run_etl.py
    """

    exit_code = 1

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ):
        self.message = message
        self.context = context or {}
        self.original_exception = original_exception
        self.timestamp = datetime.now(timezone.utc)

        # Add timestamp to context
        self.context["error_timestamp"] = self.timestamp.isoformat()

        # Chain original exception if provided
        super().__init__(message)
        if original_exception:
            self.__cause__ = original_exception

    def __str__(self) -> str:
        """Format error message with context."""
        base_msg = f"{self.__class__.__name__}: {self.message}"

        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base_msg += f" | Context: {context_str}"

        if self.original_exception:
            base_msg += f" | Caused by: {type(self.original_exception).__name__}: {str(self.original_exception)}"

        return base_msg

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
            "exit_code": self.exit_code,
            "original_error": str(self.original_exception) if self.original_exception else None
        }


# ============================================================================
# Run-level Errors
# ============================================================================

class ConfigurationError(ETLException):
    """
    Exception raised when required settings are missing or invalid.

    Context should include:
        - setting: Name of the offending setting
    """

    exit_code = 2


class RunLockError(ETLException):
    """
    Exception raised when another run already holds the run lock.

    Context should include:
        - lock_path: Path of the lock file
        - holder: Content of the lock file (pid and start time), if readable
    """

    exit_code = 7


# ============================================================================
# Extraction Errors (transport)
# ============================================================================

class ExtractionError(ETLException):
    """Base exception for data extraction failures."""

    exit_code = 3


class APIExtractionError(ExtractionError):
    """
    Exception raised when the traffic API request fails.

    Context should include:
        - api_url: The API endpoint that failed
        - status_code: HTTP status code (if applicable)
    """
    pass


class NetworkError(APIExtractionError):
    """Connection, DNS, TLS or timeout failure while talking to the API."""
    pass


class HTTPStatusError(APIExtractionError):
    """The API answered with a status other than 200."""

    def __init__(
        self,
        message: str,
        status_code: int,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ):
        super().__init__(message, context, original_exception)
        self.status_code = status_code
        self.context["status_code"] = status_code


class ResponseReadError(APIExtractionError):
    """The response body could not be read completely."""
    pass


# ============================================================================
# Local I/O Errors
# ============================================================================

class SnapshotWriteError(ETLException):
    """
    Exception raised when the raw snapshot file cannot be written.

    Context should include:
        - snapshot_path: Target path of the snapshot
        - size_bytes: Number of bytes that were to be written
    """

    exit_code = 4


# ============================================================================
# Transformation Errors (decode)
# ============================================================================

class TransformationError(ETLException):
    """Base exception for payload decoding failures."""

    exit_code = 5


class DataFormatError(TransformationError):
    """The payload is not well-formed JSON."""
    pass


class SchemaValidationError(TransformationError):
    """
    The payload is JSON but does not match the expected record schema.

    Context should include:
        - field_errors: List of "location: message" strings
    """
    pass


# ============================================================================
# Load Errors (persistence)
# ============================================================================

class LoadError(ETLException):
    """Base exception for data loading failures."""

    exit_code = 6


class DatabaseConnectionError(LoadError):
    """Could not connect to the database."""
    pass


class TransactionError(LoadError):
    """
    Exception raised when a transaction cannot be started or committed.

    Context should include:
        - operation: BEGIN or COMMIT
    """
    pass


class DatabaseError(LoadError):
    """
    Exception raised when statement preparation fails.

    Context should include:
        - operation: Type of database operation (PREPARE)
        - table_name: Name of the table
    """
    pass


class InsertError(LoadError):
    """
    Exception raised when inserting a single row fails.

    Context should include:
        - table_name: Name of the table
        - batch_index: Index of the failing record in the batch
        - zone_id: Zone identifier of the failing record
    """
    pass
