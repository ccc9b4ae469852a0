"""
arraybench Error Handling Module

Provides standardized error codes, exceptions and logging helpers for the
measurement harness.

Usage:
    from arraybench.errors import (
        ErrorCode,
        HarnessError,
        ConfigError,
        StorageConnectionError,
        SerializationError,
        StorageWriteError,
        StorageReadError,
        error_result,
        log_error,
    )

Example:
    from arraybench.errors import StorageWriteError

    try:
        collection.insert_one(document)
    except PyMongoError as e:
        raise StorageWriteError(
            "Failed to insert document",
            details=str(e),
            operation="insert",
        ) from e
"""

from .codes import ErrorCode
from .exceptions import (
    HarnessError,
    ConfigError,
    StorageConnectionError,
    SerializationError,
    StorageWriteError,
    StorageReadError,
)
from .handlers import (
    error_result,
    log_error,
)

__all__ = [
    # Error codes
    "ErrorCode",
    # Exceptions
    "HarnessError",
    "ConfigError",
    "StorageConnectionError",
    "SerializationError",
    "StorageWriteError",
    "StorageReadError",
    # Helpers
    "error_result",
    "log_error",
]
