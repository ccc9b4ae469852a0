"""
Custom exception hierarchy for arraybench.

All exceptions inherit from HarnessError and include:
- code: ErrorCode for categorization
- message: Human-readable error message
- details: Optional additional context
- context: Additional key-value pairs for debugging

Every HarnessError is fatal to a sweep: the runner stops at the first one.
"""

from typing import Any, Optional
from .codes import ErrorCode


class HarnessError(Exception):
    """Base exception for all arraybench errors.

    Attributes:
        code: The ErrorCode categorizing this error
        message: Human-readable error message
        details: Optional additional context for the user
        context: Additional debugging information
    """

    code: ErrorCode = ErrorCode.INTERNAL_UNEXPECTED

    def __init__(
        self,
        message: str,
        details: Optional[str] = None,
        code: Optional[ErrorCode] = None,
        **context: Any,
    ):
        self.message = message
        self.details = details
        self.context = context if context else None

        if code is not None:
            self.code = code

        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - {self.details}"
        return self.message

    def to_dict(self) -> dict:
        """Convert exception to dictionary for JSON serialization."""
        return {
            "code": self.code.value,
            "message": self.message,
            "details": self.details,
            "context": self.context,
        }


class ConfigError(HarnessError):
    """Invalid or missing harness configuration."""

    code = ErrorCode.CONFIG_INVALID

    def __init__(
        self,
        message: str,
        details: Optional[str] = None,
        parameter: Optional[str] = None,
        received: Any = None,
        missing: bool = False,
        **context: Any,
    ):
        ctx = {**context}
        if parameter:
            ctx["parameter"] = parameter
        if received is not None:
            ctx["received"] = repr(received)
        code = ErrorCode.CONFIG_MISSING if missing else ErrorCode.CONFIG_INVALID
        super().__init__(message, details, code=code, **ctx)


class StorageConnectionError(HarnessError):
    """The storage collaborator cannot be reached."""

    code = ErrorCode.STORAGE_CONNECTION_FAILED

    def __init__(
        self,
        message: str,
        details: Optional[str] = None,
        backend: Optional[str] = None,
        **context: Any,
    ):
        ctx = {**context}
        if backend:
            ctx["backend"] = backend
        super().__init__(message, details, **ctx)


class SerializationError(HarnessError):
    """A document cannot be encoded to its binary form."""

    code = ErrorCode.SERIALIZATION_FAILED


class StorageWriteError(HarnessError):
    """Insert, update or delete failed."""

    code = ErrorCode.STORAGE_WRITE_FAILED

    def __init__(
        self,
        message: str,
        details: Optional[str] = None,
        operation: Optional[str] = None,
        collection: Optional[str] = None,
        **context: Any,
    ):
        ctx = {**context}
        if operation:
            ctx["operation"] = operation
        if collection:
            ctx["collection"] = collection
        super().__init__(message, details, **ctx)


class StorageReadError(HarnessError):
    """find / find_one failed or returned less than was written."""

    code = ErrorCode.STORAGE_READ_FAILED

    def __init__(
        self,
        message: str,
        details: Optional[str] = None,
        operation: Optional[str] = None,
        collection: Optional[str] = None,
        **context: Any,
    ):
        ctx = {**context}
        if operation:
            ctx["operation"] = operation
        if collection:
            ctx["collection"] = collection
        super().__init__(message, details, **ctx)
