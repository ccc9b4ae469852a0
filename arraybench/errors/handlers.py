"""
Error logging utilities for arraybench.
"""

import logging
from typing import Optional

from .codes import ErrorCode
from .exceptions import HarnessError


def error_result(error: Exception, **context) -> dict:
    """Build the error entry stored on a failed run result.

    Args:
        error: The exception that aborted the run
        **context: Extra keys to merge in (e.g. object_count)

    Returns:
        Dict with code, message, details and context
    """
    if isinstance(error, HarnessError):
        result = error.to_dict()
    else:
        result = {
            "code": ErrorCode.INTERNAL_UNEXPECTED.value,
            "message": str(error),
            "details": None,
            "context": None,
        }
    result.update(context)
    return result


def log_error(
    logger: logging.Logger, error: Exception, context: Optional[str] = None, include_traceback: bool = True
) -> None:
    """Log an error with consistent formatting.

    Args:
        logger: Logger instance to use
        error: The exception to log
        context: Optional context string to prefix the message
        include_traceback: Whether to include the full stack trace

    Example:
        >>> log_error(logger, err, context="N=89")
        # Logs: "[N=89] STORAGE_WRITE_FAILED: Failed to insert document"
    """
    if isinstance(error, HarnessError):
        message = f"{error.code.value}: {error}"
    else:
        message = str(error)

    if context:
        message = f"[{context}] {message}"

    logger.error(message, exc_info=include_traceback)
