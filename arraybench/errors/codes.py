"""
Error codes for arraybench.

Provides a standardized taxonomy of error codes organized by category.
Use these codes consistently across all error results.
"""

from enum import Enum


class ErrorCode(str, Enum):
    """Standardized error codes for arraybench.

    Categories:
    - CONFIG_*: Harness configuration errors
    - STORAGE_*: Storage collaborator errors (connect, write, read)
    - SERIALIZATION_*: Document encoding errors
    - INTERNAL_*: Internal/unexpected errors
    """

    # Configuration errors
    CONFIG_INVALID = "CONFIG_INVALID"
    CONFIG_MISSING = "CONFIG_MISSING"

    # Storage errors
    STORAGE_CONNECTION_FAILED = "STORAGE_CONNECTION_FAILED"
    STORAGE_WRITE_FAILED = "STORAGE_WRITE_FAILED"
    STORAGE_READ_FAILED = "STORAGE_READ_FAILED"

    # Serialization errors
    SERIALIZATION_FAILED = "SERIALIZATION_FAILED"

    # Internal errors (unexpected failures)
    INTERNAL_UNEXPECTED = "INTERNAL_UNEXPECTED"
