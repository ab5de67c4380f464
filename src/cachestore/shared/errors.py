"""CacheStore Error Handling Module

This module defines the error handling system for CacheStore, providing
structured error classes with context information.

The error hierarchy follows these principles:
- One Source of Truth: All error codes are defined in ErrorCode enum
- Structured Context: ErrorContext provides additional information
- Proper Exception Chaining: Original engine exceptions are preserved
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any, Union

# Type alias for primitive context values (str, int, float, bool only)
PrimitiveContextValue = Union[str, int, float, bool]

# Default keys to mask in safe_dict
SAFE_DICT_MASK_KEYS: tuple[str, ...] = ()


class ErrorCode(str, Enum):
    """Error codes for the CacheStore library.

    This enum serves as the single source of truth for all error codes
    used throughout the library.
    """

    # Argument Errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    MISSING_REQUIRED_FIELD = "MISSING_REQUIRED_FIELD"
    INVALID_ARGUMENT_TYPE = "INVALID_ARGUMENT_TYPE"

    # Database Errors
    DATABASE_ERROR = "DATABASE_ERROR"
    DATABASE_OPEN_FAILED = "DATABASE_OPEN_FAILED"
    DATABASE_CLOSED = "DATABASE_CLOSED"
    SCHEMA_ERROR = "SCHEMA_ERROR"
    CACHE_READ_FAILED = "CACHE_READ_FAILED"
    CACHE_WRITE_FAILED = "CACHE_WRITE_FAILED"
    CACHE_DELETE_FAILED = "CACHE_DELETE_FAILED"
    TRANSACTION_FAILED = "TRANSACTION_FAILED"

    # File System Errors
    FILE_NOT_FOUND = "FILE_NOT_FOUND"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    FILE_PERMISSION_DENIED = "FILE_PERMISSION_DENIED"
    FILE_WRITE_ERROR = "FILE_WRITE_ERROR"

    # Configuration Errors
    CONFIG_INVALID = "CONFIG_INVALID"


def _coerce_primitives(value: Any | None) -> dict[str, PrimitiveContextValue] | None:
    """Coerce additional_data values to primitives.

    Converts Path, Enum, Decimal to primitive types.

    Args:
        value: Input dictionary or None

    Returns:
        Dictionary with primitive values only, or None

    Raises:
        TypeError: If value is not a dict or contains unconvertible types
    """
    if value is None:
        return None

    if not isinstance(value, dict):
        error_msg = f"additional_data must be dict, got {type(value).__name__}"
        raise TypeError(error_msg)

    coerced: dict[str, PrimitiveContextValue] = {}
    for key, val in value.items():
        if isinstance(val, (str, int, float, bool)):
            coerced[key] = val
        elif isinstance(val, Path):
            coerced[key] = str(val)
        elif isinstance(val, Enum):
            coerced[key] = val.value
        elif isinstance(val, Decimal):
            coerced[key] = float(val)
        else:
            error_msg = (
                f"Cannot coerce {type(val).__name__} to primitive type. "
                f"Only str, int, float, bool, Path, Enum, Decimal are allowed."
            )
            raise TypeError(error_msg)

    return coerced


@dataclass(frozen=True)
class ErrorContext:
    """Context information for errors.

    Only primitive types (str, int, float, bool) are allowed in
    additional_data to ensure safe serialization into log records.

    Attributes:
        file_path: Optional database file path associated with the error
        operation: Optional operation name that caused the error
        additional_data: Optional dict with primitive values only
    """

    file_path: str | None = None
    operation: str | None = None
    additional_data: dict[str, PrimitiveContextValue] | None = None

    def __post_init__(self) -> None:
        """Post-initialization validation and coercion."""
        if self.additional_data is not None:
            coerced = _coerce_primitives(self.additional_data)
            object.__setattr__(self, "additional_data", coerced)

    def safe_dict(self, *, mask_keys: tuple[str, ...] | None = None) -> dict[str, Any]:
        """Export context as dict for logging.

        Args:
            mask_keys: Fields to exclude from output. Defaults to SAFE_DICT_MASK_KEYS.

        Returns:
            Dictionary with masked fields and a guaranteed additional_data key.

        Example:
            >>> ErrorContext(operation="put", file_path="/tmp/c.db").safe_dict()
            {'file_path': '/tmp/c.db', 'operation': 'put', 'additional_data': {}}
        """
        if mask_keys is None:
            mask_keys = SAFE_DICT_MASK_KEYS

        data: dict[str, Any] = {}
        if self.file_path is not None and "file_path" not in mask_keys:
            data["file_path"] = self.file_path
        if self.operation is not None and "operation" not in mask_keys:
            data["operation"] = self.operation

        if self.additional_data is not None and "additional_data" not in mask_keys:
            data["additional_data"] = self.additional_data
        else:
            data["additional_data"] = {}

        return data


class CacheStoreError(Exception):
    """Base exception class for all CacheStore errors."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        context: ErrorContext | None = None,
        original_error: Exception | None = None,
    ) -> None:
        """Initialize CacheStoreError.

        Args:
            code: Error code from ErrorCode enum
            message: Human-readable error message
            context: Additional context information
            original_error: Original exception that caused this error
        """
        self.code = code
        self.message = message
        self.context = context or ErrorContext()
        self.original_error = original_error

        super().__init__(f"{code.value}: {message}")

    def __str__(self) -> str:
        """Return string representation of the error."""
        return f"{self.code.value}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging.

        Returns:
            Dictionary representation of the error with code, message,
            context, and original_error (if present)
        """
        return {
            "code": self.code.value,
            "message": self.message,
            "context": self.context.safe_dict(),
            "original_error": str(self.original_error) if self.original_error else None,
        }


class DomainError(CacheStoreError):
    """Domain-specific errors.

    These errors occur when caller input violates the cache contract.
    """


class InfrastructureError(CacheStoreError):
    """Infrastructure-related errors.

    These errors occur when interacting with the file system or the
    database engine.
    """


class ApplicationError(CacheStoreError):
    """Application-level errors, typically configuration problems."""


class ArgumentError(DomainError):
    """A required argument is missing or has the wrong type.

    Examples:
    - Empty cache entry name
    - Missing value on put
    - Non-integer expiry minutes
    """


class DatabaseError(InfrastructureError):
    """The database engine rejected a statement.

    The engine's diagnostic is kept as the message and as original_error.

    Examples:
    - Database file locked by another process
    - Disk full or malformed path
    - Corrupt database file
    - Operation on a closed handle
    """


def create_argument_error(
    message: str,
    field: str | None = None,
    operation: str | None = None,
    code: ErrorCode = ErrorCode.VALIDATION_ERROR,
) -> ArgumentError:
    """Create an argument error with context."""
    additional_data: dict[str, PrimitiveContextValue] | None = (
        {"field": field} if field else None
    )
    context = ErrorContext(
        operation=operation,
        additional_data=additional_data,
    )
    return ArgumentError(code, message, context)


def create_database_error(
    original_error: Exception,
    operation: str | None = None,
    file_path: str | None = None,
    code: ErrorCode = ErrorCode.DATABASE_ERROR,
) -> DatabaseError:
    """Create a database error that preserves the engine diagnostic."""
    context = ErrorContext(
        file_path=file_path,
        operation=operation,
        additional_data={"engine_error": type(original_error).__name__},
    )
    return DatabaseError(
        code,
        str(original_error),
        context,
        original_error,
    )


def create_config_error(
    message: str,
    config_key: str | None = None,
    operation: str | None = None,
    original_error: Exception | None = None,
) -> ApplicationError:
    """Create a configuration error with context."""
    additional_data: dict[str, PrimitiveContextValue] | None = (
        {"config_key": config_key} if config_key else None
    )
    context = ErrorContext(
        operation=operation,
        additional_data=additional_data,
    )
    return ApplicationError(
        ErrorCode.CONFIG_INVALID,
        message,
        context,
        original_error,
    )
