"""Base operation class for SQLite cache operations.

This module provides shared functionality for all cache operations.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Any, Sequence

from cachestore.shared.constants import CacheDefaults, CacheSchema
from cachestore.shared.errors import (
    ErrorCode,
    create_argument_error,
    create_database_error,
)
from cachestore.shared.logging import log_operation_error, log_validation_error

logger = logging.getLogger(__name__)

SELECT_COLUMNS = "id, name, value, creationtime, expiretime"
TABLE = CacheSchema.TABLE_NAME

# Rows with an expiry earlier than the engine's clock.
EXPIRED_PREDICATE = "expiretime IS NOT NULL AND expiretime < datetime('now')"


def key_preview(name: str) -> str:
    """Shorten a cache name for log output."""
    return name[: CacheDefaults.KEY_PREVIEW_LENGTH]


def is_encodable(text: str) -> bool:
    """Whether the driver can bind ``text`` (lone surrogates cannot be)."""
    try:
        text.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


class BaseOperation:
    """Base class for cache operations with shared functionality."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        """Initialize base operation.

        Args:
            conn: SQLite database connection (the handle every statement runs on)
        """
        self.conn = conn

    def _validate_name(self, name: Any, operation: str) -> str:
        """Ensure a cache name is a non-empty string.

        Raises:
            ArgumentError: If name is missing, empty, not a string or not encodable
        """
        if name is None or (isinstance(name, str) and name == ""):
            log_validation_error(logger, "name", name, "name is required")
            raise create_argument_error(
                "name is required",
                field="name",
                operation=operation,
                code=ErrorCode.MISSING_REQUIRED_FIELD,
            )
        if not isinstance(name, str):
            log_validation_error(logger, "name", name, "name must be a string")
            raise create_argument_error(
                f"name must be a string, got {type(name).__name__}",
                field="name",
                operation=operation,
                code=ErrorCode.INVALID_ARGUMENT_TYPE,
            )
        if not is_encodable(name):
            log_validation_error(logger, "name", name, "name is not valid UTF-8 text")
            raise create_argument_error(
                "name contains characters that cannot be encoded as UTF-8",
                field="name",
                operation=operation,
                code=ErrorCode.INVALID_ARGUMENT_TYPE,
            )
        return name

    def _execute(
        self,
        sql: str,
        params: Sequence[Any] = (),
        *,
        operation: str,
        code: ErrorCode = ErrorCode.DATABASE_ERROR,
    ) -> sqlite3.Cursor:
        """Run one parameterized statement on the handle.

        Raises:
            DatabaseError: If the engine rejects the statement or the
                handle has been closed
        """
        try:
            return self.conn.execute(sql, params)
        except sqlite3.ProgrammingError as e:
            # Raised by the driver for closed handles and bad bindings
            error = create_database_error(
                e,
                operation=operation,
                code=ErrorCode.DATABASE_CLOSED if "closed" in str(e).lower() else code,
            )
            log_operation_error(logger, error)
            raise error from e
        except sqlite3.Error as e:
            error = create_database_error(e, operation=operation, code=code)
            log_operation_error(logger, error)
            raise error from e
