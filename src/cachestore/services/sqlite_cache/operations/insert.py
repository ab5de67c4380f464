"""Insert operations for SQLite cache.

This module provides the upsert used to store cached values.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

from cachestore.services.sqlite_cache.operations.base import (
    TABLE,
    BaseOperation,
    is_encodable,
    key_preview,
)
from cachestore.shared.constants import CacheDefaults
from cachestore.shared.errors import ErrorCode, create_argument_error
from cachestore.shared.logging import log_validation_error

logger = logging.getLogger(__name__)

# Expiry is computed by the engine in the same statement that writes the row.
UPSERT_WITH_EXPIRY_SQL = f"""
INSERT INTO {TABLE} (name, value, creationtime, expiretime)
VALUES (?, ?, CURRENT_TIMESTAMP, datetime('now', ?))
ON CONFLICT(name) DO UPDATE SET
    value = excluded.value,
    creationtime = excluded.creationtime,
    expiretime = excluded.expiretime
"""

UPSERT_WITHOUT_EXPIRY_SQL = f"""
INSERT INTO {TABLE} (name, value, creationtime, expiretime)
VALUES (?, ?, CURRENT_TIMESTAMP, NULL)
ON CONFLICT(name) DO UPDATE SET
    value = excluded.value,
    creationtime = excluded.creationtime,
    expiretime = NULL
"""


def expiry_modifier(expire_minutes: int) -> str:
    """SQLite datetime() modifier adding whole minutes, e.g. ``'+5 minutes'``."""
    return f"+{int(expire_minutes)} minutes"


def max_expire_minutes(now: datetime | None = None) -> int:
    """Largest expiry whose timestamp SQLite can still represent.

    datetime() yields NULL past year 9999, which would read as "never expires".
    """
    now = now or datetime.now(timezone.utc)
    return (CacheDefaults.MAX_EXPIRE_TIME - now) // timedelta(minutes=1)


class InsertOperations(BaseOperation):
    """Insert operations for cache storage."""

    def put(
        self,
        name: str,
        value: str,
        expire_minutes: int = CacheDefaults.NO_EXPIRY,
    ) -> None:
        """Insert or overwrite the entry for ``name``.

        Args:
            name: Cache key (non-empty, case-sensitive)
            value: Text payload, may be empty
            expire_minutes: Minutes until expiry; ``<= 0`` clears any expiry

        Raises:
            ArgumentError: If name or value is missing or mistyped, or the
                expiry is past what SQLite can store
            DatabaseError: If the engine rejects the statement
        """
        name = self._validate_name(name, "put")
        self._validate_value(value)
        self._validate_expire_minutes(expire_minutes)

        if expire_minutes > 0:
            self._execute(
                UPSERT_WITH_EXPIRY_SQL,
                (name, value, expiry_modifier(expire_minutes)),
                operation="put",
                code=ErrorCode.CACHE_WRITE_FAILED,
            )
        else:
            self._execute(
                UPSERT_WITHOUT_EXPIRY_SQL,
                (name, value),
                operation="put",
                code=ErrorCode.CACHE_WRITE_FAILED,
            )

        logger.debug(
            "Cache stored: name=%s, size=%d chars, expire_minutes=%d",
            key_preview(name),
            len(value),
            max(expire_minutes, 0),
        )

    def _validate_value(self, value: Any) -> None:
        if value is None:
            log_validation_error(logger, "value", value, "value is required")
            raise create_argument_error(
                "value is required",
                field="value",
                operation="put",
                code=ErrorCode.MISSING_REQUIRED_FIELD,
            )
        if not isinstance(value, str):
            log_validation_error(logger, "value", value, "value must be a string")
            raise create_argument_error(
                f"value must be a string, got {type(value).__name__}; serialize it first",
                field="value",
                operation="put",
                code=ErrorCode.INVALID_ARGUMENT_TYPE,
            )
        if not is_encodable(value):
            log_validation_error(logger, "value", value, "value is not valid UTF-8 text")
            raise create_argument_error(
                "value contains characters that cannot be encoded as UTF-8",
                field="value",
                operation="put",
                code=ErrorCode.INVALID_ARGUMENT_TYPE,
            )

    def _validate_expire_minutes(self, expire_minutes: Any) -> None:
        # bool is an int subclass but never a meaningful expiry
        if isinstance(expire_minutes, bool) or not isinstance(expire_minutes, int):
            log_validation_error(
                logger, "expire_minutes", expire_minutes, "expire_minutes must be an integer"
            )
            raise create_argument_error(
                f"expire_minutes must be an integer, got {type(expire_minutes).__name__}",
                field="expire_minutes",
                operation="put",
                code=ErrorCode.INVALID_ARGUMENT_TYPE,
            )
        if expire_minutes > max_expire_minutes():
            log_validation_error(
                logger, "expire_minutes", expire_minutes, "expiry is past year 9999"
            )
            raise create_argument_error(
                f"expire_minutes={expire_minutes} puts the expiry past year 9999",
                field="expire_minutes",
                operation="put",
                code=ErrorCode.VALIDATION_ERROR,
            )
