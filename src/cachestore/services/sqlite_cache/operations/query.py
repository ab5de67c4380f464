"""Query operations for SQLite cache.

This module provides read-only operations for retrieving cached entries.
None of them filter out expired rows; removing those is sweep's job.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Any

from cachestore.services.cache_models import CacheEntry
from cachestore.services.sqlite_cache.operations.base import (
    EXPIRED_PREDICATE,
    SELECT_COLUMNS,
    TABLE,
    BaseOperation,
    key_preview,
)
from cachestore.shared.errors import ErrorCode, create_database_error
from cachestore.shared.logging import log_operation_error

logger = logging.getLogger(__name__)


class QueryOperations(BaseOperation):
    """Query operations for cache retrieval."""

    def get(self, name: str) -> CacheEntry | None:
        """Retrieve the entry for ``name``, expired or not.

        Args:
            name: Cache key

        Returns:
            The matching entry, or None when no row matches
        """
        name = self._validate_name(name, "get")

        cursor = self._execute(
            f"SELECT {SELECT_COLUMNS} FROM {TABLE} WHERE name = ?",
            (name,),
            operation="get",
            code=ErrorCode.CACHE_READ_FAILED,
        )
        row = cursor.fetchone()

        if row is None:
            logger.debug("Cache miss: name=%s", key_preview(name))
            return None

        logger.debug("Cache hit: name=%s", key_preview(name))
        return self._to_entry(row, "get")

    def get_all(self) -> list[CacheEntry]:
        """Return every entry in engine default order."""
        cursor = self._execute(
            f"SELECT {SELECT_COLUMNS} FROM {TABLE}",
            operation="get_all",
            code=ErrorCode.CACHE_READ_FAILED,
        )
        return [self._to_entry(row, "get_all") for row in cursor.fetchall()]

    def get_expired(self) -> list[CacheEntry]:
        """Return the entries a sweep would remove right now."""
        cursor = self._execute(
            f"SELECT {SELECT_COLUMNS} FROM {TABLE} WHERE {EXPIRED_PREDICATE}",
            operation="get_expired",
            code=ErrorCode.CACHE_READ_FAILED,
        )
        return [self._to_entry(row, "get_expired") for row in cursor.fetchall()]

    def count(self) -> int:
        """Total number of rows, expired or not."""
        cursor = self._execute(
            f"SELECT COUNT(*) FROM {TABLE}",
            operation="count",
            code=ErrorCode.CACHE_READ_FAILED,
        )
        return int(cursor.fetchone()[0])

    def contains(self, name: str) -> bool:
        """Whether a row exists for ``name``."""
        name = self._validate_name(name, "contains")
        cursor = self._execute(
            f"SELECT 1 FROM {TABLE} WHERE name = ? LIMIT 1",
            (name,),
            operation="contains",
            code=ErrorCode.CACHE_READ_FAILED,
        )
        return cursor.fetchone() is not None

    def get_cache_info(self) -> dict[str, Any]:
        """Summarize the table.

        Returns:
            Dictionary with:
            - total_entries: number of rows
            - valid_entries: rows that are not expired
            - expired_entries: rows a sweep would remove
            - total_size_bytes: UTF-8 size of all values
        """
        cursor = self._execute(
            f"""
            SELECT
                COUNT(*),
                COALESCE(SUM(CASE WHEN {EXPIRED_PREDICATE} THEN 1 ELSE 0 END), 0),
                COALESCE(SUM(LENGTH(CAST(value AS BLOB))), 0)
            FROM {TABLE}
            """,
            operation="get_cache_info",
            code=ErrorCode.CACHE_READ_FAILED,
        )
        total, expired, size = cursor.fetchone()

        return {
            "total_entries": total,
            "valid_entries": total - expired,
            "expired_entries": expired,
            "total_size_bytes": size,
        }

    def _to_entry(self, row: sqlite3.Row | tuple[Any, ...], operation: str) -> CacheEntry:
        try:
            return CacheEntry.from_row(tuple(row))
        except (ValueError, TypeError) as e:
            error = create_database_error(
                e,
                operation=operation,
                code=ErrorCode.CACHE_READ_FAILED,
            )
            log_operation_error(logger, error)
            raise error from e
