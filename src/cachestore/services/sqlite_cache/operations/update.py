"""Update operations for SQLite cache.

This module provides delete/sweep operations for cache management.
"""

from __future__ import annotations

import logging

from cachestore.services.sqlite_cache.operations.base import (
    EXPIRED_PREDICATE,
    TABLE,
    BaseOperation,
    key_preview,
)
from cachestore.shared.errors import ErrorCode

logger = logging.getLogger(__name__)


class UpdateOperations(BaseOperation):
    """Delete/sweep operations for cache management."""

    def delete(self, name: str) -> None:
        """Delete the entry for ``name``; missing names are not an error.

        Args:
            name: Cache key
        """
        name = self._validate_name(name, "delete")

        cursor = self._execute(
            f"DELETE FROM {TABLE} WHERE name = ?",
            (name,),
            operation="delete",
            code=ErrorCode.CACHE_DELETE_FAILED,
        )

        if cursor.rowcount > 0:
            logger.debug("Cache deleted: name=%s", key_preview(name))

    def sweep(self) -> int:
        """Delete every row whose expiry is earlier than the engine clock.

        Returns:
            Number of deleted rows
        """
        cursor = self._execute(
            f"DELETE FROM {TABLE} WHERE {EXPIRED_PREDICATE}",
            operation="sweep",
            code=ErrorCode.CACHE_DELETE_FAILED,
        )

        swept = max(cursor.rowcount, 0)
        if swept > 0:
            logger.info("Swept %d expired cache entries", swept)

        return swept

    def clear(self) -> int:
        """Delete every row.

        Returns:
            Number of deleted rows
        """
        cursor = self._execute(
            f"DELETE FROM {TABLE}",
            operation="clear",
            code=ErrorCode.CACHE_DELETE_FAILED,
        )
        cleared = max(cursor.rowcount, 0)
        logger.info("Cleared %d cache entries", cleared)
        return cleared
