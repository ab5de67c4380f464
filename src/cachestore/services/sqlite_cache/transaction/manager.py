"""Transaction manager for SQLite cache.

The store's connection runs in autocommit mode, so every statement is its
own transaction unless it runs inside one of these blocks.
"""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Generator
from contextlib import contextmanager

from cachestore.shared.errors import ErrorCode, create_database_error
from cachestore.shared.logging import log_operation_error

logger = logging.getLogger(__name__)


class TransactionManager:
    """Explicit BEGIN/COMMIT/ROLLBACK on a connection."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        """Initialize transaction manager.

        Args:
            conn: SQLite database connection
        """
        self.conn = conn

    def __enter__(self) -> TransactionManager:
        """Enter context manager - begin transaction."""
        self.begin()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Exit context manager - commit or rollback."""
        if exc_type is None:
            self.commit()
        else:
            self.rollback()

    def begin(self) -> None:
        """Begin a transaction."""
        self._run("BEGIN")

    def commit(self) -> None:
        """Commit the current transaction."""
        self._run("COMMIT")

    def rollback(self) -> None:
        """Rollback the current transaction."""
        if not self.conn.in_transaction:
            return
        self._run("ROLLBACK")
        logger.debug("Transaction rolled back")

    @contextmanager
    def transaction(self) -> Generator[None, None, None]:
        """Context manager for transactions.

        Automatically commits on success or rolls back on exception.

        Example:
            >>> with transaction_manager.transaction():
            ...     insert_ops.put("key1", "a")
            ...     insert_ops.put("key2", "b")
        """
        self.begin()
        try:
            yield
        except BaseException:
            self.rollback()
            raise
        self.commit()

    def _run(self, statement: str) -> None:
        try:
            self.conn.execute(statement)
        except sqlite3.Error as e:
            error = create_database_error(
                e,
                operation=f"transaction_{statement.lower()}",
                code=ErrorCode.TRANSACTION_FAILED,
            )
            log_operation_error(logger, error)
            raise error from e
