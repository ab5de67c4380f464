"""SQLite cache store facade.

This module ties the schema manager and the modular operations together
around one explicit database handle.
"""

from __future__ import annotations

import logging
import sqlite3
import time
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from cachestore.config import get_config
from cachestore.config.models.cache_settings import CacheSettings
from cachestore.security.permissions import set_secure_file_permissions
from cachestore.services.cache_models import CacheEntry
from cachestore.services.sqlite_cache.migration.manager import SchemaManager
from cachestore.services.sqlite_cache.operations.insert import InsertOperations
from cachestore.services.sqlite_cache.operations.query import QueryOperations
from cachestore.services.sqlite_cache.operations.update import UpdateOperations
from cachestore.services.sqlite_cache.transaction.manager import TransactionManager
from cachestore.shared.constants import SQLiteConfig
from cachestore.shared.errors import (
    ApplicationError,
    ErrorCode,
    ErrorContext,
    create_database_error,
)
from cachestore.shared.logging import (
    log_operation_error,
    log_operation_start,
    log_operation_success,
)

logger = logging.getLogger(__name__)


class CacheStore:
    """Key/value cache over the ``cachetable`` table of a SQLite file.

    Values are text; callers serialize richer data themselves. Entries
    may carry an absolute expiry computed by the engine clock. Expired
    entries stay readable until sweep() removes them.

    Attributes:
        conn: The SQLite handle every operation runs on
        db_path: Path of the database file (None for wrapped handles)
        settings: Cache settings in effect

    Example:
        >>> with CacheStore.open("cache.db") as store:
        ...     store.put("session:42", "payload", expire_minutes=30)
        ...     store.get("session:42").value
        'payload'
    """

    def __init__(
        self,
        conn: sqlite3.Connection,
        *,
        db_path: Path | str | None = None,
        settings: CacheSettings | None = None,
    ) -> None:
        """Wrap an already-open handle.

        Does not create the schema; call initialize() (open() does).

        Args:
            conn: Open SQLite connection
            db_path: Database file path, for diagnostics only
            settings: Cache settings (defaults to the loaded configuration)
        """
        self.conn = conn
        self.db_path = Path(db_path) if db_path is not None else None
        self.settings = settings or get_config().cache
        self._closed = False

        self._schema = SchemaManager(conn)
        self._query_ops = QueryOperations(conn)
        self._insert_ops = InsertOperations(conn)
        self._update_ops = UpdateOperations(conn)
        self._transactions = TransactionManager(conn)

    @classmethod
    def open(
        cls,
        db_path: Path | str | None = None,
        settings: CacheSettings | None = None,
    ) -> CacheStore:
        """Open or create the database file, ensure the schema, sweep once.

        Args:
            db_path: Database file (defaults to settings.db_path); ``":memory:"``
                opens a private in-memory database
            settings: Cache settings (defaults to the loaded configuration)

        Returns:
            A live store; close it (or use it as a context manager) when done

        Raises:
            DatabaseError: If the file cannot be opened or initialized
        """
        settings = settings or get_config().cache
        path_str = str(db_path if db_path is not None else settings.db_path)
        in_memory = path_str == SQLiteConfig.IN_MEMORY_PATH
        path = None if in_memory else Path(path_str)
        context = ErrorContext(operation="open", file_path=path_str)

        log_operation_start(logger, "open", context={"db_path": path_str})
        started = time.perf_counter()

        db_is_new = path is not None and not path.exists()
        conn: sqlite3.Connection | None = None
        try:
            if path is not None:
                path.parent.mkdir(parents=True, exist_ok=True)

            conn = sqlite3.connect(
                path_str,
                timeout=settings.busy_timeout,
                check_same_thread=False,
                isolation_level=None,  # autocommit: one statement, one transaction
            )
            if not in_memory:
                conn.execute(f"PRAGMA journal_mode={settings.journal_mode}")
            conn.execute(f"PRAGMA synchronous={settings.synchronous}")
        except (sqlite3.Error, OSError) as e:
            if conn is not None:
                conn.close()
            error = create_database_error(
                e,
                operation="open",
                file_path=path_str,
                code=ErrorCode.DATABASE_OPEN_FAILED,
            )
            log_operation_error(logger, error)
            raise error from e

        if db_is_new and settings.secure_permissions and path is not None:
            try:
                set_secure_file_permissions(path)
            except ApplicationError as e:
                logger.warning(
                    "Failed to set secure permissions for DB file %s: %s",
                    path,
                    e,
                )

        store = cls(conn, db_path=path, settings=settings)
        try:
            store.initialize()
            if settings.sweep_on_open:
                store.sweep()
        except Exception:
            store.close()
            raise

        log_operation_success(
            logger,
            operation="open",
            duration_ms=(time.perf_counter() - started) * 1000,
            result_info={"created": db_is_new},
            context=context,
        )
        return store

    def initialize(self) -> None:
        """Create the cache table and indexes unless they already exist.

        Raises:
            DatabaseError: If the engine rejects the schema statements
        """
        self._schema.create_tables()

    def sweep(self) -> None:
        """Delete every entry whose expiry has passed.

        Raises:
            DatabaseError: If the engine rejects the statement
        """
        self._update_ops.sweep()

    def put(self, name: str, value: str, expire_minutes: int | None = None) -> None:
        """Insert or overwrite the entry for ``name``.

        Args:
            name: Cache key (non-empty, case-sensitive)
            value: Text payload, may be empty
            expire_minutes: Whole minutes until expiry, measured on the engine
                clock. ``<= 0`` means never expire and clears a previous
                expiry. None uses settings.default_expire_minutes.

        Raises:
            ArgumentError: If name or value is missing
            DatabaseError: If the engine rejects the statement
        """
        if expire_minutes is None:
            expire_minutes = self.settings.default_expire_minutes
        self._insert_ops.put(name, value, expire_minutes)

    def get(self, name: str) -> CacheEntry | None:
        """Return the entry for ``name`` (expired or not), or None."""
        return self._query_ops.get(name)

    def get_all(self) -> list[CacheEntry]:
        """Return every entry, expired or not."""
        return self._query_ops.get_all()

    def get_expired(self) -> list[CacheEntry]:
        """Return the entries a sweep would remove, without deleting them."""
        return self._query_ops.get_expired()

    def count(self) -> int:
        """Return the total number of entries, expired or not."""
        return self._query_ops.count()

    def delete(self, name: str) -> None:
        """Delete the entry for ``name``; a missing entry is not an error."""
        self._update_ops.delete(name)

    def clear(self) -> None:
        """Delete every entry."""
        self._update_ops.clear()

    def contains(self, name: str) -> bool:
        """Whether an entry exists for ``name`` (expired or not)."""
        return self._query_ops.contains(name)

    def get_cache_info(self) -> dict[str, Any]:
        """Get cache statistics and metadata.

        Returns:
            Dictionary with db_path, total_entries, valid_entries,
            expired_entries and total_size_bytes
        """
        info = self._query_ops.get_cache_info()
        info["db_path"] = str(self.db_path) if self.db_path else None
        return info

    @contextmanager
    def transaction(self) -> Generator[CacheStore, None, None]:
        """Group several operations into one atomic transaction.

        Example:
            >>> with store.transaction():
            ...     store.put("a", "1")
            ...     store.put("b", "2")
        """
        with self._transactions:
            yield self

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Close the database handle. Calling it again is a no-op."""
        if self._closed:
            return
        self._closed = True
        self.conn.close()
        logger.debug("Closed SQLite cache connection: %s", self.db_path or "<memory>")

    def __enter__(self) -> CacheStore:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        self.close()

    def __len__(self) -> int:
        return self.count()

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name != "" and self.contains(name)

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"<CacheStore {self.db_path or ':memory:'} ({state})>"
