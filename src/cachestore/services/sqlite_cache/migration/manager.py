"""Schema manager for the SQLite cache.

This module creates the cache table and its indexes, and reports the
recorded schema version.
"""

from __future__ import annotations

import logging
import sqlite3

from cachestore.shared.constants import CacheSchema
from cachestore.shared.errors import ErrorCode, create_database_error
from cachestore.shared.logging import log_operation_error

logger = logging.getLogger(__name__)

SCHEMA_SQL = f"""
CREATE TABLE IF NOT EXISTS {CacheSchema.TABLE_NAME} (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL UNIQUE,
    value TEXT,
    creationtime DATETIME DEFAULT CURRENT_TIMESTAMP,
    expiretime DATETIME DEFAULT NULL
);

CREATE INDEX IF NOT EXISTS {CacheSchema.INDEX_NAME}
    ON {CacheSchema.TABLE_NAME}(name);
CREATE INDEX IF NOT EXISTS {CacheSchema.INDEX_CREATION_TIME}
    ON {CacheSchema.TABLE_NAME}(creationtime);
CREATE INDEX IF NOT EXISTS {CacheSchema.INDEX_EXPIRE_TIME}
    ON {CacheSchema.TABLE_NAME}(expiretime);

CREATE TABLE IF NOT EXISTS {CacheSchema.VERSION_TABLE_NAME} (
    version INTEGER PRIMARY KEY,
    applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP NOT NULL
);
"""

_TABLE_EXISTS_SQL = "SELECT name FROM sqlite_master WHERE type='table' AND name=?"


class SchemaManager:
    """Creates and inspects the cache schema on a connection."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        """Initialize schema manager.

        Args:
            conn: SQLite database connection
        """
        self.conn = conn

    def table_exists(self, table: str = CacheSchema.TABLE_NAME) -> bool:
        """Check the engine catalog for a table.

        Args:
            table: Table name to look up

        Returns:
            True if the table exists
        """
        cursor = self.conn.execute(_TABLE_EXISTS_SQL, (table,))
        return cursor.fetchone() is not None

    def create_tables(self) -> bool:
        """Create the cache table, its indexes and version bookkeeping.

        Idempotent: when the cache table already exists nothing is created.

        Returns:
            True if the schema was created, False if it already existed

        Raises:
            DatabaseError: If the engine rejects the schema statements
        """
        try:
            if self.table_exists():
                logger.debug("Schema already present, skipping creation")
                return False

            self.conn.executescript(SCHEMA_SQL)
            self.conn.execute(
                f"INSERT OR REPLACE INTO {CacheSchema.VERSION_TABLE_NAME} (version) VALUES (?)",
                (CacheSchema.SCHEMA_VERSION,),
            )
        except sqlite3.Error as e:
            error = create_database_error(e, operation="create_tables", code=ErrorCode.SCHEMA_ERROR)
            log_operation_error(logger, error)
            raise error from e

        logger.info("Created database schema (v%d)", CacheSchema.SCHEMA_VERSION)
        return True

    def get_current_version(self) -> int:
        """Get current schema version.

        Returns:
            Recorded schema version, 0 if none is recorded
        """
        if not self.table_exists(CacheSchema.VERSION_TABLE_NAME):
            return 0

        cursor = self.conn.execute(
            f"SELECT MAX(version) FROM {CacheSchema.VERSION_TABLE_NAME}"
        )
        row = cursor.fetchone()
        return row[0] if row and row[0] is not None else 0

    def get_indexes(self) -> list[str]:
        """Names of the explicit indexes on the cache table."""
        cursor = self.conn.execute(
            "SELECT name FROM sqlite_master WHERE type='index' AND tbl_name=? AND sql IS NOT NULL",
            (CacheSchema.TABLE_NAME,),
        )
        return sorted(row[0] for row in cursor.fetchall())

    def validate_schema(self) -> bool:
        """Validate that the cache table and its indexes are present.

        Returns:
            True if schema is valid, False otherwise
        """
        if not self.table_exists():
            logger.error("Required table '%s' not found", CacheSchema.TABLE_NAME)
            return False

        expected = {
            CacheSchema.INDEX_NAME,
            CacheSchema.INDEX_CREATION_TIME,
            CacheSchema.INDEX_EXPIRE_TIME,
        }
        missing = expected - set(self.get_indexes())
        if missing:
            logger.warning("Cache table is missing indexes: %s", sorted(missing))
            return False

        return True
