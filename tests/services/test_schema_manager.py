"""Unit tests for the SQLite cache schema manager.

This module tests SchemaManager to ensure schema creation is idempotent
and matches the persisted table layout.
"""

from __future__ import annotations

import sqlite3

import pytest

from cachestore.config import CacheSettings
from cachestore.services.sqlite_cache import CacheStore
from cachestore.services.sqlite_cache.migration.manager import SchemaManager

EXPECTED_INDEXES = [
    "idx_cachetable_creationtime",
    "idx_cachetable_expiretime",
    "idx_cachetable_name",
]


@pytest.fixture
def schema_manager(memory_conn: sqlite3.Connection) -> SchemaManager:
    """Create SchemaManager instance."""
    return SchemaManager(memory_conn)


def _schema_objects(conn: sqlite3.Connection) -> list[tuple[str, str]]:
    cursor = conn.execute("SELECT type, name FROM sqlite_master ORDER BY type, name")
    return cursor.fetchall()


class TestSchemaManager:
    """Test SchemaManager."""

    def test_table_absent_on_new_database(self, schema_manager: SchemaManager) -> None:
        assert schema_manager.table_exists() is False
        assert schema_manager.get_current_version() == 0

    def test_create_tables_creates_table_and_indexes(
        self, schema_manager: SchemaManager
    ) -> None:
        """create_tables() builds the table, three indexes and the version row."""
        created = schema_manager.create_tables()

        assert created is True
        assert schema_manager.table_exists() is True
        assert schema_manager.get_indexes() == EXPECTED_INDEXES
        assert schema_manager.get_current_version() == 1
        assert schema_manager.validate_schema() is True

    def test_create_tables_is_idempotent(
        self, schema_manager: SchemaManager, memory_conn: sqlite3.Connection
    ) -> None:
        """Running initialization twice neither fails nor duplicates objects."""
        schema_manager.create_tables()
        before = _schema_objects(memory_conn)

        created_again = schema_manager.create_tables()

        assert created_again is False
        assert _schema_objects(memory_conn) == before

    def test_store_initialize_twice(self, store: CacheStore) -> None:
        """CacheStore.initialize() on an initialized handle is a no-op."""
        before = _schema_objects(store.conn)

        store.initialize()
        store.initialize()

        assert _schema_objects(store.conn) == before

    def test_column_layout(
        self, schema_manager: SchemaManager, memory_conn: sqlite3.Connection
    ) -> None:
        """Column names, types, defaults and nullability match the contract."""
        schema_manager.create_tables()

        columns = {
            row[1]: (row[2], row[3], row[4], row[5])
            for row in memory_conn.execute("PRAGMA table_info(cachetable)")
        }

        # name: (type, notnull, default, pk)
        assert columns == {
            "id": ("INTEGER", 0, None, 1),
            "name": ("TEXT", 1, None, 0),
            "value": ("TEXT", 0, None, 0),
            "creationtime": ("DATETIME", 0, "CURRENT_TIMESTAMP", 0),
            "expiretime": ("DATETIME", 0, "NULL", 0),
        }

    def test_ids_are_autoincrement(self, memory_conn: sqlite3.Connection) -> None:
        """Deleted ids are never reused."""
        store = CacheStore(memory_conn, settings=CacheSettings())
        store.initialize()
        store.put("a", "1")
        store.put("b", "2")
        last_id = store.get("b").id
        store.delete("b")

        store.put("c", "3")

        assert store.get("c").id > last_id

    def test_existing_table_from_other_writer_is_kept(
        self, memory_conn: sqlite3.Connection, schema_manager: SchemaManager
    ) -> None:
        """A cachetable written elsewhere is detected and left untouched."""
        # Given
        memory_conn.execute(
            """
            CREATE TABLE cachetable (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL UNIQUE,
                value TEXT,
                creationtime DATETIME DEFAULT CURRENT_TIMESTAMP,
                expiretime DATETIME DEFAULT NULL
            )
            """
        )
        memory_conn.execute("INSERT INTO cachetable (name, value) VALUES ('k', 'v')")

        # When
        created = schema_manager.create_tables()

        # Then
        assert created is False
        assert memory_conn.execute("SELECT value FROM cachetable").fetchone() == ("v",)
        assert schema_manager.validate_schema() is False  # indexes were not added

    def test_reads_rows_written_by_other_implementation(
        self, memory_conn: sqlite3.Connection
    ) -> None:
        """Rows stored with the shared text timestamps read back correctly."""
        store = CacheStore(memory_conn, settings=CacheSettings())
        store.initialize()
        memory_conn.execute(
            "INSERT INTO cachetable (name, value, creationtime, expiretime) "
            "VALUES ('old', NULL, '2020-05-01 10:00:00', '2020-05-01 11:30:00')"
        )

        entry = store.get("old")

        assert entry.value is None
        assert entry.creation_time.isoformat() == "2020-05-01T10:00:00+00:00"
        assert entry.expire_time.isoformat() == "2020-05-01T11:30:00+00:00"
        assert [e.name for e in store.get_expired()] == ["old"]

    def test_validate_schema_without_table(self, schema_manager: SchemaManager) -> None:
        assert schema_manager.validate_schema() is False
