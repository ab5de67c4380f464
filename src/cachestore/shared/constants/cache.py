"""
Cache Configuration Constants

This module provides centralized constants for the cache table schema
and SQLite connection tuning.
"""

from datetime import datetime, timezone


class CacheSchema:
    """Persisted schema names (compatibility contract)."""

    TABLE_NAME = "cachetable"
    VERSION_TABLE_NAME = "schema_version"
    SCHEMA_VERSION = 1

    # Indexes
    INDEX_NAME = "idx_cachetable_name"
    INDEX_CREATION_TIME = "idx_cachetable_creationtime"
    INDEX_EXPIRE_TIME = "idx_cachetable_expiretime"


class CacheDefaults:
    """Default cache behaviour."""

    NO_EXPIRY = 0  # expire_minutes <= 0 means "never expires"
    DEFAULT_EXPIRE_MINUTES = NO_EXPIRY
    DEFAULT_DB_PATH = "data/cache.db"

    # Latest timestamp SQLite date functions can produce
    MAX_EXPIRE_TIME = datetime(9999, 12, 31, tzinfo=timezone.utc)

    # Log previews
    KEY_PREVIEW_LENGTH = 50


class SQLiteConfig:
    """SQLite connection tuning."""

    JOURNAL_MODE_WAL = "WAL"
    JOURNAL_MODES = ("DELETE", "TRUNCATE", "PERSIST", "MEMORY", "WAL", "OFF")

    SYNCHRONOUS_NORMAL = "NORMAL"
    SYNCHRONOUS_MODES = ("OFF", "NORMAL", "FULL", "EXTRA")

    DEFAULT_BUSY_TIMEOUT_SECONDS = 5.0
    IN_MEMORY_PATH = ":memory:"
