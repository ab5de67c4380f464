"""
CacheStore - SQLite-backed key/value cache with optional expiration

A small library that keeps text values in a single table of an embedded
SQLite database file, with per-entry expiry and explicit sweeping.
"""

__version__ = "0.1.0"

from pathlib import Path

from cachestore.config.models.cache_settings import CacheSettings
from cachestore.services import CacheEntry, CacheStore
from cachestore.shared.errors import (
    ArgumentError,
    CacheStoreError,
    DatabaseError,
    ErrorCode,
)

__all__ = [
    "ArgumentError",
    "CacheEntry",
    "CacheStore",
    "CacheStoreError",
    "DatabaseError",
    "ErrorCode",
    "open_store",
]


def open_store(
    db_path: Path | str | None = None,
    settings: CacheSettings | None = None,
) -> CacheStore:
    """Shorthand for CacheStore.open()."""
    return CacheStore.open(db_path, settings)
