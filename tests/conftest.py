"""
Pytest configuration and shared fixtures for CacheStore tests.

This module provides common fixtures and configuration that can be used
across all test modules in the project.
"""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Generator
from pathlib import Path

import pytest

from cachestore.config import CacheSettings, reset_config
from cachestore.services.sqlite_cache import CacheStore
from cachestore.shared.constants import LogConfig


@pytest.fixture(autouse=True)
def isolated_config(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Generator[None, None, None]:
    """Keep every test away from real config files and CACHESTORE_* variables."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("CACHESTORE_CONFIG_FILE", raising=False)
    monkeypatch.delenv("CACHESTORE_CACHE__DB_PATH", raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def restore_library_logger() -> Generator[logging.Logger, None, None]:
    """Undo setup_structured_logger() on the library logger after a test."""
    logger = logging.getLogger(LogConfig.ROOT_LOGGER_NAME)
    yield logger
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    logger.addHandler(logging.NullHandler())


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    """Path for a fresh cache database file."""
    return tmp_path / "cache.db"


@pytest.fixture
def cache_settings(db_path: Path) -> CacheSettings:
    """Cache settings pointing at the temporary database."""
    return CacheSettings(db_path=str(db_path))


@pytest.fixture
def store(db_path: Path, cache_settings: CacheSettings) -> Generator[CacheStore, None, None]:
    """An open store on a temporary database file.

    Yields:
        The open store; it is closed after the test.
    """
    cache_store = CacheStore.open(db_path, cache_settings)
    yield cache_store
    cache_store.close()


@pytest.fixture
def memory_conn() -> Generator[sqlite3.Connection, None, None]:
    """A bare in-memory SQLite connection in autocommit mode."""
    conn = sqlite3.connect(":memory:", isolation_level=None)
    yield conn
    conn.close()


def backdate_expiry(conn: sqlite3.Connection, name: str, minutes: int = 5) -> None:
    """Move an entry's expiry into the past on the engine clock."""
    conn.execute(
        "UPDATE cachetable SET expiretime = datetime('now', ?) WHERE name = ?",
        (f"-{minutes} minutes", name),
    )


@pytest.fixture
def backdate():
    """Helper that pushes an entry's expiry into the past."""
    return backdate_expiry
