"""Cache configuration model.

This module contains the cache configuration model for the database file
location, SQLite connection tuning and expiry defaults.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from cachestore.shared.constants import CacheDefaults, SQLiteConfig


class CacheSettings(BaseModel):
    """Cache configuration.

    This class manages where the cache database lives, how the SQLite
    connection is tuned, and the default expiry applied by put().
    """

    db_path: str = Field(
        default=CacheDefaults.DEFAULT_DB_PATH,
        min_length=1,
        description="Path to the SQLite cache database file",
    )
    journal_mode: str = Field(
        default=SQLiteConfig.JOURNAL_MODE_WAL,
        description="SQLite journal mode (WAL, DELETE, ...)",
    )
    synchronous: str = Field(
        default=SQLiteConfig.SYNCHRONOUS_NORMAL,
        description="SQLite synchronous mode (OFF, NORMAL, FULL, EXTRA)",
    )
    busy_timeout: float = Field(
        default=SQLiteConfig.DEFAULT_BUSY_TIMEOUT_SECONDS,
        ge=0,
        description="Seconds to wait on a locked database before failing",
    )
    secure_permissions: bool = Field(
        default=True,
        description="Restrict newly created database files to the owner",
    )
    sweep_on_open: bool = Field(
        default=True,
        description="Delete expired entries when the store is opened",
    )
    default_expire_minutes: int = Field(
        default=CacheDefaults.DEFAULT_EXPIRE_MINUTES,
        description="Expiry used by put() when none is given (<= 0 never expires)",
    )

    @field_validator("journal_mode")
    @classmethod
    def _validate_journal_mode(cls, value: str) -> str:
        upper = value.upper()
        if upper not in SQLiteConfig.JOURNAL_MODES:
            msg = f"journal_mode must be one of {SQLiteConfig.JOURNAL_MODES}, got {value!r}"
            raise ValueError(msg)
        return upper

    @field_validator("synchronous")
    @classmethod
    def _validate_synchronous(cls, value: str) -> str:
        upper = value.upper()
        if upper not in SQLiteConfig.SYNCHRONOUS_MODES:
            msg = f"synchronous must be one of {SQLiteConfig.SYNCHRONOUS_MODES}, got {value!r}"
            raise ValueError(msg)
        return upper


__all__ = ["CacheSettings"]
