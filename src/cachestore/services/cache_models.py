"""Cache entry dataclass model.

This module defines the dataclass for rows of the cache table, providing
type safety for values read back from SQLite.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

__all__ = ["CacheEntry", "parse_timestamp"]


def parse_timestamp(timestamp: str | datetime | None) -> datetime | None:
    """Parse a stored timestamp and make it timezone-aware (UTC).

    SQLite's CURRENT_TIMESTAMP and datetime('now', ...) produce
    ``YYYY-MM-DD HH:MM:SS`` text in UTC without an offset.

    Args:
        timestamp: Stored timestamp text, a datetime, or None

    Returns:
        Timezone-aware datetime or None if input is None

    Raises:
        ValueError: If the text is not an ISO-8601 timestamp
    """
    if timestamp is None or timestamp == "":
        return None

    dt = timestamp if isinstance(timestamp, datetime) else datetime.fromisoformat(str(timestamp))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


@dataclass(frozen=True)
class CacheEntry:
    """One row of the cache table.

    Attributes:
        id: Auto-assigned row id, preserved across updates of the same name
        name: Unique, case-sensitive cache key
        value: Cached text payload (None only for rows written externally)
        creation_time: When the row was inserted or last overwritten (UTC)
        expire_time: Absolute expiry instant (UTC), None for no expiration

    Example:
        >>> entry = store.get("session:42")
        >>> entry.value if entry else None
        'payload'
    """

    id: int
    name: str
    value: str | None
    creation_time: datetime | None
    expire_time: datetime | None = None

    @classmethod
    def from_row(cls, row: tuple[Any, ...]) -> CacheEntry:
        """Build an entry from an ``(id, name, value, creationtime, expiretime)`` row."""
        row_id, name, value, creation_time, expire_time = row
        return cls(
            id=row_id,
            name=name,
            value=value,
            creation_time=parse_timestamp(creation_time),
            expire_time=parse_timestamp(expire_time),
        )

    @property
    def expires(self) -> bool:
        """Whether this entry has an expiry at all."""
        return self.expire_time is not None

    def is_expired(self, now: datetime | None = None) -> bool:
        """Check if the entry is past its expiry.

        This mirrors the sweep predicate client-side; it never filters
        anything on its own.

        Args:
            now: Reference instant (defaults to the current UTC time)

        Returns:
            True if expire_time is set and earlier than now
        """
        if self.expire_time is None:
            return False

        now = now or datetime.now(timezone.utc)
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        return self.expire_time < now

    def to_dict(self) -> dict[str, Any]:
        """Column-name keyed view of the entry, timestamps as ISO strings."""
        return {
            "id": self.id,
            "name": self.name,
            "value": self.value,
            "creationtime": self.creation_time.isoformat() if self.creation_time else None,
            "expiretime": self.expire_time.isoformat() if self.expire_time else None,
        }
