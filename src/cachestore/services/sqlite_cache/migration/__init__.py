"""SQLite cache schema module."""

from cachestore.services.sqlite_cache.migration.manager import SchemaManager

__all__ = ["SchemaManager"]
