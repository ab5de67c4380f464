"""SQLite cache module with modular operations.

Separate modules handle the schema, queries, inserts, updates and
transactions; CacheStore is the facade over one database handle.
"""

from cachestore.services.sqlite_cache.store import CacheStore

__all__ = ["CacheStore"]
