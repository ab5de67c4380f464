"""CacheStore services."""

from cachestore.services.cache_models import CacheEntry
from cachestore.services.sqlite_cache import CacheStore

__all__ = ["CacheEntry", "CacheStore"]
