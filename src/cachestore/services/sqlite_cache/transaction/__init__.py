"""SQLite cache transaction module.

This module provides transaction management for cache operations.
"""

from cachestore.services.sqlite_cache.transaction.manager import TransactionManager

__all__ = ["TransactionManager"]
