"""Security helpers for CacheStore."""

from cachestore.security.permissions import set_secure_file_permissions

__all__ = ["set_secure_file_permissions"]
