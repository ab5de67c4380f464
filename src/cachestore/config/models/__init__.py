"""Configuration models for CacheStore."""

from cachestore.config.models.app_settings import LoggingSettings
from cachestore.config.models.cache_settings import CacheSettings
from cachestore.config.models.settings import Settings

__all__ = [
    "CacheSettings",
    "LoggingSettings",
    "Settings",
]
