"""CacheStore configuration.

Usage:
    from cachestore.config import get_config
    settings = get_config()
    settings.cache.db_path
"""

from cachestore.config.loader import (
    SettingsLoader,
    get_config,
    load_settings,
    reload_config,
    reset_config,
)
from cachestore.config.models import CacheSettings, LoggingSettings, Settings

__all__ = [
    "CacheSettings",
    "LoggingSettings",
    "Settings",
    "SettingsLoader",
    "get_config",
    "load_settings",
    "reload_config",
    "reset_config",
]
