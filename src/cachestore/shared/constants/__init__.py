"""
CacheStore Constants Module

This module provides centralized constants for the CacheStore library.
All magic values are defined here to keep a single source of truth.
"""

from .cache import CacheDefaults, CacheSchema, SQLiteConfig
from .logging import LogConfig, LogLevels

__all__ = [
    "CacheDefaults",
    "CacheSchema",
    "LogConfig",
    "LogLevels",
    "SQLiteConfig",
]
