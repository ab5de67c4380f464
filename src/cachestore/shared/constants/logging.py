"""
Logging Configuration Constants

This module contains all constants related to logging configuration
and log formatting.
"""


class LogLevels:
    """Log level constants."""

    NAMES = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class LogConfig:
    """Log configuration constants."""

    ROOT_LOGGER_NAME = "cachestore"
    DEFAULT_LEVEL = "INFO"
    DEFAULT_ENCODING = "utf-8"
    RICH_TIME_FORMAT = "[%H:%M:%S]"
