"""Shared utilities for CacheStore: constants, errors and logging helpers."""
