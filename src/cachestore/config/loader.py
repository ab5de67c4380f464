"""Settings loader and singleton manager.

This module handles:
- Environment variable loading from .env files
- Configuration file loading from TOML
- Thread-safe singleton pattern for the Settings instance
"""

from __future__ import annotations

import logging
import os
import threading
from pathlib import Path

from dotenv import load_dotenv
from pydantic import ValidationError

from cachestore.config.models.settings import Settings
from cachestore.shared.errors import ErrorCode, ErrorContext, InfrastructureError, create_config_error

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config/cachestore.toml")
CONFIG_PATH_ENV_VAR = "CACHESTORE_CONFIG_FILE"


class SettingsLoader:
    """Thread-safe singleton manager for Settings.

    Uses double-checked locking pattern to ensure thread-safety
    while minimizing lock overhead.
    """

    _instance: Settings | None = None
    _lock: threading.RLock = threading.RLock()

    def get_config(self) -> Settings:
        """Get the global settings instance, loading it if necessary."""
        if self._instance is None:
            with self._lock:
                if self._instance is None:
                    _load_env_file()
                    SettingsLoader._instance = load_settings()

        return self._instance  # type: ignore[return-value]

    def reload_config(self) -> Settings:
        """Reload the global settings instance from configuration files."""
        with self._lock:
            _load_env_file()
            SettingsLoader._instance = load_settings()

        return SettingsLoader._instance

    def reset(self) -> None:
        """Drop the cached instance so the next get_config() reloads."""
        with self._lock:
            SettingsLoader._instance = None


def _load_env_file(env_file: Path | None = None) -> None:
    """Load environment variables from a .env file when one exists.

    Variables already present in the environment win over the file.

    Raises:
        InfrastructureError: If the .env file exists but cannot be read
    """
    env_file = env_file or Path(".env")
    if not env_file.exists():
        return

    try:
        load_dotenv(env_file, override=False)
    except PermissionError as e:
        raise InfrastructureError(
            code=ErrorCode.FILE_PERMISSION_DENIED,
            message=f"Permission denied reading .env file: {env_file}",
            context=ErrorContext(
                operation="load_env",
                additional_data={"file_name": env_file.name},
            ),
            original_error=e,
        ) from e


def load_settings(config_path: Path | str | None = None) -> Settings:
    """Build Settings from the TOML file (if any) and the environment.

    Args:
        config_path: TOML file to read. Defaults to $CACHESTORE_CONFIG_FILE,
            then config/cachestore.toml. A missing default file is not an error.

    Raises:
        ApplicationError: If the configuration does not validate or an
            explicitly requested file is missing
    """
    explicit = config_path is not None or CONFIG_PATH_ENV_VAR in os.environ
    path = Path(config_path or os.environ.get(CONFIG_PATH_ENV_VAR, DEFAULT_CONFIG_PATH))

    try:
        if path.exists():
            return Settings.from_toml_file(path)
        if explicit:
            raise FileNotFoundError(f"Configuration file not found: {path}")
        return Settings()
    except FileNotFoundError as e:
        raise create_config_error(
            str(e),
            config_key=str(path),
            operation="load_settings",
            original_error=e,
        ) from e
    except ValidationError as e:
        logger.exception("Invalid configuration in %s", path)
        raise create_config_error(
            f"Invalid configuration: {e.error_count()} validation error(s)",
            config_key=str(path),
            operation="load_settings",
            original_error=e,
        ) from e


_loader = SettingsLoader()


def get_config() -> Settings:
    """Return the process-wide Settings instance."""
    return _loader.get_config()


def reload_config() -> Settings:
    """Reload and return the process-wide Settings instance."""
    return _loader.reload_config()


def reset_config() -> None:
    """Forget the cached Settings instance."""
    _loader.reset()
