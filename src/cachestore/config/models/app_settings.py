"""Logging configuration model."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from cachestore.shared.constants import LogConfig, LogLevels


class LoggingSettings(BaseModel):
    """Logging configuration.

    This class manages logging behavior including level, file output
    and console output settings.
    """

    level: str = Field(default=LogConfig.DEFAULT_LEVEL, description="Logging level")
    file: str | None = Field(default=None, description="JSON log file path")
    console_output: bool = Field(default=True, description="Enable console logging")
    rich_console: bool = Field(
        default=True,
        description="Render console logs with Rich instead of JSON lines",
    )

    @field_validator("level")
    @classmethod
    def _validate_level(cls, value: str) -> str:
        upper = value.upper()
        if upper not in LogLevels.NAMES:
            msg = f"level must be one of {LogLevels.NAMES}, got {value!r}"
            raise ValueError(msg)
        return upper


__all__ = ["LoggingSettings"]
