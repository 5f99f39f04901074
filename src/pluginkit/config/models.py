"""Result and settings models for the configuration package."""

import logging
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

from pydantic import BaseModel, Field, field_validator


class LoadStatus(StrEnum):
    """What a loader did with one configuration file."""

    FRESH = "fresh"  # File was missing, defaults written
    LOADED = "loaded"  # Existing file kept as-is
    MIGRATED = "migrated"  # Outdated file archived, defaults written
    FAILED = "failed"  # Error recorded, previous document kept


@dataclass(frozen=True)
class LoadOutcome:
    """Outcome of reconciling one holder against disk.

    Attributes:
        status: What happened to the file
        error: The exception that stopped the load, for FAILED outcomes
        archived_path: Where the outdated file was moved, for MIGRATED outcomes
    """

    status: LoadStatus
    error: BaseException | None = None
    archived_path: Path | None = None

    @property
    def ok(self) -> bool:
        return self.status is not LoadStatus.FAILED

    @classmethod
    def failed(cls, error: BaseException) -> "LoadOutcome":
        return cls(status=LoadStatus.FAILED, error=error)


class LoggingConfig(BaseModel):
    """Structlog-based logging configuration."""

    level: str = "INFO"
    json_logs: bool | None = None  # None = auto-detect based on environment
    include_caller: bool = False  # Include file:line info (useful for debugging)
    extra_fields: dict[str, str] = Field(default_factory=lambda: {"service": "pluginkit"})

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate that the level names a standard logging level."""
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(
                f"Invalid log level '{v}'. Must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL."
            )
        return level
