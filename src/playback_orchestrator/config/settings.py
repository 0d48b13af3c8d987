"""Application Settings and Configuration

Pydantic-based settings loaded from environment variables and an optional
``.env`` file. Nested sections use the ``__`` delimiter, e.g.
``PLAYBACK__MAX_PREVIOUS_TRACKS=50`` or ``STORAGE__BACKEND=sqlite``.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from playback_orchestrator.domain.music.value_objects import SearchEngine
from playback_orchestrator.domain.shared.constants import PlaybackConstants
from playback_orchestrator.domain.shared.messages import ErrorMessages
from playback_orchestrator.domain.shared.types import (
    BusyTimeoutMs,
    ConnectionTimeoutS,
    MaxPreviousTracks,
    VolumeInt,
)


class PlaybackSettings(BaseModel):
    """Manager-wide playback options."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    max_previous_tracks: MaxPreviousTracks = Field(
        default=PlaybackConstants.DEFAULT_MAX_PREVIOUS_TRACKS,
        validation_alias=AliasChoices("max_previous_tracks", "max_previous"),
    )
    default_volume: VolumeInt = PlaybackConstants.DEFAULT_VOLUME
    default_search_engine: SearchEngine = Field(
        default=SearchEngine.YOUTUBE,
        validation_alias=AliasChoices("default_search_engine", "search_engine"),
    )
    # Whether a track ending with reason "stopped" still writes the final checkpoint.
    persist_on_stop: bool = False


class StorageSettings(BaseModel):
    """Queue snapshot storage configuration."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    backend: Literal["memory", "sqlite"] = "memory"
    url: str = Field(
        default="sqlite:///data/queues.db",
        validation_alias=AliasChoices("url", "database_url", "db_url"),
    )
    busy_timeout_ms: BusyTimeoutMs = Field(
        default=5000,
        validation_alias=AliasChoices("busy_timeout_ms", "busy_timeout"),
    )
    connection_timeout_s: ConnectionTimeoutS = Field(
        default=10,
        validation_alias=AliasChoices("connection_timeout_s", "connection_timeout"),
    )

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        if not v.startswith("sqlite://"):
            raise ValueError(ErrorMessages.INVALID_DATABASE_URL)
        return v


class Settings(BaseSettings):
    """Settings container, loaded automatically from the environment.

    Environment variable naming:
    - LOG_LEVEL (top-level)
    - PLAYBACK__MAX_PREVIOUS_TRACKS, PLAYBACK__PERSIST_ON_STOP, ...
    - STORAGE__BACKEND, STORAGE__URL, ...
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    log_level: str = "INFO"

    playback: PlaybackSettings = Field(default_factory=PlaybackSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(ErrorMessages.INVALID_LOG_LEVEL.format(level=v, valid_levels=valid_levels))
        return v_upper


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings (.env file, then environment, then defaults)."""
    return Settings()


def clear_settings_cache() -> None:
    get_settings.cache_clear()
