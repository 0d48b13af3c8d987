"""Configuration: environment-backed settings and the dependency container."""

from playback_orchestrator.config.settings import (
    PlaybackSettings,
    Settings,
    StorageSettings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    "PlaybackSettings",
    "Settings",
    "StorageSettings",
    "clear_settings_cache",
    "get_settings",
]
