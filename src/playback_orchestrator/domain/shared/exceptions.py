"""Base exception classes for domain-level errors."""

from __future__ import annotations


class DomainError(Exception):
    """Base exception for all domain-level errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class ConfigurationError(DomainError):
    """Raised when manager or player options are invalid."""

    def __init__(self, message: str, option: str | None = None) -> None:
        super().__init__(message, code="CONFIGURATION_ERROR")
        self.option = option


class PlaybackError(DomainError):
    """Raised when a player command cannot be carried out."""

    def __init__(self, message: str, guild_id: str | None = None) -> None:
        super().__init__(message, code="PLAYBACK_ERROR")
        self.guild_id = guild_id


class StorageError(DomainError):
    """Raised when a stored queue snapshot is missing or unusable."""

    def __init__(self, message: str, key: str | None = None) -> None:
        super().__init__(message, code="STORAGE_ERROR")
        self.key = key


class PlayerDestroyedError(DomainError):
    """Raised when an operation targets a player that was already destroyed."""

    def __init__(self, guild_id: str, message: str | None = None) -> None:
        msg = message or f"Player for guild '{guild_id}' has been destroyed"
        super().__init__(msg, code="PLAYER_DESTROYED")
        self.guild_id = guild_id
