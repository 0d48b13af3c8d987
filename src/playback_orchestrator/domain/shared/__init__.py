"""
Shared Domain Kernel

Contains exceptions, messages and constrained types shared across the package.
"""

from playback_orchestrator.domain.shared.exceptions import (
    ConfigurationError,
    DomainError,
    PlaybackError,
    PlayerDestroyedError,
    StorageError,
)

__all__ = [
    "DomainError",
    "ConfigurationError",
    "PlaybackError",
    "StorageError",
    "PlayerDestroyedError",
]
