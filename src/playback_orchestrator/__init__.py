"""Per-guild music playback orchestration on top of an external audio node client."""

from playback_orchestrator.application.services import (
    Manager,
    Player,
    PlayerOptions,
    RelatedTracksAutoplay,
)
from playback_orchestrator.domain.music import LoopMode, PlayerContext, Queue, Track, TrackEndReason
from playback_orchestrator.domain.shared import (
    ConfigurationError,
    DomainError,
    PlaybackError,
    PlayerDestroyedError,
    StorageError,
)

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "DomainError",
    "LoopMode",
    "Manager",
    "PlaybackError",
    "Player",
    "PlayerContext",
    "PlayerDestroyedError",
    "PlayerOptions",
    "Queue",
    "RelatedTracksAutoplay",
    "StorageError",
    "Track",
    "TrackEndReason",
]
