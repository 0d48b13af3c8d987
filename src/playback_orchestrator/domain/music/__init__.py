"""
Music Bounded Context

Tracks, the per-guild queue, its persistence and the playback event types.
"""

from playback_orchestrator.domain.music.entities import PlayerContext, QueueSnapshot, Track
from playback_orchestrator.domain.music.events import (
    DebugMessage,
    EventBus,
    PlaybackEvent,
    PlayerCreated,
    PlayerDestroyed,
    PlayerResumed,
    PlayerUpdated,
    QueueEnded,
    QueueUpdated,
    SocketClosed,
    TrackEnded,
    TrackErrored,
    TrackStarted,
    TrackStuck,
)
from playback_orchestrator.domain.music.persistence import QueuePersistence
from playback_orchestrator.domain.music.queue import Queue
from playback_orchestrator.domain.music.repository import QueueStorage
from playback_orchestrator.domain.music.value_objects import (
    LoadType,
    LoopMode,
    SearchEngine,
    SourceName,
    TrackEndReason,
    TransitionState,
    YoutubeResolution,
)

__all__ = [
    # Entities
    "Track",
    "QueueSnapshot",
    "PlayerContext",
    "Queue",
    # Value Objects
    "LoopMode",
    "SourceName",
    "SearchEngine",
    "YoutubeResolution",
    "TrackEndReason",
    "LoadType",
    "TransitionState",
    # Events
    "EventBus",
    "PlaybackEvent",
    "TrackStarted",
    "TrackEnded",
    "TrackStuck",
    "TrackErrored",
    "QueueEnded",
    "QueueUpdated",
    "PlayerCreated",
    "PlayerDestroyed",
    "PlayerUpdated",
    "PlayerResumed",
    "SocketClosed",
    "DebugMessage",
    # Persistence
    "QueueStorage",
    "QueuePersistence",
]
