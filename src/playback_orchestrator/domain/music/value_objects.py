"""Immutable value objects for the music bounded context."""

from __future__ import annotations

from enum import Enum, StrEnum


class LoopMode(Enum):
    """Loop mode settings for queue playback."""

    OFF = "off"
    TRACK = "track"  # Replay the current track
    QUEUE = "queue"  # Re-queue finished tracks at the tail

    def next_mode(self) -> LoopMode:
        """Cycle off -> queue -> track -> off."""
        return _LOOP_CYCLE[self]


_LOOP_CYCLE: dict[LoopMode, LoopMode] = {
    LoopMode.OFF: LoopMode.QUEUE,
    LoopMode.QUEUE: LoopMode.TRACK,
    LoopMode.TRACK: LoopMode.OFF,
}


class SourceName(StrEnum):
    """Source names reported by the audio node."""

    YOUTUBE = "youtube"
    YOUTUBE_MUSIC = "youtubemusic"
    SOUNDCLOUD = "soundcloud"
    BANDCAMP = "bandcamp"
    TWITCH = "twitch"
    DEEZER = "deezer"
    SPOTIFY = "spotify"
    APPLE_MUSIC = "applemusic"
    YANDEX_MUSIC = "yandexmusic"
    FLOWERY_TTS = "flowery-tts"

    @property
    def is_youtube(self) -> bool:
        return self in {SourceName.YOUTUBE, SourceName.YOUTUBE_MUSIC}


class SearchEngine(StrEnum):
    """Query prefixes understood by the audio node's resolver."""

    YOUTUBE = "ytsearch"
    YOUTUBE_MUSIC = "ytmsearch"
    SOUNDCLOUD = "scsearch"
    SPOTIFY = "spsearch"
    SPOTIFY_RECOMMENDATIONS = "sprec"


class YoutubeResolution(StrEnum):
    """YouTube thumbnail variants."""

    DEFAULT = "default"
    HQ = "hqdefault"
    MQ = "mqdefault"
    SD = "sddefault"
    HD = "maxresdefault"


class TrackEndReason(StrEnum):
    """Reasons the audio node reports for a track ending."""

    FINISHED = "finished"
    LOAD_FAILED = "loadFailed"
    STOPPED = "stopped"
    REPLACED = "replaced"
    CLEANUP = "cleanup"

    @property
    def is_failure(self) -> bool:
        return self in {TrackEndReason.LOAD_FAILED, TrackEndReason.CLEANUP}


class LoadType(StrEnum):
    """Result kinds returned by a resolve call."""

    TRACK = "track"
    PLAYLIST = "playlist"
    SEARCH = "search"
    EMPTY = "empty"
    ERROR = "error"


class TransitionState(Enum):
    """Per-player guard that keeps autoplay to one attempt per empty event."""

    IDLE = "idle"
    AWAITING_AUTOPLAY = "awaiting_autoplay"
