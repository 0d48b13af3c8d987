"""Shared constants for playback limits, node protocol values and storage."""

from __future__ import annotations


class PlaybackConstants:
    DEFAULT_MAX_PREVIOUS_TRACKS = 25
    DEFAULT_VOLUME = 100
    MIN_VOLUME = 0
    MAX_VOLUME = 100


class GatewayConstants:
    """Discord gateway values used for voice-state updates."""

    VOICE_STATE_UPDATE_OP = 4


class ArtworkConstants:
    YOUTUBE_THUMBNAIL_URL = "https://i.ytimg.com/vi/{identifier}/{resolution}.jpg"
    YOUTUBE_MIX_URL = "https://www.youtube.com/watch?v={identifier}&list=RD{identifier}"


class SQLPragmas:
    """SQLite PRAGMA statements applied to each connection."""

    JOURNAL_MODE_WAL = "PRAGMA journal_mode=WAL"
    BUSY_TIMEOUT = "PRAGMA busy_timeout={timeout}"
