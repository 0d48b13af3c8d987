"""Centralized message constants for error messages and log output."""

from __future__ import annotations


class ErrorMessages:
    """Error messages for exceptions and validation failures."""

    # Configuration
    INVALID_SEND_PAYLOAD = "send_payload: Send payload must be a callable."
    INVALID_AUTOPLAY = "autoplay: Autoplay function must be a callable."
    INVALID_STORAGE = "storage: Storage must be an instance of QueueStorage."
    INVALID_CONNECTOR = "connector: Connector must be an instance of AudioNodeConnector."
    INVALID_RESOLVER = "resolver: Resolver must be an instance of SearchResolver."
    INVALID_SETTINGS = "settings: {details}"
    INVALID_PLAYER_OPTIONS = "options: {details}"
    NO_RESOLVER = "No search resolver is configured."
    INVALID_DATABASE_URL = "Storage URL must start with sqlite://"
    INVALID_LOG_LEVEL = "Invalid log level: {level}. Must be one of {valid_levels}"

    # Track
    EMPTY_ENCODED_TRACK = "Encoded track cannot be empty"
    MALFORMED_TRACK_DATA = "Track data is missing required field '{field}'"

    # Playback
    NO_TRACK_TO_PLAY = "No track to play."
    SKIP_BEYOND_QUEUE = "Can't skip more than the queue size."
    INVALID_SKIP_COUNT = "Skip count must be a non-negative integer."
    NO_CURRENT_TRACK = "Player has no current track in its queue."
    TRACK_NOT_SEEKABLE = "The current track isn't seekable."
    POSITION_NOT_NUMBER = "Position must be a number."
    VOLUME_NOT_NUMBER = "Volume must be a number."
    VOLUME_OUT_OF_RANGE = "Volume must be between 0 and 100."
    INVALID_LOOP_MODE = "Loop mode must be 'off', 'queue' or 'track'."

    # Storage
    NO_SNAPSHOT = "No data found to sync for guild id: {guild_id}"
    UNREADABLE_SNAPSHOT = "Stored snapshot for guild id {guild_id} could not be read"

    # Lifecycle
    DEFAULT_DESTROY_REASON = "Player destroyed."
    TRANSITION_FAILED_REASON = "Playback transition failed: {error}"


class LogTemplates:
    """Log message templates.

    Pass values as parameters to the logger call instead of pre-formatting,
    e.g. ``logger.debug(LogTemplates.QUEUE_ADDED, count)``.
    """

    # Queue
    QUEUE_ADDED = "[Queue -> Add] Added %s tracks to the queue."
    QUEUE_UNSHIFTED = "[Queue -> Unshift] Added %s tracks to the queue."
    QUEUE_SHUFFLED = "[Queue -> Shuffle] Shuffled the queue."
    QUEUE_CLEARED = "[Queue -> Clear] Cleared the queue."
    QUEUE_MOVED = "[Queue -> Move] Moved track %s to position %s."
    QUEUE_SPLICED = "[Queue -> Splice] Removed %s tracks from the queue."
    QUEUE_SAVED = "[Queue -> Save] Saved queue snapshot for guild %s."
    QUEUE_SYNCED = "[Queue -> Sync] Synced queue for guild %s (override=%s, sync_current=%s)."
    QUEUE_SNAPSHOT_DELETED = "[Queue -> Destroy] Deleted queue snapshot for guild %s."

    # Transitions
    TRACK_ARCHIVED = "[Player -> Previous] The track: %s has been added to the previous track list."
    TRACK_STARTED = "[Player -> Start] The track: %s has started playing."
    TRACK_ENDED = "[Player -> End] The track: %s has ended."
    TRACK_REPLACED = "[Player -> End] The track: %s was replaced."
    QUEUE_ENDED = "[Player -> Queue] The queue has ended."
    AUTOPLAY_QUEUED = "[Queue -> Autoplay] Track queued from autoplay function."
    AUTOPLAY_SKIPPED_REENTRY = "[Queue -> Autoplay] Autoplay already running for guild %s, skipping."
    TRANSITION_FAILED = "Playback transition failed for guild %s, destroying player"
    EVENT_DEFERRED = "[Player -> Event] Deferred %s for guild %s until the running transition finishes."

    # Player commands
    PLAYER_PLAY = "[Player -> Play] A new track is playing: %s"
    PLAYER_CONNECT = "[Player -> Connect] Player %s connected."
    PLAYER_DISCONNECT = "[Player -> Disconnect] Player %s disconnected."
    PLAYER_DESTROY = "[Player -> Destroy] Player %s destroyed."
    PLAYER_PAUSE = "[Player -> Pause] Player %s paused."
    PLAYER_RESUME = "[Player -> Resume] Player %s resumed."
    PLAYER_SEEK = "[Player -> Seek] Player %s seeked to %s."
    PLAYER_SKIP = "[Player -> Skip] Player %s skipping (discarding %s pending tracks)."
    PLAYER_LOOP = "[Player -> Loop] Player %s loop mode set to %s."
    PLAYER_VOLUME = "[Player -> Volume] Player %s volume set to %s."
    PLAYER_TEXT_CHANNEL = "[Player -> TextChannel] Player %s text channel set to %s."
    PLAYER_VOICE_CHANNEL = "[Player -> VoiceChannel] Player %s voice channel set to %s."

    # Manager
    PLAYER_CREATED = "[Manager -> Create] Player %s created."
    PLAYER_EXISTS = "[Manager -> Create] Player %s already exists, reusing it."
    SEARCH = "[Manager -> Search] Resolving %s"

    # Events
    EVENT_SUBSCRIBED = "Subscribed handler to: %s"
    EVENT_UNSUBSCRIBED = "Unsubscribed handler from %s"
    EVENT_NO_HANDLERS = "No handlers for %s"
    EVENT_PUBLISHING = "Publishing %s to %d handlers"
    EVENT_HANDLER_ERROR = "Error in handler for %s"
    EVENT_NO_LOOP = "No running event loop, dropping coroutine handler for %s"
    EVENT_BUS_CLEARED = "Cleared all event handlers"

    # Storage
    DATABASE_INITIALIZED = "Database initialized at %s"
    DATABASE_CLOSED = "Database manager closed"

    # Autoplay
    AUTOPLAY_SEARCH = "[Autoplay] Searching related tracks for %s (%s)"
    AUTOPLAY_ADDED = "[Autoplay] Added %s related tracks for guild %s"
