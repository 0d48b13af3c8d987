"""Playback events and the per-manager / per-player event bus."""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections import defaultdict
from collections.abc import Awaitable, Callable
from typing import Annotated, Any, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from playback_orchestrator.domain.music.entities import Track
from playback_orchestrator.domain.music.value_objects import TrackEndReason
from playback_orchestrator.domain.shared.messages import LogTemplates
from playback_orchestrator.domain.shared.types import (
    GuildIdStr,
    NonNegativeInt,
    UtcDatetimeField,
    utcnow,
)

logger = logging.getLogger(__name__)


class PlaybackEventBase(BaseModel):
    """Base class for all playback events."""

    model_config = ConfigDict(frozen=True)

    timestamp: UtcDatetimeField = Field(default_factory=utcnow)


class TrackStarted(PlaybackEventBase):
    event_type: Literal["TrackStarted"] = "TrackStarted"
    guild_id: GuildIdStr
    track: Track | None = None


class TrackEnded(PlaybackEventBase):
    event_type: Literal["TrackEnded"] = "TrackEnded"
    guild_id: GuildIdStr
    track: Track | None = None
    reason: TrackEndReason = TrackEndReason.FINISHED


class TrackStuck(PlaybackEventBase):
    event_type: Literal["TrackStuck"] = "TrackStuck"
    guild_id: GuildIdStr
    track: Track | None = None
    threshold_ms: NonNegativeInt = 0


class TrackErrored(PlaybackEventBase):
    event_type: Literal["TrackErrored"] = "TrackErrored"
    guild_id: GuildIdStr
    track: Track | None = None
    message: str | None = None
    severity: str | None = None


class QueueEnded(PlaybackEventBase):
    event_type: Literal["QueueEnded"] = "QueueEnded"
    guild_id: GuildIdStr
    last_track: Track | None = None


class QueueUpdated(PlaybackEventBase):
    event_type: Literal["QueueUpdated"] = "QueueUpdated"
    guild_id: GuildIdStr
    size: NonNegativeInt = 0
    total_size: NonNegativeInt = 0


class PlayerCreated(PlaybackEventBase):
    event_type: Literal["PlayerCreated"] = "PlayerCreated"
    guild_id: GuildIdStr


class PlayerDestroyed(PlaybackEventBase):
    event_type: Literal["PlayerDestroyed"] = "PlayerDestroyed"
    guild_id: GuildIdStr
    reason: str


class PlayerUpdated(PlaybackEventBase):
    event_type: Literal["PlayerUpdated"] = "PlayerUpdated"
    guild_id: GuildIdStr
    position: NonNegativeInt = 0
    connected: bool = False
    ping: int = -1


class PlayerResumed(PlaybackEventBase):
    event_type: Literal["PlayerResumed"] = "PlayerResumed"
    guild_id: GuildIdStr


class SocketClosed(PlaybackEventBase):
    event_type: Literal["SocketClosed"] = "SocketClosed"
    guild_id: GuildIdStr
    code: int
    reason: str = ""
    by_remote: bool = False


class DebugMessage(PlaybackEventBase):
    event_type: Literal["DebugMessage"] = "DebugMessage"
    message: str
    guild_id: GuildIdStr | None = None


PlaybackEvent = Annotated[
    TrackStarted
    | TrackEnded
    | TrackStuck
    | TrackErrored
    | QueueEnded
    | QueueUpdated
    | PlayerCreated
    | PlayerDestroyed
    | PlayerUpdated
    | PlayerResumed
    | SocketClosed
    | DebugMessage,
    Field(discriminator="event_type"),
]


T = TypeVar("T", bound=PlaybackEventBase)
EventHandler = Callable[[T], Awaitable[None] | None]


class EventBus:
    """In-memory pub/sub for playback events, keyed by event class.

    ``emit`` never waits: plain callables run inline and coroutine handlers
    are scheduled on the running loop. ``publish`` awaits every handler.
    Exceptions raised by handlers are logged and never reach the emitter.
    """

    def __init__(self) -> None:
        self._handlers: dict[type[PlaybackEventBase], list[EventHandler[Any]]] = defaultdict(list)
        self._pending: set[asyncio.Task[None]] = set()

    def subscribe(self, event_type: type[T], handler: EventHandler[T]) -> None:
        self._handlers[event_type].append(handler)
        logger.debug(LogTemplates.EVENT_SUBSCRIBED, event_type.__name__)

    def unsubscribe(self, event_type: type[T], handler: EventHandler[T]) -> None:
        handlers = self._handlers[event_type]
        if handler in handlers:
            handlers.remove(handler)
            logger.debug(LogTemplates.EVENT_UNSUBSCRIBED, event_type.__name__)

    def handler_count(self, event_type: type[PlaybackEventBase]) -> int:
        return len(self._handlers.get(event_type, []))

    def emit(self, event: PlaybackEventBase) -> None:
        event_type = type(event)
        for handler in list(self._handlers.get(event_type, [])):
            try:
                result = handler(event)
            except Exception:
                logger.exception(LogTemplates.EVENT_HANDLER_ERROR, event_type.__name__)
                continue

            if inspect.isawaitable(result):
                self._schedule(result, event_type.__name__)

    def _schedule(self, awaitable: Awaitable[None], event_name: str) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning(LogTemplates.EVENT_NO_LOOP, event_name)
            if inspect.iscoroutine(awaitable):
                awaitable.close()
            return

        async def guarded() -> None:
            try:
                await awaitable
            except Exception:
                logger.exception(LogTemplates.EVENT_HANDLER_ERROR, event_name)

        task = loop.create_task(guarded())
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def publish(self, event: PlaybackEventBase) -> None:
        event_type = type(event)
        handlers = list(self._handlers.get(event_type, []))

        if not handlers:
            logger.debug(LogTemplates.EVENT_NO_HANDLERS, event_type.__name__)
            return

        logger.debug(LogTemplates.EVENT_PUBLISHING, event_type.__name__, len(handlers))

        async def safe_call(handler: EventHandler[Any]) -> None:
            try:
                result = handler(event)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception(LogTemplates.EVENT_HANDLER_ERROR, event_type.__name__)

        async with asyncio.TaskGroup() as tg:
            for handler in handlers:
                tg.create_task(safe_call(handler))

    async def drain(self) -> None:
        """Wait for coroutine handlers scheduled by ``emit``."""
        while self._pending:
            await asyncio.gather(*list(self._pending))

    def clear(self) -> None:
        self._handlers.clear()
        logger.debug(LogTemplates.EVENT_BUS_CLEARED)
