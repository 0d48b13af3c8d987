"""Per-guild player: runtime flags, the queue and the command surface."""

from __future__ import annotations

import asyncio
import inspect
import logging
import math
from collections import deque
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from playback_orchestrator.application.interfaces.audio_node import NodeEvent, parse_node_event
from playback_orchestrator.application.interfaces.gateway import VoiceStatePayload
from playback_orchestrator.application.services.transitions import PlaybackTransitionEngine
from playback_orchestrator.domain.music.entities import PlayerContext, Track
from playback_orchestrator.domain.music.events import (
    DebugMessage,
    EventBus,
    PlaybackEventBase,
    PlayerDestroyed,
)
from playback_orchestrator.domain.music.queue import Queue
from playback_orchestrator.domain.music.value_objects import LoopMode, SearchEngine
from playback_orchestrator.domain.shared.constants import PlaybackConstants
from playback_orchestrator.domain.shared.exceptions import PlaybackError, PlayerDestroyedError
from playback_orchestrator.domain.shared.messages import ErrorMessages, LogTemplates

if TYPE_CHECKING:
    from playback_orchestrator.application.interfaces.audio_node import AudioNodeSession
    from playback_orchestrator.application.interfaces.search_resolver import SearchResult
    from playback_orchestrator.application.services.manager import Manager
    from playback_orchestrator.application.services.options import PlayerOptions

logger = logging.getLogger(__name__)


class Player:
    """One guild's playback session.

    Node events and mutating commands are serialized by a per-player lock,
    so a ``skip`` can never interleave with an in-flight transition. Events
    a node client delivers inline while the lock holder awaits a node
    command are queued and handled, in order, before the lock is released.
    Once :meth:`destroy` has been called every operation raises
    :class:`PlayerDestroyedError`.
    """

    def __init__(
        self,
        manager: Manager,
        session: AudioNodeSession,
        options: PlayerOptions,
        *,
        context: PlayerContext | None = None,
    ) -> None:
        self.manager = manager
        self.session = session
        self.options = options

        self.guild_id = options.guild_id
        self.voice_id: str | None = options.voice_id
        self.text_id = options.text_id
        self.shard_id = options.shard_id
        self.self_deaf = options.self_deaf
        self.self_mute = options.self_mute

        self.loop = LoopMode.OFF
        self.playing = False
        self.paused = False
        self.connected = False
        self.volume = options.volume if options.volume is not None else manager.settings.default_volume

        self.context = context or PlayerContext()
        self.events = EventBus()
        self.queue = Queue(
            self.guild_id,
            manager.storage,
            max_previous_tracks=manager.settings.max_previous_tracks,
            emit=self.emit,
        )

        self._data: dict[str, Any] = {}
        self._lock = asyncio.Lock()
        self._lock_owner: asyncio.Task[Any] | None = None
        self._pending_events: deque[NodeEvent] = deque()
        self._destroyed = False
        self._transitions = PlaybackTransitionEngine(self)

        self.session.set_event_handler(self.handle_node_event)

    @property
    def position(self) -> int:
        return self.session.position

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    @property
    def transitions(self) -> PlaybackTransitionEngine:
        return self._transitions

    # ── Events ──────────────────────────────────────────────────────

    def emit(self, event: PlaybackEventBase) -> None:
        """Fan an event out to this player's observers, then the manager's."""
        self.events.emit(event)
        self.manager.events.emit(event)

    def debug(self, template: str, *args: object) -> None:
        logger.debug(template, *args)
        self.emit(DebugMessage(message=template % args, guild_id=self.guild_id))

    async def handle_node_event(self, event: NodeEvent | dict[str, Any]) -> None:
        """Entry point for the node session's lifecycle payloads, one at a time and in order.

        A failure during a transition destroys the player before propagating.
        """
        self._ensure_alive()
        if isinstance(event, dict):
            event = parse_node_event(event)

        if self._holds_lock():
            # Delivered from inside a node command issued under the lock.
            logger.debug(LogTemplates.EVENT_DEFERRED, type(event).__name__, self.guild_id)
            self._pending_events.append(event)
            return

        async with self._serialized():
            await self._dispatch(event)

    async def _dispatch(self, event: NodeEvent) -> None:
        try:
            await self._transitions.handle(event)
        except Exception as e:
            logger.exception(LogTemplates.TRANSITION_FAILED, self.guild_id)
            if not self._destroyed:
                await self.destroy(ErrorMessages.TRANSITION_FAILED_REASON.format(error=e))
            raise

    def _holds_lock(self) -> bool:
        return self._lock_owner is not None and self._lock_owner is asyncio.current_task()

    @asynccontextmanager
    async def _serialized(self) -> AsyncIterator[None]:
        """Hold the player lock, re-entrantly for the task that already owns it.

        Deferred events are drained before the lock is given up.
        """
        if self._holds_lock():
            yield
            return

        async with self._lock:
            self._lock_owner = asyncio.current_task()
            try:
                yield
            finally:
                try:
                    await self._drain_pending_events()
                finally:
                    self._lock_owner = None

    async def _drain_pending_events(self) -> None:
        while self._pending_events:
            event = self._pending_events.popleft()
            if self._destroyed:
                self._pending_events.clear()
                return
            await self._dispatch(event)

    @asynccontextmanager
    async def released(self) -> AsyncIterator[None]:
        """Give up the lock around a call into caller code, then take it back.

        Used for the autoplay hook, which may call back into this player.
        A no-op when the current task does not hold the lock.
        """
        if not self._holds_lock():
            yield
            return

        owner = self._lock_owner
        self._lock_owner = None
        self._lock.release()
        try:
            yield
        finally:
            await self._lock.acquire()
            self._lock_owner = owner

    # ── Playback commands ───────────────────────────────────────────

    async def play(
        self,
        track: Track | None = None,
        *,
        no_replace: bool = False,
        pause: bool | None = None,
        volume: int | None = None,
    ) -> Player:
        """Play ``track``, or the current track, or the head of the queue.

        Raises:
            PlaybackError: If there is nothing to play.
        """
        self._ensure_alive()
        async with self._serialized():
            await self._play(track, no_replace=no_replace, pause=pause, volume=volume)
        return self

    async def _play(
        self,
        track: Track | None = None,
        *,
        no_replace: bool = False,
        pause: bool | None = None,
        volume: int | None = None,
    ) -> None:
        self._ensure_alive()
        queue = self.queue

        if track is not None:
            queue.current = track
        elif queue.current is None:
            queue.current = queue.shift()

        if queue.current is None:
            raise PlaybackError(ErrorMessages.NO_TRACK_TO_PLAY, guild_id=self.guild_id)

        self.debug(LogTemplates.PLAYER_PLAY, queue.current.title)
        await self.session.play_track(
            queue.current.encoded,
            paused=pause if pause is not None else self.paused,
            volume=volume if volume is not None else self.volume,
            no_replace=no_replace,
        )

    async def skip(self, count: int = 0) -> Player:
        """Discard ``count`` pending tracks, then stop the current one.

        The stop makes the node report ``ended``, which advances the queue
        through the normal transition path.
        """
        self._ensure_alive()
        if isinstance(count, bool) or not isinstance(count, int) or count < 0:
            raise PlaybackError(ErrorMessages.INVALID_SKIP_COUNT, guild_id=self.guild_id)

        async with self._serialized():
            if count > self.queue.size:
                raise PlaybackError(ErrorMessages.SKIP_BEYOND_QUEUE, guild_id=self.guild_id)

            self.debug(LogTemplates.PLAYER_SKIP, self.guild_id, count)
            if count:
                self.queue.splice_track(0, count)

            if not self.playing:
                await self._play()

        # Outside the lock: some node clients deliver the resulting end event inline.
        await self.session.stop_track()
        return self

    async def seek(self, position: int | float) -> Player:
        """Seek within the current track; out-of-range positions are clamped to ``[0, length]``."""
        self._ensure_alive()
        current = self.queue.current
        if current is None:
            raise PlaybackError(ErrorMessages.NO_CURRENT_TRACK, guild_id=self.guild_id)
        if not current.is_seekable:
            raise PlaybackError(ErrorMessages.TRACK_NOT_SEEKABLE, guild_id=self.guild_id)
        if isinstance(position, bool) or not isinstance(position, int | float) or math.isnan(position):
            raise PlaybackError(ErrorMessages.POSITION_NOT_NUMBER, guild_id=self.guild_id)

        target = int(max(min(position, current.length), 0))
        await self.session.seek_to(target)
        self.debug(LogTemplates.PLAYER_SEEK, self.guild_id, target)
        return self

    async def pause(self) -> Player:
        self._ensure_alive()
        if not self.playing:
            return self

        await self.session.set_paused(True)
        self.paused = True
        self.playing = False
        self.debug(LogTemplates.PLAYER_PAUSE, self.guild_id)
        return self

    async def resume(self) -> Player:
        self._ensure_alive()
        if not self.paused:
            return self

        await self.session.set_paused(False)
        self.paused = False
        self.playing = True
        self.debug(LogTemplates.PLAYER_RESUME, self.guild_id)
        return self

    def set_loop(self, mode: LoopMode | str | None = None) -> Player:
        """Cycle off -> queue -> track -> off, or set an explicit mode."""
        self._ensure_alive()
        if mode is None:
            self.loop = self.loop.next_mode()
        else:
            try:
                self.loop = LoopMode(mode)
            except ValueError as e:
                raise PlaybackError(ErrorMessages.INVALID_LOOP_MODE, guild_id=self.guild_id) from e

        self.debug(LogTemplates.PLAYER_LOOP, self.guild_id, self.loop.value)
        return self

    async def set_volume(self, volume: int | float) -> Player:
        self._ensure_alive()
        if isinstance(volume, bool) or not isinstance(volume, int | float) or not math.isfinite(volume):
            raise PlaybackError(ErrorMessages.VOLUME_NOT_NUMBER, guild_id=self.guild_id)
        if not PlaybackConstants.MIN_VOLUME <= volume <= PlaybackConstants.MAX_VOLUME:
            raise PlaybackError(ErrorMessages.VOLUME_OUT_OF_RANGE, guild_id=self.guild_id)

        await self.session.set_global_volume(int(volume))
        self.volume = int(volume)
        self.debug(LogTemplates.PLAYER_VOLUME, self.guild_id, self.volume)
        return self

    async def search(
        self,
        query: str,
        requester: Any = None,
        *,
        engine: SearchEngine | str | None = None,
    ) -> SearchResult:
        self._ensure_alive()
        return await self.manager.search(query, requester, engine=engine)

    # ── Voice connection ────────────────────────────────────────────

    async def connect(self) -> Player:
        self._ensure_alive()
        if self.connected:
            return self

        await self._send_voice_state(
            VoiceStatePayload.join(
                self.guild_id,
                self.voice_id,
                self_mute=self.self_mute,
                self_deaf=self.self_deaf,
            )
        )
        self.connected = True
        self.debug(LogTemplates.PLAYER_CONNECT, self.guild_id)
        return self

    async def disconnect(self) -> Player:
        self._ensure_alive()
        await self._disconnect()
        return self

    async def _disconnect(self) -> None:
        self.playing = False
        self.paused = False
        self.connected = False

        await self._send_voice_state(VoiceStatePayload.leave(self.guild_id))
        self.voice_id = None
        self.debug(LogTemplates.PLAYER_DISCONNECT, self.guild_id)

    async def destroy(self, reason: str | None = None) -> None:
        """Disconnect, release the node session and unregister from the manager.

        Raises:
            PlayerDestroyedError: If the player was already destroyed.
        """
        self._ensure_alive()
        self._destroyed = True
        # Unregistered before teardown: a create racing it gets a new player.
        self.manager._unregister(self)

        await self._disconnect()
        await self.manager.connector.leave_voice_channel(self.guild_id)
        await self.session.destroy()

        self.emit(
            PlayerDestroyed(
                guild_id=self.guild_id,
                reason=reason or ErrorMessages.DEFAULT_DESTROY_REASON,
            )
        )
        self.debug(LogTemplates.PLAYER_DESTROY, self.guild_id)

    def set_text_channel(self, text_id: str) -> Player:
        self._ensure_alive()
        self.text_id = text_id
        self.debug(LogTemplates.PLAYER_TEXT_CHANNEL, self.guild_id, text_id)
        return self

    async def set_voice_channel(self, voice_id: str) -> Player:
        self._ensure_alive()
        self.voice_id = voice_id
        await self._send_voice_state(
            VoiceStatePayload.join(
                self.guild_id,
                voice_id,
                self_mute=self.self_mute,
                self_deaf=self.self_deaf,
            )
        )
        self.debug(LogTemplates.PLAYER_VOICE_CHANNEL, self.guild_id, voice_id)
        return self

    async def _send_voice_state(self, payload: VoiceStatePayload) -> None:
        result = self.manager.send_payload(self.guild_id, payload.model_dump())
        if inspect.isawaitable(result):
            await result

    # ── Caller context ──────────────────────────────────────────────

    def set(self, key: str, value: Any) -> Player:
        self._ensure_alive()
        self._data[key] = value
        return self

    def get(self, key: str, default: Any = None) -> Any:
        self._ensure_alive()
        return self._data.get(key, default)

    def delete(self, key: str) -> Player:
        self._ensure_alive()
        self._data.pop(key, None)
        return self

    def _ensure_alive(self) -> None:
        if self._destroyed:
            raise PlayerDestroyedError(self.guild_id)

    def __repr__(self) -> str:
        return (
            f"Player(guild_id={self.guild_id!r}, playing={self.playing}, "
            f"paused={self.paused}, loop={self.loop.value!r}, size={self.queue.size})"
        )
