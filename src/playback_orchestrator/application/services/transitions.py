"""Playback transition engine: decides what a player does after each node lifecycle event."""

from __future__ import annotations

import inspect
import logging
from typing import TYPE_CHECKING

from playback_orchestrator.application.interfaces.audio_node import (
    NodeEvent,
    PlayerResumedPayload,
    PlayerUpdatePayload,
    TrackEndPayload,
    TrackExceptionPayload,
    TrackStartPayload,
    TrackStuckPayload,
    WebSocketClosedPayload,
)
from playback_orchestrator.domain.music.entities import Track
from playback_orchestrator.domain.music.events import (
    PlayerResumed,
    PlayerUpdated,
    QueueEnded,
    SocketClosed,
    TrackEnded,
    TrackErrored,
    TrackStarted,
    TrackStuck,
)
from playback_orchestrator.domain.music.value_objects import LoopMode, TrackEndReason, TransitionState
from playback_orchestrator.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from playback_orchestrator.application.services.player import Player

logger = logging.getLogger(__name__)

TerminalPayload = TrackEndPayload | TrackStuckPayload | TrackExceptionPayload


class PlaybackTransitionEngine:
    """State machine bound to one player.

    The owning player serializes calls to :meth:`handle`, so every branch
    sees ``current`` and the queue size as they were when the event arrived.
    Reads of ``current`` are null-tolerant: a missing track leads to the
    finalize path, never to an exception.
    """

    def __init__(self, player: Player) -> None:
        self._player = player
        self.state = TransitionState.IDLE

    async def handle(self, event: NodeEvent) -> None:
        if isinstance(event, TrackStartPayload):
            await self._on_track_start()
        elif isinstance(event, TrackEndPayload):
            await self._on_track_end(event)
        elif isinstance(event, (TrackStuckPayload, TrackExceptionPayload)):
            await self._on_track_failure(event)
        elif isinstance(event, WebSocketClosedPayload):
            self._player.emit(
                SocketClosed(
                    guild_id=self._player.guild_id,
                    code=event.code,
                    reason=event.reason,
                    by_remote=event.by_remote,
                )
            )
        elif isinstance(event, PlayerUpdatePayload):
            self._player.emit(
                PlayerUpdated(
                    guild_id=self._player.guild_id,
                    position=event.state.position,
                    connected=event.state.connected,
                    ping=event.state.ping,
                )
            )
        elif isinstance(event, PlayerResumedPayload):
            self._player.emit(PlayerResumed(guild_id=self._player.guild_id))

    # ── Lifecycle branches ──────────────────────────────────────────

    async def _on_track_start(self) -> None:
        player = self._player
        player.playing = True
        player.paused = False

        current = player.queue.current
        if current is not None:
            await player.queue.persistence.save()

        player.debug(LogTemplates.TRACK_STARTED, _title(current))
        player.emit(TrackStarted(guild_id=player.guild_id, track=current))

    async def _on_track_end(self, payload: TrackEndPayload) -> None:
        player = self._player
        queue = player.queue
        current = queue.current
        reason = payload.reason

        # Another play command superseded this track; the queue already moved on.
        if reason is TrackEndReason.REPLACED:
            player.debug(LogTemplates.TRACK_REPLACED, _title(current))
            player.emit(TrackEnded(guild_id=player.guild_id, track=current, reason=reason))
            return

        if reason.is_failure:
            player.playing = False
            await self.advance_queue()

            if queue.size == 0 or queue.current is None:
                await self.finalize_empty(current, payload)
                return

            player.debug(LogTemplates.TRACK_ENDED, _title(current))
            player.emit(TrackEnded(guild_id=player.guild_id, track=current, reason=reason))
            queue.current = None
            await player._play()
            return

        if queue.size == 0 and player.loop is LoopMode.OFF:
            await self.finalize_empty(current, payload)
            return

        if current is not None:
            await queue.persistence.save()

        await self.advance_queue()
        queue.current = None

        if queue.size == 0:
            player.playing = False
            await self.finalize_empty(current, payload)
            return

        player.emit(TrackEnded(guild_id=player.guild_id, track=current, reason=reason))
        player.debug(LogTemplates.TRACK_ENDED, _title(current))
        await player._play()

    async def _on_track_failure(self, payload: TrackStuckPayload | TrackExceptionPayload) -> None:
        player = self._player
        queue = player.queue

        if queue.size == 0 and player.loop is LoopMode.OFF:
            await self.finalize_empty(queue.current, payload)
            return

        await self.advance_queue()

        if queue.current is None:
            await self.finalize_empty(queue.current, payload)
            return

        if isinstance(payload, TrackStuckPayload):
            player.emit(
                TrackStuck(
                    guild_id=player.guild_id,
                    track=queue.current,
                    threshold_ms=payload.threshold_ms,
                )
            )
        else:
            player.emit(
                TrackErrored(
                    guild_id=player.guild_id,
                    track=queue.current,
                    message=payload.exception.message,
                    severity=payload.exception.severity,
                )
            )

    # ── Sub-procedures ──────────────────────────────────────────────

    async def advance_queue(self) -> None:
        """Archive ``current``, apply the loop mode and pull the next track if the slot is empty."""
        player = self._player
        queue = player.queue
        current = queue.current

        if current is not None and queue.archive(current):
            await queue.persistence.save()
            player.debug(LogTemplates.TRACK_ARCHIVED, current.title)

        if current is not None:
            if player.loop is LoopMode.TRACK:
                queue.unshift(current)
            elif player.loop is LoopMode.QUEUE:
                queue.add(current)

        if queue.current is None:
            queue.current = queue.shift()

        await queue.persistence.save()

    async def finalize_empty(self, last_track: Track | None, payload: TerminalPayload) -> None:
        """Nothing is left to play: try autoplay once, otherwise declare the queue ended."""
        player = self._player
        queue = player.queue

        player.playing = False
        player.paused = False
        queue.current = None

        autoplay = player.manager.autoplay
        if autoplay is not None:
            if self.state is TransitionState.AWAITING_AUTOPLAY:
                logger.debug(LogTemplates.AUTOPLAY_SKIPPED_REENTRY, player.guild_id)
            else:
                self.state = TransitionState.AWAITING_AUTOPLAY
                try:
                    # The hook may call back into the player; events arriving
                    # meanwhile see AWAITING_AUTOPLAY and skip autoplay.
                    async with player.released():
                        result = autoplay(player, last_track)
                        if inspect.isawaitable(result):
                            await result
                finally:
                    self.state = TransitionState.IDLE

                if queue.size > 0:
                    await self.advance_queue()

                if queue.current is not None:
                    if isinstance(payload, TrackEndPayload):
                        player.emit(
                            TrackEnded(guild_id=player.guild_id, track=last_track, reason=payload.reason)
                        )
                    player.debug(LogTemplates.AUTOPLAY_QUEUED)
                    await player._play(no_replace=True, pause=False)
                    return

        if self._should_checkpoint(payload):
            await queue.persistence.save()

        player.debug(LogTemplates.QUEUE_ENDED)
        player.emit(QueueEnded(guild_id=player.guild_id, last_track=last_track))

    def _should_checkpoint(self, payload: TerminalPayload) -> bool:
        if isinstance(payload, TrackEndPayload) and payload.reason is TrackEndReason.STOPPED:
            return self._player.manager.settings.persist_on_stop
        return True


def _title(track: Track | None) -> str | None:
    return track.title if track is not None else None
