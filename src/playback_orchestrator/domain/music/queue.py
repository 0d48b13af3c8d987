"""Per-guild track queue: pending tracks, the current slot and bounded history."""

from __future__ import annotations

import logging
import random
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING

from playback_orchestrator.domain.music.entities import QueueSnapshot, Track
from playback_orchestrator.domain.music.events import DebugMessage, PlaybackEventBase, QueueUpdated
from playback_orchestrator.domain.music.persistence import QueuePersistence
from playback_orchestrator.domain.shared.constants import PlaybackConstants
from playback_orchestrator.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from playback_orchestrator.domain.music.repository import QueueStorage

logger = logging.getLogger(__name__)

Emitter = Callable[[PlaybackEventBase], None]


class Queue:
    """Ordered pending tracks, the ``current`` slot and newest-first ``previous`` history.

    Structural mutators emit a ``QueueUpdated`` event. Only ``shuffle``
    checkpoints to storage as part of the call.
    """

    def __init__(
        self,
        guild_id: str,
        storage: QueueStorage,
        *,
        max_previous_tracks: int = PlaybackConstants.DEFAULT_MAX_PREVIOUS_TRACKS,
        emit: Emitter | None = None,
    ) -> None:
        self.guild_id = guild_id
        self.tracks: list[Track] = []
        self.previous: list[Track] = []
        self.current: Track | None = None
        self.max_previous_tracks = max_previous_tracks
        self._emit = emit
        self.persistence = QueuePersistence(self, storage)

    @property
    def size(self) -> int:
        return len(self.tracks)

    @property
    def total_size(self) -> int:
        """Pending tracks plus the current one."""
        return self.size + (1 if self.current is not None else 0)

    def is_empty(self) -> bool:
        return self.size == 0

    def get_previous(self, remove: bool = False) -> Track | None:
        """Most recent history entry, optionally popping it."""
        if not self.previous:
            return None
        if remove:
            return self.previous.pop(0)
        return self.previous[0]

    def add(self, track: Track | Iterable[Track], position: int | None = None) -> Queue:
        """Insert at ``position`` when it is a valid index, otherwise append."""
        new_tracks = _as_list(track)

        if isinstance(position, int) and not isinstance(position, bool) and 0 <= position < self.size:
            self.tracks[position:position] = new_tracks
        else:
            self.tracks.extend(new_tracks)

        self._notify(LogTemplates.QUEUE_ADDED, len(new_tracks))
        return self

    def unshift(self, *tracks: Track) -> Queue:
        self.tracks[0:0] = tracks
        self._notify(LogTemplates.QUEUE_UNSHIFTED, len(tracks))
        return self

    def shift(self) -> Track | None:
        """Remove and return the head of ``tracks``; ``current`` is left alone."""
        if not self.tracks:
            return None
        return self.tracks.pop(0)

    def move_track(self, track: Track, to: int) -> Queue:
        """Move ``track`` to 1-based position ``to``. Unknown tracks are ignored."""
        index = self._index_of(track)
        if index is None:
            return self

        del self.tracks[index]
        target = to - 1
        if 0 <= target < self.size:
            self.tracks.insert(target, track)
        else:
            self.tracks.append(track)

        self._notify(LogTemplates.QUEUE_MOVED, track.title, to)
        return self

    def splice_track(
        self,
        start: int,
        delete_count: int,
        tracks: Track | Iterable[Track] | None = None,
    ) -> Queue:
        """Remove ``delete_count`` tracks at ``start`` and insert ``tracks`` there.

        On an empty queue the replacement tracks are appended first and only
        the removal is applied, so one call can seed and trim.
        """
        replacement = _as_list(tracks) if tracks is not None else []

        if not self.tracks and replacement:
            self.tracks.extend(replacement)
            replacement = []

        if start < 0:
            start = max(self.size + start, 0)
        end = start + max(delete_count, 0)

        self.tracks[start:end] = replacement
        self._notify(LogTemplates.QUEUE_SPLICED, delete_count)
        return self

    async def shuffle(self) -> Queue:
        """Fisher-Yates over pending tracks, then checkpoint."""
        if self.size <= 1:
            return self

        if self.size == 2:
            self.tracks[0], self.tracks[1] = self.tracks[1], self.tracks[0]
        else:
            for i in range(self.size - 1, 0, -1):
                j = random.randint(0, i)
                self.tracks[i], self.tracks[j] = self.tracks[j], self.tracks[i]

        self._notify(LogTemplates.QUEUE_SHUFFLED)
        await self.persistence.save()
        return self

    def clear(self) -> Queue:
        """Empty pending tracks, history and the current slot."""
        self.tracks = []
        self.previous = []
        self.current = None
        self._notify(LogTemplates.QUEUE_CLEARED)
        return self

    def archive(self, track: Track) -> bool:
        """Push ``track`` onto history unless it already heads it; returns whether it was added."""
        if self.previous and self.previous[0].is_same(track):
            return False

        self.previous.insert(0, track)
        self.trim_previous()
        return True

    def trim_previous(self) -> None:
        if len(self.previous) > self.max_previous_tracks:
            del self.previous[self.max_previous_tracks :]

    def snapshot(self) -> QueueSnapshot:
        self.trim_previous()
        return QueueSnapshot(
            tracks=list(self.tracks),
            previous=list(self.previous),
            current=self.current,
        )

    def _index_of(self, track: Track) -> int | None:
        for index, queued in enumerate(self.tracks):
            if queued is track:
                return index
        return None

    def _notify(self, template: str, *args: object) -> None:
        logger.debug(template, *args)
        if self._emit is None:
            return

        self._emit(DebugMessage(message=template % args, guild_id=self.guild_id))
        self._emit(QueueUpdated(guild_id=self.guild_id, size=self.size, total_size=self.total_size))


def _as_list(track: Track | Iterable[Track]) -> list[Track]:
    if isinstance(track, Track):
        return [track]
    return list(track)
