"""Checkpointing of queue state to a QueueStorage backend."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from playback_orchestrator.domain.shared.exceptions import StorageError
from playback_orchestrator.domain.shared.messages import ErrorMessages, LogTemplates

if TYPE_CHECKING:
    from playback_orchestrator.domain.music.queue import Queue
    from playback_orchestrator.domain.music.repository import QueueStorage

logger = logging.getLogger(__name__)


class QueuePersistence:
    """Saves and restores one guild's queue.

    Best-effort crash recovery: failures from the storage backend propagate
    to the caller and are never retried here.
    """

    def __init__(self, queue: Queue, storage: QueueStorage) -> None:
        self._queue = queue
        self._storage = storage

    @property
    def storage(self) -> QueueStorage:
        return self._storage

    async def save(self) -> None:
        """Write ``{tracks, previous, current}`` with the history bound applied."""
        snapshot = self._queue.snapshot()
        await self._storage.set(self._queue.guild_id, snapshot)
        logger.debug(LogTemplates.QUEUE_SAVED, self._queue.guild_id)

    async def destroy(self) -> bool:
        deleted = await self._storage.delete(self._queue.guild_id)
        if deleted:
            logger.debug(LogTemplates.QUEUE_SNAPSHOT_DELETED, self._queue.guild_id)
        return deleted

    async def sync(self, override: bool = True, sync_current: bool = False) -> None:
        """Merge the stored snapshot back into the live queue.

        With ``override`` the stored tracks and history replace the local
        ones, otherwise they are appended. ``current`` is restored only when
        ``sync_current`` is set and the local slot is empty.

        Raises:
            StorageError: If nothing is stored for this guild.
        """
        guild_id = self._queue.guild_id
        data = await self._storage.get(guild_id)
        if data is None:
            raise StorageError(ErrorMessages.NO_SNAPSHOT.format(guild_id=guild_id), key=guild_id)

        queue = self._queue
        if sync_current and queue.current is None:
            queue.current = data.current

        if data.tracks:
            if override:
                queue.tracks[:] = data.tracks
            else:
                queue.tracks.extend(data.tracks)

        if data.previous:
            if override:
                queue.previous[:] = data.previous
            else:
                queue.previous.extend(data.previous)

        logger.debug(LogTemplates.QUEUE_SYNCED, guild_id, override, sync_current)
        await self.save()
