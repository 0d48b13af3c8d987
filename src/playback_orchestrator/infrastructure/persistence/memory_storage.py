"""Default in-process queue snapshot store."""

from __future__ import annotations

from playback_orchestrator.domain.music.entities import QueueSnapshot
from playback_orchestrator.domain.music.repository import QueueStorage


class InMemoryQueueStorage(QueueStorage):
    """Dictionary-backed store. Snapshots are copied in and out so later
    queue mutations never leak into stored state."""

    def __init__(self) -> None:
        self._data: dict[str, QueueSnapshot] = {}

    async def get(self, key: str) -> QueueSnapshot | None:
        snapshot = self._data.get(key)
        if snapshot is None:
            return None
        return _copy(snapshot)

    async def set(self, key: str, value: QueueSnapshot) -> None:
        self._data[key] = _copy(value)

    async def delete(self, key: str) -> bool:
        return self._data.pop(key, None) is not None

    async def has(self, key: str) -> bool:
        return key in self._data

    async def clear(self) -> None:
        self._data.clear()

    def __len__(self) -> int:
        return len(self._data)


def _copy(snapshot: QueueSnapshot) -> QueueSnapshot:
    # Tracks are frozen, so copying the lists is enough.
    return QueueSnapshot(
        tracks=list(snapshot.tracks),
        previous=list(snapshot.previous),
        current=snapshot.current,
    )
