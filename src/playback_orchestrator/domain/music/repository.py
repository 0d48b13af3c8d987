"""
Queue Storage Interface

Abstract contract for the key/value store that checkpoints queue snapshots.
Implementations live in the infrastructure layer.
"""

from abc import ABC, abstractmethod

from playback_orchestrator.domain.music.entities import QueueSnapshot


class QueueStorage(ABC):
    """Abstract store for queue snapshots keyed by guild id.

    Implementations may use in-memory storage, SQLite, Redis, etc.
    """

    @abstractmethod
    async def get(self, key: str) -> QueueSnapshot | None:
        """Retrieve the snapshot stored under a guild id.

        Args:
            key: The guild id.

        Returns:
            The snapshot if present, None otherwise.
        """
        ...

    @abstractmethod
    async def set(self, key: str, value: QueueSnapshot) -> None:
        """Store a snapshot, replacing any previous one.

        Args:
            key: The guild id.
            value: The snapshot to store.
        """
        ...

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Delete the snapshot for a guild id.

        Returns:
            True if a snapshot was deleted, False if none existed.
        """
        ...

    @abstractmethod
    async def has(self, key: str) -> bool:
        """Check whether a snapshot exists for a guild id."""
        ...

    @abstractmethod
    async def clear(self) -> None:
        """Remove every stored snapshot."""
        ...
