"""SQLite-backed queue snapshot store."""

from __future__ import annotations

from pydantic import ValidationError

from playback_orchestrator.domain.music.entities import QueueSnapshot
from playback_orchestrator.domain.music.repository import QueueStorage
from playback_orchestrator.domain.shared.exceptions import StorageError
from playback_orchestrator.domain.shared.messages import ErrorMessages
from playback_orchestrator.infrastructure.persistence.database import Database


class SQLiteQueueStorage(QueueStorage):
    """Stores each guild's snapshot as one JSON row.

    The schema is created lazily on first use. Requesters that are not JSON
    values are written as their string form.
    """

    def __init__(self, database: Database) -> None:
        self._db = database

    @property
    def database(self) -> Database:
        return self._db

    async def get(self, key: str) -> QueueSnapshot | None:
        await self._db.initialize()
        row = await self._db.fetch_one(
            "SELECT payload FROM queue_snapshots WHERE guild_id = ?",
            (key,),
        )
        if row is None:
            return None

        try:
            return QueueSnapshot.model_validate_json(row["payload"])
        except ValidationError as e:
            raise StorageError(ErrorMessages.UNREADABLE_SNAPSHOT.format(guild_id=key), key=key) from e

    async def set(self, key: str, value: QueueSnapshot) -> None:
        await self._db.initialize()
        await self._db.execute(
            """
            INSERT INTO queue_snapshots (guild_id, payload, updated_at)
            VALUES (?, ?, strftime('%Y-%m-%dT%H:%M:%f','now'))
            ON CONFLICT(guild_id) DO UPDATE SET
                payload = excluded.payload,
                updated_at = excluded.updated_at
            """,
            (key, value.model_dump_json()),
        )

    async def delete(self, key: str) -> bool:
        await self._db.initialize()
        deleted = await self._db.execute("DELETE FROM queue_snapshots WHERE guild_id = ?", (key,))
        return deleted > 0

    async def has(self, key: str) -> bool:
        await self._db.initialize()
        row = await self._db.fetch_one("SELECT 1 AS found FROM queue_snapshots WHERE guild_id = ?", (key,))
        return row is not None

    async def clear(self) -> None:
        await self._db.initialize()
        await self._db.execute("DELETE FROM queue_snapshots")
