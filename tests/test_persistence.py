"""
Tests for queue persistence

Tests for:
- QueuePersistence: save, sync (override / append, sync_current both ways), destroy
- InMemoryQueueStorage and SQLiteQueueStorage behind the QueueStorage contract
"""

import pytest
import pytest_asyncio

from playback_orchestrator.domain.music.entities import QueueSnapshot
from playback_orchestrator.domain.music.queue import Queue
from playback_orchestrator.domain.shared.exceptions import StorageError
from playback_orchestrator.infrastructure.persistence.database import Database
from playback_orchestrator.infrastructure.persistence.sqlite_storage import SQLiteQueueStorage


@pytest.fixture
def queue(memory_storage):
    return Queue("guild-1", memory_storage, max_previous_tracks=3)


class TestQueuePersistenceSave:
    @pytest.mark.asyncio
    async def test_save_writes_snapshot(self, queue, memory_storage, track_factory):
        """Should store tracks, previous and current under the guild id."""
        a, b, c = track_factory("a"), track_factory("b"), track_factory("c")
        queue.add([a, b])
        queue.current = c

        await queue.persistence.save()

        stored = await memory_storage.get("guild-1")
        assert stored.tracks == [a, b]
        assert stored.current == c
        assert stored.previous == []

    @pytest.mark.asyncio
    async def test_save_applies_history_bound(self, queue, memory_storage, track_factory):
        """Should never store more history than the configured bound."""
        queue.previous = [track_factory(str(i)) for i in range(10)]

        await queue.persistence.save()

        stored = await memory_storage.get("guild-1")
        assert len(stored.previous) == 3
        assert len(queue.previous) == 3

    @pytest.mark.asyncio
    async def test_stored_copy_is_detached(self, queue, memory_storage, track_factory):
        """Should not leak later queue mutations into stored state."""
        queue.add(track_factory("a"))
        await queue.persistence.save()

        queue.add(track_factory("b"))

        stored = await memory_storage.get("guild-1")
        assert len(stored.tracks) == 1


class TestQueuePersistenceSync:
    @pytest.mark.asyncio
    async def test_sync_without_snapshot_raises(self, queue):
        """Should raise StorageError when nothing is stored."""
        with pytest.raises(StorageError, match="No data found to sync for guild id: guild-1"):
            await queue.persistence.sync()

    @pytest.mark.asyncio
    async def test_sync_override_replaces(self, queue, memory_storage, track_factory):
        """Should replace tracks and previous wholesale when override is set."""
        stored = QueueSnapshot(tracks=[track_factory("s")], previous=[track_factory("p")])
        await memory_storage.set("guild-1", stored)
        queue.add(track_factory("local"))

        await queue.persistence.sync(override=True)

        assert [t.identifier for t in queue.tracks] == ["id-s"]
        assert [t.identifier for t in queue.previous] == ["id-p"]

    @pytest.mark.asyncio
    async def test_sync_append(self, queue, memory_storage, track_factory):
        """Should append stored tracks after local ones without override."""
        await memory_storage.set("guild-1", QueueSnapshot(tracks=[track_factory("s")]))
        queue.add(track_factory("local"))

        await queue.persistence.sync(override=False)

        assert [t.identifier for t in queue.tracks] == ["id-local", "id-s"]

    @pytest.mark.asyncio
    async def test_sync_current_restores_when_empty(self, queue, memory_storage, track_factory):
        """Should restore current when requested and the local slot is empty."""
        await memory_storage.set("guild-1", QueueSnapshot(current=track_factory("c")))

        await queue.persistence.sync(sync_current=True)

        assert queue.current.identifier == "id-c"

    @pytest.mark.asyncio
    async def test_sync_current_keeps_local(self, queue, memory_storage, track_factory):
        """Should not overwrite a local current track."""
        await memory_storage.set("guild-1", QueueSnapshot(current=track_factory("c")))
        local = track_factory("local")
        queue.current = local

        await queue.persistence.sync(sync_current=True)

        assert queue.current is local

    @pytest.mark.asyncio
    async def test_sync_current_disabled_leaves_slot(self, queue, memory_storage, track_factory):
        """Should leave current alone when sync_current is False."""
        await memory_storage.set("guild-1", QueueSnapshot(current=track_factory("c")))

        await queue.persistence.sync(sync_current=False)

        assert queue.current is None

    @pytest.mark.asyncio
    async def test_sync_resaves_with_bound(self, queue, memory_storage, track_factory):
        """Should re-save after merging, normalizing history to the bound."""
        previous = [track_factory(str(i)) for i in range(6)]
        await memory_storage.set("guild-1", QueueSnapshot(previous=previous))

        await queue.persistence.sync()

        stored = await memory_storage.get("guild-1")
        assert len(queue.previous) == 3
        assert len(stored.previous) == 3


class TestQueuePersistenceDestroy:
    @pytest.mark.asyncio
    async def test_destroy(self, queue, memory_storage):
        """Should delete the snapshot and report whether one existed."""
        await queue.persistence.save()

        assert await queue.persistence.destroy() is True
        assert await memory_storage.has("guild-1") is False
        assert await queue.persistence.destroy() is False


# =============================================================================
# Storage backends
# =============================================================================


@pytest_asyncio.fixture(params=["memory", "sqlite"])
async def storage(request, memory_storage):
    if request.param == "memory":
        yield memory_storage
        return

    db = Database(":memory:")
    yield SQLiteQueueStorage(db)
    await db.close()


class TestQueueStorageContract:
    @pytest.mark.asyncio
    async def test_get_missing(self, storage):
        """Should return None for unknown keys."""
        assert await storage.get("missing") is None
        assert await storage.has("missing") is False

    @pytest.mark.asyncio
    async def test_set_get_has(self, storage, track_factory):
        """Should return an equal snapshot for a stored key."""
        snapshot = QueueSnapshot(
            tracks=[track_factory("a")],
            previous=[track_factory("b")],
            current=track_factory("c"),
        )

        await storage.set("g", snapshot)

        assert await storage.has("g") is True
        assert await storage.get("g") == snapshot

    @pytest.mark.asyncio
    async def test_set_overwrites(self, storage, track_factory):
        """Should replace the previous snapshot for the same key."""
        await storage.set("g", QueueSnapshot(tracks=[track_factory("a")]))
        await storage.set("g", QueueSnapshot(tracks=[track_factory("b")]))

        stored = await storage.get("g")
        assert [t.identifier for t in stored.tracks] == ["id-b"]

    @pytest.mark.asyncio
    async def test_delete(self, storage):
        """Should report whether a key was deleted."""
        await storage.set("g", QueueSnapshot())

        assert await storage.delete("g") is True
        assert await storage.delete("g") is False

    @pytest.mark.asyncio
    async def test_clear(self, storage):
        """Should remove every key."""
        await storage.set("g1", QueueSnapshot())
        await storage.set("g2", QueueSnapshot())

        await storage.clear()

        assert await storage.has("g1") is False
        assert await storage.has("g2") is False


class TestSQLiteQueueStorage:
    @pytest.mark.asyncio
    async def test_requester_stored_as_string(self, sqlite_storage, track_factory):
        """Should persist non-JSON requesters as their string form."""

        class Member:
            def __str__(self):
                return "member#1"

        await sqlite_storage.set("g", QueueSnapshot(current=track_factory("a", requester=Member())))

        stored = await sqlite_storage.get("g")
        assert stored.current.requester == "member#1"

    @pytest.mark.asyncio
    async def test_unreadable_payload_raises(self, sqlite_storage, in_memory_database):
        """Should raise StorageError for a corrupted row."""
        await in_memory_database.execute(
            "INSERT INTO queue_snapshots (guild_id, payload) VALUES (?, ?)",
            ("g", "not json"),
        )

        with pytest.raises(StorageError):
            await sqlite_storage.get("g")

    @pytest.mark.asyncio
    async def test_file_database(self, tmp_path, track_factory):
        """Should persist across Database instances for a file URL."""
        url = f"sqlite:///{tmp_path / 'queues.db'}"
        first = SQLiteQueueStorage(Database(url))
        await first.set("g", QueueSnapshot(tracks=[track_factory("a")]))

        second = SQLiteQueueStorage(Database(url))
        stored = await second.get("g")

        assert [t.identifier for t in stored.tracks] == ["id-a"]
