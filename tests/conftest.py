import asyncio

import pytest
import pytest_asyncio

from playback_orchestrator.application.interfaces.audio_node import (
    AudioNodeConnector,
    AudioNodeSession,
)
from playback_orchestrator.domain.music.entities import Track
from playback_orchestrator.domain.music.value_objects import SourceName

# ============================================================================
# Node Client Fakes
# ============================================================================


class FakeNodeSession(AudioNodeSession):
    """Records every command instead of talking to an audio node."""

    def __init__(self) -> None:
        self.guild_id = None
        self.handler = None
        self.played: list[dict] = []
        self.stop_calls = 0
        self.seeks: list[int] = []
        self.paused_calls: list[bool] = []
        self.volumes: list[int] = []
        self.destroyed = False
        self._position = 0

    @property
    def position(self) -> int:
        return self._position

    def set_event_handler(self, handler) -> None:
        self.handler = handler

    async def play_track(self, encoded, *, paused, volume, no_replace) -> None:
        # Yield like a network round trip so concurrent callers interleave.
        await asyncio.sleep(0)
        self.played.append(
            {"encoded": encoded, "paused": paused, "volume": volume, "no_replace": no_replace}
        )

    async def stop_track(self) -> None:
        self.stop_calls += 1

    async def seek_to(self, position) -> None:
        self.seeks.append(position)

    async def set_paused(self, paused) -> None:
        self.paused_calls.append(paused)

    async def set_global_volume(self, volume) -> None:
        self.volumes.append(volume)

    async def destroy(self) -> None:
        self.destroyed = True


class InlineNodeSession(FakeNodeSession):
    """Delivers the node's follow-up events from inside the command call.

    Replacing an in-flight track reports ``ended{replaced}`` for it and
    stopping reports ``ended{stopped}``, the way some node clients do.
    """

    def __init__(self) -> None:
        super().__init__()
        self.active = None

    async def play_track(self, encoded, *, paused, volume, no_replace) -> None:
        await super().play_track(encoded, paused=paused, volume=volume, no_replace=no_replace)
        if self.active is not None and no_replace:
            return
        replaced, self.active = self.active, encoded
        if replaced is not None:
            await self.handler({"type": "TrackEndEvent", "guildId": self.guild_id, "reason": "replaced"})
        await self.handler({"type": "TrackStartEvent", "guildId": self.guild_id})

    async def stop_track(self) -> None:
        await super().stop_track()
        if self.active is not None:
            self.active = None
            await self.handler({"type": "TrackEndEvent", "guildId": self.guild_id, "reason": "stopped"})


class FakeConnector(AudioNodeConnector):
    def __init__(self, session_cls=FakeNodeSession) -> None:
        self.session_cls = session_cls
        self.sessions: dict[str, FakeNodeSession] = {}
        self.join_calls: list[dict] = []
        self.left: list[str] = []
        # When set, leave_voice_channel blocks until the event is set.
        self.leave_gate: asyncio.Event | None = None

    async def join_voice_channel(self, *, guild_id, channel_id, shard_id=0, deaf=False, mute=False):
        self.join_calls.append(
            {
                "guild_id": guild_id,
                "channel_id": channel_id,
                "shard_id": shard_id,
                "deaf": deaf,
                "mute": mute,
            }
        )
        session = self.session_cls()
        session.guild_id = guild_id
        self.sessions[guild_id] = session
        return session

    async def leave_voice_channel(self, guild_id) -> None:
        if self.leave_gate is not None:
            await self.leave_gate.wait()
        self.left.append(guild_id)


@pytest.fixture
def connector():
    return FakeConnector()


@pytest.fixture
def sent_payloads():
    """Collects ``(guild_id, payload)`` pairs passed to send_payload."""
    return []


@pytest.fixture
def send_payload(sent_payloads):
    def _send(guild_id, payload):
        sent_payloads.append((guild_id, payload))

    return _send


# ============================================================================
# Domain Fixtures
# ============================================================================


def make_track(name: str = "a", **overrides) -> Track:
    """Build a track whose identifier and title derive from ``name``."""
    fields = {
        "encoded": f"enc-{name}",
        "identifier": f"id-{name}",
        "title": f"Track {name.upper()}",
        "uri": f"https://www.youtube.com/watch?v=id-{name}",
        "source_name": SourceName.YOUTUBE,
        "length": 180_000,
        "is_seekable": True,
    }
    fields.update(overrides)
    return Track(**fields)


@pytest.fixture
def track_factory():
    return make_track


@pytest.fixture
def sample_track():
    """Create a sample track for testing."""
    return make_track("sample", requester="user-1")


# ============================================================================
# Storage Fixtures
# ============================================================================


@pytest.fixture
def memory_storage():
    from playback_orchestrator.infrastructure.persistence.memory_storage import InMemoryQueueStorage

    return InMemoryQueueStorage()


@pytest_asyncio.fixture
async def in_memory_database():
    """Create an in-memory SQLite database for testing."""
    from playback_orchestrator.infrastructure.persistence.database import Database

    db = Database(":memory:")
    await db.initialize()
    yield db
    await db.close()


@pytest_asyncio.fixture
async def sqlite_storage(in_memory_database):
    from playback_orchestrator.infrastructure.persistence.sqlite_storage import SQLiteQueueStorage

    return SQLiteQueueStorage(in_memory_database)


# ============================================================================
# Manager / Player Fixtures
# ============================================================================


@pytest.fixture
def manager(connector, send_payload, memory_storage):
    from playback_orchestrator.application.services.manager import Manager

    return Manager(connector, send_payload=send_payload, storage=memory_storage)


@pytest_asyncio.fixture
async def player(manager):
    return await manager.create_player(guild_id="111", voice_id="222", text_id="333")


@pytest.fixture
def session(player, connector):
    """The fake node session backing the ``player`` fixture."""
    return connector.sessions[player.guild_id]


@pytest.fixture
def inline_connector():
    """Connector whose sessions deliver follow-up events inline."""
    return FakeConnector(session_cls=InlineNodeSession)


@pytest_asyncio.fixture
async def inline_player(inline_connector, send_payload, memory_storage):
    from playback_orchestrator.application.services.manager import Manager

    manager = Manager(inline_connector, send_payload=send_payload, storage=memory_storage)
    return await manager.create_player(guild_id="111", voice_id="222")
