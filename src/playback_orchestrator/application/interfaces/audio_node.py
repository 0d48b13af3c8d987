"""Port interface for the external audio node client and its lifecycle payloads."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel

from playback_orchestrator.domain.music.value_objects import TrackEndReason
from playback_orchestrator.domain.shared.types import GuildIdStr, NonNegativeInt

# ── Node lifecycle payloads ─────────────────────────────────────────


class NodePayload(BaseModel):
    """Base for payloads the node client delivers; accepts the node's camelCase keys."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    guild_id: GuildIdStr


class TrackStartPayload(NodePayload):
    type: Literal["TrackStartEvent"] = "TrackStartEvent"
    track: dict[str, Any] | None = None


class TrackEndPayload(NodePayload):
    type: Literal["TrackEndEvent"] = "TrackEndEvent"
    track: dict[str, Any] | None = None
    reason: TrackEndReason = TrackEndReason.FINISHED


class TrackStuckPayload(NodePayload):
    type: Literal["TrackStuckEvent"] = "TrackStuckEvent"
    track: dict[str, Any] | None = None
    threshold_ms: NonNegativeInt = 0


class NodeException(BaseModel):
    message: str | None = None
    severity: str = "common"
    cause: str = ""


class TrackExceptionPayload(NodePayload):
    type: Literal["TrackExceptionEvent"] = "TrackExceptionEvent"
    track: dict[str, Any] | None = None
    exception: NodeException = Field(default_factory=NodeException)


class WebSocketClosedPayload(NodePayload):
    type: Literal["WebSocketClosedEvent"] = "WebSocketClosedEvent"
    code: int
    reason: str = ""
    by_remote: bool = False


class NodePlayerState(BaseModel):
    time: NonNegativeInt = 0
    position: NonNegativeInt = 0
    connected: bool = False
    ping: int = -1


class PlayerUpdatePayload(NodePayload):
    type: Literal["PlayerUpdate"] = "PlayerUpdate"
    state: NodePlayerState = Field(default_factory=NodePlayerState)


class PlayerResumedPayload(NodePayload):
    type: Literal["PlayerResumed"] = "PlayerResumed"


NodeEvent = Annotated[
    TrackStartPayload
    | TrackEndPayload
    | TrackStuckPayload
    | TrackExceptionPayload
    | WebSocketClosedPayload
    | PlayerUpdatePayload
    | PlayerResumedPayload,
    Field(discriminator="type"),
]

_node_event_adapter: TypeAdapter[NodeEvent] = TypeAdapter(NodeEvent)


def parse_node_event(data: dict[str, Any]) -> NodeEvent:
    """Parse a raw node message (``op: event`` or ``op: playerUpdate``) into a payload model."""
    if data.get("op") == "playerUpdate" and "type" not in data:
        data = {**data, "type": "PlayerUpdate"}
    return _node_event_adapter.validate_python(data)


NodeEventHandler = Callable[[NodeEvent], Awaitable[None]]


# ── Node client ports ───────────────────────────────────────────────


class AudioNodeSession(ABC):
    """One guild's player session on the audio node."""

    @property
    @abstractmethod
    def position(self) -> int:
        """Current playback position in milliseconds."""
        ...

    @abstractmethod
    def set_event_handler(self, handler: NodeEventHandler) -> None:
        """Register the coroutine that receives this session's lifecycle payloads, in order."""
        ...

    @abstractmethod
    async def play_track(
        self,
        encoded: str,
        *,
        paused: bool,
        volume: int,
        no_replace: bool,
    ) -> None:
        """Play an encoded track; ``no_replace`` leaves an in-flight track alone."""
        ...

    @abstractmethod
    async def stop_track(self) -> None:
        ...

    @abstractmethod
    async def seek_to(self, position: int) -> None:
        ...

    @abstractmethod
    async def set_paused(self, paused: bool) -> None:
        ...

    @abstractmethod
    async def set_global_volume(self, volume: int) -> None:
        ...

    @abstractmethod
    async def destroy(self) -> None:
        """Release the node-side player."""
        ...


class AudioNodeConnector(ABC):
    """Creates node sessions; owns voice handshakes and node selection."""

    @abstractmethod
    async def join_voice_channel(
        self,
        *,
        guild_id: str,
        channel_id: str,
        shard_id: int = 0,
        deaf: bool = False,
        mute: bool = False,
    ) -> AudioNodeSession:
        ...

    @abstractmethod
    async def leave_voice_channel(self, guild_id: str) -> None:
        ...
