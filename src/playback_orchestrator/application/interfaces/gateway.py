"""Voice-state gateway payload and the callable used to send it."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any

from pydantic import BaseModel, ConfigDict

from playback_orchestrator.domain.shared.constants import GatewayConstants


class VoiceStateData(BaseModel):
    model_config = ConfigDict(frozen=True)

    guild_id: str
    channel_id: str | None
    self_mute: bool = False
    self_deaf: bool = False


class VoiceStatePayload(BaseModel):
    """Gateway opcode 4 payload used to join or leave a voice channel."""

    model_config = ConfigDict(frozen=True)

    op: int = GatewayConstants.VOICE_STATE_UPDATE_OP
    d: VoiceStateData

    @classmethod
    def join(cls, guild_id: str, channel_id: str | None, *, self_mute: bool, self_deaf: bool) -> VoiceStatePayload:
        return cls(
            d=VoiceStateData(
                guild_id=guild_id,
                channel_id=channel_id,
                self_mute=self_mute,
                self_deaf=self_deaf,
            )
        )

    @classmethod
    def leave(cls, guild_id: str) -> VoiceStatePayload:
        return cls(d=VoiceStateData(guild_id=guild_id, channel_id=None))


SendPayload = Callable[[str, dict[str, Any]], Awaitable[None] | None]
"""``(guild_id, payload) -> None | awaitable`` supplied by the bot's gateway client."""
