"""Player construction options."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError

from playback_orchestrator.domain.shared.exceptions import ConfigurationError
from playback_orchestrator.domain.shared.messages import ErrorMessages
from playback_orchestrator.domain.shared.types import ChannelIdStr, GuildIdStr, NonNegativeInt, VolumeInt


class PlayerOptions(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    guild_id: GuildIdStr
    voice_id: ChannelIdStr
    text_id: ChannelIdStr | None = None
    shard_id: NonNegativeInt = 0
    self_deaf: bool = False
    self_mute: bool = False
    # None falls back to the manager's default volume.
    volume: VolumeInt | None = None


def validate_player_options(options: PlayerOptions | dict[str, Any] | None = None, **overrides: Any) -> PlayerOptions:
    """Build ``PlayerOptions`` from a model, a mapping or keyword arguments.

    Raises:
        ConfigurationError: If any value fails validation.
    """
    if isinstance(options, PlayerOptions) and not overrides:
        return options

    data: dict[str, Any] = {}
    if isinstance(options, PlayerOptions):
        data.update(options.model_dump())
    elif options is not None:
        data.update(options)
    data.update(overrides)

    try:
        return PlayerOptions.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(
            ErrorMessages.INVALID_PLAYER_OPTIONS.format(details=e.errors()[0]["msg"]),
            option=".".join(str(part) for part in e.errors()[0]["loc"]) or None,
        ) from e
