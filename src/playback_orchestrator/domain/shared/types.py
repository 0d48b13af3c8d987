"""Reusable Pydantic Annotated types shared by models and settings::

    from playback_orchestrator.domain.shared.types import GuildIdStr, VolumeInt

    class MyModel(BaseModel):
        guild_id: GuildIdStr
        volume: VolumeInt = 100
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated

from pydantic import BeforeValidator, Field

# ── Numeric constraints ─────────────────────────────────────────────

NonNegativeInt = Annotated[int, Field(ge=0)]
"""Integer >= 0."""

DurationMs = Annotated[int, Field(ge=0)]
"""Track length or position in milliseconds."""

VolumeInt = Annotated[int, Field(ge=0, le=100)]
"""Player volume: 0 … 100."""

MaxPreviousTracks = Annotated[int, Field(ge=0, le=1000)]
"""History bound: 0 … 1 000."""

BusyTimeoutMs = Annotated[int, Field(ge=1000, le=30000)]
"""Database busy timeout in milliseconds: 1 000 … 30 000."""

ConnectionTimeoutS = Annotated[int, Field(ge=1, le=60)]
"""Database connection timeout in seconds: 1 … 60."""


# ── String constraints ──────────────────────────────────────────────

NonEmptyStr = Annotated[str, Field(min_length=1)]
"""String with at least one character."""

GuildIdStr = Annotated[str, Field(min_length=1, max_length=32)]
"""Guild snowflake kept as a string, the way the gateway sends it."""

ChannelIdStr = Annotated[str, Field(min_length=1, max_length=32)]
"""Voice or text channel snowflake as a string."""


# ── Datetime constraints ────────────────────────────────────────────

def _ensure_utc(v: datetime) -> datetime:
    if v.tzinfo is None:
        raise ValueError("datetime must be timezone-aware (UTC)")
    return v.astimezone(UTC)


UtcDatetimeField = Annotated[datetime, BeforeValidator(_ensure_utc)]
"""Timezone-aware datetime, normalised to UTC on input."""


def utcnow() -> datetime:
    return datetime.now(UTC)
