"""Core domain entities for the music bounded context."""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from playback_orchestrator.domain.music.value_objects import SourceName, YoutubeResolution
from playback_orchestrator.domain.shared.constants import ArtworkConstants
from playback_orchestrator.domain.shared.messages import ErrorMessages
from playback_orchestrator.domain.shared.time_format import dotted_duration
from playback_orchestrator.domain.shared.types import DurationMs, NonEmptyStr

_JSON_SCALARS = (str, int, float, bool, type(None))


class Track(BaseModel):
    """Immutable value object representing a playable track.

    ``encoded`` is the node's opaque handle; everything else is descriptive.
    ``requester`` is whatever the caller attached at search time and is never
    interpreted here.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    encoded: NonEmptyStr
    identifier: str
    title: str
    uri: str | None = None
    source_name: Annotated[SourceName | str, Field(union_mode="left_to_right")]
    length: DurationMs = 0
    is_seekable: bool = False
    is_stream: bool = False
    author: str | None = None
    artwork_url: str | None = None
    isrc: str | None = None
    plugin_info: dict[str, Any] = Field(default_factory=dict)

    requester: Any = None

    @field_serializer("requester", when_used="json")
    def _serialize_requester(self, requester: Any) -> Any:
        if isinstance(requester, _JSON_SCALARS + (dict, list)):
            return requester
        return str(requester)

    @classmethod
    def from_node_data(cls, data: dict[str, Any], requester: Any = None) -> Track:
        """Build a track from the node's ``{encoded, info, pluginInfo}`` payload."""
        encoded = data.get("encoded")
        if not encoded:
            raise ValueError(ErrorMessages.EMPTY_ENCODED_TRACK)

        info = data.get("info")
        if not isinstance(info, dict):
            raise ValueError(ErrorMessages.MALFORMED_TRACK_DATA.format(field="info"))

        return cls(
            encoded=encoded,
            identifier=info.get("identifier", ""),
            title=info.get("title", ""),
            uri=info.get("uri"),
            source_name=info.get("sourceName", ""),
            length=info.get("length", 0),
            is_seekable=info.get("isSeekable", False),
            is_stream=info.get("isStream", False),
            author=info.get("author"),
            artwork_url=info.get("artworkUrl"),
            isrc=info.get("isrc"),
            plugin_info=data.get("pluginInfo") or {},
            requester=requester,
        )

    @property
    def hyperlink(self) -> str:
        return f"[{self.title}]({self.uri})"

    @property
    def duration_formatted(self) -> str:
        return dotted_duration(self.length)

    @property
    def is_youtube(self) -> bool:
        return isinstance(self.source_name, SourceName) and self.source_name.is_youtube

    def get_artwork(self, resolution: YoutubeResolution = YoutubeResolution.HQ) -> str | None:
        """YouTube thumbnails are derived from the identifier; other sources use ``artwork_url``."""
        if self.is_youtube:
            return ArtworkConstants.YOUTUBE_THUMBNAIL_URL.format(
                identifier=self.identifier, resolution=resolution.value
            )
        return self.artwork_url

    def is_same(self, other: Track | None) -> bool:
        """Same identifier and title; used to de-duplicate history."""
        if other is None:
            return False
        return self.identifier == other.identifier and self.title == other.title


class QueueSnapshot(BaseModel):
    """Persisted form of a queue, keyed by guild id in storage."""

    tracks: list[Track] = Field(default_factory=list)
    previous: list[Track] = Field(default_factory=list)
    current: Track | None = None


class PlayerContext(BaseModel):
    """Caller-owned context attached to a player.

    Subclass it to carry bot-specific references; extra fields are accepted
    so simple callers can pass keyword arguments directly.
    """

    model_config = ConfigDict(extra="allow", arbitrary_types_allowed=True)

    autoplay_enabled: bool = False
