"""Port interface for turning a query into node track data."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from playback_orchestrator.domain.music.entities import Track
from playback_orchestrator.domain.music.value_objects import LoadType


class SearchResolver(ABC):
    """Interface for the node's resolve endpoint."""

    @abstractmethod
    async def resolve(self, identifier: str) -> dict[str, Any] | None:
        """Resolve an identifier (URL or ``engine:query``).

        Returns:
            The raw ``{"loadType": ..., "data": ...}`` response, or None when
            the node returned nothing.
        """
        ...


class PlaylistInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = ""
    selected_track: int = Field(default=-1, validation_alias=AliasChoices("selected_track", "selectedTrack"))


class SearchResult(BaseModel):
    """Search outcome with tracks already materialized as Track values."""

    model_config = ConfigDict(frozen=True)

    load_type: LoadType
    tracks: list[Track] = Field(default_factory=list)
    playlist: PlaylistInfo | None = None
    error: dict[str, Any] | None = None
