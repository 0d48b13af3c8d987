"""Bundled autoplay collaborator that queues tracks related to the last one played."""

from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING, Any

from playback_orchestrator.domain.music.entities import Track
from playback_orchestrator.domain.music.value_objects import SearchEngine, SourceName
from playback_orchestrator.domain.shared.constants import ArtworkConstants
from playback_orchestrator.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from playback_orchestrator.application.services.player import Player

logger = logging.getLogger(__name__)


class RelatedTracksAutoplay:
    """Autoplay hook for ``Manager(autoplay=...)``.

    Acts only when the player's context has ``autoplay_enabled``. YouTube
    seeds enqueue a random window of the seed's mix playlist; Spotify seeds
    enqueue one recommendation. Tracks already in history, or equal to the
    seed, are never re-queued.
    """

    def __init__(self, max_tracks: int = 10, *, requester: Any = None) -> None:
        self.max_tracks = max_tracks
        self.requester = requester

    async def __call__(self, player: Player, last_track: Track | None) -> None:
        if last_track is None or not player.context.autoplay_enabled:
            return

        logger.debug(LogTemplates.AUTOPLAY_SEARCH, last_track.title, last_track.source_name)
        requester = self.requester if self.requester is not None else last_track.requester

        if last_track.source_name == SourceName.SPOTIFY:
            added = await self._queue_spotify(player, last_track, requester)
        elif last_track.is_youtube:
            added = await self._queue_youtube_mix(player, last_track, requester)
        else:
            added = 0

        if added:
            logger.info(LogTemplates.AUTOPLAY_ADDED, added, player.guild_id)

    async def _queue_spotify(self, player: Player, last_track: Track, requester: Any) -> int:
        seeds = [t for t in player.queue.previous if t.source_name == SourceName.SPOTIFY][:1] or [last_track]
        ids = ",".join(_spotify_id(t) for t in seeds)

        result = await player.search(
            f"seed_tracks={ids}",
            requester,
            engine=SearchEngine.SPOTIFY_RECOMMENDATIONS,
        )
        candidates = self._filter(player, last_track, result.tracks)
        if not candidates:
            return 0

        player.queue.add(random.choice(candidates))
        return 1

    async def _queue_youtube_mix(self, player: Player, last_track: Track, requester: Any) -> int:
        url = ArtworkConstants.YOUTUBE_MIX_URL.format(identifier=last_track.identifier)
        result = await player.search(url, requester)
        candidates = self._filter(player, last_track, result.tracks)
        if not candidates:
            return 0

        start = random.randrange(len(candidates))
        window = candidates[start : start + self.max_tracks]
        player.queue.add(window)
        return len(window)

    @staticmethod
    def _filter(player: Player, last_track: Track, tracks: list[Track]) -> list[Track]:
        played = {t.identifier for t in player.queue.previous}
        played.add(last_track.identifier)
        return [t for t in tracks if t.identifier not in played]


def _spotify_id(track: Track) -> str:
    if track.identifier:
        return track.identifier
    # Fall back to the last path segment of the track URL.
    return (track.uri or "").rstrip("/").rsplit("/", 1)[-1]
