"""Manager: the per-guild player registry and search entry point."""

from __future__ import annotations

import asyncio
import logging
import re
from collections import defaultdict
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import Any

from pydantic import ValidationError

from playback_orchestrator.application.interfaces.audio_node import AudioNodeConnector
from playback_orchestrator.application.interfaces.gateway import SendPayload
from playback_orchestrator.application.interfaces.search_resolver import (
    PlaylistInfo,
    SearchResolver,
    SearchResult,
)
from playback_orchestrator.application.services.options import PlayerOptions, validate_player_options
from playback_orchestrator.application.services.player import Player
from playback_orchestrator.config.settings import PlaybackSettings
from playback_orchestrator.domain.music.entities import PlayerContext, Track
from playback_orchestrator.domain.music.events import EventBus, PlayerCreated
from playback_orchestrator.domain.music.repository import QueueStorage
from playback_orchestrator.domain.music.value_objects import LoadType, SearchEngine
from playback_orchestrator.domain.shared.exceptions import ConfigurationError
from playback_orchestrator.domain.shared.messages import ErrorMessages, LogTemplates
from playback_orchestrator.infrastructure.persistence.memory_storage import InMemoryQueueStorage

logger = logging.getLogger(__name__)

AutoplayFn = Callable[[Player, Track | None], Awaitable[None] | None]

_URL_PATTERN = re.compile(r"^https?://")


class Manager:
    """Registry of one player per guild.

    Options are validated eagerly: an invalid collaborator or setting raises
    :class:`ConfigurationError` here, never at playback time.
    """

    def __init__(
        self,
        connector: AudioNodeConnector,
        *,
        send_payload: SendPayload,
        resolver: SearchResolver | None = None,
        autoplay: AutoplayFn | None = None,
        storage: QueueStorage | None = None,
        settings: PlaybackSettings | dict[str, Any] | None = None,
    ) -> None:
        if not isinstance(connector, AudioNodeConnector):
            raise ConfigurationError(ErrorMessages.INVALID_CONNECTOR, option="connector")
        if not callable(send_payload):
            raise ConfigurationError(ErrorMessages.INVALID_SEND_PAYLOAD, option="send_payload")
        if resolver is not None and not isinstance(resolver, SearchResolver):
            raise ConfigurationError(ErrorMessages.INVALID_RESOLVER, option="resolver")
        if autoplay is not None and not callable(autoplay):
            raise ConfigurationError(ErrorMessages.INVALID_AUTOPLAY, option="autoplay")
        if storage is not None and not isinstance(storage, QueueStorage):
            raise ConfigurationError(ErrorMessages.INVALID_STORAGE, option="storage")

        self.connector = connector
        self.send_payload = send_payload
        self.resolver = resolver
        self.autoplay = autoplay
        self.storage: QueueStorage = storage if storage is not None else InMemoryQueueStorage()
        self.settings = _validate_settings(settings)

        self.players: dict[str, Player] = {}
        self.events = EventBus()
        self._guild_locks: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)
        self._guild_lock_users: defaultdict[str, int] = defaultdict(int)

    @asynccontextmanager
    async def _guild_lock(self, guild_id: str) -> AsyncIterator[None]:
        """Per-guild lock for create/delete; the entry is dropped once nobody holds or awaits it."""
        lock = self._guild_locks[guild_id]
        self._guild_lock_users[guild_id] += 1
        try:
            async with lock:
                yield
        finally:
            self._guild_lock_users[guild_id] -= 1
            if not self._guild_lock_users[guild_id]:
                del self._guild_lock_users[guild_id]
                del self._guild_locks[guild_id]

    def get_player(self, guild_id: str) -> Player | None:
        return self.players.get(guild_id)

    async def create_player(
        self,
        options: PlayerOptions | dict[str, Any] | None = None,
        *,
        context: PlayerContext | None = None,
        **kwargs: Any,
    ) -> Player:
        """Return the guild's player, joining voice and creating it on first use.

        Concurrent calls for the same guild share one player.
        """
        opts = validate_player_options(options, **kwargs)

        async with self._guild_lock(opts.guild_id):
            existing = self.players.get(opts.guild_id)
            if existing is not None and not existing.destroyed:
                logger.debug(LogTemplates.PLAYER_EXISTS, opts.guild_id)
                return existing

            session = await self.connector.join_voice_channel(
                guild_id=opts.guild_id,
                channel_id=opts.voice_id,
                shard_id=opts.shard_id,
                deaf=opts.self_deaf,
                mute=opts.self_mute,
            )
            player = Player(self, session, opts, context=context)
            self.players[opts.guild_id] = player

        logger.info(LogTemplates.PLAYER_CREATED, opts.guild_id)
        self.events.emit(PlayerCreated(guild_id=opts.guild_id))
        return player

    async def delete_player(self, guild_id: str, reason: str | None = None) -> bool:
        """Destroy the guild's player; returns False if there was none.

        Holds the guild lock through teardown, so a concurrent create joins
        voice only after the old player has left.
        """
        async with self._guild_lock(guild_id):
            player = self.players.get(guild_id)
            if player is None or player.destroyed:
                return False

            await player.destroy(reason)
        return True

    def _unregister(self, player: Player) -> None:
        if self.players.get(player.guild_id) is player:
            del self.players[player.guild_id]

    async def search(
        self,
        query: str,
        requester: Any = None,
        *,
        engine: SearchEngine | str | None = None,
    ) -> SearchResult:
        """Resolve a URL or an ``engine:query`` search into tracks.

        Raises:
            ConfigurationError: If no resolver was configured.
        """
        if self.resolver is None:
            raise ConfigurationError(ErrorMessages.NO_RESOLVER, option="resolver")

        prefix = engine or self.settings.default_search_engine
        identifier = query if _URL_PATTERN.match(query) else f"{prefix}:{query}"
        logger.debug(LogTemplates.SEARCH, identifier)

        response = await self.resolver.resolve(identifier)
        if not response:
            return SearchResult(load_type=LoadType.EMPTY)

        load_type = LoadType(response.get("loadType", LoadType.EMPTY))
        data = response.get("data")

        if load_type is LoadType.ERROR:
            return SearchResult(load_type=load_type, error=data)
        if load_type is LoadType.TRACK:
            return SearchResult(load_type=load_type, tracks=[Track.from_node_data(data, requester)])
        if load_type is LoadType.SEARCH:
            return SearchResult(
                load_type=load_type,
                tracks=[Track.from_node_data(item, requester) for item in data or []],
            )
        if load_type is LoadType.PLAYLIST:
            data = data or {}
            return SearchResult(
                load_type=load_type,
                playlist=PlaylistInfo.model_validate(data.get("info") or {}),
                tracks=[Track.from_node_data(item, requester) for item in data.get("tracks", [])],
            )
        return SearchResult(load_type=LoadType.EMPTY)


def _validate_settings(settings: PlaybackSettings | dict[str, Any] | None) -> PlaybackSettings:
    if settings is None:
        return PlaybackSettings()
    if isinstance(settings, PlaybackSettings):
        return settings
    try:
        return PlaybackSettings.model_validate(settings)
    except ValidationError as e:
        raise ConfigurationError(
            ErrorMessages.INVALID_SETTINGS.format(details=e.errors()[0]["msg"]),
            option="settings",
        ) from e
