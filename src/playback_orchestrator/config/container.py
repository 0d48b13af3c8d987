"""Dependency Container

Builds the storage backend selected by the settings and wires it into a
``Manager``. Components are created on first access and cached.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..application.interfaces.audio_node import AudioNodeConnector
    from ..application.interfaces.gateway import SendPayload
    from ..application.interfaces.search_resolver import SearchResolver
    from ..application.services.manager import AutoplayFn, Manager
    from ..domain.music.repository import QueueStorage
    from ..infrastructure.persistence.database import Database
    from .settings import Settings


@dataclass
class Container:
    """Holds the settings and the lazily built storage layer."""

    settings: Settings
    _database: Database | None = None
    _storage: QueueStorage | None = None

    @property
    def database(self) -> Database:
        if self._database is None:
            from ..infrastructure.persistence.database import Database

            self._database = Database(self.settings.storage.url, settings=self.settings.storage)
        return self._database

    @property
    def storage(self) -> QueueStorage:
        """Queue snapshot store for the configured backend."""
        if self._storage is None:
            if self.settings.storage.backend == "sqlite":
                from ..infrastructure.persistence.sqlite_storage import SQLiteQueueStorage

                self._storage = SQLiteQueueStorage(self.database)
            else:
                from ..infrastructure.persistence.memory_storage import InMemoryQueueStorage

                self._storage = InMemoryQueueStorage()
        return self._storage

    def create_manager(
        self,
        connector: AudioNodeConnector,
        *,
        send_payload: SendPayload,
        resolver: SearchResolver | None = None,
        autoplay: AutoplayFn | None = None,
    ) -> Manager:
        from ..application.services.manager import Manager

        return Manager(
            connector,
            send_payload=send_payload,
            resolver=resolver,
            autoplay=autoplay,
            storage=self.storage,
            settings=self.settings.playback,
        )

    async def shutdown(self) -> None:
        if self._database is not None:
            await self._database.close()


def create_container(settings: Settings | None = None) -> Container:
    """Create a container from ``settings``, or from the cached environment settings."""
    if settings is None:
        from .settings import get_settings

        settings = get_settings()
    return Container(settings)


def create_manager(
    connector: AudioNodeConnector,
    *,
    send_payload: SendPayload,
    resolver: SearchResolver | None = None,
    autoplay: AutoplayFn | None = None,
    settings: Settings | None = None,
) -> Manager:
    """Shortcut for ``create_container(settings).create_manager(...)``."""
    return create_container(settings).create_manager(
        connector,
        send_payload=send_payload,
        resolver=resolver,
        autoplay=autoplay,
    )
