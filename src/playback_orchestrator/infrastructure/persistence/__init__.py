"""Queue snapshot storage implementations."""

from playback_orchestrator.infrastructure.persistence.database import Database
from playback_orchestrator.infrastructure.persistence.memory_storage import InMemoryQueueStorage
from playback_orchestrator.infrastructure.persistence.sqlite_storage import SQLiteQueueStorage

__all__ = [
    "Database",
    "InMemoryQueueStorage",
    "SQLiteQueueStorage",
]
