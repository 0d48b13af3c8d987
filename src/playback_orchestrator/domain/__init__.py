# ruff: noqa: N999
"""
Domain Layer

Contains pure playback logic organized by bounded contexts:
- shared/: Exceptions, messages, constrained types and constants
- music/: Track, queue, persistence bridge and playback events
"""

from playback_orchestrator.domain.shared.exceptions import DomainError

__all__ = [
    "DomainError",
]
