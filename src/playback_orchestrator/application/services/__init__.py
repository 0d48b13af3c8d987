"""
Application Services

The player, its transition engine and the manager registry.
"""

from playback_orchestrator.application.services.autoplay import RelatedTracksAutoplay
from playback_orchestrator.application.services.manager import AutoplayFn, Manager
from playback_orchestrator.application.services.options import PlayerOptions, validate_player_options
from playback_orchestrator.application.services.player import Player
from playback_orchestrator.application.services.transitions import PlaybackTransitionEngine

__all__ = [
    "AutoplayFn",
    "Manager",
    "Player",
    "PlayerOptions",
    "PlaybackTransitionEngine",
    "RelatedTracksAutoplay",
    "validate_player_options",
]
