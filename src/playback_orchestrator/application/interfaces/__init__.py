"""
Application Interfaces (Ports)

Abstract contracts for the collaborators the playback core consumes.
"""

from playback_orchestrator.application.interfaces.audio_node import (
    AudioNodeConnector,
    AudioNodeSession,
    NodeEvent,
    parse_node_event,
)
from playback_orchestrator.application.interfaces.gateway import SendPayload, VoiceStatePayload
from playback_orchestrator.application.interfaces.search_resolver import SearchResolver, SearchResult

__all__ = [
    "AudioNodeConnector",
    "AudioNodeSession",
    "NodeEvent",
    "parse_node_event",
    "SearchResolver",
    "SearchResult",
    "SendPayload",
    "VoiceStatePayload",
]
