"""Tests for parsing audio node lifecycle payloads."""

import pytest
from pydantic import ValidationError

from playback_orchestrator.application.interfaces.audio_node import (
    PlayerResumedPayload,
    PlayerUpdatePayload,
    TrackEndPayload,
    TrackExceptionPayload,
    TrackStartPayload,
    TrackStuckPayload,
    WebSocketClosedPayload,
    parse_node_event,
)
from playback_orchestrator.application.interfaces.gateway import VoiceStatePayload
from playback_orchestrator.domain.music.value_objects import TrackEndReason


class TestParseNodeEvent:
    def test_track_start(self):
        """Should parse a TrackStartEvent."""
        event = parse_node_event({"op": "event", "type": "TrackStartEvent", "guildId": "1", "track": {}})
        assert isinstance(event, TrackStartPayload)
        assert event.guild_id == "1"

    @pytest.mark.parametrize("reason", ["finished", "loadFailed", "stopped", "replaced", "cleanup"])
    def test_track_end_reasons(self, reason):
        """Should parse every end reason."""
        event = parse_node_event({"op": "event", "type": "TrackEndEvent", "guildId": "1", "reason": reason})
        assert isinstance(event, TrackEndPayload)
        assert event.reason is TrackEndReason(reason)

    def test_unknown_end_reason_rejected(self):
        """Should reject reasons outside the known set."""
        with pytest.raises(ValidationError):
            parse_node_event({"type": "TrackEndEvent", "guildId": "1", "reason": "exploded"})

    def test_track_stuck(self):
        """Should read thresholdMs."""
        event = parse_node_event({"type": "TrackStuckEvent", "guildId": "1", "thresholdMs": 10000})
        assert isinstance(event, TrackStuckPayload)
        assert event.threshold_ms == 10000

    def test_track_exception(self):
        """Should parse the nested exception."""
        event = parse_node_event(
            {
                "type": "TrackExceptionEvent",
                "guildId": "1",
                "exception": {"message": "bad", "severity": "fault", "cause": "io"},
            }
        )
        assert isinstance(event, TrackExceptionPayload)
        assert event.exception.message == "bad"
        assert event.exception.severity == "fault"

    def test_websocket_closed(self):
        """Should read byRemote."""
        event = parse_node_event(
            {"type": "WebSocketClosedEvent", "guildId": "1", "code": 4006, "reason": "gone", "byRemote": True}
        )
        assert isinstance(event, WebSocketClosedPayload)
        assert event.code == 4006
        assert event.by_remote is True

    def test_player_update_op(self):
        """Should map op playerUpdate without a type field."""
        event = parse_node_event(
            {
                "op": "playerUpdate",
                "guildId": "1",
                "state": {"time": 1, "position": 5000, "connected": True, "ping": 30},
            }
        )
        assert isinstance(event, PlayerUpdatePayload)
        assert event.state.position == 5000
        assert event.state.connected is True

    def test_player_resumed(self):
        """Should parse PlayerResumed."""
        assert isinstance(parse_node_event({"type": "PlayerResumed", "guildId": "1"}), PlayerResumedPayload)

    def test_unknown_type_rejected(self):
        """Should reject unknown event types."""
        with pytest.raises(ValidationError):
            parse_node_event({"type": "SomethingElse", "guildId": "1"})

    def test_populate_by_name(self):
        """Should also accept snake_case field names."""
        event = TrackStuckPayload(guild_id="1", threshold_ms=5)
        assert event.threshold_ms == 5


class TestVoiceStatePayload:
    def test_join(self):
        """Should build an op 4 join payload."""
        payload = VoiceStatePayload.join("1", "2", self_mute=False, self_deaf=True).model_dump()
        assert payload == {
            "op": 4,
            "d": {"guild_id": "1", "channel_id": "2", "self_mute": False, "self_deaf": True},
        }

    def test_leave(self):
        """Should clear the channel id on leave."""
        payload = VoiceStatePayload.leave("1").model_dump()
        assert payload["d"]["channel_id"] is None
        assert payload["d"]["self_deaf"] is False
