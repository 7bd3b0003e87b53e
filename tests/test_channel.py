from interview_coach.infrastructure.channel import ChannelEventType
from interview_coach.interview.testing import FakeTelemetryChannel


def collect(channel, *event_types):
    events = []
    for event_type in event_types:
        channel.subscribe(event_type, events.append)
    return events


def test_messages_map_to_events():
    channel = FakeTelemetryChannel()
    events = collect(channel, ChannelEventType.FACIAL_RESULT, ChannelEventType.VOICE_RESULT,
                     ChannelEventType.ERROR)

    channel.dispatch_message({"type": "facial_analysis", "data": {"confidence": 0.7}})
    channel.dispatch_message({"type": "voice_analysis", "data": {"clarity": 0.6}})
    channel.dispatch_message({"type": "error", "message": "model not loaded"})

    assert [e.event_type for e in events] == [
        ChannelEventType.FACIAL_RESULT, ChannelEventType.VOICE_RESULT, ChannelEventType.ERROR
    ]
    assert events[0].data == {"confidence": 0.7}
    assert events[2].data == {"message": "model not loaded"}


def test_heartbeat_ack_and_unknown_types_are_ignored():
    channel = FakeTelemetryChannel()
    events = collect(channel, *ChannelEventType)

    channel.dispatch_message({"type": "heartbeat_ack"})
    channel.dispatch_message({"type": "something_new", "data": {}})

    assert events == []


def test_handler_errors_are_isolated():
    channel = FakeTelemetryChannel()
    received = []

    def broken(event):
        raise ValueError("bad handler")

    channel.subscribe(ChannelEventType.FACIAL_RESULT, broken)
    channel.subscribe(ChannelEventType.FACIAL_RESULT, received.append)

    channel.emit_facial({"confidence": 0.4})

    assert len(received) == 1


def test_connection_state_follows_events():
    channel = FakeTelemetryChannel()
    assert channel.connect("s1")
    assert channel.connected
    assert channel.send_heartbeat()

    channel.disconnect()
    assert not channel.connected
    assert not channel.send_snapshot("aW1n")


def test_failed_connect_reports_error():
    channel = FakeTelemetryChannel(connect_ok=False)
    errors = collect(channel, ChannelEventType.ERROR)

    assert channel.connect("s1") is False
    assert not channel.connected
    assert errors[0].data["message"] == "connection refused"
