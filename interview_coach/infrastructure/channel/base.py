"""
Message-oriented channel to the real-time analysis collaborator.
"""
import time
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Any, List, Callable

logger = logging.getLogger("telemetry_channel")


class ChannelEventType(str, Enum):
    """Events raised by a telemetry channel."""
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"
    FACIAL_RESULT = "facial_result"
    VOICE_RESULT = "voice_result"
    ERROR = "error"


@dataclass
class ChannelEvent:
    event_type: ChannelEventType
    data: Dict[str, Any] = field(default_factory=dict)
    timestamp: float = field(default_factory=time.time)


ChannelHandler = Callable[[ChannelEvent], None]

# Incoming wire message type -> channel event
INCOMING_TYPES = {
    "facial_analysis": ChannelEventType.FACIAL_RESULT,
    "voice_analysis": ChannelEventType.VOICE_RESULT,
    "error": ChannelEventType.ERROR,
}


class TelemetryChannel:
    """
    Base channel: subscription bookkeeping plus the send/connect interface.

    Subclasses implement the transport and call ``_dispatch`` for every
    event they receive.
    """

    def __init__(self):
        self._handlers: Dict[ChannelEventType, List[ChannelHandler]] = {}
        self.connected = False

    def subscribe(self, event_type: ChannelEventType, handler: ChannelHandler) -> None:
        self._handlers.setdefault(event_type, []).append(handler)

    def _dispatch(self, event: ChannelEvent) -> None:
        if event.event_type == ChannelEventType.CONNECTED:
            self.connected = True
        elif event.event_type == ChannelEventType.DISCONNECTED:
            self.connected = False
        for handler in list(self._handlers.get(event.event_type, [])):
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Error in channel handler for {event.event_type}: {e}")

    def dispatch_message(self, message: Dict[str, Any]) -> None:
        """Translate a decoded wire message into a channel event."""
        msg_type = message.get("type")
        if msg_type == "heartbeat_ack":
            logger.debug("Heartbeat acknowledged")
            return
        event_type = INCOMING_TYPES.get(msg_type)
        if event_type is None:
            logger.debug("Ignoring channel message of type %r", msg_type)
            return
        data = message.get("data")
        if not isinstance(data, dict):
            data = {"message": message.get("message", data)}
        self._dispatch(ChannelEvent(event_type, data))

    def connect(self, session_id: str) -> bool:
        raise NotImplementedError

    def disconnect(self) -> None:
        raise NotImplementedError

    def send_snapshot(self, image_b64: str) -> bool:
        raise NotImplementedError

    def send_heartbeat(self) -> bool:
        raise NotImplementedError
