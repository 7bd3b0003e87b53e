"""Real-time telemetry channel."""

from .base import TelemetryChannel, ChannelEvent, ChannelEventType


# Lazy import so the websocket client is only loaded when used
def __getattr__(name):
    if name == "WebSocketTelemetryChannel":
        from .websocket import WebSocketTelemetryChannel
        return WebSocketTelemetryChannel
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")


__all__ = ["TelemetryChannel", "ChannelEvent", "ChannelEventType", "WebSocketTelemetryChannel"]
