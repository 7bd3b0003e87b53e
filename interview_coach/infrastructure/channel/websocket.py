"""
WebSocket transport for the telemetry channel.
"""
import json
import time
import logging
import threading
from typing import Optional

from websockets.exceptions import ConnectionClosed, WebSocketException
from websockets.sync.client import connect as ws_connect

from .base import TelemetryChannel, ChannelEvent, ChannelEventType
from ...config import TELEMETRY_WS_URL

logger = logging.getLogger("telemetry_websocket")


class WebSocketTelemetryChannel(TelemetryChannel):
    """Streams frame snapshots out and analysis results in over one websocket."""

    def __init__(self, ws_url: str = TELEMETRY_WS_URL, open_timeout: float = 10.0):
        super().__init__()
        self.ws_url = ws_url.rstrip("/")
        self.open_timeout = open_timeout
        self.session_id: Optional[str] = None
        self._ws = None
        self._reader: Optional[threading.Thread] = None
        self._send_lock = threading.Lock()
        self._state_lock = threading.Lock()

    def connect(self, session_id: str) -> bool:
        """
        Open the websocket for `session_id` and start the reader thread.

        Returns:
            True when connected; connection failures are reported as ERROR events
        """
        self.session_id = session_id
        url = f"{self.ws_url}/ws/{session_id}"
        try:
            self._ws = ws_connect(url, open_timeout=self.open_timeout)
        except (OSError, TimeoutError, WebSocketException) as e:
            logger.warning("Telemetry channel connect to %s failed: %s", url, e)
            self._dispatch(ChannelEvent(ChannelEventType.ERROR, {"message": str(e)}))
            return False

        logger.info("Telemetry channel connected: %s", url)
        self._dispatch(ChannelEvent(ChannelEventType.CONNECTED, {"session_id": session_id}))
        self._reader = threading.Thread(target=self._read_loop, name="telemetry-reader", daemon=True)
        self._reader.start()
        return True

    def _read_loop(self) -> None:
        ws = self._ws
        try:
            for raw in ws:
                try:
                    message = json.loads(raw)
                except (TypeError, ValueError):
                    logger.warning("Dropping non-JSON channel message")
                    continue
                if isinstance(message, dict):
                    self.dispatch_message(message)
        except ConnectionClosed as e:
            logger.info("Telemetry channel closed: %s", e)
        except (OSError, WebSocketException) as e:
            logger.warning("Telemetry channel read failed: %s", e)
            self._dispatch(ChannelEvent(ChannelEventType.ERROR, {"message": str(e)}))
        finally:
            self._notify_disconnected()

    def _notify_disconnected(self) -> None:
        with self._state_lock:
            if not self.connected:
                return
            self.connected = False
        self._dispatch(ChannelEvent(ChannelEventType.DISCONNECTED, {}))

    def _send(self, payload: dict) -> bool:
        if self._ws is None or not self.connected:
            return False
        try:
            with self._send_lock:
                self._ws.send(json.dumps(payload))
            return True
        except (ConnectionClosed, OSError, WebSocketException) as e:
            logger.warning("Telemetry channel send failed: %s", e)
            return False

    def send_snapshot(self, image_b64: str) -> bool:
        return self._send({"type": "facial_data", "session_id": self.session_id, "image": image_b64})

    def send_heartbeat(self) -> bool:
        return self._send({"type": "heartbeat", "session_id": self.session_id, "timestamp": time.time()})

    def disconnect(self) -> None:
        ws, self._ws = self._ws, None
        if ws is not None:
            try:
                ws.close()
            except (OSError, WebSocketException) as e:
                logger.debug("Error closing telemetry channel: %s", e)
        if self._reader is not None and self._reader is not threading.current_thread():
            self._reader.join(timeout=2.0)
        self._reader = None
        self._notify_disconnected()
