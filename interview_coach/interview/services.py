"""
Service classes for the interview session.
"""
import logging
from dataclasses import dataclass
from typing import Optional, List

from ..config import HEARTBEAT_INTERVAL, SNAPSHOT_INTERVAL
from ..errors import DeviceAccessError
from ..infrastructure.audio import CapturedAudio
from ..infrastructure.channel import TelemetryChannel
from ..infrastructure.scheduling import Scheduler, TimerHandle

logger = logging.getLogger("services")


@dataclass
class RecordedAnswer:
    """What one recording produced: transcript plus audio for voice analysis."""
    transcript: str
    audio: Optional[CapturedAudio] = None

    @property
    def has_audio(self) -> bool:
        return self.audio is not None and not self.audio.empty


class RecordingService:
    """
    Handles microphone capture and speech recognition for one answer.

    With no recorder configured (text mode) recording is a no-op and the
    caller supplies the transcript directly.
    """

    def __init__(self, recorder=None, recognizer=None):
        self.recorder = recorder
        self.recognizer = recognizer
        self.recording = False

    def start(self) -> None:
        """
        Start capture and recognition.

        Raises:
            DeviceAccessError: If the microphone cannot be opened
        """
        if self.recorder is not None:
            self.recorder.start()
        self.recording = True

        if self.recognizer is not None:
            try:
                self.recognizer.start()
            except Exception as e:
                # Recognition is best effort; capture keeps running
                logger.warning(f"Speech recognizer failed to start: {e}")

    def stop(self) -> RecordedAnswer:
        """Stop capture and return the transcript of what was said."""
        if not self.recording:
            return RecordedAnswer(transcript="")
        self.recording = False

        audio = self.recorder.stop() if self.recorder is not None else None
        transcript = ""
        if self.recognizer is not None:
            self.recognizer.stop()
            if audio is not None and not audio.empty:
                transcript = self.recognizer.transcribe(audio.pcm16, audio.sample_rate)
        logger.info(f"Speech recognition result: {transcript or '(empty)'}")
        return RecordedAnswer(transcript=transcript, audio=audio)


class TTSService:
    """Handles text-to-speech functionality."""

    def __init__(self, synthesizer=None, use_tts: bool = True):
        self.synthesizer = synthesizer
        self.use_tts = use_tts and synthesizer is not None

    def speak_or_print(self, message: str, prefix: str = "🤖"):
        """Speak message via TTS or print if TTS disabled."""
        if self.use_tts:
            self.synthesizer.say(message)
        else:
            print(f"{prefix} {message}")


class LiveTelemetryService:
    """
    Owns the telemetry channel connection and its periodic tasks.

    A heartbeat goes out every `heartbeat_interval` seconds; a webcam
    snapshot every `snapshot_interval` seconds while video is enabled and
    the channel is connected.
    """

    def __init__(self,
                 channel: Optional[TelemetryChannel],
                 scheduler: Scheduler,
                 snapshotter=None,
                 video_enabled: bool = True,
                 heartbeat_interval: float = HEARTBEAT_INTERVAL,
                 snapshot_interval: float = SNAPSHOT_INTERVAL):
        self.channel = channel
        self.scheduler = scheduler
        self.snapshotter = snapshotter
        self.video_enabled = video_enabled and snapshotter is not None
        self.heartbeat_interval = heartbeat_interval
        self.snapshot_interval = snapshot_interval
        self.snapshots_sent = 0
        self._handles: List[TimerHandle] = []

    @property
    def connected(self) -> bool:
        return self.channel is not None and self.channel.connected

    def start(self, session_id: str) -> bool:
        """Connect the channel and schedule the periodic tasks. Returns the connection state."""
        if self.channel is None:
            return False

        connected = self.channel.connect(session_id)
        if not connected:
            logger.warning(f"Telemetry channel unavailable for session {session_id}")

        if self.video_enabled:
            try:
                self.snapshotter.open()
            except DeviceAccessError as e:
                logger.error(f"Video disabled: {e}")
                self.video_enabled = False

        self._handles.append(self.scheduler.call_every(self.heartbeat_interval, self.send_heartbeat))
        if self.video_enabled:
            self._handles.append(self.scheduler.call_every(self.snapshot_interval, self.send_snapshot))
        return connected

    def send_heartbeat(self) -> None:
        if self.connected:
            self.channel.send_heartbeat()

    def send_snapshot(self) -> None:
        if not self.video_enabled or not self.connected:
            return
        image = self.snapshotter.snapshot()
        if image and self.channel.send_snapshot(image):
            self.snapshots_sent += 1

    def stop(self) -> None:
        """Cancel periodic tasks, release the camera and disconnect."""
        for handle in self._handles:
            handle.cancel()
        self._handles = []
        if self.snapshotter is not None:
            self.snapshotter.close()
        if self.channel is not None:
            self.channel.disconnect()
