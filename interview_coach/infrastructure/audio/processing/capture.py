"""
Microphone capture for spoken answers.

Recording is started and stopped explicitly by the session; PyAudio fills
the buffer from its own callback thread in between.
"""
import time
import logging
import threading
from dataclasses import dataclass
from typing import List, Optional

from ....config import (
    CHANNELS, SAMPLE_RATE_CAPTURE, FRAME_MS,
    SAMPLE_RATE_TARGET, TARGET_RMS, MAX_ANSWER_SECONDS
)
from ....errors import DeviceAccessError
from ....utils import import_quietly, with_suppressed_audio_warnings
from .processing import (
    pcm16_to_float, stereo_to_mono, remove_dc, resample,
    normalize_audio, float_to_pcm16, wav_bytes
)

logger = logging.getLogger("audio_capture")


@dataclass
class CapturedAudio:
    """One recorded answer, resampled to the speech-recognition rate."""
    pcm16: bytes
    wav: bytes
    sample_rate: int
    duration: float

    @property
    def empty(self) -> bool:
        return not self.pcm16


def prepare_answer_audio(raw: bytes,
                         channels: int = CHANNELS,
                         sr_capture: int = SAMPLE_RATE_CAPTURE,
                         sr_target: int = SAMPLE_RATE_TARGET,
                         target_rms: float = TARGET_RMS) -> CapturedAudio:
    """Turn raw PCM16 microphone bytes into normalized mono audio at `sr_target`."""
    data = pcm16_to_float(raw, channels)
    duration = data.shape[0] / float(sr_capture)
    if data.size == 0:
        return CapturedAudio(pcm16=b"", wav=b"", sample_rate=sr_target, duration=0.0)

    mono = stereo_to_mono(data) if channels > 1 else data.flatten()
    mono = remove_dc(mono)
    mono = resample(mono, sr_capture, sr_target)
    mono = normalize_audio(mono, target_rms)

    pcm16 = float_to_pcm16(mono)
    return CapturedAudio(
        pcm16=pcm16.tobytes(),
        wav=wav_bytes(pcm16, sr_target, channels=1),
        sample_rate=sr_target,
        duration=duration,
    )


class MicrophoneRecorder:
    """Non-blocking PyAudio recorder; one recording at a time."""

    def __init__(self,
                 input_device: Optional[int] = None,
                 num_channels: int = CHANNELS,
                 sr_capture: int = SAMPLE_RATE_CAPTURE,
                 frame_ms: int = FRAME_MS,
                 sr_target: int = SAMPLE_RATE_TARGET,
                 target_rms: float = TARGET_RMS,
                 max_seconds: float = MAX_ANSWER_SECONDS):
        self.input_device = input_device
        self.num_channels = num_channels
        self.sr_capture = sr_capture
        self.frame_size = int(sr_capture * frame_ms / 1000)
        self.sr_target = sr_target
        self.target_rms = target_rms
        self.max_frames = int(max_seconds * sr_capture)

        self._pyaudio = None
        self._pa = None
        self._stream = None
        self._chunks: List[bytes] = []
        self._frames = 0
        self._lock = threading.Lock()
        self._started_at: Optional[float] = None

    @property
    def recording(self) -> bool:
        return self._stream is not None

    @with_suppressed_audio_warnings
    def start(self) -> None:
        """
        Open the input stream and start buffering.

        Raises:
            DeviceAccessError: PyAudio is missing or the device cannot be opened
        """
        if self._stream is not None:
            raise DeviceAccessError("Microphone is already recording")

        try:
            self._pyaudio = import_quietly("pyaudio")
        except ImportError as e:
            raise DeviceAccessError(f"Microphone support is not installed: {e}") from e

        with self._lock:
            self._chunks = []
            self._frames = 0

        self._pa = self._pyaudio.PyAudio()
        try:
            self._stream = self._pa.open(
                format=self._pyaudio.paInt16,
                channels=self.num_channels,
                rate=self.sr_capture,
                input=True,
                input_device_index=self.input_device,
                frames_per_buffer=self.frame_size,
                stream_callback=self._on_audio,
            )
        except (OSError, ValueError) as e:
            self._pa.terminate()
            self._pa = None
            logger.error(f"Failed to open microphone {self.input_device}: {e}")
            raise DeviceAccessError(f"Unable to access microphone: {e}") from e

        self._started_at = time.time()
        logger.info(f"Microphone recording started ({self.num_channels} ch @ {self.sr_capture} Hz)")

    def _on_audio(self, in_data, frame_count, time_info, status):
        with self._lock:
            self._chunks.append(in_data)
            self._frames += frame_count
            full = self._frames >= self.max_frames
        if full:
            logger.warning("Maximum answer length reached; microphone stopped buffering")
            return (None, self._pyaudio.paComplete)
        return (None, self._pyaudio.paContinue)

    def stop(self) -> CapturedAudio:
        """Close the stream, release the device and return the processed recording."""
        stream, self._stream = self._stream, None
        if stream is not None:
            try:
                stream.stop_stream()
                stream.close()
            except OSError as e:
                logger.warning(f"Error closing microphone stream: {e}")
        if self._pa is not None:
            self._pa.terminate()
            self._pa = None

        with self._lock:
            raw = b"".join(self._chunks)
            self._chunks = []

        captured = prepare_answer_audio(raw, self.num_channels, self.sr_capture,
                                        self.sr_target, self.target_rms)
        logger.info(f"Captured {captured.duration:.1f}s of audio")
        return captured
