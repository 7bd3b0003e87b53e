"""
Basic audio processing functions including format conversions and normalization.
"""
import io
import wave
from math import gcd

import numpy as np
from scipy.signal import resample_poly

from ....config import TARGET_RMS


def pcm16_to_float(raw: bytes, channels: int = 1) -> np.ndarray:
    """Decode interleaved PCM16 bytes into a (frames, channels) float32 array in [-1, 1]."""
    samples = np.frombuffer(raw, dtype=np.int16).astype(np.float32) / 32768.0
    return samples.reshape(-1, channels)


def stereo_to_mono(x: np.ndarray) -> np.ndarray:
    """Convert multi-channel audio to mono by averaging channels."""
    return np.mean(x, axis=1)


def remove_dc(x: np.ndarray) -> np.ndarray:
    """Remove DC offset from audio signal."""
    if x.size == 0:
        return x
    return x - np.mean(x)


def resample(mono: np.ndarray, sr_in: int, sr_out: int) -> np.ndarray:
    """Resample mono audio between integer sample rates."""
    if sr_in == sr_out:
        return mono.astype(np.float32)
    g = gcd(sr_in, sr_out)
    return resample_poly(mono, up=sr_out // g, down=sr_in // g).astype(np.float32)


def normalize_audio(audio: np.ndarray, target_rms: float = TARGET_RMS) -> np.ndarray:
    """Normalize audio to target RMS level."""
    if audio.size == 0:
        return audio
    rms = float(np.sqrt(np.mean(audio**2)) + 1e-9)
    gain = min(20.0, target_rms / rms)
    return audio * gain


def float_to_pcm16(audio: np.ndarray) -> np.ndarray:
    return np.clip(audio * 32767, -32768, 32767).astype(np.int16)


def wav_bytes(pcm16: np.ndarray, sr: int, channels: int = 1) -> bytes:
    """Encode PCM16 audio data as an in-memory WAV file."""
    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as wf:
        wf.setnchannels(channels)
        wf.setsampwidth(2)
        wf.setframerate(sr)
        wf.writeframes(pcm16.tobytes())
    return buffer.getvalue()
