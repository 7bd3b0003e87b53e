"""Audio processing and capture modules."""

# Import processing functions immediately (numpy/scipy only)
from .processing import (
    pcm16_to_float,
    stereo_to_mono,
    remove_dc,
    resample,
    normalize_audio,
    float_to_pcm16,
    wav_bytes
)
from .capture import CapturedAudio, MicrophoneRecorder, prepare_answer_audio

__all__ = [
    "CapturedAudio",
    "MicrophoneRecorder",
    "prepare_answer_audio",
    "pcm16_to_float",
    "stereo_to_mono",
    "remove_dc",
    "resample",
    "normalize_audio",
    "float_to_pcm16",
    "wav_bytes"
]
