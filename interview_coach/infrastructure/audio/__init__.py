"""
Audio capture and speech services for the interview session.

- processing: microphone capture and signal processing
- speech: Google Cloud speech-to-text and text-to-speech
"""

from .processing import CapturedAudio, MicrophoneRecorder, prepare_answer_audio

__all__ = [
    "CapturedAudio",
    "MicrophoneRecorder",
    "prepare_answer_audio",
]
