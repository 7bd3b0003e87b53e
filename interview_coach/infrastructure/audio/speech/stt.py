"""
Speech-to-text functionality using Google Cloud Speech.
"""
import logging
from typing import Iterator, List, Optional

from google.api_core.exceptions import (
    GoogleAPICallError, DeadlineExceeded, ServiceUnavailable, Cancelled, RetryError
)
from google.auth.exceptions import DefaultCredentialsError
from google.cloud import speech

from ....config import LANGUAGE_CODE, SAMPLE_RATE_TARGET

logger = logging.getLogger("speech_stt")

# Errors that mean "no transcript this time" rather than a broken setup
TRANSIENT_ERRORS = (DeadlineExceeded, ServiceUnavailable, Cancelled, RetryError)

# Synchronous recognize rejects audio over one minute
RECOGNIZE_CHUNK_SECONDS = 55


def split_pcm16(pcm16_bytes: bytes, sample_rate: int, seconds: float) -> Iterator[bytes]:
    """Yield consecutive mono PCM16 windows of at most `seconds` each."""
    step = max(2, int(sample_rate * seconds) * 2)
    for start in range(0, len(pcm16_bytes), step):
        yield pcm16_bytes[start:start + step]


class GoogleSpeechRecognizer:
    """
    Transcribes one recorded answer at a time.

    The client is created in ``start()`` so a misconfigured account is
    reported when recording begins; the recording itself carries on and
    the answer is scored from whatever text is available.
    """

    def __init__(self, language: str = LANGUAGE_CODE, sample_rate: int = SAMPLE_RATE_TARGET,
                 chunk_seconds: float = RECOGNIZE_CHUNK_SECONDS):
        self.language = language
        self.sample_rate = sample_rate
        self.chunk_seconds = chunk_seconds
        self._client: Optional[speech.SpeechClient] = None

    def start(self) -> None:
        if self._client is None:
            try:
                self._client = speech.SpeechClient()
            except DefaultCredentialsError as e:
                logger.error("Speech recognizer unavailable: %s", e)

    def stop(self) -> None:
        """Nothing is streamed, so there is nothing to flush."""

    def transcribe(self, pcm16_bytes: bytes, sample_rate: Optional[int] = None) -> str:
        """
        Synchronous Google Cloud Speech-to-Text recognition.

        Long answers are recognized in windows short enough for the
        synchronous API and the pieces joined in order.
        Returns transcribed text or empty string if no speech detected.
        """
        if not pcm16_bytes:
            return ""
        self.start()
        if self._client is None:
            return ""

        rate = sample_rate or self.sample_rate
        config = speech.RecognitionConfig(
            encoding=speech.RecognitionConfig.AudioEncoding.LINEAR16,
            sample_rate_hertz=rate,
            language_code=self.language,
            enable_automatic_punctuation=True,
        )

        texts = []
        for chunk in split_pcm16(pcm16_bytes, rate, self.chunk_seconds):
            texts.extend(self._recognize(config, chunk))
        transcript = " ".join(texts).strip()
        if not transcript:
            logger.info("No speech detected in answer")
        return transcript

    def _recognize(self, config, chunk: bytes) -> List[str]:
        try:
            resp = self._client.recognize(config=config, audio=speech.RecognitionAudio(content=chunk))
        except TRANSIENT_ERRORS as e:
            logger.warning("Speech recognition interrupted: %s", e)
            return []
        except GoogleAPICallError as e:
            logger.error("Speech recognition failed: %s", e)
            return []
        return [r.alternatives[0].transcript for r in resp.results if r.alternatives]
