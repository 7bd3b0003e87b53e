"""
Text-to-speech functionality using Google Cloud TTS.
"""
import os
import shutil
import subprocess
import tempfile
import logging
from typing import Optional

from google.api_core.exceptions import GoogleAPICallError
from google.auth.exceptions import DefaultCredentialsError
from google.cloud import texttospeech

from ....config import (
    TTS_VOICE, LANGUAGE_CODE, TTS_SAMPLE_RATE,
    TTS_SPEAKING_RATE, TTS_PITCH
)

logger = logging.getLogger("speech_tts")

# Command-line players tried in order
PLAYERS = (["afplay"], ["aplay", "-q"], ["paplay"])


def find_player() -> Optional[list]:
    for cmd in PLAYERS:
        if shutil.which(cmd[0]):
            return cmd
    return None


class GoogleSpeechSynthesizer:
    """Speaks interview questions with Google Cloud TTS, printing them when audio is unavailable."""

    def __init__(self, voice: str = TTS_VOICE, language_code: str = LANGUAGE_CODE,
                 sample_rate: int = TTS_SAMPLE_RATE, speaking_rate: float = TTS_SPEAKING_RATE,
                 pitch: float = TTS_PITCH):
        self.voice = voice
        self.language_code = language_code
        self.sample_rate = sample_rate
        self.speaking_rate = speaking_rate
        # Google expects semitones; config holds a multiplier around 1.0
        self.pitch = (pitch - 1.0) * 20.0
        self._client: Optional[texttospeech.TextToSpeechClient] = None
        self._player = find_player()

    def synthesize(self, text: str) -> bytes:
        """Return LINEAR16 WAV bytes for `text`."""
        if self._client is None:
            self._client = texttospeech.TextToSpeechClient()

        response = self._client.synthesize_speech(
            input=texttospeech.SynthesisInput(text=text),
            voice=texttospeech.VoiceSelectionParams(
                language_code=self.language_code,
                name=self.voice
            ),
            audio_config=texttospeech.AudioConfig(
                audio_encoding=texttospeech.AudioEncoding.LINEAR16,
                sample_rate_hertz=self.sample_rate,
                speaking_rate=self.speaking_rate,
                pitch=self.pitch
            )
        )
        return response.audio_content

    def say(self, text: str) -> bool:
        """
        Speak `text`; returns False when it had to be printed instead.
        """
        if not text.strip():
            return True
        if self._player is None:
            print(f"🤖 {text}")
            return False

        try:
            audio = self.synthesize(text)
        except (GoogleAPICallError, DefaultCredentialsError) as e:
            logger.error(f"Google TTS failed: {e}")
            print(f"🤖 {text}")
            return False

        with tempfile.NamedTemporaryFile(suffix='.wav', delete=False) as tmp_file:
            wav_path = tmp_file.name
            tmp_file.write(audio)
        try:
            subprocess.run(self._player + [wav_path], check=True, capture_output=True)
            return True
        except (OSError, subprocess.CalledProcessError) as e:
            logger.warning(f"Audio playback failed: {e}")
            print(f"🤖 {text}")
            return False
        finally:
            try:
                os.unlink(wav_path)
            except OSError:
                pass
