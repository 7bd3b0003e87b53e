import io
import wave

import numpy as np
import pytest

from interview_coach.infrastructure.audio import prepare_answer_audio
from interview_coach.infrastructure.audio.processing import (
    pcm16_to_float, stereo_to_mono, remove_dc, resample, normalize_audio, wav_bytes
)


def tone(seconds, sr, channels=1, amplitude=0.3):
    t = np.arange(int(seconds * sr)) / sr
    wave_ = amplitude * np.sin(2 * np.pi * 440 * t)
    frames = np.repeat(wave_[:, None], channels, axis=1)
    return (frames * 32767).astype(np.int16).tobytes()


def test_stereo_48k_becomes_mono_16k():
    audio = prepare_answer_audio(tone(0.5, 48000, channels=2), channels=2, sr_capture=48000, sr_target=16000)

    assert audio.sample_rate == 16000
    assert audio.duration == pytest.approx(0.5)
    assert len(audio.pcm16) == 8000 * 2
    with wave.open(io.BytesIO(audio.wav)) as wf:
        assert wf.getnchannels() == 1
        assert wf.getframerate() == 16000
        assert wf.getnframes() == 8000


def test_empty_capture():
    audio = prepare_answer_audio(b"", channels=1)
    assert audio.empty
    assert audio.duration == 0.0
    assert audio.wav == b""


def test_normalization_reaches_target_rms():
    x = remove_dc(stereo_to_mono(pcm16_to_float(tone(0.2, 16000, channels=2), channels=2)))
    y = normalize_audio(x, target_rms=0.06)
    assert float(np.sqrt(np.mean(y ** 2))) == pytest.approx(0.06, rel=1e-3)


def test_normalization_gain_is_capped():
    quiet = np.full(100, 1e-4, dtype=np.float32)
    assert np.max(np.abs(normalize_audio(quiet, target_rms=0.5))) == pytest.approx(2e-3)


def test_resample_same_rate_is_identity():
    x = np.linspace(-1, 1, 32).astype(np.float32)
    assert np.array_equal(resample(x, 16000, 16000), x)


def test_wav_bytes_header():
    data = wav_bytes(np.zeros(10, dtype=np.int16), 16000)
    assert data[:4] == b"RIFF"
