from types import SimpleNamespace

from google.api_core.exceptions import InvalidArgument

from interview_coach.infrastructure.audio.speech.stt import GoogleSpeechRecognizer, split_pcm16

SAMPLE_RATE = 16000
BYTES_PER_SECOND = SAMPLE_RATE * 2


def result(text):
    return SimpleNamespace(results=[SimpleNamespace(alternatives=[SimpleNamespace(transcript=text)])])


class FakeSpeechClient:
    """Rejects audio over a minute, like the synchronous API."""

    def __init__(self, *replies):
        self.replies = list(replies)
        self.seconds = []

    def recognize(self, config, audio):
        seconds = len(audio.content) / BYTES_PER_SECOND
        self.seconds.append(seconds)
        if seconds > 60:
            raise InvalidArgument("Sync input too long")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


def recognizer_with(client):
    recognizer = GoogleSpeechRecognizer(sample_rate=SAMPLE_RATE)
    recognizer._client = client
    return recognizer


def test_split_keeps_every_byte_in_order():
    data = bytes(range(256)) * 10
    chunks = list(split_pcm16(data, sample_rate=100, seconds=1))
    assert all(len(c) <= 200 for c in chunks)
    assert b"".join(chunks) == data


def test_ninety_second_answer_is_fully_transcribed():
    client = FakeSpeechClient(result("first part of the answer"), result("and the rest"))
    recognizer = recognizer_with(client)

    transcript = recognizer.transcribe(b"\x00\x01" * (SAMPLE_RATE * 90))

    assert transcript == "first part of the answer and the rest"
    assert client.seconds == [55, 35]


def test_failed_window_keeps_other_text():
    client = FakeSpeechClient(InvalidArgument("bad audio"), result("second window"))
    recognizer = recognizer_with(client)

    assert recognizer.transcribe(b"\x00\x01" * (SAMPLE_RATE * 70)) == "second window"


def test_empty_audio_skips_recognition():
    client = FakeSpeechClient()
    assert recognizer_with(client).transcribe(b"") == ""
    assert client.seconds == []
