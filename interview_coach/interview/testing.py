"""
Testing infrastructure with mock services for the interview session.
"""
import heapq
import random
import itertools
from typing import Dict, Any, List, Optional, Callable, Union

from .evaluation import EvaluationEngine
from .orchestrator import InterviewSession
from .questions import QuestionGenerator
from .scoring import ResponseScorer
from .services import RecordingService, TTSService, LiveTelemetryService
from ..errors import AIServiceError, DeviceAccessError
from ..infrastructure.audio import CapturedAudio
from ..infrastructure.channel import TelemetryChannel, ChannelEvent, ChannelEventType
from ..infrastructure.data import MemorySessionStore
from ..infrastructure.scheduling import Scheduler, TimerHandle


class ManualScheduler(Scheduler):
    """Scheduler driven by an explicit fake clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start
        self._queue = []
        self._seq = itertools.count()
        self._handles: List[TimerHandle] = []

    def time(self) -> float:
        return self.now

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        handle = TimerHandle()
        heapq.heappush(self._queue, (self.now + delay, next(self._seq), None, handle, callback))
        self._handles.append(handle)
        return handle

    def call_every(self, interval: float, callback: Callable[[], None]) -> TimerHandle:
        handle = TimerHandle()
        heapq.heappush(self._queue, (self.now + interval, next(self._seq), interval, handle, callback))
        self._handles.append(handle)
        return handle

    def cancel_all(self) -> None:
        for handle in self._handles:
            handle.cancel()
        self._handles = []

    @property
    def pending(self) -> int:
        return sum(1 for entry in self._queue if not entry[3].cancelled)

    def advance(self, seconds: float) -> int:
        """Move the clock forward, running every callback that falls due. Returns how many ran."""
        deadline = self.now + seconds
        ran = 0
        while self._queue and self._queue[0][0] <= deadline:
            due, _, interval, handle, callback = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self.now = due
            if interval is not None:
                heapq.heappush(self._queue, (due + interval, next(self._seq), interval, handle, callback))
            callback()
            ran += 1
        self.now = deadline
        return ran


class FakeTelemetryChannel(TelemetryChannel):
    """In-memory channel; tests push analysis results with the emit_* helpers."""

    def __init__(self, connect_ok: bool = True):
        super().__init__()
        self.connect_ok = connect_ok
        self.session_id: Optional[str] = None
        self.snapshots: List[str] = []
        self.heartbeats = 0
        self.disconnect_calls = 0

    def connect(self, session_id: str) -> bool:
        self.session_id = session_id
        if not self.connect_ok:
            self._dispatch(ChannelEvent(ChannelEventType.ERROR, {"message": "connection refused"}))
            return False
        self._dispatch(ChannelEvent(ChannelEventType.CONNECTED, {"session_id": session_id}))
        return True

    def disconnect(self) -> None:
        self.disconnect_calls += 1
        if self.connected:
            self._dispatch(ChannelEvent(ChannelEventType.DISCONNECTED, {}))

    def send_snapshot(self, image_b64: str) -> bool:
        if not self.connected:
            return False
        self.snapshots.append(image_b64)
        return True

    def send_heartbeat(self) -> bool:
        if not self.connected:
            return False
        self.heartbeats += 1
        return True

    def emit_facial(self, data: Dict[str, float], timestamp: Optional[float] = None) -> None:
        event = ChannelEvent(ChannelEventType.FACIAL_RESULT, data)
        if timestamp is not None:
            event.timestamp = timestamp
        self._dispatch(event)

    def emit_voice(self, data: Dict[str, Any]) -> None:
        self._dispatch(ChannelEvent(ChannelEventType.VOICE_RESULT, data))

    def emit_error(self, message: str) -> None:
        self._dispatch(ChannelEvent(ChannelEventType.ERROR, {"message": message}))


Response = Union[Dict[str, Any], Exception]


class MockAIServiceClient:
    """
    Stand-in for AIServiceClient.

    Each endpoint returns its queued responses in order, then the default.
    Queue an exception instance to make a call fail.
    """

    def __init__(self,
                 questions: Optional[List[Union[str, Exception]]] = None,
                 evaluations: Optional[List[Response]] = None,
                 voice_results: Optional[List[Response]] = None,
                 reports: Optional[List[Response]] = None):
        self.questions = list(questions or [])
        self.evaluations = list(evaluations or [])
        self.voice_results = list(voice_results or [])
        self.reports = list(reports or [])
        self.request_history: List[Dict[str, Any]] = []

    @staticmethod
    def _next(queue: list, default):
        value = queue.pop(0) if queue else default
        if isinstance(value, Exception):
            raise value
        return value

    def generate_question(self, session_id, job_role, category, difficulty, resume_data=None) -> str:
        self.request_history.append({
            "endpoint": "/generate/question", "session_id": session_id, "job_role": job_role,
            "category": category, "difficulty": difficulty, "resume_data": resume_data
        })
        return self._next(self.questions, AIServiceError("no mock question queued"))

    def evaluate_answer(self, answer_text, question, session_id, response_time, job_role,
                        voice_analysis=None) -> Dict[str, Any]:
        self.request_history.append({
            "endpoint": "/evaluate/comprehensive", "answer_text": answer_text, "question": question,
            "response_time": response_time, "voice_analysis": voice_analysis
        })
        return self._next(self.evaluations, AIServiceError("no mock evaluation queued"))

    def analyze_voice(self, audio, session_id, question_id, filename="response.wav",
                      content_type="audio/wav") -> Dict[str, Any]:
        self.request_history.append({"endpoint": "/analyze/voice", "question_id": question_id, "bytes": len(audio)})
        return self._next(self.voice_results, AIServiceError("no mock voice analysis queued"))

    def generate_report(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        self.request_history.append({"endpoint": "/generate/comprehensive-evaluation", "payload": payload})
        return self._next(self.reports, AIServiceError("no mock report queued"))

    def calls(self, endpoint: str) -> List[Dict[str, Any]]:
        return [r for r in self.request_history if r["endpoint"] == endpoint]


class MockRecorder:
    """Recorder that hands back canned audio, or fails to open."""

    def __init__(self, audio: Optional[CapturedAudio] = None, fail_with: Optional[Exception] = None):
        self.audio = audio or CapturedAudio(pcm16=b"\x00\x01" * 160, wav=b"RIFFmock", sample_rate=16000, duration=0.01)
        self.fail_with = fail_with
        self.recording = False
        self.start_calls = 0

    def start(self) -> None:
        self.start_calls += 1
        if self.fail_with is not None:
            raise self.fail_with
        self.recording = True

    def stop(self) -> CapturedAudio:
        self.recording = False
        return self.audio


class MockRecognizer:
    """Returns queued transcripts in order."""

    def __init__(self, transcripts: Optional[List[str]] = None, fail_on_start: bool = False):
        self.transcripts = list(transcripts or [])
        self.fail_on_start = fail_on_start

    def start(self) -> None:
        if self.fail_on_start:
            raise RuntimeError("recognizer unavailable")

    def stop(self) -> None:
        pass

    def transcribe(self, pcm16_bytes: bytes, sample_rate: Optional[int] = None) -> str:
        return self.transcripts.pop(0) if self.transcripts else ""


class MockSnapshotter:
    """Camera stand-in producing a fixed image."""

    def __init__(self, image: str = "aW1hZ2U=", fail_on_open: bool = False):
        self.image = image
        self.fail_on_open = fail_on_open
        self.opened = False

    def open(self) -> None:
        if self.fail_on_open:
            raise DeviceAccessError("camera permission denied")
        self.opened = True

    def snapshot(self) -> Optional[str]:
        return self.image if self.opened else None

    def close(self) -> None:
        self.opened = False


class MockTTSService(TTSService):
    """Mock TTS service for testing."""

    def __init__(self):
        # Don't call super().__init__ to avoid creating a synthesizer
        self.use_tts = False
        self.spoken_messages = []

    def speak_or_print(self, message: str, prefix: str = "🤖"):
        """Record instead of speaking."""
        self.spoken_messages.append(message)


def create_mock_session(client: Optional[MockAIServiceClient] = None,
                        recorder: Optional[MockRecorder] = None,
                        recognizer: Optional[MockRecognizer] = None,
                        channel: Optional[FakeTelemetryChannel] = None,
                        snapshotter: Optional[MockSnapshotter] = None,
                        seed: int = 7,
                        **session_kwargs) -> Dict[str, Any]:
    """
    Build an InterviewSession wired entirely to fakes.

    Returns:
        Dict with the session and every collaborator, keyed by role
    """
    client = client or MockAIServiceClient()
    scheduler = ManualScheduler()
    channel = channel or FakeTelemetryChannel()
    store = session_kwargs.pop("store", None) or MemorySessionStore()
    tts = MockTTSService()
    scorer = ResponseScorer(rng=random.Random(seed))

    telemetry_service = LiveTelemetryService(
        channel=channel,
        scheduler=scheduler,
        snapshotter=snapshotter,
        video_enabled=snapshotter is not None,
    )
    session = InterviewSession(
        question_generator=QuestionGenerator(client),
        evaluator=EvaluationEngine(client, scorer),
        recording_service=RecordingService(recorder, recognizer),
        tts_service=tts,
        telemetry_service=telemetry_service,
        ai_client=client,
        store=store,
        scheduler=scheduler,
        clock=scheduler.time,
        **session_kwargs
    )
    return {
        "session": session,
        "client": client,
        "scheduler": scheduler,
        "channel": channel,
        "store": store,
        "tts": tts,
        "telemetry_service": telemetry_service,
    }
