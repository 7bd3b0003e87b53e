"""
Interview session state machine using service-based architecture.
"""
import time
import uuid
import logging
import threading
from typing import Optional, List, Dict, Any, Callable

from .models import (
    SessionStatus, EvaluationSource, IssuedQuestion, QuestionRecord,
    InterviewScore, SessionSummary
)
from .evaluation import EvaluationEngine
from .questions import QuestionGenerator
from .report import build_summary
from .scoring import ResponseScorer
from .services import RecordingService, RecordedAnswer, TTSService, LiveTelemetryService
from .telemetry import TelemetryAggregator
from .events import (
    SessionEventBus, EventLogger, SessionMetrics,
    SessionStartedEvent, QuestionIssuedEvent, RecordingStartedEvent,
    AnswerScoredEvent, QuestionSkippedEvent, SessionEndedEvent, ErrorOccurredEvent
)
from ..config import (
    Config, DEFAULT_JOB_ROLE, MAX_QUESTIONS, QUESTION_POINTS, SKIPPED_ANSWER,
    METRIC_FLOOR, ADVANCE_DELAY, SKIP_END_DELAY,
    SESSION_DATA_KEY, SESSION_RESUME_KEY, GENERIC_RESUME_KEY
)
from ..errors import InvalidTransitionError, DeviceAccessError, AIServiceError
from ..infrastructure.ai_service import AIServiceClient
from ..infrastructure.channel import TelemetryChannel, ChannelEvent, ChannelEventType
from ..infrastructure.data import SessionStore, MemorySessionStore
from ..infrastructure.scheduling import Scheduler, ThreadingScheduler

logger = logging.getLogger("orchestrator")

# Skip-rate thresholds -> penalty points, checked in order
SKIP_PENALTIES = ((0.8, 50.0), (0.6, 40.0), (0.4, 30.0), (0.2, 20.0))
BASE_SKIP_PENALTY = 12.0
# Skip-rate thresholds -> hard cap on the total score
SKIP_CAPS = ((0.6, 15.0), (0.4, 35.0))

CONFIDENCE_SKIP_DROP = 0.25
ENGAGEMENT_SKIP_DROP = 0.20
COMMUNICATION_SKIP_DROP = 0.15


def skip_penalty(skip_rate: float) -> float:
    for threshold, penalty in SKIP_PENALTIES:
        if skip_rate >= threshold:
            return penalty
    return BASE_SKIP_PENALTY


def apply_skip(score: InterviewScore) -> float:
    """
    Count one more skip against `score` and apply the penalties.

    Returns:
        The penalty subtracted from the total
    """
    score.questions_skipped += 1
    rate = score.skip_rate
    penalty = skip_penalty(rate)

    total = max(0.0, score.total_score - penalty)
    for threshold, cap in SKIP_CAPS:
        if rate >= threshold:
            total = min(total, cap)
            break
    score.total_score = total

    score.confidence = max(METRIC_FLOOR, score.confidence - CONFIDENCE_SKIP_DROP)
    score.engagement = max(METRIC_FLOOR, score.engagement - ENGAGEMENT_SKIP_DROP)
    score.communication = max(METRIC_FLOOR, score.communication - COMMUNICATION_SKIP_DROP)
    return penalty


def merge_answer(score: InterviewScore, answer_score: float, response_time: float) -> None:
    """Add one answered question's contribution to the running score."""
    answered = score.questions_answered
    score.total_score += answer_score * QUESTION_POINTS / 100.0
    score.average_response_time = (score.average_response_time * answered + response_time) / (answered + 1)
    score.questions_answered = answered + 1


def new_session_id() -> str:
    return f"session_{int(time.time())}_{uuid.uuid4().hex[:8]}"


class InterviewSession:
    """
    One interview attempt: NOT_STARTED -> IN_PROGRESS -> ENDED.

    Every state mutation happens under one re-entrant lock, so scheduler
    callbacks and channel events behave as if on a single logical thread.
    Remote calls run outside the lock; their results are merged only if the
    session is still on the question they belong to.
    """

    def __init__(self,
                 question_generator: QuestionGenerator,
                 evaluator: EvaluationEngine,
                 session_id: Optional[str] = None,
                 job_role: str = DEFAULT_JOB_ROLE,
                 recording_service: Optional[RecordingService] = None,
                 tts_service: Optional[TTSService] = None,
                 telemetry_service: Optional[LiveTelemetryService] = None,
                 ai_client: Optional[AIServiceClient] = None,
                 store: Optional[SessionStore] = None,
                 scheduler: Optional[Scheduler] = None,
                 event_bus: Optional[SessionEventBus] = None,
                 resume_data: Optional[Dict[str, Any]] = None,
                 max_questions: int = MAX_QUESTIONS,
                 advance_delay: float = ADVANCE_DELAY,
                 skip_end_delay: float = SKIP_END_DELAY,
                 clock: Callable[[], float] = time.time):

        self.session_id = session_id or new_session_id()
        self.job_role = job_role or DEFAULT_JOB_ROLE
        self.max_questions = max_questions
        self.advance_delay = advance_delay
        self.skip_end_delay = skip_end_delay
        self.clock = clock

        # Collaborators
        self.question_generator = question_generator
        self.evaluator = evaluator
        self.recording_service = recording_service or RecordingService()
        self.tts_service = tts_service or TTSService(use_tts=False)
        self.telemetry_service = telemetry_service
        self.ai_client = ai_client
        self.store = store if store is not None else MemorySessionStore()
        self.scheduler = scheduler or ThreadingScheduler()

        # Initialize event system
        if event_bus is None:
            event_bus = SessionEventBus()
            self.event_logger = EventLogger()
            event_bus.subscribe_all(self.event_logger.handle_event)
        self.event_bus = event_bus
        self.metrics = SessionMetrics()
        self.event_bus.subscribe_all(self.metrics.handle_event)

        # Session state
        self.status = SessionStatus.NOT_STARTED
        self.recording = False
        self.question_index = 0
        self.current_question: Optional[IssuedQuestion] = None
        self.score = InterviewScore()
        self.telemetry = TelemetryAggregator()
        self.channel_connected = False
        self.started_at: Optional[float] = None
        self.summary: Optional[SessionSummary] = None
        self._summary_saved = False
        self._records: List[QuestionRecord] = []
        self._lock = threading.RLock()

        self.resume_data = resume_data if resume_data is not None else self._load_resume()
        self.has_resume = self.resume_data is not None

        if self.telemetry_service is not None and self.telemetry_service.channel is not None:
            self._subscribe_channel(self.telemetry_service.channel)

    @classmethod
    def from_config(cls,
                    config: Config,
                    job_role: str = DEFAULT_JOB_ROLE,
                    text_mode: bool = False,
                    resume_data: Optional[Dict[str, Any]] = None,
                    session_id: Optional[str] = None) -> "InterviewSession":
        """Wire a session to the real AI service, devices and telemetry channel."""
        from ..infrastructure.channel import WebSocketTelemetryChannel
        from ..infrastructure.data import FileSessionStore

        client = AIServiceClient(config.ai_service_url, config.request_timeout, config.report_timeout)
        scheduler = ThreadingScheduler()

        recorder = recognizer = synthesizer = snapshotter = None
        if not text_mode:
            from ..infrastructure.audio import MicrophoneRecorder
            from ..infrastructure.audio.speech import GoogleSpeechRecognizer
            recorder = MicrophoneRecorder()
            recognizer = GoogleSpeechRecognizer(language=config.language_code)
        if config.enable_tts:
            from ..infrastructure.audio.speech import GoogleSpeechSynthesizer
            synthesizer = GoogleSpeechSynthesizer(voice=config.tts_voice, language_code=config.language_code)
        if config.enable_video:
            from ..infrastructure.video import WebcamSnapshotter
            snapshotter = WebcamSnapshotter(device=config.camera_device)

        telemetry_service = LiveTelemetryService(
            channel=WebSocketTelemetryChannel(config.telemetry_ws_url),
            scheduler=scheduler,
            snapshotter=snapshotter,
            video_enabled=config.enable_video,
            heartbeat_interval=config.heartbeat_interval,
            snapshot_interval=config.snapshot_interval,
        )

        return cls(
            question_generator=QuestionGenerator(client),
            evaluator=EvaluationEngine(client, ResponseScorer()),
            session_id=session_id,
            job_role=job_role,
            recording_service=RecordingService(recorder, recognizer),
            tts_service=TTSService(synthesizer, use_tts=config.enable_tts),
            telemetry_service=telemetry_service,
            ai_client=client,
            store=FileSessionStore(config.workdir),
            scheduler=scheduler,
            resume_data=resume_data,
            max_questions=config.max_questions,
            advance_delay=config.advance_delay,
            skip_end_delay=config.skip_end_delay,
        )

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def records(self) -> List[QuestionRecord]:
        with self._lock:
            return list(self._records)

    @property
    def summary_key(self) -> str:
        return SESSION_DATA_KEY.format(session_id=self.session_id)

    def get_metrics(self) -> Dict[str, int]:
        """Get current session metrics."""
        return self.metrics.get_metrics()

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Begin the session and issue the first question."""
        with self._lock:
            if self.status is not SessionStatus.NOT_STARTED:
                raise InvalidTransitionError("start", self.status.value)
            self.status = SessionStatus.IN_PROGRESS
            self.started_at = self.clock()
            logger.info(f"Session {self.session_id} started for role '{self.job_role}' "
                        f"(resume: {self.has_resume})")
            self.event_bus.emit(SessionStartedEvent(
                self.session_id, self.started_at, self.job_role, self.max_questions
            ))

        if self.telemetry_service is not None:
            self.telemetry_service.start(self.session_id)

        self._issue_next_question()

    def _issue_next_question(self) -> Optional[IssuedQuestion]:
        with self._lock:
            if self.status is not SessionStatus.IN_PROGRESS:
                return None
            if self.score.questions_attempted >= self.max_questions:
                number = None
            else:
                self.question_index += 1
                self.current_question = None
                number = self.question_index

        if number is None:
            self.end()
            return None

        generated = self.question_generator.generate(
            self.session_id, self.job_role, number, self.resume_data
        )

        with self._lock:
            if self.status is not SessionStatus.IN_PROGRESS or self.question_index != number:
                logger.info(f"Discarding question {number}: session moved on")
                return None
            question = IssuedQuestion(
                number=number,
                text=generated.text,
                category=generated.category,
                difficulty=generated.difficulty,
                issued_at=self.clock(),
                fallback=generated.fallback,
            )
            self.current_question = question
            logger.info(f"Question {number}/{self.max_questions} "
                        f"[{question.category}/{question.difficulty.value}]: {question.text}")
            self.event_bus.emit(QuestionIssuedEvent(
                self.session_id, question.issued_at, number, question.text,
                question.category, question.difficulty.value, question.fallback
            ))

        self.tts_service.speak_or_print(question.text)
        return question

    def _require_active_question(self, operation: str) -> IssuedQuestion:
        if self.status is not SessionStatus.IN_PROGRESS:
            raise InvalidTransitionError(operation, self.status.value)
        if self.current_question is None:
            raise InvalidTransitionError(operation, "waiting for a question")
        return self.current_question

    def begin_recording(self) -> None:
        """
        Start capturing the answer to the current question.

        Raises:
            InvalidTransitionError: No active question, or already recording
            DeviceAccessError: Microphone unavailable; session state is unchanged
        """
        with self._lock:
            question = self._require_active_question("begin recording")
            if self.recording:
                raise InvalidTransitionError("begin recording", "recording")

            try:
                self.recording_service.start()
            except DeviceAccessError as e:
                logger.error(f"Recording failed to start: {e}")
                self.event_bus.emit(ErrorOccurredEvent(
                    self.session_id, self.clock(), type(e).__name__, str(e), "recording"
                ))
                raise

            self.recording = True
            self.event_bus.emit(RecordingStartedEvent(self.session_id, self.clock(), question.number))

    def end_recording(self, transcript: Optional[str] = None) -> Optional[QuestionRecord]:
        """
        Stop capture, score the answer and schedule the next question.

        Args:
            transcript: Typed answer; overrides speech recognition when given

        Returns:
            The new record, or None when the result arrived after the session moved on
        """
        with self._lock:
            if not self.recording:
                raise InvalidTransitionError("end recording", "not recording")
            self.recording = False
            question = self.current_question
            # The question is consumed; nothing else may act on it while it is scored
            self.current_question = None
            response_time = max(0.0, self.clock() - question.issued_at)
            facial = self.telemetry.recent_facial_averages()

        # Speech recognition is a remote call
        answer = self.recording_service.stop()
        text = (transcript if transcript is not None else answer.transcript).strip()
        voice_analysis = self._analyze_voice(answer, question.number)
        evaluation = self.evaluator.evaluate(
            transcript=text,
            response_time=response_time,
            question=question.text,
            session_id=self.session_id,
            job_role=self.job_role,
            voice_analysis=voice_analysis,
            facial=facial,
        )

        with self._lock:
            if self.status is not SessionStatus.IN_PROGRESS or self.question_index != question.number:
                logger.warning(f"Discarding stale evaluation for question {question.number}")
                return None

            merge_answer(self.score, evaluation.score, response_time)
            record = QuestionRecord(
                number=question.number,
                question=question.text,
                category=question.category,
                difficulty=question.difficulty,
                answer=text,
                response_time=response_time,
                score=evaluation.score,
                timestamp=self.clock(),
                feedback=evaluation.feedback,
                strengths=tuple(evaluation.strengths),
                improvements=tuple(evaluation.improvements),
                source=evaluation.source,
            )
            self._records.append(record)
            logger.info(f"Answer {question.number} scored {evaluation.score:.1f} ({evaluation.source.value}), "
                        f"total {self.score.total_score:.1f}")
            self.event_bus.emit(AnswerScoredEvent(
                self.session_id, record.timestamp, record.number, record.score,
                record.source.value, response_time, self.score.total_score
            ))
            self.scheduler.call_later(self.advance_delay, self._issue_next_question)
            return record

    def _analyze_voice(self, answer: RecordedAnswer, number: int) -> Optional[Dict[str, Any]]:
        """Best-effort voice analysis of the recorded audio."""
        if self.ai_client is None or not answer.has_audio:
            return None
        try:
            result = self.ai_client.analyze_voice(answer.audio.wav, self.session_id, number)
        except AIServiceError as e:
            logger.warning(f"Voice analysis failed: {e}")
            return None
        with self._lock:
            if self.status is SessionStatus.IN_PROGRESS:
                self.telemetry.ingest_voice(result)
        return result

    def skip(self) -> QuestionRecord:
        """Skip the current question, applying the skip penalties."""
        with self._lock:
            question = self._require_active_question("skip")
            if self.recording:
                raise InvalidTransitionError("skip", "recording")

            self.current_question = None
            penalty = apply_skip(self.score)
            record = QuestionRecord(
                number=question.number,
                question=question.text,
                category=question.category,
                difficulty=question.difficulty,
                answer=SKIPPED_ANSWER,
                response_time=0.0,
                score=0.0,
                timestamp=self.clock(),
                source=EvaluationSource.SKIPPED,
            )
            self._records.append(record)
            logger.info(f"Question {question.number} skipped: penalty {penalty:.0f}, "
                        f"skip rate {self.score.skip_rate:.2f}, total {self.score.total_score:.1f}")
            self.event_bus.emit(QuestionSkippedEvent(
                self.session_id, record.timestamp, record.number, penalty,
                self.score.skip_rate, self.score.total_score
            ))
            finished = self.score.questions_attempted >= self.max_questions
            if finished:
                self.scheduler.call_later(self.skip_end_delay, self.end)

        if not finished:
            self._issue_next_question()
        return record

    def end(self) -> SessionSummary:
        """
        Finish the session and store its summary. Safe to call more than once.

        Teardown runs even when storing the summary fails; calling again
        retries the store write.

        Returns:
            The session summary (the same object on repeated calls)

        Raises:
            InvalidTransitionError: Session not started, or closed without a summary
            OSError: The summary could not be stored
        """
        with self._lock:
            if self.status is SessionStatus.ENDED:
                if self.summary is None:
                    raise InvalidTransitionError("end", "closed")
                if not self._summary_saved:
                    self._save_summary()
                return self.summary
            if self.status is SessionStatus.NOT_STARTED:
                raise InvalidTransitionError("end", self.status.value)

            was_recording = self.recording
            self.recording = False
            self.status = SessionStatus.ENDED
            self.current_question = None
            self.scheduler.cancel_all()

            summary = build_summary(
                session_id=self.session_id,
                job_role=self.job_role,
                has_resume=self.has_resume,
                questions_issued=self.question_index,
                score=self.score,
                records=self._records,
                telemetry=self.telemetry,
                started_at=self.started_at,
            )
            self.summary = summary
            logger.info(f"Session {self.session_id} ended: total {self.score.total_score:.1f}, "
                        f"answered {self.score.questions_answered}, skipped {self.score.questions_skipped}")
            self.event_bus.emit(SessionEndedEvent(
                self.session_id, summary.ended_at, self.score.total_score,
                self.score.questions_answered, self.score.questions_skipped
            ))

        try:
            self._save_summary()
        finally:
            # Outside the lock: the channel reader may be waiting on it
            if was_recording:
                self.recording_service.stop()
            if self.telemetry_service is not None:
                self.telemetry_service.stop()
            self.telemetry.clear()
        return summary

    def _save_summary(self) -> None:
        with self._lock:
            if self._summary_saved:
                return
            try:
                self.store.save(self.summary_key, self.summary.to_dict())
            except OSError as e:
                logger.error(f"Could not store summary for session {self.session_id}: {e}")
                raise
            self._summary_saved = True

    def close(self) -> None:
        """Tear down timers, devices and the channel without building a summary."""
        with self._lock:
            self.scheduler.cancel_all()
            was_recording = self.recording
            self.recording = False
            if self.status is not SessionStatus.ENDED:
                logger.info(f"Session {self.session_id} closed before it ended")
                self.status = SessionStatus.ENDED
                self.current_question = None

        if was_recording:
            self.recording_service.stop()
        if self.telemetry_service is not None:
            self.telemetry_service.stop()

    # ------------------------------------------------------------------
    # Telemetry channel
    # ------------------------------------------------------------------

    def _subscribe_channel(self, channel: TelemetryChannel) -> None:
        channel.subscribe(ChannelEventType.CONNECTED, self._on_channel_connected)
        channel.subscribe(ChannelEventType.DISCONNECTED, self._on_channel_disconnected)
        channel.subscribe(ChannelEventType.FACIAL_RESULT, self._on_facial_result)
        channel.subscribe(ChannelEventType.VOICE_RESULT, self._on_voice_result)
        channel.subscribe(ChannelEventType.ERROR, self._on_channel_error)

    def _on_channel_connected(self, event: ChannelEvent) -> None:
        with self._lock:
            self.channel_connected = True

    def _on_channel_disconnected(self, event: ChannelEvent) -> None:
        with self._lock:
            self.channel_connected = False

    def _on_facial_result(self, event: ChannelEvent) -> None:
        with self._lock:
            if self.status is not SessionStatus.IN_PROGRESS:
                return
            self.telemetry.ingest_facial(event.data, event.timestamp)
            self.telemetry.running_metrics(self.score)

    def _on_voice_result(self, event: ChannelEvent) -> None:
        with self._lock:
            if self.status is not SessionStatus.IN_PROGRESS:
                return
            self.telemetry.ingest_voice(event.data, event.timestamp)

    def _on_channel_error(self, event: ChannelEvent) -> None:
        message = str(event.data.get("message", "unknown channel error"))
        logger.warning(f"Telemetry channel error: {message}")
        self.event_bus.emit(ErrorOccurredEvent(
            self.session_id, event.timestamp, "ChannelError", message, "telemetry_channel"
        ))

    # ------------------------------------------------------------------

    def _load_resume(self) -> Optional[Dict[str, Any]]:
        for key in (SESSION_RESUME_KEY.format(session_id=self.session_id), GENERIC_RESUME_KEY):
            data = self.store.load(key)
            if data:
                logger.info(f"Using resume data from '{key}'")
                return data
        return None
