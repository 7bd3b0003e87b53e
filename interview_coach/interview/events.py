"""
Event-driven notifications for the interview session engine.
"""
import logging
from abc import ABC
from typing import Dict, Any, List, Callable
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger("events")


class EventType(str, Enum):
    """Types of session events."""
    SESSION_STARTED = "session_started"
    QUESTION_ISSUED = "question_issued"
    RECORDING_STARTED = "recording_started"
    ANSWER_SCORED = "answer_scored"
    QUESTION_SKIPPED = "question_skipped"
    SESSION_ENDED = "session_ended"
    ERROR_OCCURRED = "error_occurred"


@dataclass
class SessionEvent(ABC):
    """Base class for all session events."""
    event_type: EventType
    session_id: str
    timestamp: float
    data: Dict[str, Any]


@dataclass
class SessionStartedEvent(SessionEvent):
    """Event fired when a session begins."""
    def __init__(self, session_id: str, timestamp: float, job_role: str, max_questions: int):
        super().__init__(
            event_type=EventType.SESSION_STARTED,
            session_id=session_id,
            timestamp=timestamp,
            data={"job_role": job_role, "max_questions": max_questions}
        )


@dataclass
class QuestionIssuedEvent(SessionEvent):
    """Event fired when a new question is put to the candidate."""
    def __init__(self, session_id: str, timestamp: float, number: int, question: str,
                 category: str, difficulty: str, fallback: bool):
        super().__init__(
            event_type=EventType.QUESTION_ISSUED,
            session_id=session_id,
            timestamp=timestamp,
            data={
                "number": number,
                "question": question,
                "category": category,
                "difficulty": difficulty,
                "fallback": fallback
            }
        )


@dataclass
class RecordingStartedEvent(SessionEvent):
    """Event fired when answer recording begins."""
    def __init__(self, session_id: str, timestamp: float, number: int):
        super().__init__(
            event_type=EventType.RECORDING_STARTED,
            session_id=session_id,
            timestamp=timestamp,
            data={"number": number}
        )


@dataclass
class AnswerScoredEvent(SessionEvent):
    """Event fired when an answer has been evaluated and merged."""
    def __init__(self, session_id: str, timestamp: float, number: int, score: float,
                 source: str, response_time: float, total_score: float):
        super().__init__(
            event_type=EventType.ANSWER_SCORED,
            session_id=session_id,
            timestamp=timestamp,
            data={
                "number": number,
                "score": score,
                "source": source,
                "response_time": response_time,
                "total_score": total_score
            }
        )


@dataclass
class QuestionSkippedEvent(SessionEvent):
    """Event fired when the candidate skips a question."""
    def __init__(self, session_id: str, timestamp: float, number: int, penalty: float,
                 skip_rate: float, total_score: float):
        super().__init__(
            event_type=EventType.QUESTION_SKIPPED,
            session_id=session_id,
            timestamp=timestamp,
            data={
                "number": number,
                "penalty": penalty,
                "skip_rate": skip_rate,
                "total_score": total_score
            }
        )


@dataclass
class SessionEndedEvent(SessionEvent):
    """Event fired once when the session reaches its terminal state."""
    def __init__(self, session_id: str, timestamp: float, total_score: float,
                 questions_answered: int, questions_skipped: int):
        super().__init__(
            event_type=EventType.SESSION_ENDED,
            session_id=session_id,
            timestamp=timestamp,
            data={
                "total_score": total_score,
                "questions_answered": questions_answered,
                "questions_skipped": questions_skipped
            }
        )


@dataclass
class ErrorOccurredEvent(SessionEvent):
    """Event fired when an error occurs."""
    def __init__(self, session_id: str, timestamp: float, error_type: str,
                 error_message: str, component: str):
        super().__init__(
            event_type=EventType.ERROR_OCCURRED,
            session_id=session_id,
            timestamp=timestamp,
            data={
                "error_type": error_type,
                "error_message": error_message,
                "component": component
            }
        )


EventHandler = Callable[[SessionEvent], None]


class SessionEventBus:
    """Event bus for session communication."""

    def __init__(self):
        self._handlers: Dict[EventType, List[EventHandler]] = {}
        self._global_handlers: List[EventHandler] = []

    def subscribe(self, event_type: EventType, handler: EventHandler) -> None:
        """
        Subscribe to specific event type.

        Args:
            event_type: Type of event to listen for
            handler: Function to call when event occurs
        """
        self._handlers.setdefault(event_type, []).append(handler)
        logger.debug(f"Subscribed handler to {event_type}")

    def subscribe_all(self, handler: EventHandler) -> None:
        """Subscribe to all events."""
        self._global_handlers.append(handler)
        logger.debug("Subscribed global handler")

    def unsubscribe(self, event_type: EventType, handler: EventHandler) -> None:
        """Unsubscribe from specific event type."""
        if event_type in self._handlers:
            try:
                self._handlers[event_type].remove(handler)
                logger.debug(f"Unsubscribed handler from {event_type}")
            except ValueError:
                logger.warning(f"Handler not found for {event_type}")

    def emit(self, event: SessionEvent) -> None:
        """
        Emit an event to all subscribers.

        A failing handler is logged and does not stop delivery to the others.
        """
        logger.debug(f"Emitting event: {event.event_type} for session {event.session_id}")

        for handler in list(self._handlers.get(event.event_type, [])):
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Error in event handler for {event.event_type}: {e}")

        for handler in list(self._global_handlers):
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Error in global event handler: {e}")


class EventLogger:
    """Logs all events for debugging and analysis."""

    def __init__(self, log_level: int = logging.INFO):
        self.logger = logging.getLogger("event_logger")
        self.logger.setLevel(log_level)

    def handle_event(self, event: SessionEvent) -> None:
        """Log event details."""
        self.logger.info(f"Event: {event.event_type.value} | Session: {event.session_id} | Data: {event.data}")


class SessionMetrics:
    """Collects counters from session events."""

    def __init__(self):
        self.reset()

    def handle_event(self, event: SessionEvent) -> None:
        """Update metrics based on event."""
        if event.event_type == EventType.SESSION_STARTED:
            self.sessions_started += 1
        elif event.event_type == EventType.QUESTION_ISSUED:
            self.questions_issued += 1
            if event.data.get("fallback"):
                self.fallback_questions += 1
        elif event.event_type == EventType.ANSWER_SCORED:
            self.answers_scored += 1
            if event.data.get("source") == "remote":
                self.remote_evaluations += 1
            else:
                self.local_evaluations += 1
        elif event.event_type == EventType.QUESTION_SKIPPED:
            self.questions_skipped += 1
        elif event.event_type == EventType.SESSION_ENDED:
            self.sessions_ended += 1
        elif event.event_type == EventType.ERROR_OCCURRED:
            self.errors_occurred += 1

    def get_metrics(self) -> Dict[str, int]:
        """Get current metrics snapshot."""
        return {
            "sessions_started": self.sessions_started,
            "sessions_ended": self.sessions_ended,
            "questions_issued": self.questions_issued,
            "fallback_questions": self.fallback_questions,
            "answers_scored": self.answers_scored,
            "remote_evaluations": self.remote_evaluations,
            "local_evaluations": self.local_evaluations,
            "questions_skipped": self.questions_skipped,
            "errors_occurred": self.errors_occurred
        }

    def reset(self) -> None:
        """Reset all metrics to zero."""
        self.sessions_started = 0
        self.sessions_ended = 0
        self.questions_issued = 0
        self.fallback_questions = 0
        self.answers_scored = 0
        self.remote_evaluations = 0
        self.local_evaluations = 0
        self.questions_skipped = 0
        self.errors_occurred = 0
