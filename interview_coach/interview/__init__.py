"""Interview session components.

This module contains the business logic for running a mock interview:
the session state machine, answer scoring, telemetry aggregation,
question generation and report hand-off.
"""

# Core session class
from .orchestrator import InterviewSession, skip_penalty, apply_skip, merge_answer

# Data models
from .models import (
    SessionStatus, Difficulty, EvaluationSource, TelemetrySample,
    ScoreResult, Evaluation, IssuedQuestion, QuestionRecord,
    InterviewScore, SessionSummary, InterviewReport
)

# Scoring and evaluation
from .scoring import ResponseScorer
from .evaluation import EvaluationEngine
from .telemetry import TelemetryAggregator
from .questions import QuestionGenerator, question_category, question_difficulty, fallback_question

# Service classes
from .services import RecordingService, RecordedAnswer, TTSService, LiveTelemetryService
from .report import ReportService

# Event system
from .events import (
    SessionEventBus, EventLogger, SessionMetrics,
    EventType, SessionEvent, SessionStartedEvent, QuestionIssuedEvent,
    RecordingStartedEvent, AnswerScoredEvent, QuestionSkippedEvent,
    SessionEndedEvent, ErrorOccurredEvent
)

__all__ = [
    # Session
    "InterviewSession", "skip_penalty", "apply_skip", "merge_answer",

    # Data models
    "SessionStatus", "Difficulty", "EvaluationSource", "TelemetrySample",
    "ScoreResult", "Evaluation", "IssuedQuestion", "QuestionRecord",
    "InterviewScore", "SessionSummary", "InterviewReport",

    # Scoring, telemetry and questions
    "ResponseScorer", "EvaluationEngine", "TelemetryAggregator",
    "QuestionGenerator", "question_category", "question_difficulty", "fallback_question",

    # Services
    "RecordingService", "RecordedAnswer", "TTSService", "LiveTelemetryService",
    "ReportService",

    # Events
    "SessionEventBus", "EventLogger", "SessionMetrics",
    "EventType", "SessionEvent", "SessionStartedEvent", "QuestionIssuedEvent",
    "RecordingStartedEvent", "AnswerScoredEvent", "QuestionSkippedEvent",
    "SessionEndedEvent", "ErrorOccurredEvent",
]
