"""
Data models for the interview session engine.
"""
import time
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Optional, Dict, List, Any

from ..config import NEUTRAL_METRIC, SKIPPED_ANSWER


class SessionStatus(str, Enum):
    """Lifecycle states of an interview session."""
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    ENDED = "ended"


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class EvaluationSource(str, Enum):
    """Where a question's score came from."""
    REMOTE = "remote"
    LOCAL = "local"
    SKIPPED = "skipped"


@dataclass
class TelemetrySample:
    """One facial or voice observation pushed by the analysis channel."""
    timestamp: float
    data: Dict[str, Any]


@dataclass
class ScoreResult:
    """Outcome of scoring one answer."""
    score: float
    feedback: str
    strengths: List[str] = field(default_factory=list)
    improvements: List[str] = field(default_factory=list)


@dataclass
class Evaluation(ScoreResult):
    """Score plus the evaluator that produced it."""
    source: EvaluationSource = EvaluationSource.LOCAL


@dataclass(frozen=True)
class IssuedQuestion:
    """The question currently put to the candidate."""
    number: int
    text: str
    category: str
    difficulty: Difficulty
    issued_at: float
    fallback: bool = False


@dataclass(frozen=True)
class QuestionRecord:
    """Outcome of one question slot. Immutable once appended."""
    number: int
    question: str
    category: str
    difficulty: Difficulty
    answer: str
    response_time: float
    score: float
    timestamp: float
    feedback: str = ""
    strengths: tuple = ()
    improvements: tuple = ()
    source: EvaluationSource = EvaluationSource.LOCAL

    @property
    def skipped(self) -> bool:
        return self.answer == SKIPPED_ANSWER

    def to_response(self) -> Dict[str, Any]:
        """Row used in the session summary's response list."""
        return {
            "question": self.question,
            "answer": self.answer,
            "score": self.score,
            "duration": self.response_time,
            "timestamp": int(self.timestamp * 1000),
        }


@dataclass
class InterviewScore:
    """Cumulative running score of a session."""
    total_score: float = 0.0
    questions_answered: int = 0
    questions_skipped: int = 0
    average_response_time: float = 0.0
    confidence: float = NEUTRAL_METRIC
    engagement: float = NEUTRAL_METRIC
    eye_contact: float = NEUTRAL_METRIC
    communication: float = NEUTRAL_METRIC

    @property
    def questions_attempted(self) -> int:
        return self.questions_answered + self.questions_skipped

    @property
    def skip_rate(self) -> float:
        attempted = self.questions_attempted
        return self.questions_skipped / attempted if attempted else 0.0


@dataclass
class SessionSummary:
    """Everything handed to report generation when a session ends."""
    session_id: str
    job_role: str
    has_resume: bool
    total_questions: int
    score: InterviewScore
    responses: List[Dict[str, Any]]
    performance_metrics: Dict[str, Any]
    analysis_data: Dict[str, Any]
    ended_at: float = field(default_factory=time.time)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with the key layout the report service expects."""
        return {
            "sessionId": self.session_id,
            "jobRole": self.job_role,
            "totalQuestions": self.total_questions,
            "questionsAnswered": self.score.questions_answered,
            "questionsSkipped": self.score.questions_skipped,
            "averageResponseTime": self.score.average_response_time,
            "totalScore": self.score.total_score,
            "confidence": self.score.confidence,
            "engagement": self.score.engagement,
            "eyeContact": self.score.eye_contact,
            "communication": self.score.communication,
            "hasResume": self.has_resume,
            "responses": list(self.responses),
            "performanceMetrics": self.performance_metrics,
            "analysisData": self.analysis_data,
            "endedAt": self.ended_at,
        }


@dataclass
class InterviewReport:
    """Report returned by the AI service's comprehensive evaluation."""
    session_id: str
    overall_score: float
    placement_likelihood: str
    performance_summary: str = ""
    strengths: List[str] = field(default_factory=list)
    development_areas: List[str] = field(default_factory=list)
    detailed_feedback: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    skill_breakdown: Dict[str, float] = field(default_factory=dict)
    recommendations: List[str] = field(default_factory=list)
    generated_at: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
