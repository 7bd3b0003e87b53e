"""
End-of-session summary and report generation.

The session builds a `SessionSummary` when it ends and stores it under
``interview_data_{session_id}``. `ReportService` later reads that entry and
asks the AI service for the full report; there is no local fallback for
the report, so failures surface as `ReportGenerationError`.
"""
import time
import logging
from typing import Dict, Any, List, Optional, Sequence

from .models import QuestionRecord, InterviewScore, SessionSummary, InterviewReport
from .schemas import parse_report
from .telemetry import TelemetryAggregator, mean, variance
from ..config import (
    SESSION_DATA_KEY, DEFAULT_JOB_ROLE, MAX_QUESTIONS, NEUTRAL_METRIC
)
from ..errors import (
    AIServiceError, AIServiceHTTPError, AIServiceTimeout, AIServiceUnavailable,
    ReportGenerationError
)
from ..infrastructure.ai_service import AIServiceClient
from ..infrastructure.data import SessionStore

logger = logging.getLogger("report")

NO_DATA_MESSAGE = "No interview data found. Please complete an interview first."
UNAVAILABLE_MESSAGE = ("Unable to connect to AI evaluation service. "
                       "Please check your internet connection and try again.")
TIMEOUT_MESSAGE = "AI evaluation is taking longer than expected. Please try again."


def consistency_score(scores: Sequence[float]) -> float:
    """100 for perfectly even scores, dropping by 2 per unit of variance."""
    if len(scores) < 2:
        return 100.0
    return max(0.0, 100.0 - 2 * variance(scores))


def response_metrics(records: Sequence[QuestionRecord]) -> Optional[Dict[str, float]]:
    """Score and duration statistics over every record, skips included."""
    if not records:
        return None
    scores = [r.score for r in records]
    return {
        "avgScore": mean(scores),
        "avgDuration": mean([r.response_time for r in records]),
        "scoreImprovement": scores[-1] - scores[0] if len(scores) > 1 else 0.0,
        "consistencyScore": consistency_score(scores),
    }


def build_summary(session_id: str,
                  job_role: str,
                  has_resume: bool,
                  questions_issued: int,
                  score: InterviewScore,
                  records: List[QuestionRecord],
                  telemetry: TelemetryAggregator,
                  started_at: Optional[float]) -> SessionSummary:
    """Package a finished session for hand-off."""
    ended_at = time.time()
    return SessionSummary(
        session_id=session_id,
        job_role=job_role,
        has_resume=has_resume,
        total_questions=questions_issued,
        score=score,
        responses=[r.to_response() for r in records],
        performance_metrics={
            "facialMetrics": telemetry.summary_statistics(),
            "responseMetrics": response_metrics(records),
        },
        analysis_data={
            "facialAnalysisSamples": telemetry.facial_sample_count,
            "voiceAnalysisSamples": telemetry.voice_sample_count,
            "interviewDuration": ended_at - started_at if started_at else 0.0,
            "questionsAttempted": questions_issued,
        },
        ended_at=ended_at,
    )


def _or_default(data: Dict[str, Any], key: str, default):
    value = data.get(key)
    return value if value else default


def evaluation_payload(data: Dict[str, Any]) -> Dict[str, Any]:
    """Request body for the comprehensive evaluation, with defaults for missing fields."""
    return {
        "sessionId": data.get("sessionId"),
        "job_role": _or_default(data, "jobRole", DEFAULT_JOB_ROLE),
        "totalQuestions": _or_default(data, "totalQuestions", MAX_QUESTIONS),
        "questionsAnswered": _or_default(data, "questionsAnswered", 0),
        "questionsSkipped": _or_default(data, "questionsSkipped", 0),
        "averageResponseTime": _or_default(data, "averageResponseTime", 60),
        "confidence": _or_default(data, "confidence", NEUTRAL_METRIC),
        "engagement": _or_default(data, "engagement", NEUTRAL_METRIC),
        "eyeContact": _or_default(data, "eyeContact", NEUTRAL_METRIC),
        "responses": _or_default(data, "responses", []),
        "hasResume": bool(data.get("hasResume")),
        "totalScore": _or_default(data, "totalScore", 0),
    }


class ReportService:
    """Turns a stored session summary into the AI service's full report."""

    def __init__(self, client: AIServiceClient, store: SessionStore):
        self.client = client
        self.store = store

    def save_summary(self, summary: SessionSummary) -> str:
        key = SESSION_DATA_KEY.format(session_id=summary.session_id)
        self.store.save(key, summary.to_dict())
        return key

    def generate(self, session_id: str) -> InterviewReport:
        """
        Generate the report for a finished session.

        The stored summary is consumed only when the report succeeds, so a
        failed call can be retried.

        Raises:
            ReportGenerationError: No stored summary, or the AI service failed
        """
        key = SESSION_DATA_KEY.format(session_id=session_id)
        data = self.store.load(key)
        if data is None:
            raise ReportGenerationError(NO_DATA_MESSAGE)

        payload = evaluation_payload(data)
        logger.info(f"Requesting comprehensive evaluation for session {session_id}")
        try:
            body = self.client.generate_report(payload)
            report = parse_report(body, session_id)
        except AIServiceUnavailable as e:
            logger.error(f"Report generation failed: {e}")
            raise ReportGenerationError(UNAVAILABLE_MESSAGE) from e
        except AIServiceTimeout as e:
            logger.error(f"Report generation timed out: {e}")
            raise ReportGenerationError(TIMEOUT_MESSAGE) from e
        except AIServiceHTTPError as e:
            logger.error(f"Report generation failed: {e}")
            raise ReportGenerationError(
                f"AI evaluation failed: AI evaluation service responded with {e.status_code}: {e.body}"
            ) from e
        except AIServiceError as e:
            logger.error(f"Report generation failed: {e}")
            raise ReportGenerationError(f"AI evaluation failed: {e}") from e

        self.store.delete(key)
        logger.info(f"Report generated for session {session_id}: overall {report.overall_score}")
        return report
