"""
Parsing of AI service payloads into the engine's data models.
"""
from typing import Dict, Any, List

from .models import Evaluation, EvaluationSource, InterviewReport
from ..errors import AIServiceError


def _as_float(value: Any, default: float = 0.0) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _as_str_list(value: Any) -> List[str]:
    if not isinstance(value, (list, tuple)):
        return []
    return [str(item) for item in value if item is not None and str(item).strip()]


def parse_remote_evaluation(body: Dict[str, Any]) -> Evaluation:
    """
    Convert a comprehensive-evaluation response into an Evaluation.

    A missing or non-numeric score counts as 0; scores are clamped to 0-100.
    """
    score = max(0.0, min(100.0, _as_float(body.get("score"), 0.0)))
    feedback = body.get("feedback")
    return Evaluation(
        score=score,
        feedback=feedback if isinstance(feedback, str) else "",
        strengths=_as_str_list(body.get("strengths")),
        improvements=_as_str_list(body.get("improvements")),
        source=EvaluationSource.REMOTE,
    )


def parse_report(body: Dict[str, Any], session_id: str) -> InterviewReport:
    """
    Convert a comprehensive-evaluation report into an InterviewReport.

    Raises:
        AIServiceError: If the report has no usable overall score
    """
    if "overall_score" not in body:
        raise AIServiceError("Report is missing overall_score")
    detailed = body.get("detailed_feedback")
    breakdown = body.get("skill_breakdown")
    return InterviewReport(
        session_id=str(body.get("session_id") or session_id),
        overall_score=_as_float(body.get("overall_score")),
        placement_likelihood=str(body.get("placement_likelihood") or "Unknown"),
        performance_summary=str(body.get("performance_summary") or ""),
        strengths=_as_str_list(body.get("strengths")),
        development_areas=_as_str_list(body.get("development_areas")),
        detailed_feedback=detailed if isinstance(detailed, dict) else {},
        skill_breakdown={str(k): _as_float(v) for k, v in breakdown.items()} if isinstance(breakdown, dict) else {},
        recommendations=_as_str_list(body.get("recommendations")),
        generated_at=body.get("generated_at"),
    )
