"""
Answer evaluation: remote evaluator first, local heuristic on any failure.
"""
import logging
from typing import Dict, Any, Optional

from .models import Evaluation, EvaluationSource
from .schemas import parse_remote_evaluation
from .scoring import ResponseScorer
from ..errors import AIServiceError
from ..infrastructure.ai_service import AIServiceClient

logger = logging.getLogger("evaluation")


class EvaluationEngine:
    """Scores answers, preferring the AI service and falling back silently."""

    def __init__(self, client: Optional[AIServiceClient], scorer: ResponseScorer):
        self.client = client
        self.scorer = scorer

    def evaluate(self,
                 transcript: str,
                 response_time: float,
                 question: str,
                 session_id: str,
                 job_role: str,
                 voice_analysis: Optional[Dict[str, Any]] = None,
                 facial: Optional[Dict[str, float]] = None) -> Evaluation:
        """
        Evaluate one answer.

        Args:
            transcript: Answer text
            response_time: Seconds since the question was issued
            question: Question text
            session_id: Session identifier sent to the service
            job_role: Target role sent to the service
            voice_analysis: Voice metrics for the answer, if available
            facial: Recent facial averages for the local nonverbal component

        Returns:
            Evaluation tagged with the evaluator that produced it
        """
        if self.client is not None:
            try:
                body = self.client.evaluate_answer(
                    answer_text=transcript,
                    question=question,
                    session_id=session_id,
                    response_time=response_time,
                    job_role=job_role,
                    voice_analysis=voice_analysis,
                )
                evaluation = parse_remote_evaluation(body)
                logger.info("Remote evaluation: score=%.1f", evaluation.score)
                return evaluation
            except AIServiceError as e:
                logger.warning("Remote evaluation failed, using local scorer: %s", e)

        result = self.scorer.score(transcript, response_time, question, facial=facial)
        logger.info("Local evaluation: score=%s", result.score)
        return Evaluation(
            score=result.score,
            feedback=result.feedback,
            strengths=result.strengths,
            improvements=result.improvements,
            source=EvaluationSource.LOCAL,
        )
