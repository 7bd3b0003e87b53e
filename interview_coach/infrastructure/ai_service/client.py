"""
REST client for the external AI question/evaluation service.
"""
import json
import logging
from typing import Optional, Dict, Any

import requests

from ...config import AI_SERVICE_URL, AI_SERVICE_TIMEOUT, REPORT_TIMEOUT
from ...errors import AIServiceError, AIServiceHTTPError, AIServiceTimeout, AIServiceUnavailable

logger = logging.getLogger("ai_service_client")


class AIServiceClient:
    """Thin REST client; every failure surfaces as an AIServiceError."""

    def __init__(self,
                 base_url: str = AI_SERVICE_URL,
                 timeout: float = AI_SERVICE_TIMEOUT,
                 report_timeout: float = REPORT_TIMEOUT,
                 session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.report_timeout = report_timeout
        self.http = session or requests.Session()

    def _post(self, endpoint: str, timeout: Optional[float] = None, **kwargs) -> Dict[str, Any]:
        """POST to the service and decode the JSON body."""
        url = f"{self.base_url}{endpoint}"
        try:
            resp = self.http.post(url, timeout=timeout or self.timeout, **kwargs)
        except requests.Timeout as e:
            raise AIServiceTimeout(f"{endpoint} timed out: {e}") from e
        except requests.ConnectionError as e:
            raise AIServiceUnavailable(f"Unable to reach {url}: {e}") from e
        except requests.RequestException as e:
            raise AIServiceError(f"{endpoint} request failed: {e}") from e

        if not 200 <= resp.status_code < 300:
            raise AIServiceHTTPError(resp.status_code, resp.text, endpoint)

        try:
            body = resp.json()
        except ValueError as e:
            raise AIServiceError(f"{endpoint} returned invalid JSON: {resp.text[:200]}") from e

        if not isinstance(body, dict):
            raise AIServiceError(f"{endpoint} returned {type(body).__name__}, expected an object")
        logger.debug("%s -> %s", endpoint, json.dumps(body, default=str)[:500])
        return body

    def generate_question(self,
                          session_id: str,
                          job_role: str,
                          category: str,
                          difficulty: str,
                          resume_data: Optional[Dict[str, Any]] = None) -> str:
        """Ask the service for the next interview question."""
        body = self._post("/generate/question", json={
            "session_id": session_id,
            "job_role": job_role,
            "category": category,
            "difficulty": difficulty,
            "resume_data": resume_data,
        })
        question = body.get("question")
        if not isinstance(question, str) or not question.strip():
            raise AIServiceError("Question service returned no question")
        return question.strip()

    def evaluate_answer(self,
                        answer_text: str,
                        question: str,
                        session_id: str,
                        response_time: float,
                        job_role: str,
                        voice_analysis: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Comprehensive evaluation of one answer."""
        return self._post("/evaluate/comprehensive", json={
            "answer_text": answer_text,
            "question": question,
            "session_id": session_id,
            "response_time": response_time,
            "voice_analysis": voice_analysis,
            "job_role": job_role,
        })

    def analyze_voice(self,
                      audio: bytes,
                      session_id: str,
                      question_id: int,
                      filename: str = "response.wav",
                      content_type: str = "audio/wav") -> Dict[str, Any]:
        """Upload the recorded answer for voice analysis (multipart form)."""
        return self._post(
            "/analyze/voice",
            files={"audio": (filename, audio, content_type)},
            data={"session_id": session_id, "question_id": str(question_id)},
        )

    def generate_report(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Full end-of-session evaluation report."""
        return self._post("/generate/comprehensive-evaluation", timeout=self.report_timeout, json=payload)

    def health(self) -> bool:
        """Best-effort reachability check."""
        try:
            resp = self.http.get(f"{self.base_url}/health", timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning("AI service health check failed: %s", e)
            return False
        return 200 <= resp.status_code < 300

    def close(self) -> None:
        self.http.close()
