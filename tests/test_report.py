import pytest

from interview_coach.errors import (
    AIServiceHTTPError, AIServiceTimeout, AIServiceUnavailable, ReportGenerationError
)
from interview_coach.infrastructure.data import MemorySessionStore
from interview_coach.interview.models import Difficulty, EvaluationSource, QuestionRecord
from interview_coach.interview.report import (
    ReportService, consistency_score, response_metrics, evaluation_payload,
    NO_DATA_MESSAGE, UNAVAILABLE_MESSAGE, TIMEOUT_MESSAGE
)
from interview_coach.interview.testing import MockAIServiceClient

REPORT = {
    "session_id": "s1",
    "overall_score": 72,
    "placement_likelihood": "Medium",
    "performance_summary": "Solid answers with room to grow.",
    "strengths": ["Structure"],
    "development_areas": ["Metrics"],
    "skill_breakdown": {"communication": "80"},
    "recommendations": ["Quantify outcomes"],
}


def record(number, score, response_time=30.0):
    return QuestionRecord(
        number=number, question=f"Q{number}", category="behavioral", difficulty=Difficulty.EASY,
        answer="answer", response_time=response_time, score=score, timestamp=1000.0 + number,
        source=EvaluationSource.LOCAL,
    )


@pytest.fixture
def store():
    store = MemorySessionStore()
    store.save("interview_data_s1", {"sessionId": "s1", "jobRole": "Accountant", "totalScore": 42.0})
    return store


def test_report_success_consumes_summary(store):
    client = MockAIServiceClient(reports=[REPORT])

    report = ReportService(client, store).generate("s1")

    assert report.overall_score == 72
    assert report.placement_likelihood == "Medium"
    assert report.skill_breakdown == {"communication": 80.0}
    assert "interview_data_s1" not in store
    payload = client.calls("/generate/comprehensive-evaluation")[0]["payload"]
    assert payload["job_role"] == "Accountant"
    assert payload["totalScore"] == 42.0


def test_missing_summary():
    with pytest.raises(ReportGenerationError, match="No interview data found"):
        ReportService(MockAIServiceClient(), MemorySessionStore()).generate("s1")
    assert NO_DATA_MESSAGE.startswith("No interview data found")


@pytest.mark.parametrize("error, message", [
    (AIServiceUnavailable("refused"), UNAVAILABLE_MESSAGE),
    (AIServiceTimeout("slow"), TIMEOUT_MESSAGE),
    (AIServiceHTTPError(503, "overloaded"),
     "AI evaluation failed: AI evaluation service responded with 503: overloaded"),
])
def test_failures_keep_summary_for_retry(store, error, message):
    client = MockAIServiceClient(reports=[error, REPORT])
    service = ReportService(client, store)

    with pytest.raises(ReportGenerationError) as excinfo:
        service.generate("s1")
    assert str(excinfo.value) == message
    assert "interview_data_s1" in store

    assert service.generate("s1").overall_score == 72


def test_report_without_overall_score_is_a_failure(store):
    client = MockAIServiceClient(reports=[{"placement_likelihood": "High"}])
    with pytest.raises(ReportGenerationError, match="AI evaluation failed"):
        ReportService(client, store).generate("s1")


def test_payload_defaults():
    payload = evaluation_payload({"sessionId": "s9", "questionsAnswered": 0})

    assert payload == {
        "sessionId": "s9",
        "job_role": "Software Developer",
        "totalQuestions": 5,
        "questionsAnswered": 0,
        "questionsSkipped": 0,
        "averageResponseTime": 60,
        "confidence": 0.5,
        "engagement": 0.5,
        "eyeContact": 0.5,
        "responses": [],
        "hasResume": False,
        "totalScore": 0,
    }


def test_consistency_score():
    assert consistency_score([]) == 100
    assert consistency_score([70]) == 100
    assert consistency_score([70, 70, 70]) == 100
    # variance 25 -> 100 - 50
    assert consistency_score([65, 75]) == pytest.approx(50)
    assert consistency_score([0, 100]) == 0


def test_response_metrics():
    assert response_metrics([]) is None

    metrics = response_metrics([record(1, 68, 20.0), record(2, 70, 40.0), record(3, 72, 30.0)])

    assert metrics["avgScore"] == pytest.approx(70)
    assert metrics["avgDuration"] == pytest.approx(30)
    assert metrics["scoreImprovement"] == pytest.approx(4)
    # variance 8/3
    assert metrics["consistencyScore"] == pytest.approx(100 - 16 / 3)


def test_uneven_scores_floor_consistency_at_zero():
    metrics = response_metrics([record(1, 60), record(2, 70), record(3, 80)])
    assert metrics["consistencyScore"] == 0


def test_save_summary_uses_session_key(setup):
    session = setup["session"]
    session.start()
    summary = session.end()
    store = MemorySessionStore()

    key = ReportService(MockAIServiceClient(), store).save_summary(summary)

    assert key == f"interview_data_{session.session_id}"
    assert store.load(key)["jobRole"] == "Data Scientist"
