import random

import pytest

from interview_coach.interview.scoring import ResponseScorer
from interview_coach.interview.testing import (
    MockAIServiceClient, FakeTelemetryChannel, create_mock_session
)


STAR_ANSWER = (
    "In my last project at a retail company, the situation was that our checkout service "
    "kept failing under load. My task was to find the problem and fix it quickly. "
    "I designed a caching layer, implemented retries, and deployed the changes behind a feature flag. "
    "As a result, we increased revenue by 20% and reduced outages, which the whole team celebrated. "
    "The new dashboards also helped other teams monitor performance."
)


@pytest.fixture(autouse=True)
def _test_env(monkeypatch: pytest.MonkeyPatch):
    for name in ("AI_SERVICE_URL", "TELEMETRY_WS_URL", "INTERVIEW_WORKDIR",
                 "ENABLE_TTS", "ENABLE_VIDEO", "INTERVIEW_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def scorer() -> ResponseScorer:
    return ResponseScorer(rng=random.Random(42))


@pytest.fixture
def star_answer() -> str:
    return STAR_ANSWER


@pytest.fixture
def client() -> MockAIServiceClient:
    return MockAIServiceClient()


@pytest.fixture
def setup(client):
    return create_mock_session(client=client, job_role="Data Scientist")


@pytest.fixture
def session(setup):
    return setup["session"]
