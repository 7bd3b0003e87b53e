import pytest

from interview_coach.interview.models import Difficulty
from interview_coach.interview.questions import (
    QuestionGenerator, question_category, question_difficulty, fallback_question, DEFAULT_CATEGORIES
)
from interview_coach.interview.testing import MockAIServiceClient
from interview_coach.errors import AIServiceTimeout


def test_known_role_category_plan():
    plan = [question_category("Product Manager", n) for n in range(1, 6)]
    assert plan == ["behavioral", "strategic", "stakeholder-management", "leadership", "behavioral"]


def test_unknown_role_uses_default_plan():
    plan = [question_category("Astronaut", n) for n in range(1, 6)]
    assert plan == DEFAULT_CATEGORIES


@pytest.mark.parametrize("number, expected", [
    (1, Difficulty.EASY),
    (2, Difficulty.EASY),
    (3, Difficulty.MEDIUM),
    (4, Difficulty.MEDIUM),
    (5, Difficulty.HARD),
])
def test_difficulty_steps(number, expected):
    assert question_difficulty(number) is expected


def test_fallback_mentions_role():
    assert fallback_question("Accountant", 1) == (
        "Tell me about a challenging situation in your Accountant experience and how you handled it."
    )
    assert fallback_question("Accountant", 4).startswith("Describe a time you had to collaborate")
    assert fallback_question("Accountant", 6) == fallback_question("Accountant", 1)


def test_generator_uses_remote_question():
    client = MockAIServiceClient(questions=["What is overfitting?"])
    generated = QuestionGenerator(client).generate("s1", "Data Scientist", 3, {"skills": ["ml"]})

    assert generated.text == "What is overfitting?"
    assert generated.category == "technical"
    assert generated.difficulty is Difficulty.MEDIUM
    assert not generated.fallback
    request = client.calls("/generate/question")[0]
    assert request["category"] == "technical"
    assert request["difficulty"] == "medium"
    assert request["resume_data"] == {"skills": ["ml"]}


def test_generator_falls_back_on_service_error():
    client = MockAIServiceClient(questions=[AIServiceTimeout("slow")])
    generated = QuestionGenerator(client).generate("s1", "UX Designer", 2)

    assert generated.fallback
    assert generated.text == fallback_question("UX Designer", 2)
    assert generated.category == "design-thinking"


def test_generator_without_client():
    generated = QuestionGenerator(None).generate("s1", "Sales Manager", 5)
    assert generated.fallback
    assert generated.difficulty is Difficulty.HARD
