"""
Question planning and generation.

The category and difficulty of each question follow a fixed plan per role;
the question text comes from the AI service, or from a small set of
role-aware templates when the service is unavailable.
"""
import logging
from dataclasses import dataclass
from typing import Dict, Any, List, Optional

from .models import Difficulty
from ..errors import AIServiceError
from ..infrastructure.ai_service import AIServiceClient

logger = logging.getLogger("questions")


ROLE_CATEGORIES: Dict[str, List[str]] = {
    # Technical roles
    "Software Developer": ["behavioral", "technical", "problem-solving", "technical", "behavioral"],
    "Data Scientist": ["behavioral", "analytical", "technical", "project-based", "behavioral"],
    "DevOps Engineer": ["behavioral", "technical", "problem-solving", "technical", "behavioral"],
    "Frontend Developer": ["behavioral", "technical", "design-thinking", "technical", "behavioral"],
    "Backend Developer": ["behavioral", "technical", "system-design", "technical", "behavioral"],
    "Full Stack Developer": ["behavioral", "technical", "problem-solving", "technical", "behavioral"],

    # Business & management roles
    "Product Manager": ["behavioral", "strategic", "stakeholder-management", "leadership", "behavioral"],
    "Project Manager": ["behavioral", "organizational", "leadership", "conflict-resolution", "behavioral"],
    "Business Analyst": ["behavioral", "analytical", "stakeholder-management", "process-improvement", "behavioral"],
    "Marketing Manager": ["behavioral", "strategic", "creative-thinking", "leadership", "behavioral"],
    "Sales Manager": ["behavioral", "relationship-building", "negotiation", "leadership", "behavioral"],

    # Design & creative roles
    "UX Designer": ["behavioral", "design-thinking", "user-research", "creative-problem-solving", "behavioral"],
    "UI Designer": ["behavioral", "design-thinking", "visual-design", "creative-problem-solving", "behavioral"],
    "Graphic Designer": ["behavioral", "creative-thinking", "project-management", "client-communication", "behavioral"],

    # Operations & support roles
    "HR Manager": ["behavioral", "people-management", "conflict-resolution", "policy-implementation", "behavioral"],
    "Customer Success": ["behavioral", "relationship-building", "problem-solving", "communication", "behavioral"],
    "Operations Manager": ["behavioral", "process-improvement", "leadership", "problem-solving", "behavioral"],

    # Financial roles
    "Financial Analyst": ["behavioral", "analytical", "attention-to-detail", "strategic-thinking", "behavioral"],
    "Accountant": ["behavioral", "analytical", "compliance", "attention-to-detail", "behavioral"],
}
DEFAULT_CATEGORIES = ["behavioral", "situational", "problem-solving", "leadership", "behavioral"]

FALLBACK_QUESTION_TEMPLATES = [
    "Tell me about a challenging situation in your {role} experience and how you handled it.",
    "What has been your most significant achievement relevant to the {role} role?",
    "How do you stay current with developments in your field as a {role}?",
    "Describe a time you had to collaborate cross-functionally to deliver a project. What was your approach?",
    "Where do you see yourself growing in the next 2 years in the {role} space?",
]


def question_category(job_role: str, number: int) -> str:
    """Category of the 1-based question `number` for `job_role`."""
    categories = ROLE_CATEGORIES.get(job_role, DEFAULT_CATEGORIES)
    return categories[(number - 1) % len(categories)]


def question_difficulty(number: int) -> Difficulty:
    if number <= 2:
        return Difficulty.EASY
    if number <= 4:
        return Difficulty.MEDIUM
    return Difficulty.HARD


def fallback_question(job_role: str, number: int) -> str:
    template = FALLBACK_QUESTION_TEMPLATES[(number - 1) % len(FALLBACK_QUESTION_TEMPLATES)]
    return template.format(role=job_role)


@dataclass
class GeneratedQuestion:
    text: str
    category: str
    difficulty: Difficulty
    fallback: bool = False


class QuestionGenerator:
    """Produces the next question for a session, never failing."""

    def __init__(self, client: Optional[AIServiceClient]):
        self.client = client

    def generate(self,
                 session_id: str,
                 job_role: str,
                 number: int,
                 resume_data: Optional[Dict[str, Any]] = None) -> GeneratedQuestion:
        """
        Generate question `number` (1-based).

        Falls back to a fixed template when the AI service fails.
        """
        category = question_category(job_role, number)
        difficulty = question_difficulty(number)

        if self.client is not None:
            try:
                text = self.client.generate_question(
                    session_id=session_id,
                    job_role=job_role,
                    category=category,
                    difficulty=difficulty.value,
                    resume_data=resume_data,
                )
                logger.info("Question %d generated via AI service (%s/%s)", number, category, difficulty.value)
                return GeneratedQuestion(text=text, category=category, difficulty=difficulty)
            except AIServiceError as e:
                logger.warning("Question generation failed, using fallback template: %s", e)

        return GeneratedQuestion(
            text=fallback_question(job_role, number),
            category=category,
            difficulty=difficulty,
            fallback=True,
        )
