"""
Rule-based answer scoring used when the remote evaluator is unavailable.
"""
import re
import math
import random
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from .models import ScoreResult

logger = logging.getLogger("scoring")


EXAMPLE_PATTERN = re.compile(
    r"\b(example|instance|situation|time when|experience|project|when I|I worked|I handled|I managed)\b",
    re.IGNORECASE,
)
QUANTIFIABLE_PATTERN = re.compile(
    r"(\b\d+\s*%|\b\d+\s*percent\b|\$\d+"
    r"|\b(increased|decreased|improved|reduced|achieved|saved|gained|grew|doubled|tripled)\b"
    r"|\b\d+\s*(users|customers|sales|revenue|efficiency)\b)",
    re.IGNORECASE,
)
STAR_PATTERN = re.compile(r"(situation|task|action|result|challenge|problem|solution|outcome)", re.IGNORECASE)
TECHNICAL_VERB_PATTERN = re.compile(
    r"\b(developed|designed|implemented|managed|led|created|optimized|solved|programmed"
    r"|architected|deployed|maintained|debugged|tested|analyzed)\b",
    re.IGNORECASE,
)
SENTENCE_SPLIT = re.compile(r"[.!?]+")
HEDGING_PHRASES = ("i dont know", "not sure")

NO_RESPONSE_IMPROVEMENTS = [
    "Provide a complete answer to the question",
    "Use specific examples from your experience",
    "Speak clearly and confidently",
]
MINIMAL_IMPROVEMENTS = [
    "Provide much more detail",
    "Include specific examples",
    "Explain your thought process",
    "Use the STAR method (Situation, Task, Action, Result)",
]
SHORT_IMPROVEMENTS = [
    "Expand your answer with more detail",
    "Include specific examples",
    "Explain the impact of your actions",
]

FEEDBACK_BANDS = [
    (85, "Excellent response! Strong content with specific examples and clear impact."),
    (70, "Good response with solid content. Could be enhanced with more specific examples."),
    (50, "Adequate start, but needs more depth, examples, and structure to be compelling."),
    (25, "Basic attempt, but significantly lacks detail and specific examples. Needs major improvement."),
]
INSUFFICIENT_FEEDBACK = (
    "Insufficient response. Focus on providing detailed answers with concrete examples from your experience."
)


@dataclass
class AnswerFeatures:
    """Text features the scoring rules are gated on."""
    word_count: int
    sentence_count: int
    avg_words_per_sentence: float
    has_examples: bool
    has_quantifiable_results: bool
    has_star_structure: bool
    technical_terms: int
    has_clause_punctuation: bool
    hedging: bool
    mostly_lowercase: bool

    @classmethod
    def from_text(cls, text: str) -> "AnswerFeatures":
        words = [w for w in text.split() if len(w) > 1]
        word_count = len(words)
        sentences = [s for s in SENTENCE_SPLIT.split(text) if len(s.strip()) > 2]
        sentence_count = len(sentences)
        lowered = text.lower()
        lowercase_tokens = [w for w in text.split(" ") if w == w.lower()]
        return cls(
            word_count=word_count,
            sentence_count=sentence_count,
            avg_words_per_sentence=word_count / sentence_count if sentence_count else 0.0,
            has_examples=bool(EXAMPLE_PATTERN.search(text)),
            has_quantifiable_results=bool(QUANTIFIABLE_PATTERN.search(text)),
            has_star_structure=bool(STAR_PATTERN.search(text)),
            technical_terms=len(TECHNICAL_VERB_PATTERN.findall(text)),
            has_clause_punctuation="," in text or ";" in text,
            hedging=any(phrase in lowered for phrase in HEDGING_PHRASES),
            mostly_lowercase=len(lowercase_tokens) > word_count * 0.8,
        )


def clarity_points(word_count: int) -> int:
    return sum(10 for threshold in (20, 40, 60) if word_count >= threshold)


def structure_points(features: AnswerFeatures) -> int:
    points = 0
    if features.sentence_count >= 2:
        points += 5
    if 8 <= features.avg_words_per_sentence <= 25:
        points += 10
    if features.has_clause_punctuation:
        points += 5
    return points


def timing_points(response_time: float) -> int:
    """Both rushed and rambling answers lose points; 20-120s is the reward zone."""
    if response_time < 5:
        return 0
    if response_time < 15:
        return 5
    if 20 <= response_time <= 120:
        return 15
    if response_time <= 180:
        return 10
    return 5


def nonverbal_points(facial: Optional[Dict[str, float]]) -> int:
    if not facial:
        return 0
    return sum(5 for key in ("confidence", "engagement", "eye_contact") if facial.get(key, 0.0) > 0.6)


def feedback_for(score: float) -> str:
    for threshold, text in FEEDBACK_BANDS:
        if score >= threshold:
            return text
    return INSUFFICIENT_FEEDBACK


class ResponseScorer:
    """
    Deterministic answer scorer with a pseudo-random band for very short answers.

    Pass a seeded ``random.Random`` to get reproducible scores.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def score(self,
              transcript: str,
              response_time: float,
              question: str = "",
              facial: Optional[Dict[str, float]] = None) -> ScoreResult:
        """
        Score one answer on a 0-100 scale.

        Args:
            transcript: The candidate's answer text
            response_time: Seconds between question issue and end of the answer
            question: The question that was asked (kept for parity with the remote evaluator)
            facial: Recent average facial metrics, if any telemetry was received

        Returns:
            ScoreResult with score, feedback, strengths and improvements
        """
        text = (transcript or "").strip()
        features = AnswerFeatures.from_text(text)
        wc = features.word_count

        if wc == 0 or len(text) < 3:
            return ScoreResult(
                score=0,
                feedback="No meaningful response provided. Please answer the question with specific details.",
                strengths=[],
                improvements=list(NO_RESPONSE_IMPROVEMENTS),
            )

        if wc < 5:
            return ScoreResult(
                score=self.rng.randrange(5, 15),
                feedback="Response is too brief and lacks substance. Elaborate with specific examples.",
                strengths=["Attempted to answer"],
                improvements=list(MINIMAL_IMPROVEMENTS),
            )

        if wc < 15:
            return ScoreResult(
                score=self.rng.randrange(10, 30),
                feedback="Response needs significant development. Add more detail and examples.",
                strengths=["Provided a basic answer"] if wc > 8 else [],
                improvements=list(SHORT_IMPROVEMENTS),
            )

        clarity = clarity_points(wc)
        timing = timing_points(response_time)
        nonverbal = nonverbal_points(facial)

        total = clarity + structure_points(features) + timing + nonverbal

        if features.has_examples and wc >= 30:
            total += 10
        if features.has_quantifiable_results and wc >= 25:
            total += 10
        if features.has_star_structure and wc >= 40:
            total += 10
        if features.technical_terms >= 2 and wc >= 35:
            total += 5

        if features.hedging:
            total = math.floor(total * 0.7)
        if features.mostly_lowercase:
            total -= 5

        if wc < 20:
            total = min(total, 35)
        if wc < 30 and not features.has_examples:
            total = min(total, 45)
        if not (features.has_examples or features.has_quantifiable_results or features.has_star_structure):
            total = min(total, 50)

        total = max(0, min(100, total))

        strengths = self._strengths(features, clarity, nonverbal, timing)
        improvements = self._improvements(features, response_time, nonverbal)
        if not strengths:
            strengths.append("Made an attempt to answer the question")
        if not improvements and total < 85:
            improvements.append("Continue practicing to refine your interview responses")

        logger.debug("Local score %s (clarity=%s timing=%s nonverbal=%s words=%s)",
                     total, clarity, timing, nonverbal, wc)
        return ScoreResult(score=total, feedback=feedback_for(total),
                           strengths=strengths, improvements=improvements)

    @staticmethod
    def _strengths(f: AnswerFeatures, clarity: int, nonverbal: int, timing: int) -> List[str]:
        strengths = []
        if f.has_examples and f.word_count >= 25:
            strengths.append("Used specific examples to support your answer")
        if f.has_quantifiable_results and f.word_count >= 20:
            strengths.append("Included measurable results and impact")
        if f.has_star_structure and f.word_count >= 30:
            strengths.append("Followed a structured approach (STAR method)")
        if f.word_count >= 50 and clarity >= 20:
            strengths.append("Provided comprehensive and detailed response")
        if nonverbal >= 10:
            strengths.append("Demonstrated confidence through body language")
        if f.technical_terms >= 2:
            strengths.append("Used relevant technical terminology effectively")
        if timing >= 10:
            strengths.append("Took appropriate time to think through the response")
        return strengths

    @staticmethod
    def _improvements(f: AnswerFeatures, response_time: float, nonverbal: int) -> List[str]:
        improvements = []
        if f.word_count < 20:
            improvements.append("Expand your answers with significantly more detail and depth")
        elif f.word_count < 40:
            improvements.append("Provide more comprehensive explanations with additional context")
        if not f.has_examples:
            improvements.append("Include concrete examples from your actual experience")
        if not f.has_quantifiable_results:
            improvements.append("Add measurable outcomes and impact of your work")
        if not f.has_star_structure:
            improvements.append("Structure responses using STAR method (Situation, Task, Action, Result)")
        if response_time < 10:
            improvements.append("Take more time to think and plan your response")
        if response_time > 150:
            improvements.append("Work on being more concise while maintaining detail")
        if nonverbal < 5:
            improvements.append("Maintain better eye contact and show more engagement")
        if f.technical_terms == 0 and f.word_count > 15:
            improvements.append("Include more specific technical terminology relevant to the role")
        return improvements
