import random

import pytest

from interview_coach.interview.scoring import (
    AnswerFeatures, ResponseScorer, clarity_points, timing_points,
    nonverbal_points, feedback_for, NO_RESPONSE_IMPROVEMENTS
)


def test_empty_transcript_scores_zero(scorer):
    result = scorer.score("", 10)

    assert result.score == 0
    assert result.strengths == []
    assert result.improvements == NO_RESPONSE_IMPROVEMENTS


@pytest.mark.parametrize("text", ["   ", "a", "I a", "ok"])
def test_degenerate_transcripts_score_zero(scorer, text):
    assert scorer.score(text, 30).score == 0


def test_minimal_effort_band():
    scorer = ResponseScorer(rng=random.Random(1))
    for _ in range(50):
        result = scorer.score("I think so maybe", 20)
        assert 5 <= result.score < 15
        assert result.strengths == ["Attempted to answer"]


def test_short_answer_band():
    scorer = ResponseScorer(rng=random.Random(2))
    text = "I worked on many projects and really enjoyed them a lot"
    for _ in range(50):
        result = scorer.score(text, 20)
        assert 10 <= result.score < 30
        assert result.strengths == ["Provided a basic answer"]


def test_short_answer_without_basic_strength_under_nine_words(scorer):
    result = scorer.score("We shipped the product on time again", 20)
    assert result.strengths == []


def test_seeded_scorers_agree():
    text = "Not much to say here"
    a = ResponseScorer(rng=random.Random(99)).score(text, 10)
    b = ResponseScorer(rng=random.Random(99)).score(text, 10)
    assert a.score == b.score


def test_star_answer_is_excellent(scorer, star_answer):
    result = scorer.score(star_answer, 45)

    assert result.score >= 85
    assert result.feedback.startswith("Excellent response")
    assert "Followed a structured approach (STAR method)" in result.strengths
    assert "Included measurable results and impact" in result.strengths


def test_features_of_star_answer(star_answer):
    f = AnswerFeatures.from_text(star_answer)

    assert f.word_count >= 60
    assert f.has_examples
    assert f.has_quantifiable_results
    assert f.has_star_structure
    assert f.technical_terms >= 2
    assert not f.hedging


def test_percentage_counts_as_quantifiable():
    assert AnswerFeatures.from_text("we grew usage 20% last year").has_quantifiable_results
    assert AnswerFeatures.from_text("it cost $500 to run").has_quantifiable_results
    assert not AnswerFeatures.from_text("we worked hard all year").has_quantifiable_results


def test_hedging_reduces_score(scorer, star_answer):
    hedged = star_answer + " Honestly I am not sure it was the best approach."
    assert scorer.score(hedged, 45).score < scorer.score(star_answer, 45).score


def test_score_non_decreasing_in_word_count(scorer):
    sentence = "During the project we improved the system for our customers. "
    scores = [scorer.score(sentence * k, 45).score for k in range(2, 9)]
    assert scores == sorted(scores)


def test_generic_answer_capped_at_fifty(scorer):
    text = ("We talk a lot every day about many different things in the office, "
            "and everyone seems happy with the general direction of the team overall. ") * 4
    result = scorer.score(text, 60)
    assert result.score <= 50


def test_under_twenty_words_capped(scorer):
    text = ("In one project we increased sales by 30% through a careful new pricing approach "
            "for our largest enterprise clients")
    assert scorer.score(text, 60).score <= 35


def test_improvement_always_present_below_85(scorer):
    result = scorer.score("During the project we improved the system for our customers. " * 3, 45)
    assert result.score < 85
    assert result.improvements


def test_nonverbal_points_use_facial_averages(scorer, star_answer):
    facial = {"confidence": 0.9, "engagement": 0.8, "eye_contact": 0.7}
    assert nonverbal_points(facial) == 15
    assert nonverbal_points({"confidence": 0.61}) == 5
    assert nonverbal_points(None) == 0
    result = scorer.score(star_answer, 45, facial=facial)
    assert "Demonstrated confidence through body language" in result.strengths


@pytest.mark.parametrize("seconds,points", [
    (2, 0), (10, 5), (17, 10), (20, 15), (120, 15), (150, 10), (180, 10), (400, 5),
])
def test_timing_points(seconds, points):
    assert timing_points(seconds) == points


def test_clarity_thresholds():
    assert [clarity_points(n) for n in (19, 20, 40, 59, 60, 200)] == [0, 10, 20, 20, 30, 30]


@pytest.mark.parametrize("score,prefix", [
    (85, "Excellent"), (70, "Good"), (50, "Adequate"), (25, "Basic"), (10, "Insufficient"),
])
def test_feedback_bands(score, prefix):
    assert feedback_for(score).startswith(prefix)


def test_score_is_always_in_range(scorer):
    texts = ["", "yes", "I dont know " * 20, "Project situation result increased 50% " * 30]
    for text in texts:
        for seconds in (0, 30, 500):
            assert 0 <= scorer.score(text, seconds).score <= 100
