import pytest

from interview_coach.interview.models import InterviewScore
from interview_coach.interview.telemetry import TelemetryAggregator, mean, variance, trend


def test_histories_are_bounded_to_most_recent_fifty():
    agg = TelemetryAggregator()
    for i in range(120):
        agg.ingest_facial({"confidence": i / 120}, timestamp=float(i))
        agg.ingest_voice({"clarity": i}, timestamp=float(i))

    facial = agg.facial_history
    assert len(facial) == 50
    assert agg.voice_sample_count == 50
    assert [s.timestamp for s in facial] == [float(i) for i in range(70, 120)]


def test_running_metrics_noop_when_empty():
    score = InterviewScore()
    agg = TelemetryAggregator()

    assert agg.running_metrics(score) is score
    assert (score.confidence, score.engagement, score.eye_contact) == (0.5, 0.5, 0.5)


def test_running_metrics_uses_last_twenty_samples():
    agg = TelemetryAggregator()
    for _ in range(30):
        agg.ingest_facial({"confidence": 0.0, "engagement": 0.0, "eye_contact": 0.0})
    for _ in range(20):
        agg.ingest_facial({"confidence": 0.8, "engagement": 0.6, "eye_contact": 0.4})

    score = agg.running_metrics(InterviewScore())
    assert score.confidence == pytest.approx(0.8)
    assert score.engagement == pytest.approx(0.6)
    assert score.eye_contact == pytest.approx(0.4)


def test_running_metrics_rounds_and_treats_missing_keys_as_zero():
    agg = TelemetryAggregator()
    agg.ingest_facial({"confidence": 0.33333})
    agg.ingest_facial({"confidence": 0.66667, "engagement": 1.0})

    score = agg.running_metrics(InterviewScore())
    assert score.confidence == 0.5
    assert score.engagement == 0.5
    assert score.eye_contact == 0.0


def test_out_of_range_values_pass_through():
    agg = TelemetryAggregator()
    agg.ingest_facial({"confidence": 3.0})
    assert agg.facial_history[0].data["confidence"] == 3.0


def test_recent_facial_averages_window():
    agg = TelemetryAggregator()
    assert agg.recent_facial_averages() is None
    for value in [0.0] * 5 + [1.0] * 10:
        agg.ingest_facial({"confidence": value, "engagement": value, "eye_contact": value})
    assert agg.recent_facial_averages()["confidence"] == pytest.approx(1.0)


def test_summary_statistics():
    agg = TelemetryAggregator()
    assert agg.summary_statistics() is None

    for c, e in [(0.2, 0.1), (0.4, 0.3), (0.6, 0.5), (0.8, 0.9)]:
        agg.ingest_facial({"confidence": c, "engagement": e, "eye_contact": 0.5})

    stats = agg.summary_statistics()
    assert stats["samples"] == 4
    assert stats["avgConfidence"] == pytest.approx(0.5)
    assert stats["avgEyeContact"] == pytest.approx(0.5)
    assert stats["confidenceVariance"] == pytest.approx(0.05)
    assert stats["engagementTrend"] == pytest.approx(0.7 - 0.2)


def test_clear_discards_history():
    agg = TelemetryAggregator()
    agg.ingest_facial({"confidence": 1.0})
    agg.ingest_voice({"pace": 1.0})
    agg.clear()
    assert agg.facial_sample_count == 0
    assert agg.voice_sample_count == 0


def test_helpers():
    assert mean([]) == 0.0
    assert variance([]) == 0.0
    assert variance([5, 5, 5]) == 0.0
    assert trend([1.0]) == 0.0
    # Odd length: first half is floor(n/2) elements
    assert trend([0.0, 1.0, 1.0]) == pytest.approx(1.0)
