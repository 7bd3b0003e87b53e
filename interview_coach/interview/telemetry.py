"""
Rolling aggregation of facial and voice telemetry for a live session.
"""
import time
import logging
import threading
from collections import deque
from typing import Dict, Any, List, Optional, Sequence

from .models import TelemetrySample, InterviewScore
from ..config import TELEMETRY_HISTORY_LIMIT, RUNNING_METRICS_WINDOW, NONVERBAL_WINDOW

logger = logging.getLogger("telemetry")

FACIAL_KEYS = ("confidence", "engagement", "eye_contact")


def mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def variance(values: Sequence[float]) -> float:
    """Population variance; 0 for an empty sequence."""
    if not values:
        return 0.0
    m = mean(values)
    return sum((v - m) ** 2 for v in values) / len(values)


def trend(values: Sequence[float]) -> float:
    """Mean of the second half minus mean of the first half."""
    if len(values) < 2:
        return 0.0
    half = len(values) // 2
    return mean(values[half:]) - mean(values[:half])


def _metric(sample: TelemetrySample, key: str) -> float:
    value = sample.data.get(key) if isinstance(sample.data, dict) else None
    try:
        return float(value) if value is not None else 0.0
    except (TypeError, ValueError):
        return 0.0


class TelemetryAggregator:
    """
    Keeps the most recent facial and voice samples of a session.

    Both histories are bounded; the oldest sample is evicted once the limit
    is reached. Values are stored as received and only read defensively.
    """

    def __init__(self, limit: int = TELEMETRY_HISTORY_LIMIT):
        self.limit = limit
        self._facial: deque = deque(maxlen=limit)
        self._voice: deque = deque(maxlen=limit)
        self._lock = threading.Lock()

    def ingest_facial(self, data: Dict[str, Any], timestamp: Optional[float] = None) -> TelemetrySample:
        sample = TelemetrySample(timestamp=timestamp if timestamp is not None else time.time(), data=data)
        with self._lock:
            self._facial.append(sample)
        return sample

    def ingest_voice(self, data: Dict[str, Any], timestamp: Optional[float] = None) -> TelemetrySample:
        sample = TelemetrySample(timestamp=timestamp if timestamp is not None else time.time(), data=data)
        with self._lock:
            self._voice.append(sample)
        return sample

    @property
    def facial_history(self) -> List[TelemetrySample]:
        with self._lock:
            return list(self._facial)

    @property
    def facial_sample_count(self) -> int:
        return len(self._facial)

    @property
    def voice_sample_count(self) -> int:
        return len(self._voice)

    def _averages(self, window: int) -> Optional[Dict[str, float]]:
        recent = self.facial_history[-window:]
        if not recent:
            return None
        return {key: mean([_metric(s, key) for s in recent]) for key in FACIAL_KEYS}

    def recent_facial_averages(self, window: int = NONVERBAL_WINDOW) -> Optional[Dict[str, float]]:
        """Average confidence/engagement/eye contact over the last `window` samples."""
        return self._averages(window)

    def running_metrics(self, previous: InterviewScore) -> InterviewScore:
        """
        Update the live behavioral metrics from the recent facial history.

        Args:
            previous: Score whose confidence/engagement/eye contact are replaced

        Returns:
            The same score object; untouched when there is no facial history
        """
        averages = self._averages(RUNNING_METRICS_WINDOW)
        if averages is None:
            return previous
        previous.confidence = round(averages["confidence"], 3)
        previous.engagement = round(averages["engagement"], 3)
        previous.eye_contact = round(averages["eye_contact"], 3)
        return previous

    def summary_statistics(self) -> Optional[Dict[str, Any]]:
        """End-of-session statistics over the full retained facial history."""
        history = self.facial_history
        if not history:
            return None
        confidence = [_metric(s, "confidence") for s in history]
        engagement = [_metric(s, "engagement") for s in history]
        eye_contact = [_metric(s, "eye_contact") for s in history]
        return {
            "samples": len(history),
            "avgConfidence": mean(confidence),
            "avgEngagement": mean(engagement),
            "avgEyeContact": mean(eye_contact),
            "confidenceVariance": variance(confidence),
            "engagementTrend": trend(engagement),
        }

    def clear(self) -> None:
        with self._lock:
            self._facial.clear()
            self._voice.clear()
        logger.debug("Telemetry history cleared")
