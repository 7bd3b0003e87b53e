from interview_coach.interview.events import (
    SessionEventBus, SessionMetrics, EventType,
    SessionStartedEvent, QuestionIssuedEvent, AnswerScoredEvent, ErrorOccurredEvent
)


def test_failing_handler_does_not_block_others():
    bus = SessionEventBus()
    received = []

    def broken(event):
        raise RuntimeError("handler bug")

    bus.subscribe(EventType.SESSION_STARTED, broken)
    bus.subscribe(EventType.SESSION_STARTED, received.append)
    bus.subscribe_all(received.append)

    bus.emit(SessionStartedEvent("s1", 1.0, "Accountant", 5))

    assert len(received) == 2
    assert received[0].data == {"job_role": "Accountant", "max_questions": 5}


def test_unsubscribe():
    bus = SessionEventBus()
    received = []
    bus.subscribe(EventType.ERROR_OCCURRED, received.append)
    bus.unsubscribe(EventType.ERROR_OCCURRED, received.append)

    bus.emit(ErrorOccurredEvent("s1", 1.0, "X", "boom", "test"))

    assert received == []


def test_metrics_count_events():
    bus = SessionEventBus()
    metrics = SessionMetrics()
    bus.subscribe_all(metrics.handle_event)

    bus.emit(SessionStartedEvent("s1", 1.0, "Accountant", 5))
    bus.emit(QuestionIssuedEvent("s1", 2.0, 1, "Q?", "behavioral", "easy", True))
    bus.emit(QuestionIssuedEvent("s1", 3.0, 2, "Q?", "analytical", "easy", False))
    bus.emit(AnswerScoredEvent("s1", 4.0, 1, 80.0, "remote", 12.0, 16.0))
    bus.emit(AnswerScoredEvent("s1", 5.0, 2, 40.0, "local", 20.0, 24.0))

    counts = metrics.get_metrics()
    assert counts["sessions_started"] == 1
    assert counts["questions_issued"] == 2
    assert counts["fallback_questions"] == 1
    assert counts["remote_evaluations"] == 1
    assert counts["local_evaluations"] == 1

    metrics.reset()
    assert set(metrics.get_metrics().values()) == {0}
