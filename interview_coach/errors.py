"""
Exception hierarchy for the interview session engine.
"""
from typing import Optional


class InterviewCoachError(Exception):
    """Base class for every error raised by this package."""


class SessionError(InterviewCoachError):
    """Session lifecycle errors."""


class InvalidTransitionError(SessionError):
    """Operation not allowed in the session's current state."""

    def __init__(self, operation: str, state: str):
        self.operation = operation
        self.state = state
        super().__init__(f"Cannot {operation} while session is {state}")


class DeviceAccessError(SessionError):
    """Microphone or camera could not be opened (permission denied, missing device)."""


class AIServiceError(InterviewCoachError):
    """Any failure talking to the AI evaluation/question service."""


class AIServiceTimeout(AIServiceError):
    """The AI service did not answer in time."""


class AIServiceUnavailable(AIServiceError):
    """The AI service could not be reached."""


class AIServiceHTTPError(AIServiceError):
    """The AI service answered with a non-2xx status."""

    def __init__(self, status_code: int, body: str = "", endpoint: Optional[str] = None):
        self.status_code = status_code
        self.body = body
        self.endpoint = endpoint
        super().__init__(f"AI service responded with {status_code}: {body}")


class ChannelError(InterviewCoachError):
    """Telemetry channel failure."""


class ReportGenerationError(InterviewCoachError):
    """Final report could not be generated. Safe to retry."""
