"""
Interview Coach: mock-interview session engine.

Asks role-specific questions, records and scores spoken or typed answers,
aggregates live facial/voice telemetry and hands a session summary to an
external AI service for the final report.
"""

__version__ = "1.0.0"

# Main entry points
from .interview.orchestrator import InterviewSession
from .interview.report import ReportService
from .interview.models import QuestionRecord, InterviewScore, SessionSummary, InterviewReport

__all__ = [
    "InterviewSession", "ReportService",
    "QuestionRecord", "InterviewScore", "SessionSummary", "InterviewReport"
]
