"""Infrastructure components for the interview coach.

This module contains low-level technical components: the AI service
client, the telemetry channel, audio/video capture, session storage and
timer scheduling.
"""

# AI service client
from .ai_service import AIServiceClient

# Session storage
from .data import SessionStore, MemorySessionStore, FileSessionStore

# Scheduling
from .scheduling import Scheduler, ThreadingScheduler, TimerHandle

__all__ = [
    "AIServiceClient",
    "SessionStore", "MemorySessionStore", "FileSessionStore",
    "Scheduler", "ThreadingScheduler", "TimerHandle",
]
