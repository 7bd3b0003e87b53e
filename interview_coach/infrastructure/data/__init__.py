"""
Data storage infrastructure for session summaries and resume data.
"""

from .session_store import SessionStore, MemorySessionStore, FileSessionStore

__all__ = [
    'SessionStore',
    'MemorySessionStore',
    'FileSessionStore'
]
