"""Utility modules for imports, logging, and helpers."""

from .imports import import_quietly, with_suppressed_audio_warnings
from .logging import setup_logging

__all__ = ["import_quietly", "with_suppressed_audio_warnings", "setup_logging"]
