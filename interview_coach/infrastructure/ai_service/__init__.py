"""Client for the external AI question/evaluation service."""

from .client import AIServiceClient

__all__ = ["AIServiceClient"]
