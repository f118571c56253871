"""SQLAlchemy models for the MVC architecture."""

from .base import Base
from .transcription import Transcription, TranscriptionStatus  # noqa: F401
from .user import User  # noqa: F401

__all__ = [
    "Base",
    "User",
    "Transcription",
    "TranscriptionStatus",
]
