"""SQLAlchemy model for persisted transcripts."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from sqlalchemy import Column, DateTime
from sqlalchemy import Enum as SqlEnum
from sqlalchemy import ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship

from scribe.models.base import Base


class TranscriptionStatus(str, Enum):
    """Outcome of a transcription job as recorded for its owner."""

    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class Transcription(Base):
    __tablename__ = "transcriptions"
    __table_args__ = (
        Index("ix_transcriptions_user_created", "user_id", "created_at"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    filename = Column(String(255), nullable=False, index=True)
    # Staging path of the original upload; never serialised to callers.
    filepath = Column(String(1024), nullable=False)
    transcription = Column(Text, nullable=False, default="")
    file_size = Column(Integer, nullable=False)
    mime_type = Column(String(255), nullable=False)
    status = Column(
        SqlEnum(
            TranscriptionStatus,
            name="transcription_status",
            values_callable=lambda members: [member.value for member in members],
        ),
        nullable=False,
        default=TranscriptionStatus.COMPLETED,
        index=True,
    )
    error_message = Column(Text, nullable=True)
    processing_time_ms = Column(Integer, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    updated_at = Column(
        DateTime,
        nullable=False,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )

    owner = relationship("User", back_populates="transcriptions")


__all__ = ["Transcription", "TranscriptionStatus"]
