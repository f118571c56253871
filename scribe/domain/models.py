"""Domain models handed between the pipeline, the record store and views."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, model_validator

from scribe.models.transcription import TranscriptionStatus

NO_SPEECH_DETECTED = "No speech detected"


class TranscriptRecord(BaseModel):
    """Persisted outcome of one transcription job, owned by one account."""

    id: Optional[int] = None
    user_id: int
    filename: str
    filepath: str
    transcription: str = ""
    file_size: int
    mime_type: str
    status: TranscriptionStatus = TranscriptionStatus.COMPLETED
    error_message: Optional[str] = None
    processing_time_ms: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @model_validator(mode="after")
    def check_outcome(self) -> "TranscriptRecord":
        if self.status is TranscriptionStatus.FAILED and not (self.error_message or "").strip():
            raise ValueError("failed records require an error message")
        if self.status is TranscriptionStatus.COMPLETED and not self.transcription:
            raise ValueError("completed records require transcript text")
        return self


__all__ = ["TranscriptRecord", "NO_SPEECH_DETECTED"]
