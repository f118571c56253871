"""Pydantic schemas for transcript records exposed over HTTP.

The staging path stored with each record is not part of these schemas; callers
only ever see the original filename.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from scribe.models.transcription import TranscriptionStatus


class TranscriptionResponse(BaseModel):
    id: int
    user_id: int = Field(serialization_alias="userId")
    filename: str
    transcription: str = ""
    file_size: int = Field(serialization_alias="fileSize")
    mime_type: str = Field(serialization_alias="mimeType")
    status: TranscriptionStatus
    error_message: Optional[str] = Field(default=None, serialization_alias="errorMessage")
    processing_time_ms: Optional[int] = Field(
        default=None,
        serialization_alias="processingTime",
        description="Milliseconds spent uploading, transcribing and polling",
    )
    created_at: Optional[datetime] = Field(default=None, serialization_alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, serialization_alias="updatedAt")

    model_config = ConfigDict(from_attributes=True)


class UploadResponse(BaseModel):
    success: bool = True
    file: TranscriptionResponse


class HistoryResponse(BaseModel):
    success: bool = True
    data: List[TranscriptionResponse]


class FailedUploadResponse(BaseModel):
    success: bool = False
    error: str
    code: str
    file: Optional[TranscriptionResponse] = None


__all__ = [
    "TranscriptionResponse",
    "UploadResponse",
    "HistoryResponse",
    "FailedUploadResponse",
]
