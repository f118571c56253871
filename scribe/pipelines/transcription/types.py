"""Typed containers shared across the transcription pipeline.

These dataclasses live in their own module so the provider client, the
poller and the orchestrator can import them without circular imports.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from .errors import JobError


@dataclass(frozen=True)
class StagedFile:
    """An upload copied to the staging directory for one pipeline run."""

    path: Path
    original_name: str
    size: int
    media_type: str


@dataclass(frozen=True)
class UploadHandle:
    """Provider-side reference to uploaded audio."""

    upload_url: str


@dataclass(frozen=True)
class TranscriptionOptions:
    """Options sent when a transcription job is requested."""

    punctuate: bool = True
    format_text: bool = True
    language_detection: bool = True


class ProviderJobStatus(str, Enum):
    QUEUED = "queued"
    PROCESSING = "processing"
    COMPLETED = "completed"
    ERROR = "error"


@dataclass(frozen=True)
class JobSnapshot:
    """One observation of a provider job."""

    status: ProviderJobStatus
    text: str | None = None
    error_detail: str | None = None


class JobState(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    TIMED_OUT = "timed_out"

    @property
    def is_terminal(self) -> bool:
        return self is not JobState.PENDING


@dataclass(frozen=True)
class JobOutcome:
    """Terminal result of the polling state machine."""

    job_id: str
    state: JobState
    ticks: int
    text: str = ""
    error: JobError | None = None

    @property
    def succeeded(self) -> bool:
        return self.state is JobState.COMPLETED


__all__ = [
    "StagedFile",
    "UploadHandle",
    "TranscriptionOptions",
    "ProviderJobStatus",
    "JobSnapshot",
    "JobState",
    "JobOutcome",
]
