"""Transcription job pipeline package.

Modules follow the order in which ``POST /upload`` executes:

1. ``ingestion`` – validate the upload and stage it on disk.
2. ``polling`` – bounded state machine that waits for the provider job.
3. ``flow`` – orchestration, cleanup and persistence policy.

``errors`` and ``types`` hold the shared exception hierarchy and dataclasses.
"""

from .errors import (
    ConfigurationError,
    JobError,
    JobFailed,
    JobTimedOut,
    MissingFile,
    ProviderRejected,
    ProviderUnavailable,
    StagingError,
    StoreError,
    TooLarge,
    TooSmall,
    TranscriptionPipelineError,
    UnsupportedType,
    ValidationError,
)
from .flow import TranscriptionPipeline
from .ingestion import IntakeValidator
from .polling import JobPoller
from .types import (
    JobOutcome,
    JobSnapshot,
    JobState,
    ProviderJobStatus,
    StagedFile,
    TranscriptionOptions,
    UploadHandle,
)

__all__ = [
    "ConfigurationError",
    "IntakeValidator",
    "JobError",
    "JobFailed",
    "JobOutcome",
    "JobPoller",
    "JobSnapshot",
    "JobState",
    "JobTimedOut",
    "MissingFile",
    "ProviderJobStatus",
    "ProviderRejected",
    "ProviderUnavailable",
    "StagedFile",
    "StagingError",
    "StoreError",
    "TooLarge",
    "TooSmall",
    "TranscriptionOptions",
    "TranscriptionPipeline",
    "TranscriptionPipelineError",
    "UnsupportedType",
    "UploadHandle",
    "ValidationError",
]
