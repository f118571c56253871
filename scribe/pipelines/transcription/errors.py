"""Exception hierarchy for the transcription job pipeline.

Every error carries the HTTP status and machine-readable code the FastAPI
layer reports, plus a ``public_message`` that is safe to show to callers.
The full message (which may contain provider or database detail) is only
ever logged.
"""

from __future__ import annotations

from typing import Any, ClassVar


class TranscriptionPipelineError(RuntimeError):
    """Base class for failures raised while processing an upload."""

    status_code: ClassVar[int] = 500
    error_code: ClassVar[str] = "PIPELINE_ERROR"
    default_public_message: ClassVar[str] = "Transcription failed"

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.context = context

    @property
    def public_message(self) -> str:
        return self.default_public_message


class ValidationError(TranscriptionPipelineError):
    """The upload itself is malformed; nothing was staged or persisted."""

    status_code = 400
    error_code = "VALIDATION_ERROR"

    @property
    def public_message(self) -> str:
        return str(self)


class MissingFile(ValidationError):
    error_code = "MISSING_FILE"


class UnsupportedType(ValidationError):
    error_code = "UNSUPPORTED_FILE_TYPE"


class TooSmall(ValidationError):
    error_code = "FILE_TOO_SMALL"


class TooLarge(ValidationError):
    status_code = 413
    error_code = "FILE_TOO_LARGE"


class ConfigurationError(TranscriptionPipelineError):
    """The deployment is missing something the pipeline needs (e.g. API key)."""

    error_code = "CONFIGURATION_ERROR"
    default_public_message = "Transcription service is not configured"


class ProviderUnavailable(TranscriptionPipelineError):
    """Transport-level failure talking to the speech-to-text provider."""

    status_code = 502
    error_code = "PROVIDER_UNAVAILABLE"
    default_public_message = "Transcription provider is unavailable"


class ProviderRejected(TranscriptionPipelineError):
    """The provider answered without the expected upload handle or job id."""

    status_code = 502
    error_code = "PROVIDER_REJECTED"
    default_public_message = "Transcription provider rejected the request"


class JobError(TranscriptionPipelineError):
    """A submitted job ended unsuccessfully; a failed record was persisted."""

    status_code = 502

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message, **context)
        self.record: Any | None = None

    @property
    def public_message(self) -> str:
        return str(self)


class JobFailed(JobError):
    error_code = "JOB_FAILED"


class JobTimedOut(JobError):
    status_code = 504
    error_code = "JOB_TIMED_OUT"


class StagingError(TranscriptionPipelineError):
    """An upload could not be written to the staging directory."""

    error_code = "STAGING_ERROR"
    default_public_message = "Could not store the uploaded file"


class StoreError(TranscriptionPipelineError):
    """The record store could not complete the operation."""

    error_code = "STORE_ERROR"
    default_public_message = "Could not save the transcription"


__all__ = [
    "TranscriptionPipelineError",
    "ValidationError",
    "MissingFile",
    "UnsupportedType",
    "TooSmall",
    "TooLarge",
    "ConfigurationError",
    "ProviderUnavailable",
    "ProviderRejected",
    "JobError",
    "JobFailed",
    "JobTimedOut",
    "StagingError",
    "StoreError",
]
