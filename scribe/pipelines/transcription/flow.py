"""Job orchestration for ``POST /upload``.

``TranscriptionPipeline.process`` runs the stages in order:

1. ``ingestion`` – validate the upload and copy it to staging.
2. ``assemblyai`` – upload the staged audio and start a provider job.
3. ``polling`` – wait for the job to complete, fail or time out.
4. cleanup – the staged file is discarded on every exit path.
5. persistence – completed and failed jobs are stored for the owner.

Failures before a job exists (validation, configuration, provider transport
or rejection) are raised to the caller and never stored. Jobs that end in
``failed`` or ``timed_out`` are stored with their error message and the
corresponding ``JobError`` is raised with the stored record attached.
"""

from __future__ import annotations

import logging
import time
from typing import Protocol

from scribe.application.interfaces import TranscriptRepositoryInterface
from scribe.domain.models import TranscriptRecord
from scribe.models.transcription import TranscriptionStatus
from scribe.services.staging import staged_file
from scribe.telemetry import record_job_outcome

from .errors import TranscriptionPipelineError, ValidationError
from .ingestion import AudioUpload, IntakeValidator
from .polling import JobPoller
from .types import JobOutcome, StagedFile, TranscriptionOptions, UploadHandle

logger = logging.getLogger("scribe.pipelines.transcription")


class TranscriptionProvider(Protocol):
    async def submit_audio(self, staged: StagedFile) -> UploadHandle: ...

    async def start_job(
        self,
        handle: UploadHandle,
        options: TranscriptionOptions | None = None,
    ) -> str: ...


class TranscriptionPipeline:
    """Sequence intake, provider submission, polling, cleanup and persistence."""

    def __init__(
        self,
        *,
        validator: IntakeValidator,
        provider: TranscriptionProvider,
        poller: JobPoller,
        repository: TranscriptRepositoryInterface,
    ) -> None:
        self._validator = validator
        self._provider = provider
        self._poller = poller
        self._repository = repository

    async def process(self, upload: AudioUpload | None, owner_id: int) -> TranscriptRecord:
        try:
            staged = await self._validator.validate(upload)
        except ValidationError as exc:
            logger.info("Rejected upload owner=%s: %s", owner_id, exc)
            record_job_outcome("rejected")
            raise

        logger.info("Upload from user=%s: %s", owner_id, staged.original_name)
        started = time.perf_counter()

        try:
            async with staged_file(staged):
                outcome = await self._transcribe(staged)
        except TranscriptionPipelineError as exc:
            logger.error("Submission failed for %s: %s", staged.original_name, exc)
            record_job_outcome("submission_failed")
            raise

        elapsed_ms = int((time.perf_counter() - started) * 1000)
        record = self._build_record(staged, owner_id, outcome, elapsed_ms)
        persisted = await self._repository.create(record)
        record_job_outcome(outcome.state.value, outcome.ticks)

        if outcome.error is not None:
            outcome.error.record = persisted
            raise outcome.error

        logger.info(
            "Transcription stored id=%s owner=%s chars=%s elapsed_ms=%s",
            persisted.id,
            owner_id,
            len(persisted.transcription),
            elapsed_ms,
        )
        return persisted

    async def _transcribe(self, staged: StagedFile) -> JobOutcome:
        handle = await self._provider.submit_audio(staged)
        job_id = await self._provider.start_job(handle, TranscriptionOptions())
        return await self._poller.run(job_id)

    @staticmethod
    def _build_record(
        staged: StagedFile,
        owner_id: int,
        outcome: JobOutcome,
        elapsed_ms: int,
    ) -> TranscriptRecord:
        if outcome.succeeded:
            status, text, error_message = TranscriptionStatus.COMPLETED, outcome.text, None
        else:
            status, text, error_message = TranscriptionStatus.FAILED, "", str(outcome.error)

        return TranscriptRecord(
            user_id=owner_id,
            filename=staged.original_name,
            filepath=str(staged.path),
            transcription=text,
            file_size=staged.size,
            mime_type=staged.media_type,
            status=status,
            error_message=error_message,
            processing_time_ms=elapsed_ms,
        )


__all__ = ["TranscriptionPipeline", "TranscriptionProvider"]
