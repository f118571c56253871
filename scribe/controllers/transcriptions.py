"""Transcription upload and history endpoints.

``POST /upload`` hands the multipart ``audio`` field to
``scribe.pipelines.transcription.TranscriptionPipeline``; see that package
for the stage-by-stage description. Pipeline failures are rendered by the
exception handlers registered in ``scribe.main``.
"""

import logging
from typing import Optional

from fastapi import APIRouter, File, UploadFile, status
from fastapi.responses import JSONResponse

from scribe.controllers.dependencies import CurrentUserDep, PipelineDep, RepositoryDep
from scribe.views import (
    ErrorResponse,
    HistoryResponse,
    MessageResponse,
    TranscriptionResponse,
    UploadResponse,
)

router = APIRouter(tags=["transcriptions"])

logger = logging.getLogger(__name__)
transcript_logger = logging.getLogger("scribe.logs.transcript")

_AUDIO_UPLOAD = File(None, description="Audio file (wav, mp3, mp4, aac, ogg, webm, flac, m4a)")


@router.post("/upload", response_model=UploadResponse)
async def upload_audio(
    current_user: CurrentUserDep,
    pipeline: PipelineDep,
    audio: Optional[UploadFile] = _AUDIO_UPLOAD,
) -> UploadResponse:
    """Transcribe an uploaded recording and store the result for the caller."""

    try:
        record = await pipeline.process(audio, current_user.id)
    finally:
        if audio is not None:
            await audio.close()

    transcript_logger.info(
        "user=%s | file=%s | id=%s | text=%s",
        current_user.id,
        record.filename,
        record.id,
        record.transcription,
    )
    return UploadResponse(file=TranscriptionResponse.model_validate(record))


@router.get("/history", response_model=HistoryResponse)
async def list_history(
    current_user: CurrentUserDep,
    repository: RepositoryDep,
) -> HistoryResponse:
    """Return the caller's transcriptions, newest first."""

    records = await repository.list_by_owner(current_user.id)
    return HistoryResponse(
        data=[TranscriptionResponse.model_validate(record) for record in records]
    )


@router.delete(
    "/history/{transcription_id}",
    response_model=MessageResponse,
    responses={status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}},
)
async def delete_history_item(
    transcription_id: int,
    current_user: CurrentUserDep,
    repository: RepositoryDep,
):
    """Delete one of the caller's transcriptions and its stored audio."""

    deleted = await repository.delete_by_id_for_owner(transcription_id, current_user.id)
    if not deleted:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content=ErrorResponse(error="Not found").model_dump(exclude_none=True),
        )

    logger.info("User %s deleted transcription %s", current_user.id, transcription_id)
    return MessageResponse(message="Deleted")
