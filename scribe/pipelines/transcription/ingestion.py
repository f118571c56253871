"""Upload intake: validation and staging (first stage of the pipeline)."""

from __future__ import annotations

import logging
import mimetypes
import os
from pathlib import Path
from typing import BinaryIO, Optional, Protocol

from scribe.config.settings import IntakeConfig
from scribe.services.staging import (
    ensure_staging_dir,
    generate_staging_name,
    write_staged_upload,
)

from .errors import MissingFile, TooLarge, TooSmall, UnsupportedType
from .types import StagedFile

logger = logging.getLogger("scribe.pipelines.transcription")

_FALLBACK_MEDIA_TYPE = "application/octet-stream"


class AudioUpload(Protocol):
    """The subset of ``fastapi.UploadFile`` the validator relies on."""

    filename: Optional[str]
    file: BinaryIO
    size: Optional[int]

    @property
    def content_type(self) -> Optional[str]: ...


def _declared_size(upload: AudioUpload) -> int:
    if upload.size is not None:
        return upload.size
    stream = upload.file
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(0)
    return size


def _resolve_media_type(upload: AudioUpload) -> str:
    content_type = upload.content_type
    if not content_type and upload.filename:
        content_type, _ = mimetypes.guess_type(upload.filename)
    return content_type or _FALLBACK_MEDIA_TYPE


class IntakeValidator:
    """Check an upload against the configured limits and stage it on disk."""

    def __init__(self, config: IntakeConfig) -> None:
        self._config = config
        self._extensions = tuple(ext.lower() for ext in config.allowed_extensions)

    def is_supported(self, filename: str) -> bool:
        return filename.lower().endswith(self._extensions)

    def check(self, upload: AudioUpload | None) -> int:
        """Run every validation rule and return the upload size in bytes."""

        if upload is None or not upload.filename:
            raise MissingFile("No file uploaded")

        if not self.is_supported(upload.filename):
            supported = ", ".join(self._config.allowed_extensions)
            raise UnsupportedType(
                f"Unsupported file type. Supported: {supported}",
                filename=upload.filename,
            )

        size = _declared_size(upload)
        if size < self._config.min_size_bytes:
            raise TooSmall("File too small", size=size)
        if size > self._config.max_size_bytes:
            limit_mb = self._config.max_size_bytes // (1024 * 1024)
            raise TooLarge(f"File too large. Maximum size is {limit_mb}MB", size=size)
        return size

    async def validate(self, upload: AudioUpload | None) -> StagedFile:
        """Validate ``upload`` and copy it into the staging directory."""

        size = self.check(upload)
        staging_dir = ensure_staging_dir(self._config.staging_dir)
        destination = Path(staging_dir) / generate_staging_name(upload.filename)
        await write_staged_upload(upload.file, destination)

        staged = StagedFile(
            path=destination,
            original_name=upload.filename,
            size=size,
            media_type=_resolve_media_type(upload),
        )
        logger.info(
            "Staged upload name=%s size=%s type=%s path=%s",
            staged.original_name,
            staged.size,
            staged.media_type,
            staged.path,
        )
        return staged


__all__ = ["AudioUpload", "IntakeValidator"]
