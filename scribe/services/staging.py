"""Local staging storage for uploads awaiting transcription."""

from __future__ import annotations

import logging
import os
import secrets
import shutil
import time
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, BinaryIO

from fastapi.concurrency import run_in_threadpool

from scribe.pipelines.transcription.errors import StagingError
from scribe.pipelines.transcription.types import StagedFile

logger = logging.getLogger(__name__)

_COPY_CHUNK_BYTES = 1024 * 1024


def ensure_staging_dir(directory: str | os.PathLike[str]) -> Path:
    """Create the staging directory if it is missing and return it."""

    path = Path(directory)
    path.mkdir(parents=True, exist_ok=True)
    return path


def generate_staging_name(original_name: str) -> str:
    """Return a collision-resistant file name preserving the original extension."""

    extension = Path(original_name).suffix
    return f"audio-{int(time.time() * 1000)}-{secrets.randbelow(10**9)}{extension}"


async def write_staged_upload(source: BinaryIO, destination: Path) -> None:
    """Copy an upload stream to ``destination``; partial files are removed."""

    def _copy() -> None:
        source.seek(0)
        with destination.open("xb") as target:
            shutil.copyfileobj(source, target, _COPY_CHUNK_BYTES)

    try:
        await run_in_threadpool(_copy)
    except OSError as exc:
        discard_file(destination)
        raise StagingError(f"Failed to stage upload at {destination}: {exc}") from exc


def discard_file(path: str | os.PathLike[str] | None) -> bool:
    """Delete a staged file if it exists. Failures are logged, never raised."""

    if not path:
        return False

    try:
        os.remove(path)
    except FileNotFoundError:
        return False
    except OSError as exc:
        logger.warning("Could not delete staged file %s: %s", path, exc)
        return False

    logger.info("Deleted staged file %s", path)
    return True


@asynccontextmanager
async def staged_file(staged: StagedFile) -> AsyncIterator[StagedFile]:
    """Scope a staged file to a block; it is discarded on every exit path."""

    try:
        yield staged
    finally:
        discard_file(staged.path)


__all__ = [
    "StagingError",
    "discard_file",
    "ensure_staging_dir",
    "generate_staging_name",
    "staged_file",
    "write_staged_upload",
]
