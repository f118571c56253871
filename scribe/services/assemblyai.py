"""AssemblyAI speech-to-text client.

All knowledge of the provider's endpoints and JSON shapes lives here. The
pipeline only sees ``UploadHandle``, job identifiers and ``JobSnapshot``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, AsyncIterator

import httpx
from fastapi.concurrency import run_in_threadpool

from scribe.config.settings import ProviderConfig
from scribe.pipelines.transcription.errors import (
    ConfigurationError,
    ProviderRejected,
    ProviderUnavailable,
)
from scribe.pipelines.transcription.types import (
    JobSnapshot,
    ProviderJobStatus,
    StagedFile,
    TranscriptionOptions,
    UploadHandle,
)

logger = logging.getLogger(__name__)

_UPLOAD_CHUNK_BYTES = 256 * 1024


async def _iter_file(path: Path) -> AsyncIterator[bytes]:
    """Yield a file in chunks without blocking the event loop."""

    handle = await run_in_threadpool(path.open, "rb")
    try:
        while True:
            chunk = await run_in_threadpool(handle.read, _UPLOAD_CHUNK_BYTES)
            if not chunk:
                break
            yield chunk
    finally:
        await run_in_threadpool(handle.close)


class AssemblyAIClient:
    """Submit audio, start jobs and poll their status on AssemblyAI."""

    def __init__(
        self,
        config: ProviderConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        self._transport = transport
        self._http: httpx.AsyncClient | None = None

    def _api_key(self) -> str:
        secret = self._config.api_key
        api_key = secret.get_secret_value().strip() if secret else ""
        if not api_key:
            logger.critical("AssemblyAI API key missing; refusing to contact the provider")
            raise ConfigurationError("AssemblyAI API key missing")
        return api_key

    def _client(self, api_key: str) -> httpx.AsyncClient:
        """Return the shared HTTP client, opening it on first use."""

        if self._http is None or self._http.is_closed:
            self._http = httpx.AsyncClient(
                base_url=self._config.base_url.rstrip("/"),
                headers={"authorization": api_key},
                timeout=self._config.request_timeout_seconds,
                transport=self._transport,
            )
        return self._http

    async def aclose(self) -> None:
        """Close the pooled connections; a later call reopens them."""

        if self._http is not None:
            await self._http.aclose()
            self._http = None

    @staticmethod
    def _json(response: httpx.Response) -> dict[str, Any]:
        try:
            payload = response.json()
        except ValueError as exc:
            raise ProviderRejected(
                f"Invalid JSON from AssemblyAI ({response.status_code})"
            ) from exc
        if not isinstance(payload, dict):
            raise ProviderRejected("Unexpected response body from AssemblyAI")
        return payload

    async def submit_audio(self, staged: StagedFile) -> UploadHandle:
        """Stream the staged file to the provider's upload endpoint."""

        api_key = self._api_key()
        logger.info("Uploading %s to AssemblyAI", staged.original_name)

        client = self._client(api_key)
        try:
            response = await client.post(
                "/upload",
                content=_iter_file(staged.path),
                headers={"content-type": "application/octet-stream"},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise ProviderRejected(
                f"AssemblyAI upload failed with status {exc.response.status_code}"
            ) from exc
        except httpx.TransportError as exc:
            raise ProviderUnavailable(f"AssemblyAI upload failed: {exc}") from exc

        upload_url = self._json(response).get("upload_url")
        if not upload_url:
            raise ProviderRejected("AssemblyAI upload failed")
        return UploadHandle(upload_url=upload_url)

    async def start_job(
        self,
        handle: UploadHandle,
        options: TranscriptionOptions | None = None,
    ) -> str:
        """Request transcription of previously uploaded audio; return the job id."""

        api_key = self._api_key()
        options = options or TranscriptionOptions()
        body = {
            "audio_url": handle.upload_url,
            "punctuate": options.punctuate,
            "format_text": options.format_text,
            "language_detection": options.language_detection,
        }

        client = self._client(api_key)
        try:
            response = await client.post("/transcript", json=body)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise ProviderRejected(
                f"Failed to start transcription ({exc.response.status_code})"
            ) from exc
        except httpx.TransportError as exc:
            raise ProviderUnavailable(f"Failed to start transcription: {exc}") from exc

        job_id = self._json(response).get("id")
        if not job_id:
            raise ProviderRejected("Failed to start transcription")
        logger.info("AssemblyAI job started id=%s", job_id)
        return str(job_id)

    async def poll_job(self, job_id: str) -> JobSnapshot:
        """Fetch the current status of a job once."""

        api_key = self._api_key()

        client = self._client(api_key)
        try:
            response = await client.get(f"/transcript/{job_id}")
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise ProviderUnavailable(
                f"Polling job {job_id} returned {exc.response.status_code}"
            ) from exc
        except httpx.TransportError as exc:
            raise ProviderUnavailable(f"Polling job {job_id} failed: {exc}") from exc

        payload = self._json(response)
        raw_status = payload.get("status")
        try:
            status = ProviderJobStatus(raw_status)
        except ValueError:
            logger.warning("Unknown AssemblyAI status %r for job %s", raw_status, job_id)
            status = ProviderJobStatus.PROCESSING

        return JobSnapshot(
            status=status,
            text=payload.get("text"),
            error_detail=payload.get("error"),
        )


__all__ = ["AssemblyAIClient"]
