"""AssemblyAI client against a mocked HTTP transport."""

from __future__ import annotations

import json
from pathlib import Path

import httpx
import pytest
from pydantic import SecretStr

from scribe.config.settings import ProviderConfig
from scribe.pipelines.transcription import (
    ConfigurationError,
    JobSnapshot,
    ProviderJobStatus,
    ProviderRejected,
    ProviderUnavailable,
    StagedFile,
    TranscriptionOptions,
    UploadHandle,
)
from scribe.services import AssemblyAIClient


def _config(api_key: str | None = "secret-key") -> ProviderConfig:
    return ProviderConfig(
        api_key=SecretStr(api_key) if api_key is not None else None,
        base_url="https://stt.test/v2",
    )


@pytest.fixture
def staged(tmp_path: Path) -> StagedFile:
    path = tmp_path / "audio-1.wav"
    path.write_bytes(b"\x01" * 4096)
    return StagedFile(path=path, original_name="call.wav", size=4096, media_type="audio/wav")


@pytest.mark.asyncio
async def test_submit_audio_streams_file(staged: StagedFile):
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"upload_url": "https://cdn.test/abc"})

    client = AssemblyAIClient(_config(), transport=httpx.MockTransport(handler))
    handle = await client.submit_audio(staged)

    assert handle == UploadHandle(upload_url="https://cdn.test/abc")
    request = seen[0]
    assert request.method == "POST"
    assert request.url == "https://stt.test/v2/upload"
    assert request.headers["authorization"] == "secret-key"
    assert request.content == b"\x01" * 4096


@pytest.mark.asyncio
async def test_start_job_sends_options():
    bodies: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        return httpx.Response(200, json={"id": "tx-42", "status": "queued"})

    client = AssemblyAIClient(_config(), transport=httpx.MockTransport(handler))
    job_id = await client.start_job(
        UploadHandle(upload_url="https://cdn.test/abc"),
        TranscriptionOptions(language_detection=False),
    )

    assert job_id == "tx-42"
    assert bodies == [
        {
            "audio_url": "https://cdn.test/abc",
            "punctuate": True,
            "format_text": True,
            "language_detection": False,
        }
    ]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("payload", "expected"),
    [
        ({"status": "processing"}, JobSnapshot(status=ProviderJobStatus.PROCESSING)),
        (
            {"status": "completed", "text": "hello world"},
            JobSnapshot(status=ProviderJobStatus.COMPLETED, text="hello world"),
        ),
        (
            {"status": "error", "error": "bad audio"},
            JobSnapshot(status=ProviderJobStatus.ERROR, error_detail="bad audio"),
        ),
        ({"status": "mystery"}, JobSnapshot(status=ProviderJobStatus.PROCESSING)),
    ],
)
async def test_poll_job_maps_status(payload: dict, expected: JobSnapshot):
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/v2/transcript/tx-42"
        return httpx.Response(200, json=payload)

    client = AssemblyAIClient(_config(), transport=httpx.MockTransport(handler))
    assert await client.poll_job("tx-42") == expected


@pytest.mark.asyncio
async def test_missing_api_key_fails_before_network(staged: StagedFile):
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json={})

    client = AssemblyAIClient(_config(api_key="  "), transport=httpx.MockTransport(handler))
    with pytest.raises(ConfigurationError):
        await client.submit_audio(staged)

    client = AssemblyAIClient(_config(api_key=None), transport=httpx.MockTransport(handler))
    with pytest.raises(ConfigurationError):
        await client.poll_job("tx-1")

    assert calls == []


@pytest.mark.asyncio
async def test_upload_without_url_is_rejected(staged: StagedFile):
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json={}))
    client = AssemblyAIClient(_config(), transport=transport)

    with pytest.raises(ProviderRejected):
        await client.submit_audio(staged)


@pytest.mark.asyncio
async def test_error_status_on_start_is_rejected():
    transport = httpx.MockTransport(
        lambda request: httpx.Response(401, json={"error": "Invalid API key"})
    )
    client = AssemblyAIClient(_config(), transport=transport)

    with pytest.raises(ProviderRejected) as excinfo:
        await client.start_job(UploadHandle(upload_url="https://cdn.test/abc"))
    assert excinfo.value.status_code == 502


@pytest.mark.asyncio
async def test_transport_error_is_unavailable(staged: StagedFile):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = AssemblyAIClient(_config(), transport=httpx.MockTransport(handler))

    with pytest.raises(ProviderUnavailable):
        await client.submit_audio(staged)
    with pytest.raises(ProviderUnavailable):
        await client.poll_job("tx-1")


@pytest.mark.asyncio
async def test_server_error_while_polling_is_unavailable():
    transport = httpx.MockTransport(lambda request: httpx.Response(503, text="busy"))
    client = AssemblyAIClient(_config(), transport=transport)

    with pytest.raises(ProviderUnavailable):
        await client.poll_job("tx-1")


@pytest.mark.asyncio
async def test_one_http_client_serves_a_whole_job(staged: StagedFile, monkeypatch: pytest.MonkeyPatch):
    opened: list[httpx.AsyncClient] = []
    real_client = httpx.AsyncClient

    def tracking_client(*args, **kwargs) -> httpx.AsyncClient:
        instance = real_client(*args, **kwargs)
        opened.append(instance)
        return instance

    monkeypatch.setattr(httpx, "AsyncClient", tracking_client)

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/v2/upload":
            return httpx.Response(200, json={"upload_url": "https://cdn.test/abc"})
        if request.method == "POST":
            return httpx.Response(200, json={"id": "tx-9"})
        return httpx.Response(200, json={"status": "processing"})

    client = AssemblyAIClient(_config(), transport=httpx.MockTransport(handler))
    handle = await client.submit_audio(staged)
    job_id = await client.start_job(handle)
    for _ in range(5):
        await client.poll_job(job_id)

    assert len(opened) == 1
    assert not opened[0].is_closed

    await client.aclose()
    assert opened[0].is_closed

    await client.poll_job(job_id)
    assert len(opened) == 2
    await client.aclose()
