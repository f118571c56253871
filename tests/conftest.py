"""Shared fixtures: SQLite-backed sessions, a scripted provider and a test client."""

from __future__ import annotations

import os
import sys
import tempfile
from pathlib import Path
from typing import Iterator

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

# Settings are read at import time, so point them at throwaway locations first.
_RUNTIME_DIR = Path(tempfile.mkdtemp(prefix="scribe-tests-"))
os.environ.setdefault("DB_DSN", f"sqlite+aiosqlite:///{_RUNTIME_DIR / 'app.db'}")
os.environ.setdefault("LOG_FILE", str(_RUNTIME_DIR / "logs" / "app.log"))
os.environ.setdefault("PIPELINE_LOG_FILE", str(_RUNTIME_DIR / "logs" / "pipeline.log"))
os.environ.setdefault("TRANSCRIPT_LOG_FILE", str(_RUNTIME_DIR / "logs" / "transcripts.log"))
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("ASSEMBLYAI_API_KEY", "test-key")

from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import NullPool  # noqa: E402

from scribe.config.settings import IntakeConfig, PollingConfig  # noqa: E402
from scribe.controllers.dependencies import (  # noqa: E402
    get_intake_validator,
    get_job_poller,
    get_provider_client,
)
from scribe.database import get_session  # noqa: E402
from scribe.main import app  # noqa: E402
from scribe.models import Base  # noqa: E402
from scribe.pipelines.transcription import (  # noqa: E402
    IntakeValidator,
    JobPoller,
    JobSnapshot,
    ProviderJobStatus,
    TranscriptionOptions,
    UploadHandle,
)


class ScriptedProvider:
    """Provider double that replays a fixed list of poll snapshots."""

    def __init__(self, snapshots: list[JobSnapshot] | None = None, job_id: str = "job-1") -> None:
        self.snapshots = list(snapshots or [])
        self.job_id = job_id
        self.submitted: list[str] = []
        self.started: list[tuple[UploadHandle, TranscriptionOptions | None]] = []
        self.polled: list[str] = []
        self.submit_error: Exception | None = None
        self.poll_error: Exception | None = None

    async def submit_audio(self, staged) -> UploadHandle:
        if self.submit_error is not None:
            raise self.submit_error
        assert Path(staged.path).exists()
        self.submitted.append(staged.original_name)
        return UploadHandle(upload_url="https://cdn.example.com/upload/abc")

    async def start_job(self, handle, options=None) -> str:
        self.started.append((handle, options))
        return self.job_id

    async def poll_job(self, job_id: str) -> JobSnapshot:
        self.polled.append(job_id)
        if self.poll_error is not None:
            raise self.poll_error
        if len(self.snapshots) > 1:
            return self.snapshots.pop(0)
        if self.snapshots:
            return self.snapshots[0]
        return JobSnapshot(status=ProviderJobStatus.PROCESSING)


class RecordingSleep:
    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)

    @property
    def total(self) -> float:
        return sum(self.calls)


def processing() -> JobSnapshot:
    return JobSnapshot(status=ProviderJobStatus.PROCESSING)


def completed(text: str | None) -> JobSnapshot:
    return JobSnapshot(status=ProviderJobStatus.COMPLETED, text=text)


@pytest.fixture
def staging_dir(tmp_path: Path) -> Path:
    return tmp_path / "uploads"


@pytest.fixture
def intake_config(staging_dir: Path) -> IntakeConfig:
    return IntakeConfig(staging_dir=str(staging_dir))


@pytest.fixture
def polling_config() -> PollingConfig:
    return PollingConfig(interval_seconds=3, max_attempts=60)


@pytest.fixture
def provider() -> ScriptedProvider:
    return ScriptedProvider([processing(), processing(), completed("hello world")])


@pytest.fixture
def fake_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def session_factory(tmp_path: Path) -> async_sessionmaker:
    """Sessions on a fresh SQLite file; the schema is created synchronously."""

    database = tmp_path / "records.db"
    schema_engine = create_engine(f"sqlite:///{database}")
    Base.metadata.create_all(schema_engine)
    schema_engine.dispose()

    engine = create_async_engine(f"sqlite+aiosqlite:///{database}", poolclass=NullPool)
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest.fixture
def client(
    session_factory: async_sessionmaker,
    provider: ScriptedProvider,
    intake_config: IntakeConfig,
    polling_config: PollingConfig,
    fake_sleep: RecordingSleep,
) -> Iterator[TestClient]:
    """Test client wired to SQLite and the scripted provider."""

    async def override_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_session
    app.dependency_overrides[get_provider_client] = lambda: provider
    app.dependency_overrides[get_intake_validator] = lambda: IntakeValidator(intake_config)
    app.dependency_overrides[get_job_poller] = lambda: JobPoller(
        provider, polling_config, sleep=fake_sleep
    )

    yield TestClient(app)

    app.dependency_overrides.clear()


def signup(client: TestClient, email: str, name: str = "Test User") -> str:
    response = client.post(
        "/auth/signup",
        json={"name": name, "email": email, "password": "secret123"},
    )
    assert response.status_code == 201, response.text
    return response.json()["token"]


def auth_headers(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
