"""Polling state machine."""

from __future__ import annotations

import pytest

from scribe.config.settings import PollingConfig
from scribe.pipelines.transcription import (
    JobFailed,
    JobPoller,
    JobSnapshot,
    JobState,
    JobTimedOut,
    ProviderJobStatus,
    ProviderUnavailable,
)

from .conftest import RecordingSleep, ScriptedProvider, completed, processing


@pytest.mark.asyncio
async def test_completes_after_pending_ticks(polling_config: PollingConfig, fake_sleep: RecordingSleep):
    provider = ScriptedProvider([processing(), processing(), completed("hello world")])
    poller = JobPoller(provider, polling_config, sleep=fake_sleep)

    outcome = await poller.run("job-1")

    assert outcome.state is JobState.COMPLETED
    assert outcome.succeeded
    assert outcome.text == "hello world"
    assert outcome.ticks == 3
    assert outcome.error is None
    assert provider.polled == ["job-1"] * 3
    assert fake_sleep.calls == [3, 3]


@pytest.mark.asyncio
async def test_queued_is_treated_as_pending(polling_config: PollingConfig, fake_sleep: RecordingSleep):
    provider = ScriptedProvider(
        [JobSnapshot(status=ProviderJobStatus.QUEUED), completed("done")]
    )
    outcome = await JobPoller(provider, polling_config, sleep=fake_sleep).run("job-q")

    assert outcome.state is JobState.COMPLETED
    assert outcome.ticks == 2


@pytest.mark.asyncio
@pytest.mark.parametrize("text", [None, ""])
async def test_empty_transcript_becomes_placeholder(
    polling_config: PollingConfig, fake_sleep: RecordingSleep, text
):
    provider = ScriptedProvider([completed(text)])
    outcome = await JobPoller(provider, polling_config, sleep=fake_sleep).run("job-2")

    assert outcome.state is JobState.COMPLETED
    assert outcome.text == "No speech detected"
    assert fake_sleep.calls == []


@pytest.mark.asyncio
async def test_provider_error_yields_failed_outcome(
    polling_config: PollingConfig, fake_sleep: RecordingSleep
):
    provider = ScriptedProvider(
        [
            processing(),
            JobSnapshot(status=ProviderJobStatus.ERROR, error_detail="Audio file is corrupt"),
        ]
    )
    outcome = await JobPoller(provider, polling_config, sleep=fake_sleep).run("job-3")

    assert outcome.state is JobState.FAILED
    assert not outcome.succeeded
    assert isinstance(outcome.error, JobFailed)
    assert str(outcome.error) == "Transcription failed: Audio file is corrupt"
    assert outcome.error.status_code == 502
    assert outcome.ticks == 2


@pytest.mark.asyncio
async def test_error_without_detail_still_has_message(
    polling_config: PollingConfig, fake_sleep: RecordingSleep
):
    provider = ScriptedProvider([JobSnapshot(status=ProviderJobStatus.ERROR)])
    outcome = await JobPoller(provider, polling_config, sleep=fake_sleep).run("job-4")

    assert str(outcome.error) == "Transcription failed: unknown provider error"


@pytest.mark.asyncio
async def test_budget_exhaustion_times_out(polling_config: PollingConfig, fake_sleep: RecordingSleep):
    provider = ScriptedProvider([processing()])
    outcome = await JobPoller(provider, polling_config, sleep=fake_sleep).run("job-5")

    assert outcome.state is JobState.TIMED_OUT
    assert outcome.state.is_terminal
    assert outcome.ticks == 60
    assert len(provider.polled) == 60
    assert fake_sleep.total == 180
    assert isinstance(outcome.error, JobTimedOut)
    assert outcome.error.status_code == 504
    assert "60 status checks" in str(outcome.error)


@pytest.mark.asyncio
async def test_small_budget(fake_sleep: RecordingSleep):
    provider = ScriptedProvider([processing()])
    config = PollingConfig(interval_seconds=0.5, max_attempts=2)

    outcome = await JobPoller(provider, config, sleep=fake_sleep).run("job-6")

    assert outcome.state is JobState.TIMED_OUT
    assert provider.polled == ["job-6", "job-6"]
    assert fake_sleep.calls == [0.5, 0.5]


@pytest.mark.asyncio
async def test_transport_failure_propagates(polling_config: PollingConfig, fake_sleep: RecordingSleep):
    provider = ScriptedProvider([processing()])
    provider.poll_error = ProviderUnavailable("connection reset")

    with pytest.raises(ProviderUnavailable):
        await JobPoller(provider, polling_config, sleep=fake_sleep).run("job-7")

    assert len(provider.polled) == 1
    assert fake_sleep.calls == []


def test_only_pending_keeps_polling():
    assert [state for state in JobState if not state.is_terminal] == [JobState.PENDING]
