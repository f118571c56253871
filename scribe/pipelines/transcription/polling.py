"""Bounded polling state machine for provider jobs.

A job starts ``pending`` and is polled at a fixed interval until the
provider reports ``completed`` or ``error``, or until the tick budget runs
out. Each wait is an ``asyncio`` suspension, so concurrent requests keep
running while a job is in flight.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Protocol

from scribe.config.settings import PollingConfig
from scribe.domain.models import NO_SPEECH_DETECTED

from .errors import JobFailed, JobTimedOut
from .types import JobOutcome, JobSnapshot, JobState, ProviderJobStatus

logger = logging.getLogger("scribe.pipelines.transcription")

Sleep = Callable[[float], Awaitable[None]]


class JobStatusSource(Protocol):
    async def poll_job(self, job_id: str) -> JobSnapshot: ...


class JobPoller:
    """Drive one job to a terminal ``JobState``."""

    def __init__(
        self,
        source: JobStatusSource,
        config: PollingConfig,
        *,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._source = source
        self._interval = config.interval_seconds
        self._max_attempts = config.max_attempts
        self._sleep = sleep

    @staticmethod
    def _transition(snapshot: JobSnapshot) -> JobState:
        if snapshot.status is ProviderJobStatus.COMPLETED:
            return JobState.COMPLETED
        if snapshot.status is ProviderJobStatus.ERROR:
            return JobState.FAILED
        return JobState.PENDING

    @staticmethod
    def _finish(job_id: str, state: JobState, tick: int, snapshot: JobSnapshot) -> JobOutcome:
        if state is JobState.COMPLETED:
            logger.info("Job %s completed after %s polls", job_id, tick)
            return JobOutcome(
                job_id=job_id,
                state=state,
                ticks=tick,
                text=snapshot.text or NO_SPEECH_DETECTED,
            )

        detail = snapshot.error_detail or "unknown provider error"
        logger.warning("Job %s failed after %s polls: %s", job_id, tick, detail)
        return JobOutcome(
            job_id=job_id,
            state=state,
            ticks=tick,
            error=JobFailed(f"Transcription failed: {detail}", job_id=job_id),
        )

    async def run(self, job_id: str) -> JobOutcome:
        """Poll ``job_id`` until it is terminal or the budget is exhausted.

        ``ProviderUnavailable`` raised by the source is not retried; it
        propagates to the caller and no outcome is produced.
        """

        for tick in range(1, self._max_attempts + 1):
            snapshot = await self._source.poll_job(job_id)
            state = self._transition(snapshot)

            if state.is_terminal:
                return self._finish(job_id, state, tick, snapshot)

            logger.debug("Job %s still %s (poll %s/%s)", job_id, snapshot.status.value, tick, self._max_attempts)
            await self._sleep(self._interval)

        waited = self._interval * self._max_attempts
        logger.warning("Job %s timed out after %s polls", job_id, self._max_attempts)
        return JobOutcome(
            job_id=job_id,
            state=JobState.TIMED_OUT,
            ticks=self._max_attempts,
            error=JobTimedOut(
                f"Transcription timed out after {self._max_attempts} status checks "
                f"({waited:g} seconds)",
                job_id=job_id,
            ),
        )


__all__ = ["JobPoller", "JobStatusSource"]
