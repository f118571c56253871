"""Telemetry helpers and metrics."""

from .metrics import (
    ERROR_COUNTER,
    LOGIN_COUNTER,
    POLL_TICKS,
    REQUEST_COUNT,
    REQUEST_LATENCY,
    TRANSCRIPTION_JOBS,
    increment_login,
    observe_request,
    record_job_outcome,
)

__all__ = [
    "ERROR_COUNTER",
    "LOGIN_COUNTER",
    "POLL_TICKS",
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "TRANSCRIPTION_JOBS",
    "increment_login",
    "observe_request",
    "record_job_outcome",
]
