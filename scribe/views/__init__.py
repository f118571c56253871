"""Pydantic schemas used as views in the MVC architecture."""

from .auth import (
    AuthResponse,
    LoginRequest,
    ProfileUpdateRequest,
    SignupRequest,
    UserEnvelope,
    UserResponse,
)
from .common import ErrorResponse, MessageResponse
from .transcriptions import (
    FailedUploadResponse,
    HistoryResponse,
    TranscriptionResponse,
    UploadResponse,
)

__all__ = [
    "AuthResponse",
    "LoginRequest",
    "ProfileUpdateRequest",
    "SignupRequest",
    "UserEnvelope",
    "UserResponse",
    "ErrorResponse",
    "MessageResponse",
    "FailedUploadResponse",
    "HistoryResponse",
    "TranscriptionResponse",
    "UploadResponse",
]
