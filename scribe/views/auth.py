"""Pydantic schemas related to authentication and profiles."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


def _strip_name(value: str) -> str:
    cleaned = value.strip()
    if len(cleaned) < 2:
        raise ValueError("Name must be at least 2 characters long")
    return cleaned


class SignupRequest(BaseModel):
    """Payload used to create a new account."""

    name: str = Field(max_length=100)
    email: EmailStr
    password: str = Field(min_length=6, max_length=128)

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        return _strip_name(value)

    @field_validator("email")
    @classmethod
    def normalise_email(cls, value: str) -> str:
        return value.strip().lower()


class LoginRequest(BaseModel):
    """Credentials submitted to obtain an access token."""

    email: EmailStr
    password: str = Field(min_length=6, max_length=128)

    @field_validator("email")
    @classmethod
    def normalise_email(cls, value: str) -> str:
        return value.strip().lower()


class ProfileUpdateRequest(BaseModel):
    name: str = Field(max_length=100)

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        return _strip_name(value)


class UserResponse(BaseModel):
    """Public view of an account."""

    id: int
    name: str
    email: EmailStr
    created_at: Optional[datetime] = Field(default=None, serialization_alias="createdAt")
    last_login: Optional[datetime] = Field(default=None, serialization_alias="lastLogin")

    model_config = ConfigDict(from_attributes=True)


class AuthResponse(BaseModel):
    """Access token issued after signup or login."""

    success: bool = True
    message: str
    token: str
    token_type: str = Field(default="bearer", serialization_alias="tokenType")
    expires_in: int = Field(
        default=0,
        serialization_alias="expiresIn",
        description="Seconds until the token expires",
    )
    user: UserResponse


class UserEnvelope(BaseModel):
    success: bool = True
    message: Optional[str] = None
    user: UserResponse


__all__ = [
    "SignupRequest",
    "LoginRequest",
    "ProfileUpdateRequest",
    "UserResponse",
    "AuthResponse",
    "UserEnvelope",
]
