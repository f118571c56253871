"""Authentication controller providing signup, login and profile endpoints."""

from __future__ import annotations

import logging
from datetime import datetime

from fastapi import APIRouter, HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from scribe.config.settings import settings
from scribe.controllers.dependencies import CurrentUserDep, SessionDep
from scribe.models.user import User as UserModel
from scribe.telemetry import increment_login
from scribe.utils import create_access_token, hash_password, verify_password
from scribe.views import (
    AuthResponse,
    LoginRequest,
    ProfileUpdateRequest,
    SignupRequest,
    UserEnvelope,
    UserResponse,
)

router = APIRouter(prefix="/auth", tags=["auth"])

logger = logging.getLogger(__name__)

_DUPLICATE_EMAIL = "An account with this email already exists"


def _issue_token(user: UserModel, message: str) -> AuthResponse:
    return AuthResponse(
        message=message,
        token=create_access_token(subject=str(user.id), user=user),
        expires_in=settings.security.access_token_expires_minutes * 60,
        user=UserResponse.model_validate(user),
    )


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def signup(payload: SignupRequest, session: SessionDep) -> AuthResponse:
    """Create an account and return an access token for it."""

    result = await session.execute(
        select(UserModel).where(UserModel.email == payload.email)
    )
    if result.scalar_one_or_none() is not None:
        raise HTTPException(status_code=400, detail=_DUPLICATE_EMAIL)

    user = UserModel(
        name=payload.name,
        email=payload.email,
        password_hash=hash_password(payload.password),
    )
    session.add(user)
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise HTTPException(status_code=400, detail=_DUPLICATE_EMAIL) from None
    await session.refresh(user)

    logger.info("New user registered: %s", user.email)
    return _issue_token(user, "Account created successfully")


@router.post("/login", response_model=AuthResponse)
async def login(payload: LoginRequest, session: SessionDep) -> AuthResponse:
    """Validate credentials and issue a JWT access token."""

    result = await session.execute(
        select(UserModel).where(UserModel.email == payload.email)
    )
    user = result.scalar_one_or_none()

    if not user or not verify_password(payload.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid email or password")

    user.last_login = datetime.utcnow()
    await session.commit()
    await session.refresh(user)

    increment_login()
    logger.info("User logged in: %s", user.email)
    return _issue_token(user, "Logged in successfully")


@router.get("/verify", response_model=UserEnvelope)
async def verify(current_user: CurrentUserDep) -> UserEnvelope:
    """Confirm the bearer token is valid and return its account."""

    return UserEnvelope(user=UserResponse.model_validate(current_user))


@router.get("/profile", response_model=UserEnvelope)
async def get_profile(current_user: CurrentUserDep) -> UserEnvelope:
    return UserEnvelope(user=UserResponse.model_validate(current_user))


@router.put("/profile", response_model=UserEnvelope)
async def update_profile(
    payload: ProfileUpdateRequest,
    current_user: CurrentUserDep,
    session: SessionDep,
) -> UserEnvelope:
    """Rename the authenticated account."""

    current_user.name = payload.name
    await session.commit()
    await session.refresh(current_user)

    logger.info("Profile updated: %s", current_user.email)
    return UserEnvelope(
        message="Profile updated successfully",
        user=UserResponse.model_validate(current_user),
    )
