"""Common FastAPI dependencies reused across controllers."""

from __future__ import annotations

from typing import Annotated, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from scribe.application.interfaces import TranscriptRepositoryInterface
from scribe.config.settings import settings
from scribe.database import get_session
from scribe.infrastructure.persistence.repositories_sqlalchemy import (
    SQLAlchemyTranscriptRepository,
)
from scribe.models.user import User as UserModel
from scribe.pipelines.transcription import (
    IntakeValidator,
    JobPoller,
    TranscriptionPipeline,
)
from scribe.services import AssemblyAIClient
from scribe.utils import AuthenticationError, TokenExpiredError, decode_access_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)
SessionDep = Annotated[AsyncSession, Depends(get_session)]

_UNAUTHORIZED_HEADERS = {"WWW-Authenticate": "Bearer"}


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers=_UNAUTHORIZED_HEADERS,
    )


async def get_current_user(
    token: Annotated[Optional[str], Depends(oauth2_scheme)],
    session: SessionDep,
) -> UserModel:
    """Resolve and validate the user referenced by the bearer token."""

    if not token:
        raise _unauthorized("Access token required")

    try:
        payload = decode_access_token(token)
        user_id = int(payload.sub)
    except TokenExpiredError:
        raise _unauthorized("Token expired") from None
    except (AuthenticationError, ValueError):
        raise _unauthorized("Invalid token") from None

    result = await session.execute(select(UserModel).where(UserModel.id == user_id))
    user = result.scalar_one_or_none()
    if not user:
        raise _unauthorized("Invalid token - user not found")

    return user


CurrentUserDep = Annotated[UserModel, Depends(get_current_user)]


_PROVIDER_CLIENT = AssemblyAIClient(settings.provider)
_INTAKE_VALIDATOR = IntakeValidator(settings.intake)


def get_provider_client() -> AssemblyAIClient:
    return _PROVIDER_CLIENT


def get_intake_validator() -> IntakeValidator:
    return _INTAKE_VALIDATOR


ProviderDep = Annotated[AssemblyAIClient, Depends(get_provider_client)]


def get_job_poller(provider: ProviderDep) -> JobPoller:
    return JobPoller(provider, settings.polling)


def get_transcript_repository(session: SessionDep) -> TranscriptRepositoryInterface:
    return SQLAlchemyTranscriptRepository(session)


RepositoryDep = Annotated[
    TranscriptRepositoryInterface, Depends(get_transcript_repository)
]


def get_transcription_pipeline(
    provider: ProviderDep,
    validator: Annotated[IntakeValidator, Depends(get_intake_validator)],
    poller: Annotated[JobPoller, Depends(get_job_poller)],
    repository: RepositoryDep,
) -> TranscriptionPipeline:
    """Assemble a pipeline for one request; nothing is shared but the store."""

    return TranscriptionPipeline(
        validator=validator,
        provider=provider,
        poller=poller,
        repository=repository,
    )


PipelineDep = Annotated[TranscriptionPipeline, Depends(get_transcription_pipeline)]


__all__ = [
    "get_current_user",
    "get_intake_validator",
    "get_job_poller",
    "get_provider_client",
    "get_transcript_repository",
    "get_transcription_pipeline",
    "oauth2_scheme",
    "CurrentUserDep",
    "PipelineDep",
    "ProviderDep",
    "RepositoryDep",
    "SessionDep",
]
