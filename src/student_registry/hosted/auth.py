"""
student_registry.hosted.auth

Embedded auth service (GoTrue-compatible subset).

Responsibilities:
- Register users and sign them in with e-mail + password (bcrypt hashes).
- Issue access tokens the rest of the service verifies.
- Expose the current user, logout and health endpoints.
"""

from __future__ import annotations

import re
import uuid
from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
from fastapi import APIRouter, Depends, Request, Response
from pydantic import BaseModel, ValidationError
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from student_registry.api.deps import db_session, settings_dep
from student_registry.auth.jwt import JwtConfig, issue_token
from student_registry.auth.models import Principal
from student_registry.db.models import HostedUser
from student_registry.db.repositories.users import HostedUserRepo
from student_registry.hosted.deps import auth_principal
from student_registry.hosted.errors import GoTrueError
from student_registry.models import EMAIL_PATTERN
from student_registry.observability.logging import get_logger
from student_registry.settings import Settings

log = get_logger(__name__)

router = APIRouter()

MIN_PASSWORD_LENGTH = 6
# bcrypt only looks at the first 72 bytes.
MAX_PASSWORD_BYTES = 72


class Credentials(BaseModel):
    email: str
    password: str


async def _read_credentials(request: Request) -> Credentials:
    try:
        creds = Credentials.model_validate(await request.json())
    except (ValueError, ValidationError) as e:
        raise GoTrueError(
            status_code=400,
            error_code="validation_failed",
            msg="Both email and password are required",
        ) from e
    return Credentials(email=creds.email.strip().lower(), password=creds.password)


def _user_json(user: HostedUser) -> dict[str, Any]:
    created_at = user.created_at
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=UTC)
    return {
        "id": str(user.id),
        "aud": "authenticated",
        "role": "authenticated",
        "email": user.email,
        "created_at": created_at.isoformat(),
    }


def _session_json(user: HostedUser, settings: Settings) -> dict[str, Any]:
    ttl = timedelta(minutes=settings.access_token_ttl_minutes)
    token = issue_token(
        cfg=JwtConfig.from_settings(settings),
        subject=str(user.id),
        email=user.email,
        ttl=ttl,
    )
    return {
        "access_token": token,
        "token_type": "bearer",
        "expires_in": int(ttl.total_seconds()),
        "expires_at": int((datetime.now(tz=UTC) + ttl).timestamp()),
        "user": _user_json(user),
    }


def _hash_password(password: str, rounds: int) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def _check_password(password: str, password_hash: str) -> bool:
    # No stored password is longer; bcrypt refuses to compare such input.
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        return False
    return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))


@router.post("/signup")
async def sign_up(
    request: Request,
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> dict[str, Any]:
    creds = await _read_credentials(request)
    if not re.match(EMAIL_PATTERN, creds.email):
        raise GoTrueError(
            status_code=400,
            error_code="validation_failed",
            msg="Unable to validate email address: invalid format",
        )
    if len(creds.password) < MIN_PASSWORD_LENGTH:
        raise GoTrueError(
            status_code=422,
            error_code="weak_password",
            msg=f"Password should be at least {MIN_PASSWORD_LENGTH} characters.",
        )
    if len(creds.password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise GoTrueError(
            status_code=422,
            error_code="validation_failed",
            msg=f"Password cannot be longer than {MAX_PASSWORD_BYTES} characters",
        )

    users = HostedUserRepo(session)
    if await users.get_by_email(creds.email) is not None:
        raise GoTrueError(
            status_code=422, error_code="user_already_exists", msg="User already registered"
        )

    password_hash = await run_in_threadpool(
        _hash_password, creds.password, settings.password_hash_rounds
    )
    try:
        user = await users.create(email=creds.email, password_hash=password_hash)
        await session.commit()
    except IntegrityError as e:
        await session.rollback()
        raise GoTrueError(
            status_code=422, error_code="user_already_exists", msg="User already registered"
        ) from e

    log.info("hosted_user_created", user_id=str(user.id))
    return _session_json(user, settings)


@router.post("/token")
async def issue_session(
    request: Request,
    grant_type: str = "password",
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> dict[str, Any]:
    if grant_type != "password":
        raise GoTrueError(
            status_code=400,
            error_code="validation_failed",
            msg=f"unsupported_grant_type: {grant_type}",
        )
    creds = await _read_credentials(request)

    user = await HostedUserRepo(session).get_by_email(creds.email)
    ok = user is not None and await run_in_threadpool(
        _check_password, creds.password, user.password_hash
    )
    if user is None or not ok:
        log.info("hosted_sign_in_rejected")
        raise GoTrueError(
            status_code=400, error_code="invalid_credentials", msg="Invalid login credentials"
        )
    return _session_json(user, settings)


@router.post("/logout", status_code=204)
async def logout(principal: Principal = Depends(auth_principal)) -> Response:
    # Access tokens are stateless here; there is no refresh token to revoke.
    log.info("hosted_sign_out", user_id=principal.subject)
    return Response(status_code=204)


@router.get("/user")
async def current_user(
    principal: Principal = Depends(auth_principal),
    session: AsyncSession = Depends(db_session),
) -> dict[str, Any]:
    try:
        user_id = uuid.UUID(principal.subject)
    except ValueError:
        user = None
    else:
        user = await HostedUserRepo(session).get(user_id)
    if user is None:
        raise GoTrueError(status_code=404, error_code="user_not_found", msg="User not found")
    return _user_json(user)


@router.get("/health")
async def health(session: AsyncSession = Depends(db_session)) -> dict[str, str]:
    await session.execute(text("SELECT 1"))
    return {"name": "student-registry-embedded-backend", "status": "ok"}


# --- Module Notes -----------------------------------------------------------
# Field names and error codes follow the hosted auth API so that
# `HostedBackendClient` cannot tell the two apart.
