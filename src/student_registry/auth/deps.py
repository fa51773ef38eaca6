"""
student_registry.auth.deps

FastAPI dependency functions for authentication and authorization.

Responsibilities:
- Convert a bearer token (JSON API) or the session cookie (web UI) into a typed `Principal`.
- Enforce RBAC via reusable dependency factories.
"""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from starlette.status import HTTP_401_UNAUTHORIZED, HTTP_403_FORBIDDEN

from student_registry.api.deps import settings_dep
from student_registry.auth.jwt import JwtConfig, JwtValidationError, decode_and_validate
from student_registry.auth.models import Principal
from student_registry.settings import Settings

SESSION_TOKEN_KEY = "access_token"

_bearer = HTTPBearer(auto_error=False)


class LoginRequired(Exception):
    """Raised by web dependencies when the browser session is missing or no longer valid."""

    def __init__(self, reason: str | None = None) -> None:
        super().__init__(reason or "login required")
        self.reason = reason


def principal_from_token(*, settings: Settings, token: str) -> Principal:
    payload = decode_and_validate(cfg=JwtConfig.from_settings(settings), token=token)

    subject = str(payload.get("sub", ""))
    if not subject:
        raise JwtValidationError("Invalid token subject")
    role = payload.get("role")
    roles: frozenset[str] = frozenset([str(role)]) if role else frozenset()
    return Principal(
        subject=subject,
        email=str(payload.get("email", "")),
        roles=roles,
        access_token=token,
    )


def get_principal(
    creds: HTTPAuthorizationCredentials | None = Depends(_bearer),
    settings: Settings = Depends(settings_dep),
) -> Principal:
    if creds is None or not creds.credentials:
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="Missing bearer token")

    try:
        return principal_from_token(settings=settings, token=creds.credentials)
    except JwtValidationError as e:
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail=f"Invalid token: {e}") from e


def require_roles(*required: str):
    required_set = frozenset(required)

    def _dep(principal: Principal = Depends(get_principal)) -> Principal:
        if not required_set.issubset(principal.roles):
            raise HTTPException(status_code=HTTP_403_FORBIDDEN, detail="Insufficient role")
        return principal

    return _dep


def get_session_principal(
    request: Request,
    settings: Settings = Depends(settings_dep),
) -> Principal:
    token = request.session.get(SESSION_TOKEN_KEY)
    if not token:
        raise LoginRequired()

    try:
        return principal_from_token(settings=settings, token=str(token))
    except JwtValidationError as e:
        # Expired or foreign token: drop it so the next visit starts clean.
        request.session.clear()
        raise LoginRequired("expired") from e


# --- Module Notes -----------------------------------------------------------
# `LoginRequired` is turned into a redirect to `/auth` by the handler registered
# in `web.handlers`; JSON endpoints use `get_principal` and answer 401 instead.
