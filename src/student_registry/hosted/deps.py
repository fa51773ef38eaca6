"""
student_registry.hosted.deps

Request authentication for the embedded backend.

Responsibilities:
- Check the project API key when one is configured.
- Resolve the caller's bearer token, reporting failures in each API's error format.
"""

from __future__ import annotations

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from student_registry.api.deps import settings_dep
from student_registry.auth.deps import principal_from_token
from student_registry.auth.jwt import JwtValidationError
from student_registry.auth.models import Principal
from student_registry.hosted.errors import GoTrueError, PostgrestError
from student_registry.settings import Settings

_bearer = HTTPBearer(auto_error=False)


def require_api_key(request: Request, settings: Settings = Depends(settings_dep)) -> None:
    if not settings.backend_api_key:
        return
    if request.headers.get("apikey") != settings.backend_api_key:
        raise GoTrueError(status_code=401, error_code="no_authorization", msg="Invalid API key")


def rest_principal(
    creds: HTTPAuthorizationCredentials | None = Depends(_bearer),
    settings: Settings = Depends(settings_dep),
) -> Principal:
    if creds is None or not creds.credentials:
        raise PostgrestError(
            status_code=401,
            code="42501",
            message="permission denied for table students",
            hint="Sign in first",
        )
    try:
        return principal_from_token(settings=settings, token=creds.credentials)
    except JwtValidationError as e:
        raise PostgrestError(status_code=401, code="PGRST301", message=str(e)) from e


def auth_principal(
    creds: HTTPAuthorizationCredentials | None = Depends(_bearer),
    settings: Settings = Depends(settings_dep),
) -> Principal:
    if creds is None or not creds.credentials:
        raise GoTrueError(
            status_code=401,
            error_code="no_authorization",
            msg="This endpoint requires a Bearer token",
        )
    try:
        return principal_from_token(settings=settings, token=creds.credentials)
    except JwtValidationError as e:
        raise GoTrueError(status_code=401, error_code="bad_jwt", msg=str(e)) from e
