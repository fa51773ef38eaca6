from __future__ import annotations

import httpx
from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from student_registry.api.deps import backend_http, settings_dep
from student_registry.backend_clients.hosted_http import HostedBackendClient
from student_registry.models import AuthSession
from student_registry.settings import Settings

router = APIRouter(prefix="/v1/auth", tags=["auth"])


class CredentialsRequest(BaseModel):
    email: str = Field(min_length=3, max_length=320)
    password: str = Field(min_length=1, max_length=256)


@router.post("/sign-up", response_model=AuthSession)
async def sign_up(
    body: CredentialsRequest,
    settings: Settings = Depends(settings_dep),
    http: httpx.AsyncClient = Depends(backend_http),
) -> AuthSession:
    client = HostedBackendClient(settings=settings, http=http)
    return await client.sign_up(email=body.email, password=body.password)


@router.post("/sign-in", response_model=AuthSession)
async def sign_in(
    body: CredentialsRequest,
    settings: Settings = Depends(settings_dep),
    http: httpx.AsyncClient = Depends(backend_http),
) -> AuthSession:
    # The returned access_token is used as the bearer token for /v1/students.
    client = HostedBackendClient(settings=settings, http=http)
    return await client.sign_in(email=body.email, password=body.password)
