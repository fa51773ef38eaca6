"""
student_registry.api.routers.health

Health and readiness endpoints.

Responsibilities:
- Provide liveness probe (`/healthz`).
- Provide readiness probe (`/readyz`) that checks the hosted backend is reachable.
"""

from __future__ import annotations

import httpx
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from starlette.status import HTTP_503_SERVICE_UNAVAILABLE

from student_registry.api.deps import backend_http, settings_dep
from student_registry.backend_clients.hosted_http import BackendError, HostedBackendClient
from student_registry.settings import Settings

router = APIRouter()


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    # Liveness: process is up and serving HTTP.
    return {"status": "ok"}


@router.get("/readyz", response_model=None)
async def readyz(
    settings: Settings = Depends(settings_dep),
    http: httpx.AsyncClient = Depends(backend_http),
) -> dict[str, str] | JSONResponse:
    # Readiness: every page depends on the hosted backend.
    try:
        await HostedBackendClient(settings=settings, http=http).health()
    except BackendError as e:
        return JSONResponse(
            status_code=HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "unavailable", "detail": e.message},
        )
    return {"status": "ready"}


# --- Module Notes -----------------------------------------------------------
# Kubernetes typically uses /healthz for liveness and /readyz for readiness gating.
