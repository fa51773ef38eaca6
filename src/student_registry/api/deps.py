"""
student_registry.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Provide dependency functions for settings, DB sessions and the backend HTTP client.
- Encapsulate app.state access patterns (settings/engine/sessionmaker).
"""

from __future__ import annotations

from collections.abc import AsyncIterator

import httpx
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from student_registry.settings import Settings

EMBEDDED_BACKEND_BASE_URL = "http://embedded-backend"


def settings_dep(request: Request) -> Settings:
    # Settings are stashed on app.state by `student_registry.api.app.create_app`.
    return request.app.state.settings  # type: ignore[no-any-return]


def sessionmaker_from_app(request: Request) -> async_sessionmaker[AsyncSession]:
    # Only present when the embedded backend is mounted.
    return request.app.state.sessionmaker  # type: ignore[no-any-return]


async def db_session(
    session_factory: async_sessionmaker[AsyncSession] = Depends(sessionmaker_from_app),
) -> AsyncIterator[AsyncSession]:
    # Request-scoped DB session. Commit/rollback is managed explicitly by the handlers.
    async with session_factory() as session:
        yield session


async def backend_http(
    request: Request,
    settings: Settings = Depends(settings_dep),
) -> AsyncIterator[httpx.AsyncClient]:
    """
    HTTP client for the hosted backend.

    Without a configured backend URL, requests go to the embedded backend through
    ASGITransport: real HTTP semantics, no network.
    """

    if settings.embedded_backend:
        transport = httpx.ASGITransport(app=request.app)
        async with httpx.AsyncClient(
            transport=transport,
            base_url=EMBEDDED_BACKEND_BASE_URL,
            timeout=settings.backend_timeout_seconds,
        ) as http:
            yield http
        return

    async with httpx.AsyncClient(
        base_url=str(settings.backend_url).rstrip("/"),
        timeout=settings.backend_timeout_seconds,
    ) as http:
        yield http


# --- Module Notes -----------------------------------------------------------
# One backend client per request keeps connection handling simple; the hosted
# service is the only stateful dependency.
