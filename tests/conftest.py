"""
tests.conftest

Shared fixtures: an app wired to the embedded backend on a temporary SQLite file.
"""

from __future__ import annotations

from collections.abc import AsyncIterator

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI

from student_registry.api.app import create_app
from student_registry.settings import Settings
from tests.support import BASE_URL


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        env="test",
        log_level="WARNING",
        backend_url=None,
        backend_api_key="",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'registry.db'}",
        password_hash_rounds=4,
    )


@pytest_asyncio.fixture
async def app(settings: Settings) -> AsyncIterator[FastAPI]:
    app = create_app(settings=settings)
    # httpx ASGITransport does not run the lifespan; do it explicitly.
    async with app.router.lifespan_context(app):
        yield app


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url=BASE_URL) as client:
        yield client
