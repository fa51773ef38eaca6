"""
tests.test_student_service

Service-level tests against the embedded backend.

Responsibilities:
- Unique-violation translation on create and update.
- Not-found reporting for get/update/delete.
- Per-user scoping and newest-first ordering.
"""

from __future__ import annotations

import uuid
from collections.abc import AsyncIterator

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI

from student_registry.auth.deps import principal_from_token
from student_registry.auth.models import Principal
from student_registry.models import StudentInput
from student_registry.services.student_service import (
    DuplicateRegistrationError,
    StudentNotFoundError,
    StudentService,
)
from student_registry.settings import Settings
from tests.support import api_sign_up, student_payload


@pytest_asyncio.fixture
async def backend_http(app: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://embedded-backend") as http:
        yield http


async def _principal(
    client: httpx.AsyncClient, settings: Settings, email: str
) -> Principal:
    session = await api_sign_up(client, email)
    return principal_from_token(settings=settings, token=session["access_token"])


def _service(settings: Settings, http: httpx.AsyncClient, principal: Principal) -> StudentService:
    return StudentService.for_principal(settings=settings, http=http, principal=principal)


def _input(**overrides) -> StudentInput:
    return StudentInput.model_validate(student_payload(**overrides))


@pytest.mark.asyncio
async def test_create_and_list_newest_first(
    client: httpx.AsyncClient, backend_http: httpx.AsyncClient, settings: Settings
) -> None:
    ana = await _principal(client, settings, "ana@escola.com")
    svc = _service(settings, backend_http, ana)

    first = await svc.create(ana, _input(registration_number="2024001"))
    second = await svc.create(ana, _input(registration_number="2024002", name="João Lima"))

    assert str(first.user_id) == ana.subject
    students = await svc.list(ana)
    assert [s.id for s in students] == [second.id, first.id]
    assert (await svc.get(ana, first.id)).name == "Maria Souza"


@pytest.mark.asyncio
async def test_duplicate_registration_on_create(
    client: httpx.AsyncClient, backend_http: httpx.AsyncClient, settings: Settings
) -> None:
    ana = await _principal(client, settings, "ana@escola.com")
    bia = await _principal(client, settings, "bia@escola.com")
    await _service(settings, backend_http, ana).create(ana, _input())

    with pytest.raises(DuplicateRegistrationError) as exc_info:
        await _service(settings, backend_http, bia).create(bia, _input())
    assert str(exc_info.value) == "Matrícula já cadastrada"
    assert exc_info.value.registration_number == "2024001"


@pytest.mark.asyncio
async def test_duplicate_registration_on_update(
    client: httpx.AsyncClient, backend_http: httpx.AsyncClient, settings: Settings
) -> None:
    ana = await _principal(client, settings, "ana@escola.com")
    svc = _service(settings, backend_http, ana)
    await svc.create(ana, _input(registration_number="2024001"))
    other = await svc.create(ana, _input(registration_number="2024002"))

    with pytest.raises(DuplicateRegistrationError):
        await svc.update(ana, other.id, _input(registration_number="2024001"))

    updated = await svc.update(ana, other.id, _input(registration_number="2024003", name="Bia"))
    assert updated.registration_number == "2024003"
    assert updated.name == "Bia"


@pytest.mark.asyncio
async def test_missing_and_foreign_rows_are_not_found(
    client: httpx.AsyncClient, backend_http: httpx.AsyncClient, settings: Settings
) -> None:
    ana = await _principal(client, settings, "ana@escola.com")
    bia = await _principal(client, settings, "bia@escola.com")
    student = await _service(settings, backend_http, ana).create(ana, _input())
    svc = _service(settings, backend_http, bia)

    assert await svc.list(bia) == []
    with pytest.raises(StudentNotFoundError):
        await svc.get(bia, student.id)
    with pytest.raises(StudentNotFoundError):
        await svc.update(bia, student.id, _input(name="Outro"))
    with pytest.raises(StudentNotFoundError):
        await svc.delete(bia, student.id)
    with pytest.raises(StudentNotFoundError):
        await svc.delete(bia, uuid.uuid4())


@pytest.mark.asyncio
async def test_delete(
    client: httpx.AsyncClient, backend_http: httpx.AsyncClient, settings: Settings
) -> None:
    ana = await _principal(client, settings, "ana@escola.com")
    svc = _service(settings, backend_http, ana)
    student = await svc.create(ana, _input())

    await svc.delete(ana, student.id)

    assert await svc.list(ana) == []
