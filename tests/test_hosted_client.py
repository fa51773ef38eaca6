from __future__ import annotations

import json
import uuid

import httpx
import pytest

from student_registry.backend_clients.hosted_http import (
    BackendError,
    BackendUnavailableError,
    HostedBackendClient,
)
from student_registry.models import StudentInput
from student_registry.settings import Settings

SETTINGS = Settings(
    env="test", backend_url="https://project.example.co", backend_api_key="anon-key"
)


def _client(handler, *, access_token: str | None = "user-token") -> HostedBackendClient:
    http = httpx.AsyncClient(
        transport=httpx.MockTransport(handler), base_url="https://project.example.co"
    )
    return HostedBackendClient(settings=SETTINGS, http=http, access_token=access_token)


def _row(**overrides):
    row = {
        "id": str(uuid.uuid4()),
        "user_id": str(uuid.uuid4()),
        "name": "Maria Souza",
        "matricula": "2024001",
        "email": "maria@escola.com",
        "birth_date": "2005-03-15",
        "created_at": "2026-01-10T12:00:00+00:00",
    }
    row.update(overrides)
    return row


@pytest.mark.asyncio
async def test_list_students_sends_filters_and_headers() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[_row()])

    students = await _client(handler).list_students(user_id="u-1")

    [request] = seen
    assert request.url.path == "/rest/v1/students"
    assert request.url.params["user_id"] == "eq.u-1"
    assert request.url.params["order"] == "created_at.desc"
    assert request.headers["apikey"] == "anon-key"
    assert request.headers["authorization"] == "Bearer user-token"
    assert students[0].registration_number == "2024001"


@pytest.mark.asyncio
async def test_insert_maps_fields_and_asks_for_representation() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(201, json=[_row(matricula="2024002")])

    data = StudentInput(
        name="Maria Souza",
        registration_number="2024002",
        email="maria@escola.com",
        birth_date="2005-03-15",
    )
    student = await _client(handler).insert_student(user_id="u-1", data=data)

    [request] = seen
    assert request.headers["prefer"] == "return=representation"
    assert json.loads(request.content) == {
        "user_id": "u-1",
        "name": "Maria Souza",
        "matricula": "2024002",
        "email": "maria@escola.com",
        "birth_date": "2005-03-15",
    }
    assert student.registration_number == "2024002"


@pytest.mark.asyncio
async def test_postgrest_error_body_is_parsed() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            409,
            json={
                "code": "23505",
                "message": "duplicate key value violates unique constraint",
                "details": None,
                "hint": None,
            },
        )

    with pytest.raises(BackendError) as exc_info:
        await _client(handler).list_students(user_id="u-1")
    assert exc_info.value.status_code == 409
    assert exc_info.value.code == "23505"


@pytest.mark.asyncio
async def test_gotrue_error_body_is_parsed() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            400,
            json={
                "code": 400,
                "error_code": "invalid_credentials",
                "msg": "Invalid login credentials",
            },
        )

    with pytest.raises(BackendError) as exc_info:
        await _client(handler, access_token=None).sign_in(email="a@b.com", password="x" * 8)
    assert exc_info.value.code == "invalid_credentials"
    assert exc_info.value.message == "Invalid login credentials"


@pytest.mark.asyncio
async def test_sign_up_without_session_returns_bare_user() -> None:
    user_id = uuid.uuid4()

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"id": str(user_id), "email": "a@b.com"})

    session = await _client(handler, access_token=None).sign_up(email="a@b.com", password="x" * 8)
    assert session.access_token is None
    assert session.user.id == user_id


@pytest.mark.asyncio
async def test_transport_failure_is_backend_unavailable() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(BackendUnavailableError) as exc_info:
        await _client(handler).health()
    assert exc_info.value.status_code == 503


@pytest.mark.asyncio
async def test_update_and_delete_report_missing_rows() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=[])

    client = _client(handler)
    student_id = uuid.uuid4()
    data = StudentInput(
        name="Maria", registration_number="1", email="m@e.com", birth_date="2005-03-15"
    )
    assert await client.update_student(student_id=student_id, data=data) is None
    assert await client.delete_student(student_id=student_id) is False
