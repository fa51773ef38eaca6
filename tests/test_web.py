"""
tests.test_web

Browser-flow tests for the server-rendered pages.

Responsibilities:
- Session handling: redirect to /auth, sign up/in/out, expired sessions.
- Student pages: list, add, view, edit, delete, with their toasts.
"""

from __future__ import annotations

import re
import uuid
from collections.abc import AsyncIterator

import httpx
import pytest
from fastapi import FastAPI

from student_registry.api.deps import backend_http
from tests.support import PASSWORD, student_payload

STUDENT_LINK = re.compile(r'href="/students/([0-9a-f-]{36})/edit"')


async def _sign_up(client: httpx.AsyncClient, email: str = "ana@escola.com") -> None:
    r = await client.post("/auth/sign-up", data={"email": email, "password": PASSWORD})
    assert r.status_code == 303, r.text
    assert r.headers["location"] == "/"


async def _add_student(client: httpx.AsyncClient, **overrides: str) -> httpx.Response:
    return await client.post("/students/new", data=student_payload(**overrides))


async def _student_ids(client: httpx.AsyncClient) -> list[str]:
    r = await client.get("/")
    return STUDENT_LINK.findall(r.text)


@pytest.mark.asyncio
async def test_pages_redirect_to_auth_without_session(client: httpx.AsyncClient) -> None:
    for path in ("/", "/students/new"):
        r = await client.get(path)
        assert r.status_code == 303
        assert r.headers["location"] == "/auth"

    r = await client.get("/auth")
    assert r.status_code == 200
    assert "Sistema de Gerenciamento" in r.text


@pytest.mark.asyncio
async def test_sign_up_shows_empty_list(client: httpx.AsyncClient) -> None:
    await _sign_up(client)

    r = await client.get("/")
    assert r.status_code == 200
    assert "ana@escola.com" in r.text
    assert "Total de Alunos" in r.text
    assert "Nenhum aluno cadastrado" in r.text

    r = await client.get("/auth")
    assert r.status_code == 303
    assert r.headers["location"] == "/"


@pytest.mark.asyncio
async def test_sign_in_failure_and_sign_out(client: httpx.AsyncClient) -> None:
    await _sign_up(client)
    r = await client.post("/auth/sign-out")
    assert r.status_code == 303
    assert r.headers["location"] == "/auth"
    assert (await client.get("/")).status_code == 303

    r = await client.post(
        "/auth/sign-in", data={"email": "ana@escola.com", "password": "wrong-password"}
    )
    assert r.status_code == 400
    assert "Invalid login credentials" in r.text
    assert 'value="ana@escola.com"' in r.text

    r = await client.post(
        "/auth/sign-in", data={"email": "ana@escola.com", "password": "a" * 100}
    )
    assert r.status_code == 400
    assert "Invalid login credentials" in r.text

    r = await client.post("/auth/sign-in", data={"email": "ana@escola.com", "password": PASSWORD})
    assert r.status_code == 303
    assert (await client.get("/")).status_code == 200


@pytest.mark.asyncio
async def test_sign_up_failure_is_reported(client: httpx.AsyncClient) -> None:
    await _sign_up(client)
    await client.post("/auth/sign-out")

    r = await client.post("/auth/sign-up", data={"email": "ana@escola.com", "password": PASSWORD})
    assert r.status_code == 400
    assert "Erro ao cadastrar" in r.text
    assert "User already registered" in r.text


@pytest.mark.asyncio
async def test_expired_session_redirects_with_toast(
    app: FastAPI, client: httpx.AsyncClient
) -> None:
    await _sign_up(client)
    # Tokens signed with the old secret no longer validate.
    app.state.settings = app.state.settings.model_copy(update={"jwt_secret": "rotated"})

    r = await client.get("/")
    assert r.status_code == 303
    assert r.headers["location"] == "/auth"

    r = await client.get("/auth")
    assert r.status_code == 200
    assert "Sessão expirada" in r.text


@pytest.mark.asyncio
async def test_add_student(client: httpx.AsyncClient) -> None:
    await _sign_up(client)

    r = await client.get("/students/new")
    assert r.status_code == 200
    assert "Adicionar Aluno" in r.text

    r = await _add_student(client)
    assert r.status_code == 303
    assert r.headers["location"] == "/"

    r = await client.get("/")
    assert "Aluno cadastrado!" in r.text
    assert "O aluno foi adicionado com sucesso." in r.text
    assert "2024001" in r.text
    assert "15/03/2005" in r.text
    assert "Nenhum aluno cadastrado" not in r.text

    # Toasts are shown once.
    r = await client.get("/")
    assert "Aluno cadastrado!" not in r.text


@pytest.mark.asyncio
async def test_add_student_validation_keeps_values(client: httpx.AsyncClient) -> None:
    await _sign_up(client)

    r = await _add_student(client, name="", email="not-an-email")
    assert r.status_code == 422
    assert "Preencha este campo." in r.text
    assert "Informe um email válido." in r.text
    assert 'value="2024001"' in r.text
    assert await _student_ids(client) == []


@pytest.mark.asyncio
async def test_duplicate_registration_keeps_form(client: httpx.AsyncClient) -> None:
    await _sign_up(client)
    await _add_student(client)

    r = await _add_student(client, name="João Lima", email="joao@escola.com")
    assert r.status_code == 409
    assert "Matrícula já cadastrada" in r.text
    assert 'value="João Lima"' in r.text
    assert len(await _student_ids(client)) == 1


@pytest.mark.asyncio
async def test_view_edit_and_delete_student(client: httpx.AsyncClient) -> None:
    await _sign_up(client)
    await _add_student(client)
    [student_id] = await _student_ids(client)

    r = await client.get(f"/students/{student_id}")
    assert r.status_code == 200
    assert "Cadastrado em" in r.text
    assert "15/03/2005" in r.text

    r = await client.get(f"/students/{student_id}/edit")
    assert r.status_code == 200
    assert "Editar Aluno" in r.text
    assert 'value="Maria Souza"' in r.text
    assert 'value="2005-03-15"' in r.text

    r = await client.post(
        f"/students/{student_id}/edit",
        data=student_payload(name="Maria Lima", birth_date="2004-12-01"),
    )
    assert r.status_code == 303
    r = await client.get("/")
    assert "Aluno atualizado!" in r.text
    assert "Maria Lima" in r.text
    assert "01/12/2004" in r.text

    r = await client.get(f"/students/{student_id}/delete")
    assert r.status_code == 200
    assert "Esta ação não pode ser desfeita." in r.text

    r = await client.post(f"/students/{student_id}/delete")
    assert r.status_code == 303
    r = await client.get("/")
    assert "Aluno removido!" in r.text
    assert "Nenhum aluno cadastrado" in r.text


@pytest.mark.asyncio
async def test_other_users_students_are_not_visible(client: httpx.AsyncClient) -> None:
    await _sign_up(client, "ana@escola.com")
    await _add_student(client)
    [student_id] = await _student_ids(client)
    await client.post("/auth/sign-out")

    await _sign_up(client, "bia@escola.com")
    assert await _student_ids(client) == []

    r = await client.get(f"/students/{student_id}")
    assert r.status_code == 303
    r = await client.get("/")
    assert "Erro ao carregar aluno<" in r.text
    assert "Aluno não encontrado" in r.text

    r = await client.post(f"/students/{student_id}/delete")
    assert r.status_code == 303
    r = await client.get("/")
    assert "Aluno não encontrado" in r.text


def _fail_backend(app: FastAPI) -> None:
    # The table API answers every call with a server error from here on.
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            500,
            json={"code": "XX000", "message": "falha no servidor", "details": None, "hint": None},
        )

    async def failing_http() -> AsyncIterator[httpx.AsyncClient]:
        transport = httpx.MockTransport(handler)
        async with httpx.AsyncClient(transport=transport, base_url="http://hosted") as http:
            yield http

    app.dependency_overrides[backend_http] = failing_http


@pytest.mark.asyncio
async def test_backend_failure_toasts(app: FastAPI, client: httpx.AsyncClient) -> None:
    await _sign_up(client)
    _fail_backend(app)
    student_id = uuid.uuid4()

    r = await client.get("/")
    assert r.status_code == 200
    assert "Erro ao carregar alunos" in r.text
    assert "falha no servidor" in r.text
    assert "Nenhum aluno cadastrado" in r.text

    r = await _add_student(client)
    assert r.status_code == 502
    assert '<div class="toast-title">Erro</div>' in r.text
    assert "falha no servidor" in r.text
    assert 'value="Maria Souza"' in r.text

    r = await client.post(f"/students/{student_id}/edit", data=student_payload(name="Maria Lima"))
    assert r.status_code == 502
    assert '<div class="toast-title">Erro</div>' in r.text
    assert 'value="Maria Lima"' in r.text

    r = await client.get(f"/students/{student_id}/edit")
    assert r.status_code == 303
    r = await client.get(f"/students/{student_id}/delete")
    assert r.status_code == 303

    r = await client.post(f"/students/{student_id}/delete")
    assert r.status_code == 303
    r = await client.get("/")
    assert '<div class="toast-title">Erro</div>' in r.text
    assert "Erro ao carregar aluno<" in r.text
    assert "Aluno removido!" not in r.text
