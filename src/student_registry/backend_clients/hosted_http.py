"""
student_registry.backend_clients.hosted_http

HTTP client boundary to the hosted database/auth service.

Responsibilities:
- Speak the hosted service's wire formats: PostgREST under `/rest/v1`, GoTrue under `/auth/v1`.
- Attach the project API key and the user's access token.
- Map `students` rows to `Student` models and back.
- Turn error responses into `BackendError` with the service's error code.
"""

from __future__ import annotations

import uuid
from typing import Any

import httpx

from student_registry.models import AuthSession, AuthUser, Student, StudentInput
from student_registry.observability.logging import current_request_id, get_logger
from student_registry.settings import Settings

log = get_logger(__name__)

STUDENTS_PATH = "/rest/v1/students"
RETURN_REPRESENTATION = {"Prefer": "return=representation"}


class BackendError(Exception):
    """An error response from the hosted service."""

    def __init__(self, *, status_code: int, code: str | None, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.code = code
        self.message = message


class BackendUnavailableError(BackendError):
    def __init__(self, message: str) -> None:
        super().__init__(status_code=503, code="backend_unavailable", message=message)


def _error_from_response(r: httpx.Response) -> BackendError:
    try:
        body = r.json()
    except ValueError:
        body = None

    if not isinstance(body, dict):
        return BackendError(status_code=r.status_code, code=None, message=r.text or r.reason_phrase)

    # PostgREST: {code, message, details, hint}
    # GoTrue: {code: <int>, error_code, msg} or {error, error_description}
    code = body.get("code")
    if not isinstance(code, str):
        code = body.get("error_code") or body.get("error")
    message = (
        body.get("message")
        or body.get("msg")
        or body.get("error_description")
        or r.reason_phrase
    )
    return BackendError(status_code=r.status_code, code=code, message=str(message))


def _student_from_row(row: dict[str, Any]) -> Student:
    return Student(
        id=row["id"],
        user_id=row.get("user_id"),
        name=row["name"],
        registration_number=row["matricula"],
        email=row["email"],
        birth_date=row["birth_date"],
        created_at=row["created_at"],
    )


def _row_from_input(data: StudentInput) -> dict[str, Any]:
    return {
        "name": data.name,
        "matricula": data.registration_number,
        "email": data.email,
        "birth_date": data.birth_date.isoformat(),
    }


class HostedBackendClient:
    """
    Thin pass-through to the hosted service.

    Ownership, uniqueness and ordering are enforced remotely; this class only
    shapes requests and responses.
    """

    def __init__(
        self,
        *,
        settings: Settings,
        http: httpx.AsyncClient,
        access_token: str | None = None,
    ) -> None:
        self._settings = settings
        self._http = http
        self._access_token = access_token

    def _headers(self, extra: dict[str, str] | None = None) -> dict[str, str]:
        headers: dict[str, str] = {}
        if self._settings.backend_api_key:
            headers["apikey"] = self._settings.backend_api_key
        if self._access_token:
            headers["Authorization"] = f"Bearer {self._access_token}"
        request_id = current_request_id()
        if request_id:
            headers["x-request-id"] = request_id
        if extra:
            headers.update(extra)
        return headers

    async def _send(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, str] | None = None,
        json: Any = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        try:
            r = await self._http.request(
                method, url, params=params, json=json, headers=self._headers(headers)
            )
        except httpx.TransportError as e:
            log.warning("backend_unreachable", method=method, url=url, error=str(e))
            raise BackendUnavailableError(str(e) or type(e).__name__) from e

        if r.is_error:
            err = _error_from_response(r)
            log.info(
                "backend_error",
                method=method,
                url=url,
                status_code=err.status_code,
                code=err.code,
            )
            raise err
        return r

    # --- auth ---------------------------------------------------------------

    async def sign_up(self, *, email: str, password: str) -> AuthSession:
        r = await self._send(
            "POST", "/auth/v1/signup", json={"email": email, "password": password}
        )
        body = r.json()
        if "access_token" in body:
            return AuthSession.model_validate(body)
        # E-mail confirmation pending: the service returns the bare user.
        return AuthSession(user=AuthUser.model_validate(body))

    async def sign_in(self, *, email: str, password: str) -> AuthSession:
        r = await self._send(
            "POST",
            "/auth/v1/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        return AuthSession.model_validate(r.json())

    async def sign_out(self) -> None:
        await self._send("POST", "/auth/v1/logout")

    async def health(self) -> dict[str, Any]:
        r = await self._send("GET", "/auth/v1/health")
        return r.json()

    # --- students -----------------------------------------------------------

    async def list_students(self, *, user_id: str) -> list[Student]:
        r = await self._send(
            "GET",
            STUDENTS_PATH,
            params={"select": "*", "user_id": f"eq.{user_id}", "order": "created_at.desc"},
        )
        return [_student_from_row(row) for row in r.json()]

    async def get_student(self, *, student_id: uuid.UUID) -> Student | None:
        r = await self._send(
            "GET",
            STUDENTS_PATH,
            params={"select": "*", "id": f"eq.{student_id}", "limit": "1"},
        )
        rows = r.json()
        return _student_from_row(rows[0]) if rows else None

    async def insert_student(self, *, user_id: str, data: StudentInput) -> Student:
        row = {"user_id": user_id, **_row_from_input(data)}
        r = await self._send("POST", STUDENTS_PATH, json=row, headers=RETURN_REPRESENTATION)
        return _student_from_row(r.json()[0])

    async def update_student(self, *, student_id: uuid.UUID, data: StudentInput) -> Student | None:
        r = await self._send(
            "PATCH",
            STUDENTS_PATH,
            params={"id": f"eq.{student_id}"},
            json=_row_from_input(data),
            headers=RETURN_REPRESENTATION,
        )
        rows = r.json()
        return _student_from_row(rows[0]) if rows else None

    async def delete_student(self, *, student_id: uuid.UUID) -> bool:
        r = await self._send(
            "DELETE",
            STUDENTS_PATH,
            params={"id": f"eq.{student_id}"},
            headers=RETURN_REPRESENTATION,
        )
        return bool(r.json())


# --- Module Notes -----------------------------------------------------------
# The same client talks to a real hosted project (STUDENT_REGISTRY_BACKEND_URL)
# and to the embedded stand-in in `student_registry.hosted`; keep both in step.
