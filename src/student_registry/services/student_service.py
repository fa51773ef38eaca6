"""
student_registry.services.student_service

Student CRUD as a pass-through to the hosted backend.

Responsibilities:
- Scope reads and inserts to the signed-in user.
- Translate the unique-violation error code into a user-facing error.
- Report missing rows as `StudentNotFoundError`.
"""

from __future__ import annotations

import uuid

import httpx

from student_registry.auth.models import Principal
from student_registry.backend_clients.hosted_http import BackendError, HostedBackendClient
from student_registry.models import Student, StudentInput
from student_registry.observability.logging import get_logger
from student_registry.settings import Settings

log = get_logger(__name__)

UNIQUE_VIOLATION = "23505"
DUPLICATE_REGISTRATION_MESSAGE = "Matrícula já cadastrada"


class StudentServiceError(Exception):
    pass


class StudentNotFoundError(StudentServiceError):
    def __init__(self, student_id: uuid.UUID) -> None:
        super().__init__("Aluno não encontrado")
        self.student_id = student_id


class DuplicateRegistrationError(StudentServiceError):
    def __init__(self, registration_number: str) -> None:
        super().__init__(DUPLICATE_REGISTRATION_MESSAGE)
        self.registration_number = registration_number


class StudentService:
    def __init__(self, *, client: HostedBackendClient) -> None:
        self._client = client

    @classmethod
    def for_principal(
        cls, *, settings: Settings, http: httpx.AsyncClient, principal: Principal
    ) -> StudentService:
        # Calls carry the user's own token; the hosted service scopes rows by it.
        client = HostedBackendClient(
            settings=settings, http=http, access_token=principal.access_token
        )
        return cls(client=client)

    async def list(self, principal: Principal) -> list[Student]:
        # Newest first; ordering is applied by the hosted service.
        return await self._client.list_students(user_id=principal.subject)

    async def get(self, principal: Principal, student_id: uuid.UUID) -> Student:
        student = await self._client.get_student(student_id=student_id)
        if student is None:
            raise StudentNotFoundError(student_id)
        return student

    async def create(self, principal: Principal, data: StudentInput) -> Student:
        try:
            student = await self._client.insert_student(user_id=principal.subject, data=data)
        except BackendError as e:
            if e.code == UNIQUE_VIOLATION:
                raise DuplicateRegistrationError(data.registration_number) from e
            raise
        log.info("student_created", student_id=str(student.id), user_id=principal.subject)
        return student

    async def update(
        self, principal: Principal, student_id: uuid.UUID, data: StudentInput
    ) -> Student:
        try:
            student = await self._client.update_student(student_id=student_id, data=data)
        except BackendError as e:
            if e.code == UNIQUE_VIOLATION:
                raise DuplicateRegistrationError(data.registration_number) from e
            raise
        if student is None:
            raise StudentNotFoundError(student_id)
        log.info("student_updated", student_id=str(student_id), user_id=principal.subject)
        return student

    async def delete(self, principal: Principal, student_id: uuid.UUID) -> None:
        deleted = await self._client.delete_student(student_id=student_id)
        if not deleted:
            raise StudentNotFoundError(student_id)
        log.info("student_deleted", student_id=str(student_id), user_id=principal.subject)


# --- Module Notes -----------------------------------------------------------
# No retries: every failure is reported once, to the page or API caller that asked.
