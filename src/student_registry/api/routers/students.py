"""
student_registry.api.routers.students

JSON endpoints for student CRUD.

Responsibilities:
- Expose list/create/get/update/delete for the signed-in user's students.
- Delegate to `StudentService`; errors are mapped in `api.errors`.
"""

from __future__ import annotations

import uuid

import httpx
from fastapi import APIRouter, Depends, Response
from starlette.status import HTTP_201_CREATED, HTTP_204_NO_CONTENT

from student_registry.api.deps import backend_http, settings_dep
from student_registry.auth.deps import get_principal, require_roles
from student_registry.auth.models import Principal
from student_registry.models import Student, StudentInput
from student_registry.services.student_service import StudentService
from student_registry.settings import Settings

router = APIRouter(
    prefix="/v1/students",
    tags=["students"],
    dependencies=[Depends(require_roles("authenticated"))],
)


def _service(
    principal: Principal = Depends(get_principal),
    settings: Settings = Depends(settings_dep),
    http: httpx.AsyncClient = Depends(backend_http),
) -> StudentService:
    return StudentService.for_principal(settings=settings, http=http, principal=principal)


@router.get("", response_model=list[Student])
async def list_students(
    principal: Principal = Depends(get_principal),
    svc: StudentService = Depends(_service),
) -> list[Student]:
    # Newest first, as ordered by the hosted service.
    return await svc.list(principal)


@router.post("", response_model=Student, status_code=HTTP_201_CREATED)
async def create_student(
    body: StudentInput,
    principal: Principal = Depends(get_principal),
    svc: StudentService = Depends(_service),
) -> Student:
    return await svc.create(principal, body)


@router.get("/{student_id}", response_model=Student)
async def get_student(
    student_id: uuid.UUID,
    principal: Principal = Depends(get_principal),
    svc: StudentService = Depends(_service),
) -> Student:
    return await svc.get(principal, student_id)


@router.put("/{student_id}", response_model=Student)
async def update_student(
    student_id: uuid.UUID,
    body: StudentInput,
    principal: Principal = Depends(get_principal),
    svc: StudentService = Depends(_service),
) -> Student:
    return await svc.update(principal, student_id, body)


@router.delete("/{student_id}", status_code=HTTP_204_NO_CONTENT)
async def delete_student(
    student_id: uuid.UUID,
    principal: Principal = Depends(get_principal),
    svc: StudentService = Depends(_service),
) -> Response:
    await svc.delete(principal, student_id)
    return Response(status_code=HTTP_204_NO_CONTENT)


# --- Module Notes -----------------------------------------------------------
# The web pages in `student_registry.web.pages` call the same service methods.
