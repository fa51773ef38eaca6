"""
student_registry.web.pages

Student pages: list, add, view, edit and delete.

Responsibilities:
- Render the list with the total count and per-row actions.
- Drive the add/edit form (validation, error toasts, values preserved on failure).
- Confirm and perform deletes.
"""

from __future__ import annotations

import uuid

import httpx
from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse
from starlette.responses import Response
from starlette.status import (
    HTTP_303_SEE_OTHER,
    HTTP_409_CONFLICT,
    HTTP_502_BAD_GATEWAY,
)

from student_registry.api.deps import backend_http, settings_dep
from student_registry.auth.deps import get_session_principal
from student_registry.auth.models import Principal
from student_registry.backend_clients.hosted_http import BackendError
from student_registry.models import Student
from student_registry.services.student_service import (
    DuplicateRegistrationError,
    StudentNotFoundError,
    StudentService,
)
from student_registry.settings import Settings
from student_registry.web import messages
from student_registry.web.flash import push_toast
from student_registry.web.forms import StudentFormState
from student_registry.web.templating import render

router = APIRouter(include_in_schema=False)

HOME = "/"


def _home() -> RedirectResponse:
    return RedirectResponse(HOME, status_code=HTTP_303_SEE_OTHER)


def _form_page(
    request: Request,
    principal: Principal,
    form: StudentFormState,
    *,
    student_id: uuid.UUID | None = None,
    status_code: int = 200,
) -> Response:
    return render(
        request,
        "student_form.html",
        {"principal": principal, "form": form, "student_id": student_id},
        status_code=status_code,
    )


async def _load_or_redirect(
    request: Request, svc: StudentService, principal: Principal, student_id: uuid.UUID
) -> Student | RedirectResponse:
    try:
        return await svc.get(principal, student_id)
    except StudentNotFoundError as e:
        push_toast(request, messages.student_unavailable(str(e)))
    except BackendError as e:
        push_toast(request, messages.student_unavailable(e.message))
    return _home()


@router.get(HOME)
async def index(
    request: Request,
    principal: Principal = Depends(get_session_principal),
    settings: Settings = Depends(settings_dep),
    http: httpx.AsyncClient = Depends(backend_http),
) -> Response:
    svc = StudentService.for_principal(settings=settings, http=http, principal=principal)
    students: list[Student] = []
    try:
        students = await svc.list(principal)
    except BackendError as e:
        push_toast(request, messages.load_failed(e.message))
    return render(request, "index.html", {"principal": principal, "students": students})


@router.get("/students/new")
async def new_student(
    request: Request,
    principal: Principal = Depends(get_session_principal),
) -> Response:
    return _form_page(request, principal, StudentFormState())


@router.post("/students/new")
async def create_student(
    request: Request,
    principal: Principal = Depends(get_session_principal),
    settings: Settings = Depends(settings_dep),
    http: httpx.AsyncClient = Depends(backend_http),
) -> Response:
    form = StudentFormState.from_form(await request.form())
    data = form.validate()
    if data is None:
        return _form_page(request, principal, form, status_code=422)

    svc = StudentService.for_principal(settings=settings, http=http, principal=principal)
    try:
        await svc.create(principal, data)
    except DuplicateRegistrationError as e:
        push_toast(request, messages.save_failed(str(e)))
        return _form_page(request, principal, form, status_code=HTTP_409_CONFLICT)
    except BackendError as e:
        push_toast(request, messages.save_failed(e.message))
        return _form_page(request, principal, form, status_code=HTTP_502_BAD_GATEWAY)

    push_toast(request, messages.STUDENT_CREATED)
    return _home()


@router.get("/students/{student_id}")
async def view_student(
    request: Request,
    student_id: uuid.UUID,
    principal: Principal = Depends(get_session_principal),
    settings: Settings = Depends(settings_dep),
    http: httpx.AsyncClient = Depends(backend_http),
) -> Response:
    svc = StudentService.for_principal(settings=settings, http=http, principal=principal)
    student = await _load_or_redirect(request, svc, principal, student_id)
    if isinstance(student, RedirectResponse):
        return student
    return render(request, "student_detail.html", {"principal": principal, "student": student})


@router.get("/students/{student_id}/edit")
async def edit_student(
    request: Request,
    student_id: uuid.UUID,
    principal: Principal = Depends(get_session_principal),
    settings: Settings = Depends(settings_dep),
    http: httpx.AsyncClient = Depends(backend_http),
) -> Response:
    svc = StudentService.for_principal(settings=settings, http=http, principal=principal)
    student = await _load_or_redirect(request, svc, principal, student_id)
    if isinstance(student, RedirectResponse):
        return student
    return _form_page(
        request, principal, StudentFormState.from_student(student), student_id=student_id
    )


@router.post("/students/{student_id}/edit")
async def update_student(
    request: Request,
    student_id: uuid.UUID,
    principal: Principal = Depends(get_session_principal),
    settings: Settings = Depends(settings_dep),
    http: httpx.AsyncClient = Depends(backend_http),
) -> Response:
    form = StudentFormState.from_form(await request.form())
    data = form.validate()
    if data is None:
        return _form_page(
            request,
            principal,
            form,
            student_id=student_id,
            status_code=422,
        )

    svc = StudentService.for_principal(settings=settings, http=http, principal=principal)
    try:
        await svc.update(principal, student_id, data)
    except StudentNotFoundError as e:
        push_toast(request, messages.save_failed(str(e)))
        return _home()
    except DuplicateRegistrationError as e:
        push_toast(request, messages.save_failed(str(e)))
        return _form_page(
            request, principal, form, student_id=student_id, status_code=HTTP_409_CONFLICT
        )
    except BackendError as e:
        push_toast(request, messages.save_failed(e.message))
        return _form_page(
            request, principal, form, student_id=student_id, status_code=HTTP_502_BAD_GATEWAY
        )

    push_toast(request, messages.STUDENT_UPDATED)
    return _home()


@router.get("/students/{student_id}/delete")
async def confirm_delete_student(
    request: Request,
    student_id: uuid.UUID,
    principal: Principal = Depends(get_session_principal),
    settings: Settings = Depends(settings_dep),
    http: httpx.AsyncClient = Depends(backend_http),
) -> Response:
    svc = StudentService.for_principal(settings=settings, http=http, principal=principal)
    student = await _load_or_redirect(request, svc, principal, student_id)
    if isinstance(student, RedirectResponse):
        return student
    return render(
        request, "student_confirm_delete.html", {"principal": principal, "student": student}
    )


@router.post("/students/{student_id}/delete")
async def delete_student(
    request: Request,
    student_id: uuid.UUID,
    principal: Principal = Depends(get_session_principal),
    settings: Settings = Depends(settings_dep),
    http: httpx.AsyncClient = Depends(backend_http),
) -> Response:
    svc = StudentService.for_principal(settings=settings, http=http, principal=principal)
    try:
        await svc.delete(principal, student_id)
    except StudentNotFoundError as e:
        push_toast(request, messages.delete_failed(str(e)))
    except BackendError as e:
        push_toast(request, messages.delete_failed(e.message))
    else:
        push_toast(request, messages.STUDENT_REMOVED)
    return _home()


# --- Module Notes -----------------------------------------------------------
# `/students/new` is declared before `/students/{student_id}` so "new" is never
# parsed as an id.
