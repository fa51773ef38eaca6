"""
student_registry.api.errors

JSON error responses for service and backend failures.

Responsibilities:
- Map `StudentNotFoundError` to 404 and `DuplicateRegistrationError` to 409.
- Pass the hosted service's 4xx statuses through; report its outages as 502/503.
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.status import (
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
    HTTP_502_BAD_GATEWAY,
    HTTP_503_SERVICE_UNAVAILABLE,
)

from student_registry.backend_clients.hosted_http import BackendError, BackendUnavailableError
from student_registry.observability.logging import get_logger
from student_registry.services.student_service import (
    DuplicateRegistrationError,
    StudentNotFoundError,
)

log = get_logger(__name__)


async def _not_found(_: Request, exc: StudentNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=HTTP_404_NOT_FOUND, content={"detail": str(exc)})


async def _duplicate(_: Request, exc: DuplicateRegistrationError) -> JSONResponse:
    return JSONResponse(
        status_code=HTTP_409_CONFLICT,
        content={"detail": str(exc), "code": "duplicate_registration"},
    )


async def _backend_error(_: Request, exc: BackendError) -> JSONResponse:
    if isinstance(exc, BackendUnavailableError):
        status_code = HTTP_503_SERVICE_UNAVAILABLE
    elif 400 <= exc.status_code < 500:
        status_code = exc.status_code
    else:
        status_code = HTTP_502_BAD_GATEWAY
    log.warning("backend_error_response", status_code=status_code, code=exc.code)
    return JSONResponse(status_code=status_code, content={"detail": exc.message, "code": exc.code})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StudentNotFoundError, _not_found)  # type: ignore[arg-type]
    app.add_exception_handler(DuplicateRegistrationError, _duplicate)  # type: ignore[arg-type]
    app.add_exception_handler(BackendError, _backend_error)  # type: ignore[arg-type]
