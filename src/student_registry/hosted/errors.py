"""
student_registry.hosted.errors

Error payloads in the hosted service's wire formats.

Responsibilities:
- `PostgrestError`: `{code, message, details, hint}` bodies of the table API.
- `GoTrueError`: `{code, error_code, msg}` bodies of the auth API.
- Register a handler that renders both as JSON responses.
"""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse


class HostedApiError(Exception):
    def __init__(self, *, status_code: int, body: dict[str, Any]) -> None:
        super().__init__(str(body))
        self.status_code = status_code
        self.body = body


class PostgrestError(HostedApiError):
    def __init__(
        self,
        *,
        status_code: int,
        code: str,
        message: str,
        details: str | None = None,
        hint: str | None = None,
    ) -> None:
        super().__init__(
            status_code=status_code,
            body={"code": code, "message": message, "details": details, "hint": hint},
        )


class GoTrueError(HostedApiError):
    def __init__(self, *, status_code: int, error_code: str, msg: str) -> None:
        super().__init__(
            status_code=status_code,
            body={"code": status_code, "error_code": error_code, "msg": msg},
        )


async def _handle_hosted_error(_: Request, exc: HostedApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.body)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(HostedApiError, _handle_hosted_error)  # type: ignore[arg-type]
