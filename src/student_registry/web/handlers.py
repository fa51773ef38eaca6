"""
student_registry.web.handlers

Exception handlers for the web UI.
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import RedirectResponse
from starlette.status import HTTP_303_SEE_OTHER

from student_registry.auth.deps import LoginRequired
from student_registry.web import messages
from student_registry.web.flash import push_toast

AUTH_PAGE = "/auth"


async def _redirect_to_sign_in(request: Request, exc: LoginRequired) -> RedirectResponse:
    if exc.reason == "expired":
        push_toast(request, messages.SESSION_EXPIRED)
    return RedirectResponse(AUTH_PAGE, status_code=HTTP_303_SEE_OTHER)


def register_web_handlers(app: FastAPI) -> None:
    app.add_exception_handler(LoginRequired, _redirect_to_sign_in)  # type: ignore[arg-type]
