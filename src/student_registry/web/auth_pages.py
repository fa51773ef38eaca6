"""
student_registry.web.auth_pages

Sign-in, sign-up and sign-out pages.

Responsibilities:
- Exchange e-mail + password for a hosted session and keep its access token in the cookie session.
- Redirect signed-in users away from `/auth`.
"""

from __future__ import annotations

import httpx
from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse
from starlette.responses import Response
from starlette.status import HTTP_303_SEE_OTHER, HTTP_400_BAD_REQUEST

from student_registry.api.deps import backend_http, settings_dep
from student_registry.auth.deps import SESSION_TOKEN_KEY
from student_registry.backend_clients.hosted_http import BackendError, HostedBackendClient
from student_registry.models import AuthSession
from student_registry.observability.logging import get_logger
from student_registry.settings import Settings
from student_registry.web import messages
from student_registry.web.flash import push_toast
from student_registry.web.handlers import AUTH_PAGE
from student_registry.web.templating import render

log = get_logger(__name__)

router = APIRouter(include_in_schema=False)


async def _credentials(request: Request) -> tuple[str, str]:
    form = await request.form()
    return str(form.get("email") or "").strip(), str(form.get("password") or "")


def _start_session(request: Request, session: AuthSession) -> RedirectResponse:
    request.session[SESSION_TOKEN_KEY] = session.access_token
    log.info("signed_in", user_id=str(session.user.id))
    return RedirectResponse("/", status_code=HTTP_303_SEE_OTHER)


@router.get(AUTH_PAGE)
async def auth_page(request: Request) -> Response:
    if request.session.get(SESSION_TOKEN_KEY):
        return RedirectResponse("/", status_code=HTTP_303_SEE_OTHER)
    return render(request, "auth.html", {"email": "", "tab": "sign-in"})


@router.post(f"{AUTH_PAGE}/sign-in")
async def sign_in(
    request: Request,
    settings: Settings = Depends(settings_dep),
    http: httpx.AsyncClient = Depends(backend_http),
) -> Response:
    email, password = await _credentials(request)
    client = HostedBackendClient(settings=settings, http=http)
    try:
        session = await client.sign_in(email=email, password=password)
    except BackendError as e:
        push_toast(request, messages.sign_in_failed(e.message))
        return render(
            request,
            "auth.html",
            {"email": email, "tab": "sign-in"},
            status_code=HTTP_400_BAD_REQUEST,
        )
    return _start_session(request, session)


@router.post(f"{AUTH_PAGE}/sign-up")
async def sign_up(
    request: Request,
    settings: Settings = Depends(settings_dep),
    http: httpx.AsyncClient = Depends(backend_http),
) -> Response:
    email, password = await _credentials(request)
    client = HostedBackendClient(settings=settings, http=http)
    try:
        session = await client.sign_up(email=email, password=password)
    except BackendError as e:
        push_toast(request, messages.sign_up_failed(e.message))
        return render(
            request,
            "auth.html",
            {"email": email, "tab": "sign-up"},
            status_code=HTTP_400_BAD_REQUEST,
        )

    if session.access_token is None:
        push_toast(request, messages.SIGN_UP_CONFIRM_EMAIL)
        return render(request, "auth.html", {"email": email, "tab": "sign-in"})
    return _start_session(request, session)


@router.post(f"{AUTH_PAGE}/sign-out")
async def sign_out(
    request: Request,
    settings: Settings = Depends(settings_dep),
    http: httpx.AsyncClient = Depends(backend_http),
) -> Response:
    token = request.session.get(SESSION_TOKEN_KEY)
    if token:
        client = HostedBackendClient(settings=settings, http=http, access_token=str(token))
        try:
            await client.sign_out()
        except BackendError as e:
            # The local session is dropped regardless; the token expires on its own.
            log.warning("sign_out_failed", code=e.code, error=e.message)
    request.session.clear()
    return RedirectResponse(AUTH_PAGE, status_code=HTTP_303_SEE_OTHER)
