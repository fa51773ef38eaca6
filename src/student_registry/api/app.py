"""
student_registry.api.app

FastAPI app factory for the student registry.

Responsibilities:
- Build the FastAPI application and register routers/middleware/error handlers.
- Mount the embedded hosted backend when no backend URL is configured.
- Initialize and dispose shared infrastructure (DB engine/session factory) for the embedded backend.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from starlette.middleware.sessions import SessionMiddleware

from student_registry import __version__
from student_registry.api.errors import register_error_handlers
from student_registry.api.routers.auth import router as auth_router
from student_registry.api.routers.health import router as health_router
from student_registry.api.routers.students import router as students_router
from student_registry.db.init_db import init_db
from student_registry.db.session import create_engine, create_sessionmaker
from student_registry.hosted.errors import register_error_handlers as register_hosted_error_handlers
from student_registry.hosted.router import router as hosted_router
from student_registry.observability.logging import configure_logging, get_logger
from student_registry.observability.middleware import RequestContextMiddleware
from student_registry.settings import Settings
from student_registry.web.auth_pages import router as auth_pages_router
from student_registry.web.handlers import register_web_handlers
from student_registry.web.pages import router as pages_router
from student_registry.web.templating import build_templates

log = get_logger(__name__)


def create_app(*, settings: Settings) -> FastAPI:
    # Configure structured logging once at process startup (before app serves requests).
    configure_logging(service_name=settings.service_name, level=settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env, embedded_backend=settings.embedded_backend)
        if settings.embedded_backend:
            engine = create_engine(settings)
            app.state.engine = engine
            app.state.sessionmaker = create_sessionmaker(engine)
            if settings.env in ("dev", "test"):
                # Prod should use Alembic migrations.
                await init_db(engine)
        try:
            yield
        finally:
            engine = getattr(app.state, "engine", None)
            if engine is not None:
                await engine.dispose()
            log.info("shutdown")

    app = FastAPI(
        title="Student Registry",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.templates = build_templates(settings)

    app.add_middleware(RequestContextMiddleware)
    # Added last so it wraps everything; exception handlers can still write toasts.
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.session_secret,
        session_cookie=settings.session_cookie,
        https_only=settings.session_https_only,
        same_site="lax",
    )

    register_error_handlers(app)
    register_web_handlers(app)

    app.include_router(health_router, tags=["health"])
    app.include_router(auth_router)
    app.include_router(students_router)
    app.include_router(auth_pages_router)
    app.include_router(pages_router)

    if settings.embedded_backend:
        register_hosted_error_handlers(app)
        app.include_router(hosted_router)

    return app


# --- Module Notes -----------------------------------------------------------
# App composition stays here; page and API behavior lives in the routers and
# `services.student_service`.
