"""
student_registry.web.templating

Jinja2 environment for the web UI.

Responsibilities:
- Build the templates object with the date display filter.
- Render pages with the pending toasts attached.
"""

from __future__ import annotations

from datetime import UTC, date, datetime, tzinfo
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo

from fastapi.templating import Jinja2Templates
from starlette.requests import Request
from starlette.responses import Response

from student_registry.settings import Settings
from student_registry.web.flash import pop_toasts

TEMPLATES_DIR = Path(__file__).parent / "templates"


def format_display_date(
    value: date | datetime | None, fmt: str, tz: tzinfo | None = None
) -> str:
    if value is None:
        return ""
    # Calendar dates (birth_date) are never shifted; timestamps are stored in UTC.
    if isinstance(value, datetime) and tz is not None:
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        value = value.astimezone(tz)
    return value.strftime(fmt)


def build_templates(settings: Settings) -> Jinja2Templates:
    templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
    tz = ZoneInfo(settings.display_timezone)
    templates.env.filters["display_date"] = lambda value: format_display_date(
        value, settings.display_date_format, tz
    )
    return templates


def render(
    request: Request,
    name: str,
    context: dict[str, Any] | None = None,
    *,
    status_code: int = 200,
) -> Response:
    templates: Jinja2Templates = request.app.state.templates
    page_context = {"toasts": pop_toasts(request), **(context or {})}
    return templates.TemplateResponse(request, name, page_context, status_code=status_code)
