"""
student_registry.web.flash

Transient notifications ("toasts") carried across redirects in the session.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Literal

from starlette.requests import Request

_SESSION_KEY = "_toasts"


@dataclass(frozen=True, slots=True)
class Toast:
    title: str
    description: str = ""
    variant: Literal["default", "destructive"] = "default"


def push_toast(request: Request, toast: Toast) -> None:
    queued = list(request.session.get(_SESSION_KEY, []))
    queued.append(asdict(toast))
    request.session[_SESSION_KEY] = queued


def pop_toasts(request: Request) -> list[Toast]:
    queued = request.session.pop(_SESSION_KEY, [])
    return [Toast(**item) for item in queued]
