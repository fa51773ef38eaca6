"""
student_registry.auth.models

Auth domain models.

Responsibilities:
- Define the authenticated identity type (`Principal`) injected into endpoints.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class Principal:
    """
    Authenticated user, as asserted by the hosted auth service.

    `access_token` is forwarded on every backend call so the hosted service can
    scope rows to this user.
    """

    subject: str
    email: str
    roles: frozenset[str]
    access_token: str = field(repr=False)
