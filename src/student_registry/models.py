"""
student_registry.models

Domain models shared by the web UI, the JSON API and the backend client.

Responsibilities:
- `Student`: a row of the hosted `students` table, in this codebase's naming.
- `StudentInput`: the editable fields, with the checks an HTML form performs.
- `AuthSession`: the session object returned by the hosted auth service.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+$"


class StudentInput(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=256)
    registration_number: str = Field(min_length=1, max_length=64)
    email: str = Field(min_length=3, max_length=320, pattern=EMAIL_PATTERN)
    birth_date: date


class Student(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID | None = None
    name: str
    registration_number: str
    email: str
    birth_date: date
    created_at: datetime


class AuthUser(BaseModel):
    id: uuid.UUID
    email: str


class AuthSession(BaseModel):
    # access_token is None when the hosted service requires e-mail confirmation first.
    access_token: str | None = None
    token_type: str = "bearer"
    expires_in: int | None = None
    user: AuthUser
