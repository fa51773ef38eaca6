"""
student_registry.web.forms

Student form state.

Responsibilities:
- Hold the raw values a user typed, so a failed save re-renders them unchanged.
- Validate into `StudentInput`, reporting errors per field.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from student_registry.models import Student, StudentInput

FIELDS = ("name", "registration_number", "email", "birth_date")

REQUIRED_MESSAGE = "Preencha este campo."
INVALID_MESSAGES = {
    "email": "Informe um email válido.",
    "birth_date": "Informe uma data válida.",
}
TOO_LONG_MESSAGE = "Valor muito longo."


@dataclass
class StudentFormState:
    name: str = ""
    registration_number: str = ""
    email: str = ""
    birth_date: str = ""
    errors: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> StudentFormState:
        return cls(**{name: str(form.get(name) or "") for name in FIELDS})

    @classmethod
    def from_student(cls, student: Student) -> StudentFormState:
        return cls(
            name=student.name,
            registration_number=student.registration_number,
            email=student.email,
            birth_date=student.birth_date.isoformat(),
        )

    def validate(self) -> StudentInput | None:
        self.errors = {name: REQUIRED_MESSAGE for name in FIELDS if not getattr(self, name).strip()}

        try:
            data = StudentInput.model_validate({name: getattr(self, name) for name in FIELDS})
        except ValidationError as e:
            for err in e.errors():
                name = str(err["loc"][0])
                if err["type"] == "string_too_long":
                    self.errors.setdefault(name, TOO_LONG_MESSAGE)
                else:
                    self.errors.setdefault(name, INVALID_MESSAGES.get(name, REQUIRED_MESSAGE))
            return None
        return None if self.errors else data
