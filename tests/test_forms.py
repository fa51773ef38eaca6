from __future__ import annotations

import uuid
from datetime import UTC, date, datetime
from zoneinfo import ZoneInfo

from student_registry.models import Student
from student_registry.web.forms import StudentFormState
from student_registry.web.templating import format_display_date


def test_empty_form_reports_required_fields() -> None:
    form = StudentFormState.from_form({})
    assert form.validate() is None
    assert set(form.errors) == {"name", "registration_number", "email", "birth_date"}
    assert form.errors["name"] == "Preencha este campo."


def test_invalid_values_keep_raw_input() -> None:
    form = StudentFormState.from_form(
        {
            "name": "Maria",
            "registration_number": "2024001",
            "email": "maria-at-escola",
            "birth_date": "2005-13-40",
        }
    )
    assert form.validate() is None
    assert form.errors == {
        "email": "Informe um email válido.",
        "birth_date": "Informe uma data válida.",
    }
    assert form.email == "maria-at-escola"


def test_valid_form_is_stripped() -> None:
    form = StudentFormState.from_form(
        {
            "name": "  Maria Souza ",
            "registration_number": "2024001",
            "email": "maria@escola.com",
            "birth_date": "2005-03-15",
        }
    )
    data = form.validate()
    assert data is not None
    assert data.name == "Maria Souza"
    assert data.birth_date == date(2005, 3, 15)
    assert form.errors == {}


def test_from_student_prefills_iso_date() -> None:
    student = Student(
        id=uuid.uuid4(),
        name="Maria Souza",
        registration_number="2024001",
        email="maria@escola.com",
        birth_date=date(2005, 3, 15),
        created_at=datetime(2026, 1, 10, tzinfo=UTC),
    )
    form = StudentFormState.from_student(student)
    assert form.birth_date == "2005-03-15"
    assert form.registration_number == "2024001"


def test_display_date_format() -> None:
    assert format_display_date(date(2005, 3, 15), "%d/%m/%Y") == "15/03/2005"
    assert format_display_date(None, "%d/%m/%Y") == ""


def test_timestamps_use_display_timezone() -> None:
    sao_paulo = ZoneInfo("America/Sao_Paulo")
    # 01:30 UTC is still the previous evening in Brazil.
    created_at = datetime(2026, 1, 10, 1, 30, tzinfo=UTC)

    assert format_display_date(created_at, "%d/%m/%Y", sao_paulo) == "09/01/2026"
    assert format_display_date(created_at.replace(tzinfo=None), "%d/%m/%Y", sao_paulo) == (
        "09/01/2026"
    )
    assert format_display_date(date(2005, 3, 15), "%d/%m/%Y", sao_paulo) == "15/03/2005"
