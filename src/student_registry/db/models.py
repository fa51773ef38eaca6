"""
student_registry.db.models

Persistence schema of the embedded hosted backend.

Responsibilities:
- Define ORM models mirroring the hosted project's tables:
  - HostedUser: accounts of the auth service
  - StudentRecord: rows of the `students` table, owned by a user
"""

from __future__ import annotations

import uuid
from datetime import UTC, date, datetime

from sqlalchemy import Date, DateTime, ForeignKey, String, UniqueConstraint, Uuid as SAUuid
from sqlalchemy.orm import Mapped, mapped_column

from student_registry.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


class HostedUser(Base):
    __tablename__ = "auth_users"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(128), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )


class StudentRecord(Base):
    __tablename__ = "students"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), ForeignKey("auth_users.id"), nullable=False, index=True
    )

    name: Mapped[str] = mapped_column(String(256), nullable=False)
    matricula: Mapped[str] = mapped_column(String(64), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    birth_date: Mapped[date] = mapped_column(Date, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, index=True
    )

    # Constraint name matches the hosted project's, it shows up in error messages.
    __table_args__ = (UniqueConstraint("matricula", name="students_matricula_key"),)


# Wire types of the `students` columns, used to coerce filter values.
STUDENT_COLUMNS: dict[str, type] = {
    "id": uuid.UUID,
    "user_id": uuid.UUID,
    "name": str,
    "matricula": str,
    "email": str,
    "birth_date": date,
    "created_at": datetime,
}
