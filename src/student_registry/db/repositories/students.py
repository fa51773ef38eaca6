"""
student_registry.db.repositories.students

Repository for `StudentRecord` rows.

Responsibilities:
- Run select/insert/update/delete on the `students` table.
- Scope every statement to the owning user (row-level security).
"""

from __future__ import annotations

import uuid
from collections.abc import Sequence
from typing import Any

from sqlalchemy import ColumnElement, select
from sqlalchemy.ext.asyncio import AsyncSession

from student_registry.db.models import StudentRecord


class StudentRepo:
    def __init__(self, session: AsyncSession, *, owner_id: uuid.UUID) -> None:
        self._session = session
        self._owner_id = owner_id

    async def select(
        self,
        *,
        criteria: Sequence[ColumnElement[bool]] = (),
        order_by: Sequence[Any] = (),
        limit: int | None = None,
        offset: int | None = None,
    ) -> list[StudentRecord]:
        stmt = (
            select(StudentRecord)
            .where(StudentRecord.user_id == self._owner_id, *criteria)
            .order_by(*order_by)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        if offset is not None:
            stmt = stmt.offset(offset)
        return list((await self._session.execute(stmt)).scalars().all())

    async def insert(self, values: dict[str, Any]) -> StudentRecord:
        record = StudentRecord(**values)
        self._session.add(record)
        await self._session.flush()
        return record

    async def update(
        self, *, criteria: Sequence[ColumnElement[bool]], values: dict[str, Any]
    ) -> list[StudentRecord]:
        records = await self.select(criteria=criteria)
        for record in records:
            for key, value in values.items():
                setattr(record, key, value)
        await self._session.flush()
        return records

    async def delete(self, *, criteria: Sequence[ColumnElement[bool]]) -> list[StudentRecord]:
        # Deleted rows are returned so callers can echo them back.
        records = await self.select(criteria=criteria)
        for record in records:
            await self._session.delete(record)
        await self._session.flush()
        return records


# --- Module Notes -----------------------------------------------------------
# Rows of other users are never matched, so updates/deletes on them affect
# zero rows instead of failing, like the hosted service's row-level security.
