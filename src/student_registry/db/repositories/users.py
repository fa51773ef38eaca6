from __future__ import annotations

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from student_registry.db.models import HostedUser


class HostedUserRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, *, email: str, password_hash: str) -> HostedUser:
        user = HostedUser(email=email, password_hash=password_hash)
        self._session.add(user)
        await self._session.flush()
        return user

    async def get(self, user_id: uuid.UUID) -> HostedUser | None:
        return await self._session.get(HostedUser, user_id)

    async def get_by_email(self, email: str) -> HostedUser | None:
        stmt = select(HostedUser).where(HostedUser.email == email)
        return (await self._session.execute(stmt)).scalar_one_or_none()
