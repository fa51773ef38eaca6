"""
student_registry.db.init_db

Schema bootstrap for the embedded backend in dev and test.

Responsibilities:
- Create `auth_users` and `students` when they are missing.
- Leave production schemas to the Alembic migrations under `alembic/versions`.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine

from student_registry.db import models  # noqa: F401  # registers the tables on Base.metadata
from student_registry.db.base import Base
from student_registry.observability.logging import get_logger

log = get_logger(__name__)


async def init_db(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    log.info("embedded_backend_schema_ready", tables=sorted(Base.metadata.tables))
