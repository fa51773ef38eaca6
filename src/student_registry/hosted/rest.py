"""
student_registry.hosted.rest

Embedded table API for `students` (PostgREST-compatible subset).

Responsibilities:
- Serve select/insert/update/delete with PostgREST filters and ordering.
- Enforce row-level security: callers only see and write their own rows.
- Report constraint violations with the database's SQLSTATE codes (23505 etc.).
"""

from __future__ import annotations

import uuid
from datetime import UTC, date
from typing import Any

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, ValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from student_registry.api.deps import db_session
from student_registry.auth.models import Principal
from student_registry.db.models import STUDENT_COLUMNS, StudentRecord
from student_registry.db.repositories.students import StudentRepo
from student_registry.hosted.deps import rest_principal
from student_registry.hosted.errors import PostgrestError
from student_registry.hosted.query import (
    TableQuery,
    parse_table_query,
    to_criteria,
    to_order_by,
)
from student_registry.observability.logging import get_logger

log = get_logger(__name__)

router = APIRouter()

TABLE = "students"


class StudentInsert(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: uuid.UUID | None = None
    user_id: uuid.UUID | None = None
    name: str
    matricula: str
    email: str
    birth_date: date


class StudentPatch(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str | None = None
    matricula: str | None = None
    email: str | None = None
    birth_date: date | None = None


def _row(record: StudentRecord) -> dict[str, Any]:
    created_at = record.created_at
    # SQLite hands back naive datetimes; values are stored in UTC.
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=UTC)
    return {
        "id": str(record.id),
        "user_id": str(record.user_id),
        "name": record.name,
        "matricula": record.matricula,
        "email": record.email,
        "birth_date": record.birth_date.isoformat(),
        "created_at": created_at.isoformat(),
    }


def _owner_id(principal: Principal) -> uuid.UUID:
    try:
        return uuid.UUID(principal.subject)
    except ValueError as e:
        raise PostgrestError(
            status_code=401, code="PGRST301", message="JWT subject is not a user id"
        ) from e


def _wants_representation(request: Request) -> bool:
    return "return=representation" in request.headers.get("prefer", "")


def _query(request: Request) -> TableQuery:
    return parse_table_query(
        request.query_params.multi_items(), table=TABLE, columns=STUDENT_COLUMNS
    )


def _validation_error(e: ValidationError) -> PostgrestError:
    err = e.errors()[0]
    column = str(err["loc"][0]) if err["loc"] else "?"
    if err["type"] == "extra_forbidden":
        return PostgrestError(
            status_code=400,
            code="PGRST204",
            message=f"Could not find the '{column}' column of '{TABLE}' in the schema cache",
        )
    if err["type"] == "missing":
        return _not_null(column)
    return PostgrestError(
        status_code=400,
        code="22P02",
        message=f'invalid input syntax for column "{column}": "{err.get("input")}"',
    )


def _not_null(column: str) -> PostgrestError:
    return PostgrestError(
        status_code=400,
        code="23502",
        message=(
            f'null value in column "{column}" of relation "{TABLE}" violates not-null constraint'
        ),
    )


def _integrity_error(e: IntegrityError, values: dict[str, Any]) -> PostgrestError:
    detail = str(e.orig).lower()
    if "unique" in detail or "duplicate" in detail:
        if "matricula" in detail:
            return PostgrestError(
                status_code=409,
                code="23505",
                message='duplicate key value violates unique constraint "students_matricula_key"',
                details=f"Key (matricula)=({values.get('matricula')}) already exists.",
            )
        return PostgrestError(
            status_code=409,
            code="23505",
            message='duplicate key value violates unique constraint "students_pkey"',
            details=f"Key (id)=({values.get('id')}) already exists.",
        )
    if "foreign key" in detail:
        return PostgrestError(
            status_code=409,
            code="23503",
            message=(
                f'insert or update on table "{TABLE}" violates foreign key constraint'
                ' "students_user_id_fkey"'
            ),
            details=f"Key (user_id)=({values.get('user_id')}) is not present in table \"users\".",
        )
    return PostgrestError(status_code=409, code="23000", message=str(e.orig))


async def _read_json(request: Request) -> Any:
    try:
        return await request.json()
    except ValueError as e:
        raise PostgrestError(
            status_code=400, code="PGRST102", message="Empty or invalid json"
        ) from e


def _require_filters(query: TableQuery, verb: str) -> None:
    if not query.filters:
        raise PostgrestError(
            status_code=400, code="21000", message=f"{verb} requires a WHERE clause"
        )


def _rows_response(
    request: Request, records: list[StudentRecord], *, status_code: int
) -> Response:
    if _wants_representation(request):
        return JSONResponse(status_code=status_code, content=[_row(r) for r in records])
    return Response(status_code=201 if status_code == 201 else 204)


@router.get(f"/{TABLE}")
async def select_students(
    request: Request,
    principal: Principal = Depends(rest_principal),
    session: AsyncSession = Depends(db_session),
) -> list[dict[str, Any]]:
    query = _query(request)
    repo = StudentRepo(session, owner_id=_owner_id(principal))
    records = await repo.select(
        criteria=to_criteria(StudentRecord, query),
        order_by=to_order_by(StudentRecord, query),
        limit=query.limit,
        offset=query.offset,
    )
    return [_row(r) for r in records]


@router.post(f"/{TABLE}")
async def insert_students(
    request: Request,
    principal: Principal = Depends(rest_principal),
    session: AsyncSession = Depends(db_session),
) -> Response:
    owner_id = _owner_id(principal)
    payload = await _read_json(request)
    items = payload if isinstance(payload, list) else [payload]

    rows: list[dict[str, Any]] = []
    for item in items:
        try:
            body = StudentInsert.model_validate(item)
        except ValidationError as e:
            raise _validation_error(e) from e
        values = body.model_dump(exclude_none=True)
        values.setdefault("user_id", owner_id)
        if values["user_id"] != owner_id:
            raise PostgrestError(
                status_code=403,
                code="42501",
                message=f'new row violates row-level security policy for table "{TABLE}"',
            )
        rows.append(values)

    repo = StudentRepo(session, owner_id=owner_id)
    records: list[StudentRecord] = []
    for values in rows:
        try:
            records.append(await repo.insert(values))
        except IntegrityError as e:
            await session.rollback()
            raise _integrity_error(e, values) from e
    await session.commit()

    log.info("hosted_rows_inserted", table=TABLE, count=len(records))
    return _rows_response(request, records, status_code=201)


@router.patch(f"/{TABLE}")
async def update_students(
    request: Request,
    principal: Principal = Depends(rest_principal),
    session: AsyncSession = Depends(db_session),
) -> Response:
    query = _query(request)
    _require_filters(query, "UPDATE")
    payload = await _read_json(request)
    try:
        body = StudentPatch.model_validate(payload)
    except ValidationError as e:
        raise _validation_error(e) from e

    values = body.model_dump(exclude_unset=True)
    for column, value in values.items():
        if value is None:
            raise _not_null(column)

    repo = StudentRepo(session, owner_id=_owner_id(principal))
    try:
        records = await repo.update(criteria=to_criteria(StudentRecord, query), values=values)
    except IntegrityError as e:
        await session.rollback()
        raise _integrity_error(e, values) from e
    await session.commit()

    log.info("hosted_rows_updated", table=TABLE, count=len(records))
    return _rows_response(request, records, status_code=200)


@router.delete(f"/{TABLE}")
async def delete_students(
    request: Request,
    principal: Principal = Depends(rest_principal),
    session: AsyncSession = Depends(db_session),
) -> Response:
    query = _query(request)
    _require_filters(query, "DELETE")

    repo = StudentRepo(session, owner_id=_owner_id(principal))
    records = await repo.delete(criteria=to_criteria(StudentRecord, query))
    await session.commit()

    log.info("hosted_rows_deleted", table=TABLE, count=len(records))
    return _rows_response(request, records, status_code=200)


# --- Module Notes -----------------------------------------------------------
# Rows are returned as the hosted table stores them (`matricula`, ISO dates);
# mapping to `Student` happens in `backend_clients.hosted_http`.
