"""
student_registry.hosted.query

PostgREST-style query string parsing for the embedded table API.

Responsibilities:
- Parse horizontal filters (`col=op.value`), `order`, `limit`, `offset` and `select`.
- Coerce filter values to the column's wire type.
- Translate a parsed query into SQLAlchemy criteria and ordering.

Only the operators the service needs are supported; anything else is rejected
the way PostgREST rejects a malformed filter.
"""

from __future__ import annotations

import operator
import uuid
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

from sqlalchemy import ColumnElement, asc, desc

from student_registry.hosted.errors import PostgrestError

OPERATORS: dict[str, Callable[[Any, Any], Any]] = {
    "eq": operator.eq,
    "neq": operator.ne,
    "gt": operator.gt,
    "gte": operator.ge,
    "lt": operator.lt,
    "lte": operator.le,
}

_TYPE_NAMES: dict[type, str] = {
    uuid.UUID: "uuid",
    date: "date",
    datetime: "timestamp with time zone",
    str: "text",
}


@dataclass(frozen=True, slots=True)
class Filter:
    column: str
    op: str
    value: Any


@dataclass(frozen=True, slots=True)
class Order:
    column: str
    descending: bool = False


@dataclass(frozen=True, slots=True)
class TableQuery:
    filters: tuple[Filter, ...] = ()
    order: tuple[Order, ...] = ()
    limit: int | None = None
    offset: int | None = None


def unknown_column(table: str, column: str) -> PostgrestError:
    return PostgrestError(
        status_code=400,
        code="42703",
        message=f"column {table}.{column} does not exist",
    )


def coerce_value(raw: str, type_: type) -> Any:
    try:
        if type_ is uuid.UUID:
            return uuid.UUID(raw)
        if type_ is date:
            return date.fromisoformat(raw)
        if type_ is datetime:
            return datetime.fromisoformat(raw)
    except ValueError as e:
        raise PostgrestError(
            status_code=400,
            code="22P02",
            message=f'invalid input syntax for type {_TYPE_NAMES[type_]}: "{raw}"',
        ) from e
    return raw


def _parse_int(name: str, raw: str) -> int:
    try:
        value = int(raw)
    except ValueError as e:
        raise PostgrestError(
            status_code=400, code="PGRST100", message=f"failed to parse {name} ({raw})"
        ) from e
    if value < 0:
        raise PostgrestError(
            status_code=400, code="PGRST100", message=f"failed to parse {name} ({raw})"
        )
    return value


def _parse_order(table: str, raw: str, columns: Mapping[str, type]) -> tuple[Order, ...]:
    orders: list[Order] = []
    for term in raw.split(","):
        column, *modifiers = term.strip().split(".")
        if column not in columns:
            raise unknown_column(table, column)
        descending = False
        for modifier in modifiers:
            if modifier == "desc":
                descending = True
            elif modifier == "asc":
                descending = False
            elif modifier not in ("nullsfirst", "nullslast"):
                raise PostgrestError(
                    status_code=400,
                    code="PGRST100",
                    message=f"failed to parse order ({raw})",
                )
        orders.append(Order(column=column, descending=descending))
    return tuple(orders)


def parse_table_query(
    params: Iterable[tuple[str, str]],
    *,
    table: str,
    columns: Mapping[str, type],
) -> TableQuery:
    filters: list[Filter] = []
    order: tuple[Order, ...] = ()
    limit: int | None = None
    offset: int | None = None

    for name, raw in params:
        if name == "select":
            # Rows are always returned whole; only `*` and column lists are accepted.
            for column in raw.split(","):
                if column.strip() not in ("*", "") and column.strip() not in columns:
                    raise unknown_column(table, column.strip())
            continue
        if name == "order":
            order = _parse_order(table, raw, columns)
            continue
        if name == "limit":
            limit = _parse_int("limit", raw)
            continue
        if name == "offset":
            offset = _parse_int("offset", raw)
            continue

        if name not in columns:
            raise unknown_column(table, name)
        op, sep, value = raw.partition(".")
        if not sep or op not in OPERATORS:
            raise PostgrestError(
                status_code=400,
                code="PGRST100",
                message=f"failed to parse filter ({raw})",
            )
        filters.append(Filter(column=name, op=op, value=coerce_value(value, columns[name])))

    return TableQuery(filters=tuple(filters), order=order, limit=limit, offset=offset)


def to_criteria(model: type, query: TableQuery) -> list[ColumnElement[bool]]:
    return [OPERATORS[f.op](getattr(model, f.column), f.value) for f in query.filters]


def to_order_by(model: type, query: TableQuery) -> list[Any]:
    return [
        desc(getattr(model, o.column)) if o.descending else asc(getattr(model, o.column))
        for o in query.order
    ]
