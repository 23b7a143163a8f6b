"""
SQL statements for the `expense` table.

Field lists follow the row's present fields, so every call builds its own
statement text. Placeholders are asyncpg-style ($1, $2, ...) in field order.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from .errors import MissingIdError
from .rows import (
    BUSINESS_COLUMNS,
    CREATED_AT_COLUMN,
    ID_COLUMN,
    TABLE,
    UPDATED_AT_COLUMN,
    ExpenseRow,
)


@dataclass(frozen=True)
class Statement:
    sql: str
    args: tuple[Any, ...]
    fields: tuple[str, ...] = ()


def quote(column: str) -> str:
    # "when", "where" are reserved words and the timestamps are mixed case.
    return f'"{column}"'


def _require_id(expense_id: str) -> str:
    if not (expense_id or "").strip():
        raise MissingIdError()
    return expense_id


def build_insert(row: ExpenseRow, *, created_at: datetime, updated_at: datetime) -> Statement:
    _require_id(row.id)
    pairs = [
        *row.present(),
        (ID_COLUMN, row.id),
        (CREATED_AT_COLUMN, created_at),
        (UPDATED_AT_COLUMN, updated_at),
    ]
    fields = tuple(column for column, _ in pairs)
    columns = ", ".join(quote(column) for column in fields)
    placeholders = ", ".join(f"${i}" for i in range(1, len(pairs) + 1))
    return Statement(
        sql=f"INSERT INTO {TABLE} ({columns}) VALUES ({placeholders})",
        args=tuple(value for _, value in pairs),
        fields=fields,
    )


def build_update(row: ExpenseRow, *, updated_at: datetime) -> Statement:
    _require_id(row.id)
    pairs = [*row.present(), (UPDATED_AT_COLUMN, updated_at)]
    fields = tuple(column for column, _ in pairs)
    assignments = ", ".join(f"{quote(column)} = ${i}" for i, column in enumerate(fields, start=1))
    return Statement(
        sql=f"UPDATE {TABLE} SET {assignments} WHERE {quote(ID_COLUMN)} = ${len(pairs) + 1}",
        args=(*(value for _, value in pairs), row.id),
        fields=fields,
    )


def build_delete(expense_id: str) -> Statement:
    _require_id(expense_id)
    return Statement(
        sql=f"DELETE FROM {TABLE} WHERE {quote(ID_COLUMN)} = $1",
        args=(expense_id,),
    )


def build_get(expense_id: str) -> Statement:
    _require_id(expense_id)
    fields = (ID_COLUMN, *BUSINESS_COLUMNS)
    columns = ", ".join(quote(column) for column in fields)
    return Statement(
        sql=f"SELECT {columns} FROM {TABLE} WHERE {quote(ID_COLUMN)} = $1",
        args=(expense_id,),
        fields=fields,
    )
