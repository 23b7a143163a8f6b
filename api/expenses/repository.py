"""
Expense persistence (raw SQL over an asyncpg pool).

Each method runs exactly one statement and raises a classified `ExpenseError`
on failure. `timeout` is the caller's remaining deadline and is handed to the
store call; task cancellation propagates untouched.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Protocol

from core.db import affected_rows

from . import errors, queries, rows
from .ids import IdGenerator
from .models import Expense, ExpenseFilter

logger = logging.getLogger(__name__)


class Store(Protocol):
    # Satisfied by asyncpg.Pool and asyncpg.Connection.
    async def execute(self, query: str, *args: Any, timeout: float | None = None) -> str: ...

    async def fetchrow(self, query: str, *args: Any, timeout: float | None = None) -> Any: ...


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _require_id(expense_id: str) -> None:
    if not (expense_id or "").strip():
        raise errors.empty_id_error()


class ExpenseRepository:
    def __init__(
        self,
        store: Store,
        ids: IdGenerator,
        *,
        clock: Callable[[], datetime] | None = None,
        not_found_on_empty_update: bool = True,
    ) -> None:
        self._store = store
        self._ids = ids
        self._clock = clock or _utc_now
        self._not_found_on_empty_update = not_found_on_empty_update

    async def _execute(self, statement: queries.Statement, *, timeout: float | None) -> str:
        logger.debug("store_execute sql=%s args=%r", statement.sql, statement.args)
        try:
            return await self._store.execute(statement.sql, *statement.args, timeout=timeout)
        except Exception as exc:
            raise errors.StoreError(statement.sql, statement.args, str(exc)) from exc

    async def _fetchrow(self, statement: queries.Statement, *, timeout: float | None) -> Any:
        logger.debug("store_fetchrow sql=%s args=%r", statement.sql, statement.args)
        try:
            return await self._store.fetchrow(statement.sql, *statement.args, timeout=timeout)
        except Exception as exc:
            raise errors.StoreError(statement.sql, statement.args, str(exc)) from exc

    async def create(self, expense: Expense, *, timeout: float | None = None) -> str:
        """
        Insert a new expense and return its generated id.

        A caller-supplied `expense.id` is ignored: ids are always generated here.
        """
        expense_id = self._ids.next()
        now = self._clock()
        row = rows.from_entity(
            Expense(
                id=expense_id,
                amount=expense.amount,
                when=expense.when,
                where=expense.where,
                who=expense.who,
                what=expense.what,
            )
        )
        statement = queries.build_insert(row, created_at=now, updated_at=now)
        await self._execute(statement, timeout=timeout)
        return expense_id

    async def update(self, expense: Expense, *, timeout: float | None = None) -> None:
        _require_id(expense.id)
        statement = queries.build_update(rows.from_entity(expense), updated_at=self._clock())
        status = await self._execute(statement, timeout=timeout)
        if self._not_found_on_empty_update and affected_rows(status) == 0:
            raise errors.NotFoundError()

    async def delete(self, expense_id: str, *, timeout: float | None = None) -> None:
        _require_id(expense_id)
        status = await self._execute(queries.build_delete(expense_id), timeout=timeout)
        if affected_rows(status) == 0:
            raise errors.NotFoundError()

    async def get(self, expense_id: str, *, timeout: float | None = None) -> Expense:
        _require_id(expense_id)
        record = await self._fetchrow(queries.build_get(expense_id), timeout=timeout)
        if record is None:
            raise errors.NotFoundError()
        expense = rows.to_entity(record)
        expense.id = expense.id or expense_id
        return expense

    async def search(
        self,
        expense_filter: ExpenseFilter | None = None,
        *,
        timeout: float | None = None,
    ) -> list[Expense]:
        # TODO: translate ExpenseFilter predicates into a WHERE clause.
        return []
