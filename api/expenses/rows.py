"""
Mapping between `Expense` and the storage row.

Writes are sparse: only fields that are present (not None) reach a statement.
Reads are total: every business column is selected, NULL columns stay None.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

from . import money
from .models import Expense

TABLE = "expense"

# Persisted column names. Renaming any of these needs a migration.
ID_COLUMN = "id"
CREATED_AT_COLUMN = "createdAt"
UPDATED_AT_COLUMN = "updatedAt"
BUSINESS_COLUMNS = ("amount", "when", "where", "who", "what")


def to_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass(frozen=True)
class ExpenseRow:
    id: str = ""
    amount: Decimal | None = None
    when: datetime | None = None
    where: str | None = None
    who: str | None = None
    what: str | None = None

    def present(self) -> Iterator[tuple[str, Any]]:
        for column in BUSINESS_COLUMNS:
            value = getattr(self, column)
            if value is not None:
                yield column, value


def from_entity(expense: Expense) -> ExpenseRow:
    return ExpenseRow(
        id=expense.id,
        amount=money.encode(expense.amount) if expense.amount is not None else None,
        when=to_utc(expense.when) if expense.when is not None else None,
        where=expense.where,
        who=expense.who,
        what=expense.what,
    )


def to_entity(record: Mapping[str, Any]) -> Expense:
    amount = record["amount"]
    when = record["when"]
    return Expense(
        id=str(record[ID_COLUMN]),
        amount=money.decode(amount) if amount is not None else None,
        when=to_utc(when) if when is not None else None,
        where=record["where"],
        who=record["who"],
        what=record["what"],
    )
