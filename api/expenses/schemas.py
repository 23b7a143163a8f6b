"""
Expense API schemas (wire representation).
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from . import money
from .errors import InvalidAmountError
from .models import Expense
from .rows import to_utc


class ExpenseIn(BaseModel):
    """
    Create/update body. Omitted fields stay unset; `id` is never read from the body.
    """

    model_config = ConfigDict(extra="ignore")

    amount: str | None = Field(default=None, max_length=32)
    when: datetime | None = None
    where: str | None = Field(default=None, max_length=500)
    who: str | None = Field(default=None, max_length=500)
    what: str | None = Field(default=None, max_length=2000)

    @field_validator("amount", mode="before")
    @classmethod
    def _amount_is_decimal_string(cls, value: object) -> object:
        if value is None:
            return value
        if not isinstance(value, str):
            raise ValueError("amount must be a decimal string")
        try:
            money.parse_amount(value)
        except InvalidAmountError as exc:
            raise ValueError(str(exc)) from exc
        return value

    @field_validator("when")
    @classmethod
    def _when_in_utc(cls, value: datetime | None) -> datetime | None:
        return to_utc(value) if value is not None else None

    def to_expense(self, expense_id: str = "") -> Expense:
        return Expense(
            id=expense_id,
            amount=money.parse_amount(self.amount) if self.amount is not None else None,
            when=self.when,
            where=self.where,
            who=self.who,
            what=self.what,
        )


class ExpenseOut(BaseModel):
    id: str | None = None
    amount: str | None = None
    when: datetime | None = None
    where: str | None = None
    who: str | None = None
    what: str | None = None

    @classmethod
    def from_expense(cls, expense: Expense) -> "ExpenseOut":
        return cls(
            id=expense.id or None,
            amount=money.format_amount(expense.amount) if expense.amount is not None else None,
            when=to_utc(expense.when) if expense.when is not None else None,
            where=expense.where,
            who=expense.who,
            what=expense.what,
        )


class CreatedResponse(BaseModel):
    id: str


class ErrorBody(BaseModel):
    code: str | None = None
    message: str | None = None

    def to_content(self) -> dict:
        # Empty code/message are dropped, so an opaque error is just {}.
        return {k: v for k, v in self.model_dump().items() if v}
