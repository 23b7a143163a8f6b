"""
Expense error taxonomy.

Repository and codec raise these; the router alone turns them into HTTP
status codes and response bodies.
"""

from __future__ import annotations

from typing import Any


class ExpenseError(Exception):
    code = ""
    message = ""

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message or self.code)


class ValidationError(ExpenseError):
    """
    A rejected field. `cause` links an earlier error, so several field
    problems can be reported at once ("tag:[no_space] ...;tag:[no_empty] ...").
    """

    code = "VALIDATION_ERROR"

    def __init__(
        self,
        field: str,
        reason: str,
        description: str,
        cause: BaseException | None = None,
    ) -> None:
        self.field = field
        self.reason = reason
        self.description = description
        self.cause = cause
        message = f"{field}:[{reason}] {description}"
        if cause is not None:
            message = f"{message};{cause}"
        super().__init__(message)


def unwrap_field_errors(err: BaseException | None) -> list[ValidationError]:
    """
    Every ValidationError in the `cause` chain, outermost first.
    """
    found: list[ValidationError] = []
    while isinstance(err, ValidationError):
        found.append(err)
        err = err.cause
    return found


class NotFoundError(ExpenseError):
    code = "NOT_FOUND"
    message = "expense not found"


class InvalidAmountError(ExpenseError):
    code = "INVALID_AMOUNT"
    message = "invalid amount"


class InvalidRequestError(ExpenseError):
    code = "INVALID_REQUEST"
    message = "invalid request"


class MissingIdError(ExpenseError):
    code = "MISSING_ID"
    message = "expense id is required"


class IdGenerationError(ExpenseError):
    code = "ID_GENERATION_FAILED"
    message = "could not generate expense id"


class StoreError(ExpenseError):
    code = "STORE_ERROR"
    message = "store failure"

    def __init__(self, query: str, params: tuple[Any, ...], message: str | None = None) -> None:
        self.query = query
        self.params = params
        super().__init__(message)


def empty_id_error() -> ValidationError:
    return ValidationError("id", "empty", "can't be empty")
