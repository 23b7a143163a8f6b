"""
Expense route dependencies.
"""

from __future__ import annotations

from fastapi import Request

from core.middleware import remaining_seconds

from .repository import ExpenseRepository


def get_repository(request: Request) -> ExpenseRepository:
    repo = getattr(request.app.state, "expense_repository", None)
    if repo is None:
        raise RuntimeError("Expense repository is not initialized. Check the app lifespan.")
    return repo


def get_timeout(request: Request) -> float | None:
    return remaining_seconds(request)
