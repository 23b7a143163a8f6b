"""
Pytest configuration and fixtures
"""
import re
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from expenses.dependencies import get_repository
from expenses.ids import IdGenerator
from expenses.repository import ExpenseRepository

FIXED_NOW = datetime(2024, 5, 17, 12, 30, 0, tzinfo=timezone.utc)


def _column_list(text: str) -> list[str]:
    return [part.strip().strip('"') for part in text.split(",")]


class FakeStore:
    """
    In-memory stand-in for an asyncpg pool.

    Understands exactly the statement shapes produced by `expenses.queries`
    and records every call for assertions.
    """

    def __init__(self):
        self.table: dict[str, dict] = {}
        self.calls: list[tuple[str, str, tuple]] = []
        self.timeouts: list = []
        self.fail_with: Exception | None = None

    def _record(self, kind, query, args, timeout):
        self.calls.append((kind, query, args))
        self.timeouts.append(timeout)
        if self.fail_with is not None:
            raise self.fail_with

    async def execute(self, query, *args, timeout=None):
        self._record("execute", query, args, timeout)
        if query.startswith("INSERT"):
            columns = _column_list(re.search(r"\((.*?)\) VALUES", query).group(1))
            record = dict(zip(columns, args))
            self.table[record["id"]] = record
            return "INSERT 0 1"
        if query.startswith("UPDATE"):
            assignments = re.search(r" SET (.*) WHERE ", query).group(1)
            columns = [part.split(" = ")[0].strip().strip('"') for part in assignments.split(", ")]
            target = self.table.get(args[-1])
            if target is None:
                return "UPDATE 0"
            target.update(zip(columns, args))
            return "UPDATE 1"
        if query.startswith("DELETE"):
            return "DELETE 1" if self.table.pop(args[0], None) is not None else "DELETE 0"
        raise AssertionError(f"unexpected statement: {query}")

    async def fetchrow(self, query, *args, timeout=None):
        self._record("fetchrow", query, args, timeout)
        columns = _column_list(re.search(r"SELECT (.*) FROM", query).group(1))
        record = self.table.get(args[0])
        if record is None:
            return None
        return {column: record.get(column) for column in columns}


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def ids() -> IdGenerator:
    return IdGenerator()


@pytest.fixture
def repo(store, ids) -> ExpenseRepository:
    return ExpenseRepository(store, ids, clock=lambda: FIXED_NOW)


@pytest.fixture
def client(repo):
    from main import app

    app.dependency_overrides[get_repository] = lambda: repo
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
