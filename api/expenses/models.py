"""
Expense domain types.

`None` on an Expense field means "not provided": such fields are left out of
writes and omitted from the wire form. An explicit 0 or "" is a real value.
"""

from __future__ import annotations

import enum
import re
from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import datetime

from .errors import ValidationError


@dataclass
class Expense:
    id: str = ""
    amount: int | None = None  # minor units (cents)
    when: datetime | None = None
    where: str | None = None
    who: str | None = None
    what: str | None = None


def _clean_tag(tag: str, previous: ValidationError | None) -> str:
    tag = tag.strip(" ")
    if not tag:
        raise ValidationError("tag", "no_empty", "can't be empty", cause=previous)
    if " " in tag:
        raise ValidationError("tag", "no_space", "can't have spaces", cause=previous)
    return tag


class Tags:
    """
    Ordered set of labels. Tags are trimmed, must be non-empty and may not
    contain spaces.

    `add`/`set` keep every valid tag and then raise one ValidationError
    chaining all rejected ones (see `errors.unwrap_field_errors`).
    """

    def __init__(self, *tags: str) -> None:
        self._values: list[str] = []
        self.set(*tags)

    def add(self, *tags: str) -> None:
        err: ValidationError | None = None
        for tag in tags:
            try:
                tag = _clean_tag(tag, err)
            except ValidationError as exc:
                err = exc
                continue
            if tag not in self._values:
                self._values.append(tag)
        if err is not None:
            raise err

    def remove(self, *tags: str) -> None:
        self._values = [value for value in self._values if value not in tags]

    def set(self, *tags: str) -> None:
        self._values = []
        self.add(*tags)

    def index(self, tag: str) -> int:
        return self._values.index(tag) if tag in self._values else -1

    @property
    def values(self) -> tuple[str, ...]:
        return tuple(self._values)

    def __contains__(self, tag: object) -> bool:
        return tag in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Tags):
            return NotImplemented
        return self._values == other._values

    def __repr__(self) -> str:
        return f"Tags({', '.join(repr(v) for v in self._values)})"

    def __str__(self) -> str:
        return f"[{' '.join(self._values)}]"


class OpFilterType(enum.Enum):
    EQ = "eq"
    LT = "lt"
    GT = "gt"
    LE = "le"
    GE = "ge"


class StrFilterType(enum.Enum):
    EQUALS = "equals"
    REGEX = "regex"


@dataclass(frozen=True)
class IntFilter:
    op: OpFilterType
    value: int


@dataclass(frozen=True)
class TimeFilter:
    op: OpFilterType
    value: datetime


@dataclass(frozen=True)
class StrFilter:
    op: StrFilterType
    value: str

    def __post_init__(self) -> None:
        if self.op is StrFilterType.REGEX:
            try:
                re.compile(self.value)
            except re.error as exc:
                raise ValueError(f"invalid regex {self.value!r}: {exc}") from exc


@dataclass
class ExpenseFilter:
    """
    Search predicates. Lists are AND-ed; an empty filter matches everything.

    There is no query-building counterpart yet (see `ExpenseRepository.search`).
    """

    amount: list[IntFilter] = field(default_factory=list)
    when: list[TimeFilter] = field(default_factory=list)
    what: list[StrFilter] = field(default_factory=list)
    tag: list[StrFilter] = field(default_factory=list)
    category: list[StrFilter] = field(default_factory=list)
    payment_method: list[StrFilter] = field(default_factory=list)
    created_at: list[TimeFilter] = field(default_factory=list)
    updated_at: list[TimeFilter] = field(default_factory=list)

