"""
Expense identifiers: monotonic ULIDs.

Layout: 48-bit millisecond timestamp followed by 80 bits of randomness, written
as 26 Crockford base32 characters. Ids sort lexically by creation time.

Within the same millisecond (or when the clock steps backwards) the previous
randomness is incremented, so one generator never hands out a smaller or
repeated id. Running out of increments inside a millisecond is a hard failure.
"""

from __future__ import annotations

import secrets
import threading
import time
from typing import Callable

from ulid import ULID

from .errors import IdGenerationError

ID_LENGTH = 26

RANDOM_BITS = 80
RANDOM_BYTES = RANDOM_BITS // 8
MAX_TIMESTAMP = (1 << 48) - 1
MAX_RANDOM = (1 << RANDOM_BITS) - 1


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


def randomness(value: ULID) -> int:
    return int(value) & MAX_RANDOM


def parse_id(text: str) -> ULID:
    """
    Validate and decode an id. Case-insensitive; raises ValueError when malformed.
    """
    return ULID.from_str((text or "").strip().upper())


class IdGenerator:
    """
    Thread-safe monotonic id source. Create one per repository and share it.
    """

    def __init__(
        self,
        *,
        clock: Callable[[], int] | None = None,
        entropy: Callable[[int], bytes] | None = None,
    ) -> None:
        self._clock = clock or _now_ms
        self._entropy = entropy or secrets.token_bytes
        self._lock = threading.Lock()
        self._last_ms = -1
        self._last_random = 0

    def next(self) -> str:
        with self._lock:
            ms = int(self._clock())
            if ms < 0 or ms > MAX_TIMESTAMP:
                raise IdGenerationError(f"clock value {ms} is outside the id timestamp range")

            if ms <= self._last_ms:
                ms = self._last_ms
                random_part = self._last_random + 1
                if random_part > MAX_RANDOM:
                    raise IdGenerationError("id space exhausted for the current millisecond")
            else:
                raw = self._entropy(RANDOM_BYTES)
                if len(raw) != RANDOM_BYTES:
                    raise IdGenerationError(
                        f"entropy source returned {len(raw)} bytes, expected {RANDOM_BYTES}"
                    )
                random_part = int.from_bytes(raw, "big")

            self._last_ms = ms
            self._last_random = random_part
            return str(ULID.from_int((ms << RANDOM_BITS) | random_part))
