from __future__ import annotations

import threading

from antiptrn_core.errors import InvalidStoredValue


class MemoryCounterStore:
    """In-process counter store for local development and tests."""

    provider_name = "memory"

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()

    async def get(self, key: str) -> str | None:
        with self._lock:
            return self._values.get(key)

    async def incr(self, key: str) -> int:
        with self._lock:
            raw = self._values.get(key) or "0"
            try:
                value = int(raw) + 1
            except ValueError as exc:
                # Same refusal Redis gives for INCR on a non-integer.
                raise InvalidStoredValue(key, raw) from exc
            self._values[key] = str(value)
            return value

    async def ping(self) -> bool:
        return True
