from __future__ import annotations

import logging

from antiptrn_core.errors import CounterError, InvalidStoredValue
from antiptrn_core.store.base import CounterStore

logger = logging.getLogger(__name__)

DEFAULT_COUNTER_KEY = "installs"


def parse_count(key: str, raw: str | bytes | None) -> int:
    """Interpret a stored counter value.

    - Absent (None) or empty: 0.
    - Anything other than a base-10 non-negative integer: InvalidStoredValue.
    """

    if raw is None:
        return 0
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8", errors="replace")

    text = raw.strip()
    if not text:
        return 0
    if not text.isascii() or not text.isdigit():
        raise InvalidStoredValue(key, raw)
    try:
        return int(text)
    except ValueError as exc:
        # Digit strings past the interpreter's int conversion limit.
        raise InvalidStoredValue(key, raw) from exc


class CounterService:
    """Install counter operations on top of a CounterStore."""

    def __init__(self, store: CounterStore, *, key: str = DEFAULT_COUNTER_KEY) -> None:
        self._store = store
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    @property
    def store(self) -> CounterStore:
        return self._store

    async def get_count(self) -> int:
        raw = await self._store.get(self._key)
        return parse_count(self._key, raw)

    async def increment(self) -> int:
        """Record one install. Not idempotent: every call adds one."""

        value = await self._store.incr(self._key)
        if value < 0:
            raise InvalidStoredValue(self._key, value)
        logger.info("Counter %s incremented to %d", self._key, value)
        return value

    async def display_count(self) -> int:
        """Count for display: store failures read as 0 instead of raising."""

        try:
            return await self.get_count()
        except CounterError as exc:
            logger.warning("Reading counter %s failed, showing 0: %s", self._key, exc)
            return 0
