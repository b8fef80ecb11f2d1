from __future__ import annotations

from typing import Protocol


class CounterStore(Protocol):
    """Atomic key-value counter backend.

    Implementations own all counter state; callers hold nothing between requests.
    """

    provider_name: str

    async def get(self, key: str) -> str | None:
        """Return the raw stored value, or None when the key is absent."""
        ...

    async def incr(self, key: str) -> int:
        """Atomically add one to `key` (absent counts as 0) and return the new value."""
        ...

    async def ping(self) -> bool: ...
