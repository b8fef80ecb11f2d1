from __future__ import annotations


class CounterError(Exception):
    """Base class for failures of the install counter."""


class StoreUnavailable(CounterError):
    """The counter store could not be reached or the command failed."""


class InvalidStoredValue(CounterError):
    """The stored counter value is not a non-negative integer."""

    def __init__(self, key: str, raw: object) -> None:
        super().__init__(f"Counter {key!r} holds a non-integer value: {raw!r}")
        self.key = key
        self.raw = raw


class StoreNotConfigured(RuntimeError):
    """No counter store URL was configured (set REDIS_URL)."""
