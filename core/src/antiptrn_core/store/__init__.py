from __future__ import annotations

from urllib.parse import urlparse

from antiptrn_core.config import CoreConfig
from antiptrn_core.errors import StoreNotConfigured
from antiptrn_core.store.base import CounterStore
from antiptrn_core.store.memory import MemoryCounterStore
from antiptrn_core.store.redis import RedisCounterStore

REDIS_SCHEMES = frozenset({"redis", "rediss", "unix"})
MEMORY_SCHEMES = frozenset({"memory"})


def build_counter_store(config: CoreConfig) -> CounterStore:
    """Pick a store provider from the configured URL scheme."""

    url = (config.store.url or "").strip()
    if not url:
        raise StoreNotConfigured("Counter store URL is not configured (set REDIS_URL)")

    scheme = urlparse(url).scheme.lower()
    if scheme in REDIS_SCHEMES:
        return RedisCounterStore(
            url=url,
            connect_timeout_s=config.store.connect_timeout_s,
            socket_timeout_s=config.store.socket_timeout_s,
        )
    if scheme in MEMORY_SCHEMES:
        return MemoryCounterStore()

    raise ValueError(f"Unsupported counter store scheme: {scheme or url!r}")


__all__ = [
    "CounterStore",
    "MemoryCounterStore",
    "RedisCounterStore",
    "build_counter_store",
]
