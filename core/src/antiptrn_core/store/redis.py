from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from typing import Any

import redis.asyncio as aioredis
from redis.exceptions import RedisError, ResponseError

from antiptrn_core.errors import InvalidStoredValue, StoreUnavailable

logger = logging.getLogger(__name__)

ClientFactory = Callable[[], Any]


class RedisCounterStore:
    """Redis-backed counter store.

    Every operation opens its own client and closes it before returning, whether the
    command succeeded or not. INCR provides the atomicity; nothing is locked here.
    """

    provider_name = "redis"

    def __init__(
        self,
        *,
        url: str,
        connect_timeout_s: float,
        socket_timeout_s: float,
        client_factory: ClientFactory | None = None,
    ) -> None:
        self._url = url
        self._connect_timeout_s = connect_timeout_s
        self._socket_timeout_s = socket_timeout_s
        self._client_factory = client_factory

    def _new_client(self):
        if self._client_factory is not None:
            return self._client_factory()

        return aioredis.from_url(
            self._url,
            socket_connect_timeout=self._connect_timeout_s,
            socket_timeout=self._socket_timeout_s,
        )

    @asynccontextmanager
    async def _connect(self) -> AsyncIterator[Any]:
        client = self._new_client()
        try:
            yield client
        finally:
            try:
                await client.aclose()
            except RedisError:
                logger.debug("Ignoring error while closing Redis client", exc_info=True)

    async def get(self, key: str) -> str | None:
        try:
            async with self._connect() as client:
                raw = await client.get(key)
        except RedisError as exc:
            raise StoreUnavailable(f"GET {key!r} failed: {exc}") from exc

        # Replies arrive as bytes; bad UTF-8 becomes U+FFFD and fails integer parsing later.
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8", errors="replace")
        return raw

    async def incr(self, key: str) -> int:
        try:
            async with self._connect() as client:
                value = await client.incr(key)
        except ResponseError as exc:
            # Redis refuses INCR on a value that does not parse as an integer.
            raise InvalidStoredValue(key, str(exc)) from exc
        except RedisError as exc:
            raise StoreUnavailable(f"INCR {key!r} failed: {exc}") from exc
        return int(value)

    async def ping(self) -> bool:
        try:
            async with self._connect() as client:
                return bool(await client.ping())
        except RedisError:
            logger.warning("Redis ping failed", exc_info=True)
            return False
