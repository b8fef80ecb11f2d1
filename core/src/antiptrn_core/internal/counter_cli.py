from __future__ import annotations

import argparse
import asyncio
import json
import os

from antiptrn_core.config import load_core_config
from antiptrn_core.counter import CounterService
from antiptrn_core.errors import CounterError, StoreNotConfigured
from antiptrn_core.store import build_counter_store


async def _run(service: CounterService, command: str) -> dict[str, object]:
    if command == "get":
        return {"count": await service.get_count()}
    if command == "incr":
        return {"count": await service.increment()}
    if command == "ping":
        return {"ok": await service.store.ping()}
    raise ValueError(f"Unknown command: {command}")


def main(argv: list[str] | None = None, *, service: CounterService | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="python -m antiptrn_core.internal.counter_cli",
        description="Read or bump the install counter directly against the store (no API).",
    )
    parser.add_argument("command", choices=("get", "incr", "ping"))
    parser.add_argument("--url", default=None, help="Override REDIS_URL")
    parser.add_argument("--key", default=None, help="Override the counter key")
    args = parser.parse_args(argv)

    if service is None:
        environ = None
        if args.url is not None:
            environ = {**os.environ, "REDIS_URL": args.url}

        config = load_core_config(environ)
        try:
            store = build_counter_store(config)
        except StoreNotConfigured as exc:
            parser.error(str(exc))
        service = CounterService(store, key=args.key or config.store.counter_key)

    try:
        result = asyncio.run(_run(service, args.command))
    except CounterError as exc:
        print(json.dumps({"error": type(exc).__name__, "message": str(exc)}))
        return 1

    print(json.dumps(result))
    if args.command == "ping" and not result["ok"]:
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
