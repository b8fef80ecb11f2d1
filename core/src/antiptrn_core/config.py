from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

CONFIG_PATH_ENV = "ANTIPTRN_CONFIG"
STORE_URL_ENV = "REDIS_URL"
BIND_ENV = "ANTIPTRN_BIND"
PORT_ENV = "ANTIPTRN_PORT"


class StoreConfig(BaseModel):
    url: str | None = Field(
        default=None,
        description=(
            "Counter store URL: redis://, rediss:// or unix:// for Redis, memory:// for an "
            "in-process store. Overridden by REDIS_URL."
        ),
    )
    counter_key: str = Field(default="installs", min_length=1)
    connect_timeout_s: float = Field(default=2.0, gt=0)
    socket_timeout_s: float = Field(default=2.0, gt=0)


class NetworkConfig(BaseModel):
    bind_host: str = Field(default="127.0.0.1")
    port: int = Field(default=8000, ge=1, le=65535)


class LoggingConfig(BaseModel):
    level: str = Field(default="INFO")
    file: str | None = Field(
        default=None, description="Optional log file; rotated when set."
    )
    max_size_mb: int = Field(
        default=10, ge=1, description="Max size of a log file in MB before rolling."
    )
    backup_count: int = Field(default=5, ge=1, description="Number of log archives to keep.")


class CoreConfig(BaseModel):
    store: StoreConfig = Field(default_factory=StoreConfig)
    network: NetworkConfig = Field(default_factory=NetworkConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def _read_json(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def load_core_config(environ: dict[str, str] | None = None) -> CoreConfig:
    """Load config from the JSON file named by ANTIPTRN_CONFIG, then apply env overrides.

    - If no file is named (or it is missing): starts from defaults.
    - REDIS_URL replaces store.url when non-empty.
    - Validation is performed by Pydantic.
    """

    env = os.environ if environ is None else environ

    raw: dict[str, Any] = {}
    config_path = (env.get(CONFIG_PATH_ENV) or "").strip()
    if config_path:
        path = Path(config_path).expanduser()
        if path.exists():
            raw = _read_json(path)

    config = CoreConfig.model_validate(raw)

    store_url = (env.get(STORE_URL_ENV) or "").strip()
    if store_url:
        updated_store = config.store.model_copy(update={"url": store_url})
        config = config.model_copy(update={"store": updated_store})

    return config


def resolve_bind(config: CoreConfig, environ: dict[str, str] | None = None) -> tuple[str, int]:
    """Return (host, port) for the server, letting ANTIPTRN_BIND/ANTIPTRN_PORT win."""

    env = os.environ if environ is None else environ

    host = env.get(BIND_ENV) or config.network.bind_host

    env_port = env.get(PORT_ENV)
    port = int(env_port) if env_port else config.network.port
    return host, port
