from __future__ import annotations

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from antiptrn_core.config import CoreConfig, load_core_config, resolve_bind
from antiptrn_core.errors import StoreNotConfigured
from antiptrn_core.store import MemoryCounterStore, RedisCounterStore, build_counter_store


def test_load_core_config_defaults_when_empty() -> None:
    cfg = load_core_config({})
    assert isinstance(cfg, CoreConfig)
    assert cfg.store.url is None
    assert cfg.store.counter_key == "installs"
    assert cfg.network.bind_host == "127.0.0.1"


def test_redis_url_env_overrides_file(tmp_path: Path) -> None:
    config_path = tmp_path / "antiptrn.json"
    config_path.write_text(
        json.dumps(
            {
                "store": {"url": "redis://file-host:6379/0", "counter_key": "beta"},
                "logging": {"level": "DEBUG"},
            }
        ),
        encoding="utf-8",
    )

    from_file = load_core_config({"ANTIPTRN_CONFIG": str(config_path)})
    assert from_file.store.url == "redis://file-host:6379/0"
    assert from_file.store.counter_key == "beta"
    assert from_file.logging.level == "DEBUG"

    overridden = load_core_config(
        {"ANTIPTRN_CONFIG": str(config_path), "REDIS_URL": "redis://env-host:6379/1"}
    )
    assert overridden.store.url == "redis://env-host:6379/1"
    assert overridden.store.counter_key == "beta"


def test_missing_config_file_falls_back_to_defaults(tmp_path: Path) -> None:
    cfg = load_core_config({"ANTIPTRN_CONFIG": str(tmp_path / "missing.json")})
    assert cfg == CoreConfig()


def test_load_core_config_validation_error(tmp_path: Path) -> None:
    config_path = tmp_path / "antiptrn.json"
    config_path.write_text(
        json.dumps({"store": {"socket_timeout_s": 0}}),
        encoding="utf-8",
    )

    with pytest.raises(ValidationError):
        load_core_config({"ANTIPTRN_CONFIG": str(config_path)})


def test_resolve_bind_env_wins() -> None:
    cfg = CoreConfig.model_validate({"network": {"bind_host": "0.0.0.0", "port": 9000}})
    assert resolve_bind(cfg, {}) == ("0.0.0.0", 9000)
    assert resolve_bind(cfg, {"ANTIPTRN_BIND": "::1", "ANTIPTRN_PORT": "8123"}) == ("::1", 8123)


def test_build_counter_store_by_scheme() -> None:
    redis_cfg = load_core_config({"REDIS_URL": "rediss://user:pw@cache.example:6380/0"})
    assert isinstance(build_counter_store(redis_cfg), RedisCounterStore)

    memory_cfg = load_core_config({"REDIS_URL": "memory://"})
    assert isinstance(build_counter_store(memory_cfg), MemoryCounterStore)

    with pytest.raises(StoreNotConfigured):
        build_counter_store(load_core_config({}))

    with pytest.raises(ValueError):
        build_counter_store(load_core_config({"REDIS_URL": "postgres://db/0"}))
