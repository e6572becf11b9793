"""Tests for cache configuration models and loaders."""

from __future__ import annotations

import json
import logging

import pytest
from pydantic import ValidationError

from lru_cache import CacheConfigError, LRUCache
from lru_cache.config.models import (
    CacheConfig,
    CacheSettings,
    CachesFileConfig,
    create_all,
    create_from_config,
)
from lru_cache.registry import lookup


def test_cache_config_rejects_zero_size():
    with pytest.raises(ValidationError):
        CacheConfig(size=0)


def test_cache_config_defaults():
    cfg = CacheConfig(size=3)
    assert cfg.name is None
    assert cfg.timeout_seconds == 5.0


def test_create_from_config_unnamed_is_not_registered():
    cache = create_from_config(CacheConfig(size=2, timeout_seconds=1.5))
    assert isinstance(cache, LRUCache)
    assert cache.size == 2
    assert cache.timeout == 1.5


def test_create_from_config_named_registers():
    cache = create_from_config(CacheConfig(name="users", size=4))
    assert lookup("users") is cache
    with pytest.raises(CacheConfigError):
        create_from_config(CacheConfig(name="users", size=4))


def test_load_file_and_create_all(tmp_path, evictions):
    path = tmp_path / "caches.json"
    path.write_text(
        json.dumps(
            {
                "caches": [
                    {"name": "small", "size": 1},
                    {"name": "large", "size": 100, "timeout_seconds": 0.5},
                ]
            }
        ),
        encoding="utf-8",
    )

    cfg = CachesFileConfig.load(path)
    small, large = create_all(cfg, evict_fns={"small": evictions})

    assert (small.size, large.size) == (1, 100)
    assert large.timeout == 0.5
    small.put("a", 1)
    small.put("b", 2)
    assert evictions == [("a", 1)]
    assert lookup("large") is large


def test_load_file_rejects_invalid_size(tmp_path):
    path = tmp_path / "caches.json"
    path.write_text(json.dumps({"caches": [{"size": 0}]}), encoding="utf-8")
    with pytest.raises(ValidationError):
        CachesFileConfig.load(path)


def test_env_settings(monkeypatch):
    monkeypatch.setenv("LRU_CACHE_DEFAULT_SIZE", "42")
    monkeypatch.setenv("LRU_CACHE_DEFAULT_TIMEOUT_SECONDS", "0.25")
    monkeypatch.setenv("LRU_CACHE_LOG_LEVEL", "DEBUG")

    settings = CacheSettings()
    assert settings.default_size == 42
    assert settings.log_level == "DEBUG"

    cfg = settings.cache_config(name="env")
    assert cfg.size == 42
    assert cfg.timeout_seconds == 0.25


def test_env_log_level_is_applied(monkeypatch):
    monkeypatch.setenv("LRU_CACHE_LOG_LEVEL", "DEBUG")

    CacheSettings().configure_logging()

    assert logging.getLogger("lru_cache").level == logging.DEBUG
    assert logging.getLogger("lru_cache.registry").isEnabledFor(logging.DEBUG)


def test_default_log_level_is_info(monkeypatch):
    monkeypatch.delenv("LRU_CACHE_LOG_LEVEL", raising=False)

    CacheSettings().configure_logging()

    assert logging.getLogger("lru_cache").level == logging.INFO
