"""Config models and loader.

This module defines Pydantic models for file- and environment-based cache
configuration. JSON parsing prefers `orjson` when available and falls back
to the Python standard library's `json` module otherwise.
"""

from __future__ import annotations

import json as _json
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

try:
    import orjson as _orjson_mod  # type: ignore[assignment]
except ImportError:  # pragma: no cover - optional dependency
    _orjson_mod = None  # type: ignore[assignment]
    _loads_orjson: Optional[Callable[[bytes], Any]] = None
else:

    def _loads_orjson(buf: bytes) -> Any:
        loader = getattr(_orjson_mod, "loads")  # type: ignore[assignment]
        return loader(buf)


from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..cache import DEFAULT_TIMEOUT_SECONDS, EvictFn, LRUCache
from ..observability import setup_logging
from ..registry import create as _create_registered


class CacheConfig(BaseModel):
    """Configuration for a single cache instance.

    Attributes
    ----------
    name: Optional[str]
        Registry name. Unnamed caches are built but not registered.
    size: int
        Maximum number of entries; must be at least 1.
    timeout_seconds: Optional[float]
        Default wait for the cache lock on mutating calls. ``None`` waits
        forever.
    """

    name: Optional[str] = Field(None, description="Registry name for the cache")
    size: int = Field(..., ge=1, description="Maximum number of entries")
    timeout_seconds: Optional[float] = Field(
        DEFAULT_TIMEOUT_SECONDS,
        gt=0,
        description="Seconds a mutating call waits for the cache lock",
    )


class CachesFileConfig(BaseModel):
    """Top-level file configuration: a list of caches to create at startup."""

    caches: List[CacheConfig] = Field(default_factory=list)

    @staticmethod
    def load(path: Path) -> "CachesFileConfig":
        """Load cache definitions from a JSON file."""
        raw = path.read_bytes()
        if _loads_orjson is not None:
            data = _loads_orjson(raw)
        else:
            data = _json.loads(raw.decode("utf-8"))
        return CachesFileConfig.model_validate(data)


class CacheSettings(BaseSettings):
    """Environment-driven settings and .env support.

    Attributes
    ----------
    log_level: str
        Logging level name (e.g., "DEBUG", "INFO"). Defaults to "INFO".
    default_size: int
        Capacity used when a caller does not pass one. Defaults to 1024.
    default_timeout_seconds: float
        Lock wait used when a caller does not pass one. Defaults to 5.0.
    """

    model_config = SettingsConfigDict(env_file=".env", env_prefix="LRU_CACHE_")

    log_level: str = Field("INFO")
    default_size: int = Field(1024, ge=1)
    default_timeout_seconds: float = Field(DEFAULT_TIMEOUT_SECONDS, gt=0)

    def configure_logging(self, debug_evictions: bool = False) -> None:
        """Apply ``log_level`` to the root and ``lru_cache`` loggers."""
        setup_logging(self.log_level, debug_evictions=debug_evictions)

    def cache_config(self, name: Optional[str] = None) -> CacheConfig:
        """Build a :class:`CacheConfig` from these defaults."""
        return CacheConfig(
            name=name,
            size=self.default_size,
            timeout_seconds=self.default_timeout_seconds,
        )


def create_from_config(
    config: CacheConfig, evict_fn: Optional[EvictFn] = None
) -> LRUCache:
    """Build a cache from ``config``, registering it when it has a name."""
    if config.name is None:
        return LRUCache(
            config.size, evict_fn=evict_fn, timeout=config.timeout_seconds
        )
    return _create_registered(
        config.name, config.size, evict_fn=evict_fn, timeout=config.timeout_seconds
    )


def create_all(
    config: CachesFileConfig, evict_fns: Optional[Dict[str, EvictFn]] = None
) -> List[LRUCache]:
    """Create every cache listed in ``config``.

    ``evict_fns`` maps cache names to their eviction callbacks.
    """
    evict_fns = evict_fns or {}
    return [
        create_from_config(c, evict_fn=evict_fns.get(c.name or ""))
        for c in config.caches
    ]
