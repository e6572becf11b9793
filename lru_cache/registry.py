"""Named cache registry.

Caches are usually passed around as handles, but long-lived processes often
prefer to look a shared cache up by name. This module keeps a simple
in-memory name -> :class:`~lru_cache.cache.LRUCache` mapping for that.
"""

from __future__ import annotations

import logging
import threading
from typing import Dict, Iterable, Optional

from .cache import DEFAULT_TIMEOUT_SECONDS, EvictFn, LRUCache
from .errors import CacheConfigError, CacheNotFoundError

logger = logging.getLogger(__name__)

_registry: Dict[str, LRUCache] = {}
_registry_lock = threading.Lock()


def register(cache: LRUCache) -> LRUCache:
    """Register a cache under its ``name``.

    Raises
    ------
    CacheConfigError
        If another cache is already registered under the same name.
    """
    with _registry_lock:
        if cache.name in _registry:
            raise CacheConfigError(f"A cache named '{cache.name}' is already registered")
        _registry[cache.name] = cache
    logger.info("Registered cache: '%s' (size: %d)", cache.name, cache.size)
    return cache


def create(
    name: str,
    size: int,
    evict_fn: Optional[EvictFn] = None,
    timeout: Optional[float] = DEFAULT_TIMEOUT_SECONDS,
) -> LRUCache:
    """Create a cache and register it under ``name``.

    The name is checked before the cache is built, so a duplicate fails fast
    without creating anything.
    """
    if name in _registry:
        raise CacheConfigError(f"A cache named '{name}' is already registered")
    return register(LRUCache(size, evict_fn=evict_fn, name=name, timeout=timeout))


def lookup(name: str) -> LRUCache:
    """Retrieve a cache by ``name``.

    Raises
    ------
    CacheNotFoundError
        If no cache is registered under the given name.
    """
    try:
        return _registry[name]
    except KeyError:
        raise CacheNotFoundError(f"No cache registered under '{name}'") from None


def unregister(name: str) -> Optional[LRUCache]:
    """Drop ``name`` from the registry, returning the cache if it was there."""
    with _registry_lock:
        cache = _registry.pop(name, None)
    if cache is not None:
        logger.info("Unregistered cache: '%s'", name)
    return cache


def all_caches() -> Iterable[LRUCache]:
    """Iterate over a snapshot of the registered caches."""
    return list(_registry.values())


def log_registry_status() -> None:
    """Log the registered caches with their fill level."""
    if not _registry:
        logger.warning("No caches registered.")
        return
    cache_info = [f"'{c.name}' ({len(c)}/{c.size})" for c in all_caches()]
    logger.info(
        "Caches registered: %s\n  - Total caches: %d",
        ", ".join(cache_info),
        len(cache_info),
    )


def reset_registry() -> None:
    """Forget every registered cache. Useful for tests."""
    with _registry_lock:
        _registry.clear()
