"""Functional cache API.

Every function takes either an :class:`~lru_cache.cache.LRUCache` handle or
the name it was registered under, so call sites can share a cache without
passing the object around::

    from lru_cache import api

    api.create("sessions", 1000)
    api.put("sessions", "id", "value")
    api.get("sessions", "id", touch=False)  # -> "value"
"""

from __future__ import annotations

from collections.abc import Hashable
from typing import Any, Optional, Union

from . import registry
from .cache import ComputeFn, EvictFn, LRUCache

CacheRef = Union[LRUCache, str]


def _resolve(cache: CacheRef) -> LRUCache:
    if isinstance(cache, LRUCache):
        return cache
    return registry.lookup(cache)


def create(name: str, size: int, evict_fn: Optional[EvictFn] = None) -> LRUCache:
    """Create an LRU cache of ``size`` entries registered as ``name``."""
    return registry.create(name, size, evict_fn=evict_fn)


def put(
    cache: CacheRef, key: Hashable, value: Any, timeout: Optional[float] = None
) -> bool:
    return _resolve(cache).put(key, value, timeout=timeout)


def get(
    cache: CacheRef,
    key: Hashable,
    touch: bool = True,
    timeout: Optional[float] = None,
    on_miss: Optional[ComputeFn] = None,
) -> Any:
    return _resolve(cache).get(key, touch=touch, timeout=timeout, on_miss=on_miss)


def update(
    cache: CacheRef,
    key: Hashable,
    value: Any,
    touch: bool = True,
    timeout: Optional[float] = None,
) -> bool:
    """Replace the value of an existing key; absent keys are left absent."""
    return _resolve(cache).update(key, value, touch=touch, timeout=timeout)


def delete(cache: CacheRef, key: Hashable, timeout: Optional[float] = None) -> bool:
    return _resolve(cache).delete(key, timeout=timeout)


def yield_(cache: CacheRef, key: Hashable, compute: ComputeFn) -> Any:
    """Return the cached value, computing and storing it on a miss."""
    return _resolve(cache).yield_(key, compute)
