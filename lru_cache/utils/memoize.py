"""Memoization on top of :class:`~lru_cache.cache.LRUCache`.

Call arguments are turned into cache keys with
:func:`cachetools.keys.hashkey`; results are read and filled through
:meth:`LRUCache.get` with an ``on_miss`` fill, so memoized results go through
the same ``put`` as any other entry. Eviction callbacks, lock timeouts and
stats apply unchanged, and errors raised by ``evict_fn`` reach the caller of
the memoized function.
"""

from __future__ import annotations

import functools
from typing import Any, Callable, Optional, TypeVar

from cachetools.keys import hashkey  # type: ignore[import-untyped]

from ..cache import EvictFn, LRUCache

F = TypeVar("F", bound=Callable[..., Any])


def memoize(
    cache: LRUCache, key: Callable[..., Any] = hashkey
) -> Callable[[F], F]:
    """Cache a function's results in ``cache``.

    Parameters
    ----------
    cache: LRUCache
        Store for results. May be shared with other callers.
    key: callable
        Builds the cache key from the call arguments. Defaults to
        :func:`cachetools.keys.hashkey`.

    Notes
    -----
    Results equal to None are returned but never stored, since None marks
    an absent key. The wrapper exposes ``cache``, ``cache_key`` and
    ``cache_clear()``.
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            return cache.get(
                key(*args, **kwargs), on_miss=lambda _k: func(*args, **kwargs)
            )

        wrapper.cache = cache  # type: ignore[attr-defined]
        wrapper.cache_key = key  # type: ignore[attr-defined]
        wrapper.cache_clear = cache.clear  # type: ignore[attr-defined]
        return wrapper  # type: ignore[return-value]

    return decorator


def lru_memoize(
    size: int = 1024,
    evict_fn: Optional[EvictFn] = None,
    key: Callable[..., Any] = hashkey,
) -> Callable[[F], F]:
    """Like :func:`memoize` with a private cache of ``size`` entries.

    The cache is exposed as the wrapper's ``cache`` attribute.
    """
    return memoize(LRUCache(size, evict_fn=evict_fn), key=key)
