"""LRU cache controller.

:class:`LRUCache` owns a :class:`~lru_cache.cache.indices.ValueIndex` and a
:class:`~lru_cache.cache.indices.RecencyIndex` and is their only writer.
Every mutating call (``put``, touching ``get``, ``update``, ``delete``,
``resize``, ``clear``) runs under a per-instance lock acquired with a
timeout, and each ``put`` finishes with an eviction pass before the lock is
released. Non-touching reads go straight to the value index without taking
the lock.

Usage
-----
    cache = LRUCache(1000, evict_fn=lambda k, v: print(f"{k}={v} evicted"))
    cache.put("id", "value")
    cache.get("id", touch=False)  # -> "value"
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Hashable
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Optional

from ..errors import (
    CacheConfigError,
    CacheInvariantError,
    CacheTimeoutError,
    CacheValueError,
)
from .clock import RecencyClock
from .indices import RecencyIndex, ValueIndex
from .stats import CacheStats

logger = logging.getLogger(__name__)

EvictFn = Callable[[Any, Any], Any]
ComputeFn = Callable[[Any], Any]

DEFAULT_TIMEOUT_SECONDS = 5.0

_COUNTERS = ("hits", "misses", "puts", "updates", "deletes", "evictions")
_MISSING = object()


def _validate_size(size: Any) -> int:
    if isinstance(size, bool) or not isinstance(size, int) or size < 1:
        raise CacheConfigError(f"Cache size must be a positive integer, got {size!r}")
    return size


def _validate_timeout(timeout: Optional[float]) -> Optional[float]:
    if timeout is not None and timeout < 0:
        raise CacheConfigError(f"Timeout must be >= 0 or None, got {timeout!r}")
    return timeout


class LRUCache:  # pylint: disable=too-many-instance-attributes
    """
    Bounded key/value cache with least-recently-used eviction.

    Parameters
    ----------
    size : int
        Maximum number of entries (>= 1).
    evict_fn : callable, optional
        Called as ``evict_fn(key, value)`` for every entry dropped because
        the cache is over capacity. It runs synchronously while the cache
        lock is held, so it must be fast and must not call mutating methods
        of the same cache.
    name : str, optional
        Identifier used in logs, errors and the registry.
    timeout : float or None
        Default number of seconds a mutating call waits for the lock.
        ``None`` waits forever. Individual calls may override it.

    Notes
    -----
    ``None`` is the "absent" result of every lookup and therefore cannot be
    stored as a value.
    """

    def __init__(
        self,
        size: int,
        evict_fn: Optional[EvictFn] = None,
        name: Optional[str] = None,
        timeout: Optional[float] = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        if evict_fn is not None and not callable(evict_fn):
            raise CacheConfigError("evict_fn must be callable")
        self._size = _validate_size(size)
        self.timeout = _validate_timeout(timeout)
        self.name = name or f"lru-{id(self):x}"
        self._evict_fn = evict_fn
        self._values = ValueIndex()
        self._recency = RecencyIndex()
        self._clock = RecencyClock()
        self._lock = threading.Lock()
        self._counters: Dict[str, int] = dict.fromkeys(_COUNTERS, 0)
        self._counters_lock = threading.Lock()
        logger.info(
            "lru_cache.created",
            extra={
                "cache": self.name,
                "size": self._size,
                "evict_fn": evict_fn is not None,
            },
        )

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def size(self) -> int:
        """Configured capacity."""
        return self._size

    @property
    def evict_fn(self) -> Optional[EvictFn]:
        return self._evict_fn

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    def put(self, key: Hashable, value: Any, timeout: Optional[float] = None) -> bool:
        """Store ``value`` under ``key``, making it the most recently used.

        An existing value is replaced. If the insert pushes the cache over
        capacity the least recently used entry is evicted (and ``evict_fn``
        called) before this returns.

        Raises
        ------
        CacheTimeoutError
            If the cache lock was not acquired in time; nothing is stored.
        CacheValueError
            If ``value`` is None.
        Exception
            Whatever ``evict_fn`` raised. The entry is evicted regardless.
        """
        self._check_value(value)
        with self._serialized("put", timeout):
            self._insert(key, value)
            self._count("puts")
            self._clean_oversize()
        return True

    def get(
        self,
        key: Hashable,
        touch: bool = True,
        timeout: Optional[float] = None,
        on_miss: Optional[ComputeFn] = None,
    ) -> Any:
        """Return the value for ``key`` or None.

        With ``touch`` the key becomes the most recently used (this takes the
        cache lock). Without it the call is a plain lock-free read.

        On a miss, ``on_miss(key)`` is called when given; a non-None result
        is stored with ``put`` and returned, a None result is returned
        without storing anything.
        """
        entry = self._values.lookup(key)
        if entry is None:
            self._count("misses")
            if on_miss is None:
                return None
            return self._fill(key, on_miss, timeout)

        self._count("hits")
        if touch:
            with self._serialized("touch", timeout):
                self._touch(key)
        return entry.value

    def update(
        self,
        key: Hashable,
        value: Any,
        touch: bool = True,
        timeout: Optional[float] = None,
    ) -> bool:
        """Replace the value of an existing ``key``.

        Unlike :meth:`put` this never inserts: for an absent key nothing
        happens and True is still returned, so callers that expect upsert
        behaviour must use ``put`` instead. The entry's position in the
        recency order only changes when ``touch`` is set.
        """
        self._check_value(value)
        with self._serialized("update", timeout):
            if self._values.replace_value(key, value):
                self._count("updates")
                if touch:
                    self._touch(key)
        return True

    def delete(self, key: Hashable, timeout: Optional[float] = None) -> bool:
        """Remove ``key`` if present. Never calls ``evict_fn``."""
        with self._serialized("delete", timeout):
            entry = self._values.remove(key)
            if entry is not None:
                self._recency.remove(entry.token)
                self._count("deletes")
        return True

    def yield_(
        self, key: Hashable, compute: ComputeFn, timeout: Optional[float] = None
    ) -> Any:
        """Get-or-compute.

        Returns the stored value untouched when ``key`` is present, without
        calling ``compute``. Otherwise stores and returns ``compute(key)``,
        unless it returned None. Two callers filling the same key at once may
        both compute; the later ``put`` wins.
        """
        return self.get(key, touch=False, timeout=timeout, on_miss=compute)

    def peek(self, key: Hashable) -> Any:
        """Lock-free read that leaves the recency order alone."""
        return self.get(key, touch=False)

    def resize(self, size: int, timeout: Optional[float] = None) -> int:
        """Change the capacity, evicting oldest entries if it shrank.

        Returns the number of entries evicted.
        """
        size = _validate_size(size)
        with self._serialized("resize", timeout):
            old_size, self._size = self._size, size
            logger.info(
                "lru_cache.resized",
                extra={"cache": self.name, "old_size": old_size, "size": size},
            )
            return self._clean_oversize()

    def clear(self, timeout: Optional[float] = None) -> None:
        """Drop every entry without calling ``evict_fn``."""
        with self._serialized("clear", timeout):
            self._recency.clear()
            self._values.clear()

    def keys(self, timeout: Optional[float] = None) -> List[Hashable]:
        """Keys ordered from least to most recently used."""
        with self._serialized("keys", timeout):
            return list(self._recency)

    def stats(self) -> CacheStats:
        with self._counters_lock:
            counters = dict(self._counters)
        return CacheStats(currsize=len(self._values), maxsize=self._size, **counters)

    def check_invariants(self, timeout: Optional[float] = None) -> None:
        """Verify both indices agree and the capacity bound holds.

        Raises
        ------
        CacheInvariantError
            On the first inconsistency found.
        """
        with self._serialized("check_invariants", timeout):
            values = self._values.items()
            order = self._recency.items()
            if len(values) != len(order):
                raise CacheInvariantError(
                    f"Index sizes differ: {len(values)} values, {len(order)} tokens"
                )
            if len(values) > self._size:
                raise CacheInvariantError(
                    f"Cache holds {len(values)} entries, capacity is {self._size}"
                )
            by_token = dict(order)
            for key, entry in values:
                if by_token.get(entry.token, _MISSING) != key:
                    raise CacheInvariantError(
                        f"Key {key!r} has token {entry.token} "
                        "with no matching recency entry"
                    )

    # ------------------------------------------------------------------
    # Mapping protocol
    # ------------------------------------------------------------------

    def __getitem__(self, key: Hashable) -> Any:
        value = self.get(key)
        if value is None:
            raise KeyError(key)
        return value

    def __setitem__(self, key: Hashable, value: Any) -> None:
        self.put(key, value)

    def __delitem__(self, key: Hashable) -> None:
        if key not in self._values:
            raise KeyError(key)
        self.delete(key)

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[Hashable]:
        return iter(self.keys())

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(name={self.name!r}, "
            f"size={self._size}, currsize={len(self._values)})"
        )

    # ------------------------------------------------------------------
    # Internals (callers must hold the lock unless noted)
    # ------------------------------------------------------------------

    @contextmanager
    def _serialized(self, operation: str, timeout: Optional[float]) -> Iterator[None]:
        """Hold the cache lock for the duration of a mutating operation."""
        wait = self.timeout if timeout is None else _validate_timeout(timeout)
        if wait is None:
            acquired = self._lock.acquire()
        else:
            acquired = self._lock.acquire(timeout=wait)
        if not acquired:
            logger.warning(
                "lru_cache.timeout",
                extra={"cache": self.name, "operation": operation, "timeout": wait},
            )
            raise CacheTimeoutError(self.name, operation, wait)
        try:
            yield
        finally:
            self._lock.release()

    def _insert(self, key: Hashable, value: Any) -> None:
        old = self._values.lookup(key)
        if old is not None:
            self._recency.remove(old.token)
        token = self._clock.mint()
        self._recency.insert(token, key)
        self._values.store(key, token, value)

    def _touch(self, key: Hashable) -> bool:
        # The key may have been deleted between a lock-free lookup and here.
        entry = self._values.lookup(key)
        if entry is None:
            return False
        token = self._clock.mint()
        self._recency.remove(entry.token)
        self._recency.insert(token, key)
        self._values.retoken(key, token)
        return True

    def _clean_oversize(self) -> int:
        """Evict oldest entries until the capacity bound holds.

        A failing ``evict_fn`` does not stop the pass: the entry is removed
        anyway, eviction continues, and the first error is re-raised once
        the cache is back within bounds. This includes ``KeyboardInterrupt``
        and ``SystemExit``, which are deferred until the pass completes.
        """
        evicted = 0
        first_error: Optional[BaseException] = None
        while len(self._values) > self._size:
            oldest = self._recency.oldest()
            if oldest is None:
                raise CacheInvariantError(
                    f"Cache '{self.name}' is over capacity with an empty recency index"
                )
            token, key = oldest
            self._recency.remove(token)
            entry = self._values.lookup(key)
            try:
                if self._evict_fn is not None and entry is not None:
                    self._evict_fn(key, entry.value)
            except BaseException as exc:  # pylint: disable=broad-exception-caught
                logger.warning(
                    "lru_cache.evict_fn_failed",
                    extra={"cache": self.name, "key": repr(key), "error": str(exc)},
                )
                if first_error is None:
                    first_error = exc
            finally:
                self._values.remove(key)
            evicted += 1
            self._count("evictions")
            logger.debug(
                "lru_cache.evicted",
                extra={"cache": self.name, "key": repr(key)},
            )
        if first_error is not None:
            raise first_error
        return evicted

    def _fill(self, key: Hashable, compute: ComputeFn, timeout: Optional[float]) -> Any:
        # Runs without the lock: compute may be slow or reenter the cache.
        value = compute(key)
        if value is None:
            return None
        self.put(key, value, timeout)
        return value

    def _count(self, counter: str) -> None:
        with self._counters_lock:
            self._counters[counter] += 1

    @staticmethod
    def _check_value(value: Any) -> None:
        if value is None:
            raise CacheValueError("None is reserved for absent keys and cannot be stored")
