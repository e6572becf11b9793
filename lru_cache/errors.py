"""Exception hierarchy for the LRU cache.

A missing key is never an error: lookups return ``None`` instead. The
exceptions below cover the failure modes that callers may need to tell apart
(timeouts on the serialized write path, bad configuration, unknown cache
names) and all share :class:`CacheError` as a common base.
"""

from __future__ import annotations

from typing import Optional


class CacheError(Exception):
    """Base class for all cache errors."""


class CacheTimeoutError(CacheError, TimeoutError):
    """A mutating call could not acquire the cache within its timeout.

    No state change happens when this is raised; the request is abandoned,
    so callers may retry or treat it as a transient failure.
    """

    def __init__(self, cache_name: str, operation: str, timeout: Optional[float]):
        self.cache_name = cache_name
        self.operation = operation
        self.timeout = timeout
        super().__init__(
            f"Cache '{cache_name}' did not accept '{operation}' within {timeout}s"
        )


class CacheConfigError(CacheError, ValueError):
    """Invalid cache configuration (bad capacity, bad timeout, duplicate name)."""


class CacheValueError(CacheError, ValueError):
    """A value that cannot be stored (``None`` is reserved for "absent")."""


class CacheNotFoundError(CacheError, KeyError):
    """No cache is registered under the requested name."""

    def __str__(self) -> str:  # KeyError quotes its argument otherwise
        return str(self.args[0]) if self.args else ""


class CacheInvariantError(CacheError):
    """The value and recency indices disagree, or the capacity bound is broken."""


__all__ = [
    "CacheError",
    "CacheTimeoutError",
    "CacheConfigError",
    "CacheValueError",
    "CacheNotFoundError",
    "CacheInvariantError",
]
