"""
LRU cache package.

This package hosts a bounded, thread-safe key/value cache with
least-recently-used eviction, a named-instance registry, a functional API
over both, and supporting configuration and logging utilities.
"""

from .__version__ import __version__
from .cache import CacheStats, LRUCache
from .errors import (
    CacheConfigError,
    CacheError,
    CacheInvariantError,
    CacheNotFoundError,
    CacheTimeoutError,
    CacheValueError,
)

__all__ = [
    "__version__",
    "LRUCache",
    "CacheStats",
    "CacheError",
    "CacheTimeoutError",
    "CacheConfigError",
    "CacheValueError",
    "CacheNotFoundError",
    "CacheInvariantError",
]
