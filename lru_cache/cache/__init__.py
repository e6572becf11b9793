"""Cache engine: value/recency indices and the controller that owns them."""

from .clock import RecencyClock
from .controller import DEFAULT_TIMEOUT_SECONDS, ComputeFn, EvictFn, LRUCache
from .indices import Entry, RecencyIndex, ValueIndex
from .stats import CacheStats

__all__ = [
    "LRUCache",
    "CacheStats",
    "RecencyClock",
    "ValueIndex",
    "RecencyIndex",
    "Entry",
    "EvictFn",
    "ComputeFn",
    "DEFAULT_TIMEOUT_SECONDS",
]
