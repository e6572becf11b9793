"""Usage counters for a cache instance."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict


@dataclass(frozen=True)
class CacheStats:
    """
    Point-in-time snapshot of cache activity.

    Attributes
    ----------
    hits : int
        Lookups that found the key
    misses : int
        Lookups that did not find the key (before any ``on_miss`` fill)
    puts : int
        Completed ``put`` calls, including fills from ``on_miss``/``yield_``
    updates : int
        ``update`` calls that found and replaced an existing value
    deletes : int
        ``delete`` calls that removed an existing key
    evictions : int
        Entries removed because the cache exceeded its capacity
    currsize : int
        Number of entries at snapshot time
    maxsize : int
        Configured capacity at snapshot time
    """

    hits: int = 0
    misses: int = 0
    puts: int = 0
    updates: int = 0
    deletes: int = 0
    evictions: int = 0
    currsize: int = 0
    maxsize: int = 0

    @property
    def lookups(self) -> int:
        return self.hits + self.misses

    @property
    def hit_rate(self) -> float:
        """Ratio of hits to lookups (0.0-1.0)."""
        if self.lookups == 0:
            return 0.0
        return self.hits / self.lookups

    def as_dict(self) -> Dict[str, float]:
        data: Dict[str, float] = dict(asdict(self))
        data["hit_rate"] = self.hit_rate
        return data
