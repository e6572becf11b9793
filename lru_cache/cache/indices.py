"""The two indices behind an LRU cache.

``ValueIndex`` maps key -> :class:`Entry` (recency token plus value) and is
the only structure touched by lock-free readers. ``RecencyIndex`` maps
token -> key in ascending token order and exists solely to find the least
recently used key without scanning the values.

Neither class locks anything; the owning :class:`~lru_cache.cache.LRUCache`
serializes every mutation.
"""

from __future__ import annotations

from collections import OrderedDict
from collections.abc import Hashable
from typing import Any, Dict, Iterator, List, NamedTuple, Optional, Tuple

from ..errors import CacheInvariantError


class Entry(NamedTuple):
    """Immutable value record.

    Entries are replaced wholesale, never mutated, so a reader that fetched
    one always sees a matching token and value.
    """

    token: int
    value: Any


class ValueIndex:
    """key -> Entry mapping, safe for concurrent single-key lookups."""

    def __init__(self) -> None:
        self._entries: Dict[Hashable, Entry] = {}

    def lookup(self, key: Hashable) -> Optional[Entry]:
        return self._entries.get(key)

    def store(self, key: Hashable, token: int, value: Any) -> None:
        self._entries[key] = Entry(token, value)

    def replace_value(self, key: Hashable, value: Any) -> bool:
        """Swap the value of an existing key, keeping its token.

        Returns False (and stores nothing) when the key is absent.
        """
        entry = self._entries.get(key)
        if entry is None:
            return False
        self._entries[key] = entry._replace(value=value)
        return True

    def retoken(self, key: Hashable, token: int) -> Optional[int]:
        """Stamp an existing key with a new token; return the old one."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        self._entries[key] = entry._replace(token=token)
        return entry.token

    def remove(self, key: Hashable) -> Optional[Entry]:
        return self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def items(self) -> List[Tuple[Hashable, Entry]]:
        """Snapshot of all (key, entry) pairs."""
        return list(self._entries.items())

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)


class RecencyIndex:
    """token -> key mapping kept in ascending token order.

    Tokens come from a monotonic clock and are inserted under the owner's
    lock, so appending preserves the order and the first item is always the
    oldest. Inserting a token that is not greater than every token seen so
    far is rejected.
    """

    def __init__(self) -> None:
        self._order: "OrderedDict[int, Hashable]" = OrderedDict()
        self._high_water = 0

    def insert(self, token: int, key: Hashable) -> None:
        if token <= self._high_water:
            raise CacheInvariantError(
                f"Recency token {token} is not newer than {self._high_water}"
            )
        self._high_water = token
        self._order[token] = key

    def remove(self, token: int) -> Optional[Hashable]:
        return self._order.pop(token, None)

    def oldest(self) -> Optional[Tuple[int, Hashable]]:
        """Return the (token, key) pair with the smallest token, if any."""
        for token, key in self._order.items():
            return token, key
        return None

    def clear(self) -> None:
        self._order.clear()

    def items(self) -> List[Tuple[int, Hashable]]:
        """Snapshot of (token, key) pairs, oldest first."""
        return list(self._order.items())

    def __iter__(self) -> Iterator[Hashable]:
        """Iterate keys from least to most recently used."""
        return iter(list(self._order.values()))

    def __len__(self) -> int:
        return len(self._order)
