"""Monotonic recency tokens.

Every insert or touch stamps the entry with a fresh token from a
:class:`RecencyClock`. Tokens are plain integers; only their order matters,
never their magnitude.
"""

from __future__ import annotations

import itertools
import threading


class RecencyClock:
    """Thread-safe, strictly increasing integer counter.

    ``mint`` is a fetch-and-increment: two threads minting at the same time
    always receive distinct tokens, and a mint that happens later receives a
    strictly greater one.
    """

    def __init__(self, start: int = 1) -> None:
        self._counter = itertools.count(start)
        self._lock = threading.Lock()

    def mint(self) -> int:
        """Return a token greater than every token minted before."""
        with self._lock:
            return next(self._counter)
