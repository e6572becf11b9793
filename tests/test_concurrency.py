"""
Tests for serialized mutations, lock timeouts and lock-free reads.
"""

import threading

import pytest

from lru_cache import CacheTimeoutError, LRUCache


def _blocked_cache():
    """Cache whose next eviction blocks inside the lock until released."""
    entered = threading.Event()
    release = threading.Event()

    def slow_evict(key, value):
        entered.set()
        release.wait(5)

    cache = LRUCache(1, evict_fn=slow_evict, timeout=5)
    cache.put("a", 1)
    writer = threading.Thread(target=cache.put, args=("b", 2))
    writer.start()
    assert entered.wait(5)
    return cache, release, writer


def test_mutation_times_out_without_side_effects():
    cache, release, writer = _blocked_cache()
    try:
        with pytest.raises(CacheTimeoutError) as exc_info:
            cache.put("c", 3, timeout=0.05)
        assert exc_info.value.operation == "put"
        assert exc_info.value.timeout == 0.05
        with pytest.raises(CacheTimeoutError):
            cache.delete("b", timeout=0.05)
        with pytest.raises(CacheTimeoutError):
            cache.update("b", 20, timeout=0.05)
    finally:
        release.set()
        writer.join(5)

    assert cache.keys() == ["b"]
    assert cache.get("b", touch=False) == 2
    assert "c" not in cache
    cache.check_invariants()


def test_touching_get_times_out_but_plain_read_does_not():
    cache, release, writer = _blocked_cache()
    try:
        assert cache.get("b", touch=False) == 2
        assert "b" in cache
        with pytest.raises(CacheTimeoutError):
            cache.get("b", timeout=0.05)
    finally:
        release.set()
        writer.join(5)


def test_timeout_error_is_a_builtin_timeout():
    cache, release, writer = _blocked_cache()
    try:
        with pytest.raises(TimeoutError):
            cache.delete("a", timeout=0)
    finally:
        release.set()
        writer.join(5)


def test_concurrent_writers_respect_capacity(evictions):
    cache = LRUCache(50, evict_fn=evictions)
    threads = 8
    per_thread = 500
    barrier = threading.Barrier(threads)

    def writer(tid):
        barrier.wait()
        for i in range(per_thread):
            cache.put((tid, i), i)
            cache.get((tid, i // 2))

    workers = [threading.Thread(target=writer, args=(t,)) for t in range(threads)]
    for w in workers:
        w.start()
    for w in workers:
        w.join()

    assert len(cache) == 50
    cache.check_invariants()
    stats = cache.stats()
    assert stats.puts == threads * per_thread
    assert stats.evictions == len(evictions) == threads * per_thread - 50
    assert len(set(k for k, _ in evictions)) == len(evictions)


def test_concurrent_yield_fills_are_last_write_wins():
    cache = LRUCache(10)
    barrier = threading.Barrier(4)
    results = []

    def filler(n):
        barrier.wait()
        results.append(cache.yield_("shared", lambda key: n))

    workers = [threading.Thread(target=filler, args=(n,)) for n in range(1, 5)]
    for w in workers:
        w.start()
    for w in workers:
        w.join()

    assert len(cache) == 1
    assert cache.get("shared", touch=False) in {1, 2, 3, 4}
    cache.check_invariants()


def test_readers_never_see_torn_entries():
    cache = LRUCache(4)
    stop = threading.Event()
    bad = []

    def writer():
        i = 0
        while not stop.is_set():
            cache.put(i % 8, (i % 8, i))
            i += 1

    def reader():
        while not stop.is_set():
            for key in range(8):
                value = cache.get(key, touch=False)
                if value is not None and value[0] != key:
                    bad.append((key, value))

    workers = [threading.Thread(target=writer)] + [
        threading.Thread(target=reader) for _ in range(3)
    ]
    for w in workers:
        w.start()
    stop.wait(0.3)
    stop.set()
    for w in workers:
        w.join()

    assert bad == []
    cache.check_invariants()
