"""
Tests for the session-keyed conversational memory cache.
"""

import threading

from tripflow.shared.cache import SessionMemoryCache


class _Clock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


class TestSessionMemoryCache:
    """Creation, windowing and TTL eviction."""

    def test_first_caller_creates(self):
        cache = SessionMemoryCache()
        first = cache.get_or_create("s1")
        assert cache.get_or_create("s1") is first
        assert cache.active_session_count() == 1

    def test_concurrent_creation_yields_one_entry(self):
        cache = SessionMemoryCache()
        results = []
        barrier = threading.Barrier(8)

        def worker():
            barrier.wait()
            results.append(cache.get_or_create("shared"))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len({id(m) for m in results}) == 1
        assert cache.active_session_count() == 1

    def test_message_window(self):
        memory = SessionMemoryCache(max_messages=3).get_or_create("s1")
        for i in range(5):
            memory.add("user", f"m{i}")
        assert [m["content"] for m in memory.messages()] == ["m2", "m3", "m4"]
        assert [m["content"] for m in memory.recent(2)] == ["m3", "m4"]
        assert memory.recent(0) == []

    def test_evict_inactive(self):
        clock = _Clock()
        cache = SessionMemoryCache(ttl_seconds=60, clock=clock)
        cache.get_or_create("old")
        clock.now = 50
        cache.get_or_create("fresh")
        clock.now = 100

        assert cache.evict_inactive() == 1
        assert cache.get("old") is None
        assert cache.get("fresh") is not None

    def test_expired_entry_replaced_on_access(self):
        clock = _Clock()
        cache = SessionMemoryCache(ttl_seconds=10, clock=clock)
        memory = cache.get_or_create("s1")
        memory.add("user", "hello")
        clock.now = 20
        renewed = cache.get_or_create("s1")
        assert renewed is not memory
        assert len(renewed) == 0

    def test_clear(self):
        cache = SessionMemoryCache()
        cache.get_or_create("s1").add("user", "hi")
        cache.clear("s1")
        assert cache.get("s1") is None
        assert cache.active_session_count() == 0
