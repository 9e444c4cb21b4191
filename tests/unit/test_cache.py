"""Tests for the upstream response cache."""

from __future__ import annotations

import threading

import pytest

from cloudflare_operator.utils.cache import ResponseCache, make_cache_key


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


class TestCacheKey:
    """Test cases for make_cache_key function."""

    def test_make_cache_key(self):
        """Test making cache key."""
        assert make_cache_key("pool-1", "get_pool") == ("pool-1", "get_pool")

    def test_make_cache_key_different_values(self):
        """Test cache keys are unique per resource and operation."""
        key1 = make_cache_key("my-worker", "metadata")
        key2 = make_cache_key("my-worker", "content")
        key3 = make_cache_key("other-worker", "metadata")

        assert key1 != key2
        assert key1 != key3


class TestResponseCache:
    """Test cases for ResponseCache."""

    def test_set_and_get(self):
        """Test storing and reading a payload."""
        cache = ResponseCache(ttl=30)
        cache.set(("a", "get"), {"id": "a"})

        payload, hit = cache.get(("a", "get"))

        assert hit is True
        assert payload == {"id": "a"}

    def test_get_missing(self):
        """Test a missing key is a miss."""
        cache = ResponseCache(ttl=30)
        assert cache.get(("missing", "get")) == (None, False)

    def test_entry_expires_after_ttl(self):
        """Test entries older than the TTL are misses and are dropped."""
        clock = FakeClock()
        cache = ResponseCache(ttl=30, clock=clock)
        cache.set(("a", "get"), "payload")

        clock.now += 29
        assert cache.get(("a", "get")) == ("payload", True)

        clock.now += 2
        assert cache.get(("a", "get")) == (None, False)
        assert len(cache) == 0

    def test_zero_ttl_only_hits_same_instant(self):
        """Test a zero TTL never serves an entry once time moves on."""
        clock = FakeClock()
        cache = ResponseCache(ttl=0, clock=clock)
        cache.set(("a", "get"), "payload")

        clock.now += 0.001
        assert cache.get(("a", "get")) == (None, False)

    def test_get_or_load_calls_loader_once(self):
        """Test repeated reads inside the TTL reuse the first load."""
        cache = ResponseCache(ttl=30)
        calls = []

        def loader():
            calls.append(1)
            return {"id": "pool-1"}

        first = cache.get_or_load(("pool-1", "get_pool"), loader)
        second = cache.get_or_load(("pool-1", "get_pool"), loader)

        assert first == second == {"id": "pool-1"}
        assert len(calls) == 1

    def test_get_or_load_does_not_cache_errors(self):
        """Test a failed load is retried on the next read."""
        cache = ResponseCache(ttl=30)

        def failing():
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            cache.get_or_load(("a", "get"), failing)

        assert cache.get_or_load(("a", "get"), lambda: "ok") == "ok"

    def test_writes_do_not_invalidate(self):
        """Test a cached read can be stale until the TTL passes."""
        clock = FakeClock()
        cache = ResponseCache(ttl=30, clock=clock)
        cache.get_or_load(("a", "get"), lambda: {"ttl": 30})

        # An upstream write happened; the cache still serves the old value
        assert cache.get_or_load(("a", "get"), lambda: {"ttl": 60}) == {"ttl": 30}

        clock.now += 31
        assert cache.get_or_load(("a", "get"), lambda: {"ttl": 60}) == {"ttl": 60}

    def test_invalidate_single_resource(self):
        """Test invalidating one resource keeps the others."""
        cache = ResponseCache(ttl=30)
        cache.set(("a", "metadata"), 1)
        cache.set(("a", "content"), 2)
        cache.set(("b", "metadata"), 3)

        cache.invalidate("a")

        assert len(cache) == 1
        assert cache.get(("b", "metadata")) == (3, True)

    def test_invalidate_all(self):
        """Test invalidating everything."""
        cache = ResponseCache(ttl=30)
        cache.set(("a", "get"), 1)
        cache.set(("b", "get"), 2)

        cache.invalidate()

        assert len(cache) == 0

    def test_instances_are_independent(self):
        """Test two caches never share entries."""
        first = ResponseCache(ttl=30, name="first")
        second = ResponseCache(ttl=30, name="second")
        first.set(("a", "get"), 1)

        assert second.get(("a", "get")) == (None, False)

    def test_concurrent_access(self):
        """Test concurrent readers and writers do not corrupt the cache."""
        cache = ResponseCache(ttl=30)
        errors = []

        def worker(n: int):
            try:
                for i in range(100):
                    cache.set((f"r{i}", "get"), n)
                    cache.get((f"r{i}", "get"))
            except Exception as e:  # pragma: no cover
                errors.append(e)

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert len(cache) == 100
