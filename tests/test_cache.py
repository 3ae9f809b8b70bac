"""
Tests for the compiled pattern cache.
"""

import threading

import pytest

from uriroute import Pattern, TemplateSyntaxError
from uriroute.cache import (
    CacheStats,
    PatternCache,
    compile_pattern,
    get_global_cache,
    set_global_cache,
)


class TestPatternCache:
    """Test PatternCache."""

    def test_compile_and_hit(self):
        cache = PatternCache()
        first = cache.compile_with_cache("/a/{id}")
        second = cache.compile_with_cache("/a/{id}")
        assert first is second
        assert "/a/{id}" in cache

        stats = cache.get_stats()
        assert stats.hits == 1
        assert stats.misses == 1
        assert stats.hit_rate == 0.5

    def test_lru_eviction(self):
        cache = PatternCache(max_size=2)
        cache.compile_with_cache("/a")
        cache.compile_with_cache("/b")
        cache.get("/a")                  # /b is now least recently used
        cache.compile_with_cache("/c")

        assert len(cache) == 2
        assert "/a" in cache
        assert "/b" not in cache
        assert cache.get_stats().evictions == 1

    def test_ttl_expiry(self, monkeypatch):
        now = [100.0]
        monkeypatch.setattr("uriroute.cache.time.monotonic", lambda: now[0])

        cache = PatternCache(ttl=10)
        cache.compile_with_cache("/a")
        now[0] += 5
        assert cache.get("/a") is not None
        now[0] += 10
        assert cache.get("/a") is None
        assert "/a" not in cache

    def test_errors_counted_and_not_cached(self):
        cache = PatternCache()
        with pytest.raises(TemplateSyntaxError):
            cache.compile_with_cache("/a/{")
        assert cache.get_stats().errors == 1
        assert len(cache) == 0

    def test_invalidate_one(self):
        cache = PatternCache()
        cache.compile_with_cache("/a")
        cache.compile_with_cache("/b")
        cache.invalidate("/a")
        assert "/a" not in cache
        assert "/b" in cache

    def test_invalidate_all(self):
        cache = PatternCache()
        cache.compile_with_cache("/a")
        cache.compile_with_cache("/b")
        cache.invalidate()
        assert len(cache) == 0

    def test_disabled(self):
        cache = PatternCache()
        with cache.disabled():
            pattern = cache.compile_with_cache("/a")
        assert isinstance(pattern, Pattern)
        assert len(cache) == 0
        assert cache.max_size == 1000

    def test_disabled_restores_size_on_error(self):
        cache = PatternCache(max_size=7)
        with pytest.raises(TemplateSyntaxError):
            with cache.disabled():
                cache.compile_with_cache("/a/{")
        assert cache.max_size == 7

    def test_disabled_applies_to_other_threads(self):
        cache = PatternCache()
        with cache.disabled():
            worker = threading.Thread(target=cache.compile_with_cache, args=("/b",))
            worker.start()
            worker.join()
        assert "/b" not in cache
        cache.compile_with_cache("/c")
        assert "/c" in cache

    def test_zero_size_never_stores(self):
        cache = PatternCache(max_size=0)
        cache.compile_with_cache("/a")
        assert len(cache) == 0

    def test_stats_disabled(self):
        cache = PatternCache(enable_stats=False)
        cache.compile_with_cache("/a")
        cache.compile_with_cache("/a")
        assert cache.get_stats().to_dict()["hits"] == 0

    def test_reset_stats(self):
        cache = PatternCache()
        cache.compile_with_cache("/a")
        cache.reset_stats()
        assert cache.get_stats().misses == 0

    def test_validate_defaults_switch(self):
        source = "/page/{n=first:[0-9]+}"
        with pytest.raises(TemplateSyntaxError):
            PatternCache().compile_with_cache(source)
        pattern = PatternCache(validate_defaults=False).compile_with_cache(source)
        assert pattern.match("/page/3")

    def test_stats_to_dict(self):
        stats = CacheStats(hits=3, misses=1)
        data = stats.to_dict()
        assert data["hit_rate"] == 0.75
        assert set(data) == {"hits", "misses", "evictions", "errors", "total_compile_time", "hit_rate"}


class TestGlobalCache:
    """Test the module-level helpers."""

    def test_compile_pattern_uses_global_cache(self):
        pattern = compile_pattern("/a/{id}")
        assert compile_pattern("/a/{id}") is pattern
        assert "/a/{id}" in get_global_cache()

    def test_compile_pattern_without_cache(self):
        compile_pattern("/a", use_cache=False)
        assert len(get_global_cache()) == 0

    def test_set_global_cache(self):
        cache = PatternCache(max_size=5)
        set_global_cache(cache)
        compile_pattern("/a")
        assert "/a" in cache
        assert get_global_cache() is cache
