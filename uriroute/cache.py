"""
Caching layer for compiled patterns.

Provides:
- Thread-safe LRU cache with TTL
- Cache statistics for monitoring
- Invalidation

The registry compiles through a cache so an unchanged reload reuses the
patterns of the previous generation instead of recompiling them.
"""

import logging
import threading
import time
from collections import OrderedDict
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .compiler.pattern import Pattern

logger = logging.getLogger("uriroute.cache")


@dataclass
class CacheStats:
    """Cache statistics for monitoring."""
    hits: int = 0
    misses: int = 0
    evictions: int = 0
    errors: int = 0
    total_compile_time: float = 0.0

    @property
    def hit_rate(self) -> float:
        """Calculate cache hit rate."""
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0

    def to_dict(self) -> Dict[str, Any]:
        """Export stats as dictionary."""
        return {
            "hits": self.hits,
            "misses": self.misses,
            "evictions": self.evictions,
            "errors": self.errors,
            "total_compile_time": self.total_compile_time,
            "hit_rate": self.hit_rate,
        }


@dataclass
class CacheEntry:
    """Cache entry with metadata."""
    pattern: Pattern
    created_at: float
    access_count: int = 0

    def is_expired(self, ttl: Optional[float]) -> bool:
        """Check if entry has expired."""
        if ttl is None:
            return False
        return time.monotonic() - self.created_at > ttl


class PatternCache:
    """Thread-safe LRU cache for compiled patterns with TTL support."""

    def __init__(
        self,
        max_size: int = 1000,
        ttl: Optional[float] = None,
        enable_stats: bool = True,
        validate_defaults: bool = True,
    ):
        """
        Initialize pattern cache.

        Args:
            max_size: Maximum number of patterns to cache (0 disables caching)
            ttl: Time-to-live in seconds (None = no expiration)
            enable_stats: Enable statistics collection
            validate_defaults: Check defaults against constraints when compiling
        """
        self.max_size = max_size
        self.ttl = ttl
        self.enable_stats = enable_stats
        self.validate_defaults = validate_defaults

        self._cache: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self._lock = threading.RLock()
        self._stats = CacheStats()

    def get(self, source: str) -> Optional[Pattern]:
        """Get compiled pattern from cache, or None if not cached."""
        with self._lock:
            entry = self._cache.get(source)

            if entry is None:
                if self.enable_stats:
                    self._stats.misses += 1
                return None

            if entry.is_expired(self.ttl):
                del self._cache[source]
                if self.enable_stats:
                    self._stats.evictions += 1
                    self._stats.misses += 1
                return None

            self._cache.move_to_end(source)
            entry.access_count += 1

            if self.enable_stats:
                self._stats.hits += 1

            return entry.pattern

    def put(self, source: str, pattern: Pattern):
        """Store compiled pattern in cache."""
        with self._lock:
            if self.max_size <= 0:
                return
            if len(self._cache) >= self.max_size and source not in self._cache:
                self._cache.popitem(last=False)
                if self.enable_stats:
                    self._stats.evictions += 1

            self._cache[source] = CacheEntry(pattern=pattern, created_at=time.monotonic())
            self._cache.move_to_end(source)

    def compile_with_cache(self, source: str) -> Pattern:
        """
        Compile pattern with caching.

        Raises:
            TemplateSyntaxError: Invalid template syntax
            InvalidPatternError: Template contains a non-matchable token
        """
        cached = self.get(source)
        if cached is not None:
            return cached

        start_time = time.perf_counter()
        try:
            pattern = Pattern(source, validate_defaults=self.validate_defaults)
        except Exception:
            if self.enable_stats:
                with self._lock:
                    self._stats.errors += 1
            raise

        compile_time = time.perf_counter() - start_time
        self.put(source, pattern)

        if self.enable_stats:
            with self._lock:
                self._stats.total_compile_time += compile_time

        logger.debug("Compiled pattern %r in %.6fs", source, compile_time)
        return pattern

    def invalidate(self, source: Optional[str] = None):
        """
        Invalidate cache entries.

        Args:
            source: Specific pattern to invalidate (None = clear all)
        """
        with self._lock:
            if source is None:
                self._cache.clear()
            else:
                self._cache.pop(source, None)

    def get_stats(self) -> CacheStats:
        """Get a snapshot of cache statistics."""
        with self._lock:
            return CacheStats(
                hits=self._stats.hits,
                misses=self._stats.misses,
                evictions=self._stats.evictions,
                errors=self._stats.errors,
                total_compile_time=self._stats.total_compile_time,
            )

    def reset_stats(self):
        """Reset statistics counters."""
        with self._lock:
            self._stats = CacheStats()

    @contextmanager
    def disabled(self):
        """Context manager to temporarily disable caching of new patterns."""
        with self._lock:
            old_size = self.max_size
            self.max_size = 0
        try:
            yield
        finally:
            with self._lock:
                self.max_size = old_size

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)

    def __contains__(self, source: str) -> bool:
        with self._lock:
            return source in self._cache


# Global cache instance
_global_cache: Optional[PatternCache] = None


def get_global_cache() -> PatternCache:
    """Get or create global cache instance."""
    global _global_cache
    if _global_cache is None:
        _global_cache = PatternCache()
    return _global_cache


def set_global_cache(cache: Optional[PatternCache]):
    """Set global cache instance."""
    global _global_cache
    _global_cache = cache


def compile_pattern(source: str, use_cache: bool = True) -> Pattern:
    """
    Convenience function to compile patterns with optional caching.

    Args:
        source: Template source
        use_cache: Whether to use the global cache
    """
    if use_cache:
        return get_global_cache().compile_with_cache(source)
    return Pattern(source)
