"""
Pattern registry - ranked URI pattern lookup with atomic reloads.

Routes are registered into a pending generation built off to the side and
published with a single reference swap. Readers never lock: they see either
the previous generation or the new one, never a partial one.

Lookup:
- Only routes declaring the requested method are considered.
- The matching pattern with the highest score wins.
- Equal scores fall back to the lexical order of the pattern source.
"""

import hashlib
import json
import logging
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import (
    Any,
    Callable,
    Dict,
    Iterable,
    Iterator,
    List,
    Mapping,
    Optional,
    Tuple,
    Union,
)

from .cache import PatternCache
from .compiler.pattern import Pattern
from .compiler.specificity import ranking_key
from .config import ConfigError, RouterConfig
from .diagnostics.errors import (
    PatternDiagnostic,
    RegistryLoadError,
    RouteAmbiguityError,
)
from .parameters import Parameters

logger = logging.getLogger("uriroute.registry")

Methods = Union[str, Iterable[str]]
Declaration = Tuple[Union[str, Pattern], Methods, Any]


class RegistryState(str, Enum):
    """Lifecycle state of a registry."""
    EMPTY = "empty"
    LOADED = "loaded"


@dataclass(frozen=True)
class Route:
    """A pattern bound to a set of HTTP methods and an opaque payload."""
    pattern: Pattern
    methods: frozenset
    payload: Any

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pattern": self.pattern.source,
            "methods": sorted(self.methods),
            "score": self.pattern.score,
        }


@dataclass(frozen=True)
class Resolution:
    """Result of a successful lookup."""
    payload: Any
    parameters: Parameters
    pattern: Pattern
    method: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pattern": self.pattern.source,
            "method": self.method,
            "parameters": self.parameters.to_dict(),
        }


def normalize_methods(method: Methods) -> frozenset:
    """Turn one method name or an iterable of names into an upper-case set."""
    if isinstance(method, str):
        names = [method]
    else:
        names = list(method)

    methods = set()
    for name in names:
        if not isinstance(name, str) or not name.strip():
            raise ValueError(f"Invalid HTTP method: {name!r}")
        methods.add(name.strip().upper())

    if not methods:
        raise ValueError("A route needs at least one HTTP method")
    return frozenset(methods)


class Generation:
    """
    Immutable snapshot of every registered route.

    Built once by a ``GenerationBuilder``, then only read.
    """

    __slots__ = ("version", "created_at", "fingerprint", "_routes", "_by_method")

    def __init__(self, routes: Iterable[Route], version: int):
        ranked = sorted(routes, key=lambda r: ranking_key(r.pattern.source, r.pattern.score))

        by_method: Dict[str, List[Route]] = {}
        for route in ranked:
            for method in route.methods:
                by_method.setdefault(method, []).append(route)

        self.version = version
        self.created_at = time.time()
        self._routes: Tuple[Route, ...] = tuple(ranked)
        self._by_method: Mapping[str, Tuple[Route, ...]] = MappingProxyType(
            {method: tuple(candidates) for method, candidates in by_method.items()}
        )
        self.fingerprint = self._fingerprint()

    @property
    def routes(self) -> Tuple[Route, ...]:
        """All routes, best ranked first."""
        return self._routes

    @property
    def methods(self) -> frozenset:
        return frozenset(self._by_method)

    def __len__(self) -> int:
        return len(self._routes)

    def find(self, path: str, method: str) -> Optional[Resolution]:
        """Resolve *path* for *method*, or None when nothing matches."""
        method = method.upper()
        candidates = self._by_method.get(method, ())

        for i, route in enumerate(candidates):
            parameters = route.pattern.resolve(path)
            if parameters is None:
                continue
            if logger.isEnabledFor(logging.DEBUG):
                self._log_ties(route, candidates[i + 1:], path, method)
            return Resolution(
                payload=route.payload,
                parameters=parameters,
                pattern=route.pattern,
                method=method,
            )
        return None

    def allowed_methods(self, path: str) -> frozenset:
        """Every method of every route whose pattern matches *path*."""
        allowed = set()
        for route in self._routes:
            if route.methods <= allowed:
                continue
            if route.pattern.match(path):
                allowed |= route.methods
        return frozenset(allowed)

    def patterns(self, method: Optional[str] = None) -> List[Pattern]:
        """Distinct patterns in ranking order, optionally for one method only."""
        routes = self._routes if method is None else self._by_method.get(method.upper(), ())
        seen = set()
        result = []
        for route in routes:
            if route.pattern not in seen:
                seen.add(route.pattern)
                result.append(route.pattern)
        return result

    def _log_ties(self, winner: Route, rest: Tuple[Route, ...], path: str, method: str):
        for route in rest:
            if route.pattern.score != winner.pattern.score:
                break
            if route.pattern.match(path):
                logger.debug(
                    "%s %r matches %r and %r with score %d; lexical order picks %r",
                    method,
                    path,
                    winner.pattern.source,
                    route.pattern.source,
                    winner.pattern.score,
                    winner.pattern.source,
                )

    def _fingerprint(self) -> str:
        """Deterministic SHA-256 of the route table (payloads excluded)."""
        canonical = sorted((r.pattern.source, sorted(r.methods)) for r in self._routes)
        json_str = json.dumps(canonical, separators=(",", ":"))
        return hashlib.sha256(json_str.encode("utf-8")).hexdigest()

    def __repr__(self) -> str:
        return f"Generation(version={self.version}, routes={len(self._routes)})"


class GenerationBuilder:
    """Accumulates routes for the next generation. Never visible to readers."""

    def __init__(
        self,
        cache: Optional[PatternCache] = None,
        max_patterns: Optional[int] = None,
        validate_defaults: bool = True,
    ):
        self._cache = cache
        self._max_patterns = max_patterns
        self._validate_defaults = validate_defaults
        self._routes: List[Route] = []
        self._claimed: Dict[Pattern, frozenset] = {}

    def register(self, pattern: Union[str, Pattern], method: Methods, payload: Any) -> Route:
        """
        Add a route.

        Raises:
            TemplateSyntaxError: Invalid template syntax
            InvalidPatternError: Template contains a non-matchable token
            RouteAmbiguityError: Pattern already registered for one of the methods
        """
        methods = normalize_methods(method)
        compiled = self._compile(pattern)

        if self._max_patterns is not None and len(self._routes) >= self._max_patterns:
            raise RegistryLoadError(
                f"Registry is capped at {self._max_patterns} routes",
                pattern=compiled.source,
                details={"max_patterns": self._max_patterns},
            )

        claimed = self._claimed.get(compiled, frozenset())
        overlap = claimed & methods
        if overlap:
            raise RouteAmbiguityError(
                f"Pattern {compiled.source!r} is already registered for {', '.join(sorted(overlap))}",
                pattern=compiled.source,
                methods=overlap,
                suggestions=["Register each pattern at most once per method"],
            )

        route = Route(pattern=compiled, methods=methods, payload=payload)
        self._claimed[compiled] = claimed | methods
        self._routes.append(route)
        return route

    def build(self, version: int) -> Generation:
        return Generation(self._routes, version)

    def __len__(self) -> int:
        return len(self._routes)

    def _compile(self, pattern: Union[str, Pattern]) -> Pattern:
        if isinstance(pattern, Pattern):
            return pattern
        if self._cache is not None:
            return self._cache.compile_with_cache(pattern)
        return Pattern(pattern, validate_defaults=self._validate_defaults)


class PatternRegistry:
    """
    Registry of URI patterns with transactional, atomically published loads.

    Usage::

        registry = PatternRegistry()
        registry.register_pattern("/article/{id}", "GET", show_article)
        registry.commit()
        resolution = registry.find("/article/3", "GET")
        resolution.parameters["id"]     # "3"
    """

    def __init__(
        self,
        config: Optional[RouterConfig] = None,
        cache: Optional[PatternCache] = None,
    ):
        self.config = config or RouterConfig()
        if cache is None:
            cache = PatternCache(
                max_size=self.config.cache_size,
                ttl=self.config.cache_ttl,
                validate_defaults=self.config.validate_defaults,
            )
        elif cache.validate_defaults != self.config.validate_defaults:
            raise ConfigError(
                f"Cache validate_defaults={cache.validate_defaults} does not match "
                f"config validate_defaults={self.config.validate_defaults}"
            )
        self.cache = cache
        self._generation: Optional[Generation] = None
        self._pending: Optional[GenerationBuilder] = None
        self._version = 0
        self._write_lock = threading.RLock()

    # ── State ─────────────────────────────────────────────────────────────

    @property
    def state(self) -> RegistryState:
        return RegistryState.EMPTY if self._generation is None else RegistryState.LOADED

    @property
    def generation(self) -> Optional[Generation]:
        """The live generation, or None while empty."""
        return self._generation

    @property
    def version(self) -> int:
        """Number of generations committed so far."""
        return self._version

    # ── Write path ────────────────────────────────────────────────────────

    def builder(self) -> GenerationBuilder:
        """Create a builder wired to this registry's cache and limits."""
        return GenerationBuilder(
            cache=self.cache,
            max_patterns=self.config.max_patterns,
            validate_defaults=self.config.validate_defaults,
        )

    def register_pattern(self, pattern: Union[str, Pattern], method: Methods, payload: Any) -> Route:
        """
        Add a route to the pending generation.

        The first registration opens a load: the calling thread holds the
        writer lock until ``commit()`` or ``rollback()``, so other writers
        wait instead of mixing their routes into it. A failure discards the
        whole pending generation and ends the load; the live one is never
        touched.
        """
        with self._write_lock:
            if self._pending is None:
                self._write_lock.acquire()
                self._pending = self.builder()
            try:
                return self._pending.register(pattern, method, payload)
            except Exception as exc:
                logger.error("Discarding pending routes after %r failed: %s", pattern, exc)
                self._end_load()
                raise

    def commit(self) -> Generation:
        """Publish the pending generation (empty if nothing was registered)."""
        with self._write_lock:
            builder = self._pending if self._pending is not None else self.builder()
            try:
                return self._publish(builder)
            finally:
                self._end_load()

    def rollback(self):
        """Discard the pending generation."""
        with self._write_lock:
            if self._pending is not None:
                logger.info("Rolled back %d pending routes", len(self._pending))
            self._end_load()

    def _end_load(self):
        # Release the hold taken by the registration that opened the load
        if self._pending is not None:
            self._pending = None
            self._write_lock.release()

    def clear(self):
        """Drop the live generation; every lookup misses until the next commit."""
        with self._write_lock:
            self._generation = None
            logger.info("Cleared pattern registry")

    @contextmanager
    def loading(self) -> Iterator[GenerationBuilder]:
        """
        Build a generation inside a ``with`` block.

        Commits when the block exits normally, discards everything when it
        raises. Concurrent writers wait for each other.
        """
        with self._write_lock:
            builder = self.builder()
            try:
                yield builder
            except Exception:
                logger.error("Load aborted after %d routes; keeping generation %s", len(builder), self._live_version())
                raise
            self._publish(builder)

    def load(self, declarations: Iterable[Declaration]) -> Generation:
        """
        Register ``(pattern, method, payload)`` declarations as one transaction.

        Raises:
            RegistryLoadError: wrapping the first failure; the live generation
                is left untouched
        """
        with self._write_lock:
            builder = self.builder()
            for index, (pattern, method, payload) in enumerate(declarations):
                try:
                    builder.register(pattern, method, payload)
                except RegistryLoadError as exc:
                    exc.index = index
                    logger.error("Load failed at declaration #%d: %s", index, exc.message)
                    raise
                except (PatternDiagnostic, ValueError) as exc:
                    source = pattern.source if isinstance(pattern, Pattern) else pattern
                    logger.error("Load failed at declaration #%d (%r): %s", index, source, exc)
                    raise RegistryLoadError(
                        f"Invalid declaration #{index}: {exc}",
                        index=index,
                        pattern=source,
                    ) from exc
            return self._publish(builder)

    def ensure_loaded(self, declarations: Callable[[], Iterable[Declaration]]) -> Generation:
        """Load from *declarations()* only while the registry is empty."""
        with self._write_lock:
            if self._generation is not None:
                return self._generation
            return self.load(declarations())

    def _publish(self, builder: GenerationBuilder) -> Generation:
        self._version += 1
        generation = builder.build(self._version)
        previous = self._generation
        self._generation = generation
        if previous is not None and previous.fingerprint == generation.fingerprint:
            logger.info("Committed generation %d with %d routes (route table unchanged)", generation.version, len(generation))
        else:
            logger.info("Committed generation %d with %d routes", generation.version, len(generation))
        return generation

    def _live_version(self) -> Optional[int]:
        generation = self._generation
        return generation.version if generation is not None else None

    # ── Read path ─────────────────────────────────────────────────────────

    def find(self, path: str, method: str) -> Optional[Resolution]:
        """Resolve *path* for *method* against the live generation."""
        generation = self._generation
        if generation is None:
            return None
        return generation.find(path, method)

    def allowed_methods(self, path: str) -> frozenset:
        """Methods accepted for *path*, regardless of the requested one."""
        generation = self._generation
        if generation is None:
            return frozenset()
        return generation.allowed_methods(path)

    async def match(self, path: str, method: str) -> Optional[Resolution]:
        """Async compat wrapper - delegates to the sync hot path."""
        return self.find(path, method)

    def patterns(self, method: Optional[str] = None) -> List[Pattern]:
        """Patterns of the live generation in ranking order."""
        generation = self._generation
        if generation is None:
            return []
        return generation.patterns(method)

    def __len__(self) -> int:
        generation = self._generation
        return len(generation) if generation is not None else 0

    def __repr__(self) -> str:
        return f"PatternRegistry(state={self.state.value}, version={self._version}, routes={len(self)})"
