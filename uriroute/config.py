"""
Config system - layered router configuration.

Merge order (later overrides earlier):
1. Dataclass defaults
2. ``.env`` file (URIROUTE_* keys only)
3. Environment variables (URIROUTE_* prefix)
4. Manual overrides
"""

import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from dotenv import dotenv_values

logger = logging.getLogger("uriroute.config")

DEFAULT_ENV_PREFIX = "URIROUTE_"


class ConfigError(Exception):
    """Raised when configuration validation fails."""
    pass


@dataclass(frozen=True)
class RouterConfig:
    """
    Settings for a ``PatternRegistry``.

    Attributes:
        cache_size: Maximum number of compiled patterns kept for reuse
        cache_ttl: Seconds a compiled pattern stays cached (None = forever)
        validate_defaults: Check variable defaults against their constraints
        max_patterns: Upper bound on registrations per generation (None = no cap)
    """
    cache_size: int = 1000
    cache_ttl: Optional[float] = None
    validate_defaults: bool = True
    max_patterns: Optional[int] = None

    def __post_init__(self):
        if self.cache_size < 0:
            raise ConfigError(f"cache_size must be >= 0, got {self.cache_size}")
        if self.cache_ttl is not None and self.cache_ttl <= 0:
            raise ConfigError(f"cache_ttl must be > 0, got {self.cache_ttl}")
        if self.max_patterns is not None and self.max_patterns < 1:
            raise ConfigError(f"max_patterns must be >= 1, got {self.max_patterns}")

    @classmethod
    def load(
        cls,
        env_file: Optional[str] = None,
        env_prefix: str = DEFAULT_ENV_PREFIX,
        overrides: Optional[Mapping[str, Any]] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "RouterConfig":
        """
        Load configuration from the sources listed in the module docstring.

        Args:
            env_file: Path to a .env file (skipped when missing)
            env_prefix: Prefix for environment variables
            overrides: Manual overrides (highest precedence)
            environ: Environment mapping, defaults to ``os.environ``
        """
        data: Dict[str, Any] = {}

        if env_file:
            path = Path(env_file)
            if path.exists():
                logger.debug("Loading router config from %s", path)
                data.update(_extract(dotenv_values(path), env_prefix))

        data.update(_extract(os.environ if environ is None else environ, env_prefix))

        if overrides:
            data.update(overrides)

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RouterConfig":
        """Build a config from a mapping, coercing string values."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigError(f"Unknown router config keys: {', '.join(sorted(unknown))}")

        values = {}
        for f in fields(cls):
            if f.name in data:
                values[f.name] = _coerce(f.name, data[f.name])
        return cls(**values)

    def with_overrides(self, **overrides: Any) -> "RouterConfig":
        """Return a copy with *overrides* applied."""
        return replace(self, **{k: _coerce(k, v) for k, v in overrides.items()})

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def _extract(source: Mapping[str, Optional[str]], prefix: str) -> Dict[str, Any]:
    """Pick URIROUTE_CACHE_SIZE style keys and lower-case them without prefix."""
    result = {}
    for key, value in source.items():
        if key.startswith(prefix) and value is not None:
            result[key[len(prefix):].lower()] = _parse_value(value)
    return result


def _parse_value(value: str) -> Any:
    """Parse string value to appropriate type."""
    lowered = value.strip().lower()
    if lowered in ("true", "yes", "on"):
        return True
    if lowered in ("false", "no", "off"):
        return False
    if lowered in ("none", "null", ""):
        return None
    try:
        return int(lowered)
    except ValueError:
        pass
    try:
        return float(lowered)
    except ValueError:
        pass
    return value


_TYPES = {
    "cache_size": int,
    "cache_ttl": float,
    "validate_defaults": bool,
    "max_patterns": int,
}

_OPTIONAL = {"cache_ttl", "max_patterns"}


def _coerce(name: str, value: Any) -> Any:
    if name not in _TYPES:
        raise ConfigError(f"Unknown router config key: {name}")
    if isinstance(value, str):
        value = _parse_value(value)
    if value is None:
        if name in _OPTIONAL:
            return None
        raise ConfigError(f"{name} cannot be empty")

    target = _TYPES[name]
    if target is bool:
        if isinstance(value, bool):
            return value
        if value in (0, 1):
            return bool(value)
        raise ConfigError(f"{name} must be a boolean, got {value!r}")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{name} must be a number, got {value!r}")
    if target is int and isinstance(value, float) and not value.is_integer():
        raise ConfigError(f"{name} must be an integer, got {value!r}")
    return target(value)
