"""
uriroute - URI template compiler and request router.

This package provides:
- A small template grammar: literals, ``{name=default:constraint}`` variables
  and a trailing ``*`` wildcard
- Deterministic template expansion
- Patterns compiled to anchored regular expressions, one group per token
- Specificity scoring to rank ambiguous matches
- A registry with transactional loads and atomically published generations
- Diagnostics with spans and suggestions
"""

from .compiler.tokens import TokenKind, Literal, Variable, Wildcard
from .compiler.variables import VariableSpec, VariableSpecParser, parse_variables
from .compiler.tokenizer import Tokenizer, tokenize
from .compiler.template import Template
from .compiler.pattern import Pattern
from .compiler.specificity import calculate_score
from .diagnostics.errors import (
    PatternDiagnostic,
    TemplateSyntaxError,
    InvalidPatternError,
    RouteAmbiguityError,
    RegistryLoadError,
)
from .parameters import Parameters
from .grammar import REMAINDER_KEY
from .cache import PatternCache, CacheStats, compile_pattern, get_global_cache, set_global_cache
from .config import RouterConfig, ConfigError
from .registry import (
    PatternRegistry,
    Generation,
    GenerationBuilder,
    RegistryState,
    Resolution,
    Route,
)

__version__ = "0.1.0"

__all__ = [
    # Tokens
    "TokenKind",
    "Literal",
    "Variable",
    "Wildcard",
    # Parsing
    "VariableSpec",
    "VariableSpecParser",
    "parse_variables",
    "Tokenizer",
    "tokenize",
    # Templates & patterns
    "Template",
    "Pattern",
    "calculate_score",
    "Parameters",
    "REMAINDER_KEY",
    # Diagnostics
    "PatternDiagnostic",
    "TemplateSyntaxError",
    "InvalidPatternError",
    "RouteAmbiguityError",
    "RegistryLoadError",
    # Caching
    "PatternCache",
    "CacheStats",
    "compile_pattern",
    "get_global_cache",
    "set_global_cache",
    # Config
    "RouterConfig",
    "ConfigError",
    # Registry
    "PatternRegistry",
    "Generation",
    "GenerationBuilder",
    "RegistryState",
    "Resolution",
    "Route",
]
