"""Diagnostics package."""

from .errors import (
    Span,
    PatternDiagnostic,
    TemplateSyntaxError,
    InvalidPatternError,
    RouteAmbiguityError,
    RegistryLoadError,
)

__all__ = [
    "Span",
    "PatternDiagnostic",
    "TemplateSyntaxError",
    "InvalidPatternError",
    "RouteAmbiguityError",
    "RegistryLoadError",
]
