"""
Diagnostic errors for uriroute.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class Span:
    """Position of a diagnostic inside a template source."""
    start: int
    end: int

    def __repr__(self) -> str:
        return f"pos {self.start}-{self.end}"


@dataclass(eq=False)
class PatternDiagnostic(Exception):
    """Base class for all template and routing diagnostics."""
    message: str
    span: Optional[Span] = None
    source: Optional[str] = None
    suggestions: List[str] = field(default_factory=list)

    def __str__(self) -> str:
        return self.message

    def format(self) -> str:
        """Format diagnostic for display."""
        parts = [f"{self.__class__.__name__}: {self.message}"]

        if self.source is not None:
            parts.append(f"  --> {self.source}")
            if self.span:
                # Caret line under the offending characters
                width = max(self.span.end - self.span.start, 1)
                parts.append("      " + " " * self.span.start + "^" * width)
        elif self.span:
            parts.append(f"  --> {self.span}")

        if self.suggestions:
            parts.append("\nSuggestions:")
            for i, suggestion in enumerate(self.suggestions, 1):
                parts.append(f"  {i}) {suggestion}")

        return "\n".join(parts)


class TemplateSyntaxError(PatternDiagnostic):
    """Malformed template: unterminated brace, bad variable spec, bad constraint."""
    pass


class InvalidPatternError(PatternDiagnostic):
    """Template contains a token that cannot be matched."""

    def __init__(self, message: str, expression: str = "", **kwargs):
        super().__init__(message, **kwargs)
        self.expression = expression


class RouteAmbiguityError(PatternDiagnostic):
    """The same pattern was registered twice for one method in a generation."""

    def __init__(self, message: str, pattern: str, methods: frozenset, **kwargs):
        super().__init__(message, **kwargs)
        self.pattern = pattern
        self.methods = methods

    def format(self) -> str:
        """Format ambiguity error."""
        parts = [
            f"RouteAmbiguityError: {self.message}",
            f"  Pattern: {self.pattern}",
            f"  Methods: {', '.join(sorted(self.methods))}",
        ]

        if self.suggestions:
            parts.append("\nSuggestions:")
            for i, suggestion in enumerate(self.suggestions, 1):
                parts.append(f"  {i}) {suggestion}")

        return "\n".join(parts)


class RegistryLoadError(Exception):
    """A load transaction failed; the live generation was left untouched."""

    def __init__(
        self,
        message: str,
        *,
        index: Optional[int] = None,
        pattern: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.index = index
        self.pattern = pattern
        self.details = details or {}

    def format_error(self) -> str:
        """Format error with the failing declaration and its cause."""
        lines = [f"{self.__class__.__name__}: {self.message}"]

        if self.index is not None:
            lines.append(f"   at declaration #{self.index}: {self.pattern!r}")

        cause = self.__cause__
        if isinstance(cause, PatternDiagnostic):
            lines.append("")
            lines.extend("   " + line for line in cause.format().splitlines())
        elif cause is not None:
            lines.append(f"   caused by {cause.__class__.__name__}: {cause}")

        if self.details:
            lines.append("\n   Details:")
            for key, value in self.details.items():
                lines.append(f"     {key}: {value}")

        return "\n".join(lines)
