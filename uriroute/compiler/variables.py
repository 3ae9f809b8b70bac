"""
Parser for the body of a ``{...}`` expansion.

Splits the body on ``,`` and parses each piece into a ``VariableSpec``.
The first ``=`` or ``:`` after the name decides the form:

    name
    name=default
    name=default:constraint
    name:constraint
"""

import re
import warnings
from dataclasses import dataclass
from typing import List, Optional

from ..diagnostics.errors import Span, TemplateSyntaxError
from ..grammar import (
    CONSTRAINT_SEPARATOR,
    DEFAULT_SEPARATOR,
    NAME_PATTERN,
    SPEC_SEPARATOR,
)

_NAME_RE = re.compile(NAME_PATTERN)


def embed_constraint(constraint: str) -> str:
    """The constraint as it sits inside a compiled pattern: grouped, after other text."""
    return "_(" + constraint + ")"


@dataclass(frozen=True)
class VariableSpec:
    """One parsed variable spec and its position inside the expansion body."""
    name: str
    default: Optional[str]
    constraint: Optional[str]
    start: int
    end: int


class VariableSpecParser:
    """Parses expansion bodies, reporting errors against the whole template."""

    def __init__(
        self,
        source: Optional[str] = None,
        offset: int = 0,
        validate_defaults: bool = True,
    ):
        self.source = source
        self.offset = offset
        self.validate_defaults = validate_defaults

    def error(self, message: str, start: int, end: int, suggestions=None) -> TemplateSyntaxError:
        """Create syntax error spanning body[start:end]."""
        return TemplateSyntaxError(
            message=message,
            span=Span(self.offset + start, self.offset + end),
            source=self.source,
            suggestions=list(suggestions or []),
        )

    def parse(self, body: str) -> List[VariableSpec]:
        """Parse every spec in *body*; any failure aborts the whole body."""
        specs = []
        start = 0
        for piece in body.split(SPEC_SEPARATOR):
            end = start + len(piece)
            specs.append(self.parse_spec(piece, start, end))
            start = end + len(SPEC_SEPARATOR)
        return specs

    def parse_spec(self, text: str, start: int, end: int) -> VariableSpec:
        """Parse a single ``name[=default][:constraint]`` spec."""
        if not text:
            raise self.error(
                "Empty variable spec",
                start,
                end,
                suggestions=["Remove the extra ',' or name the variable"],
            )

        name, default, constraint = self._split(text)

        if not name:
            raise self.error(f"Variable spec {text!r} has no name", start, end)
        if not _NAME_RE.fullmatch(name):
            raise self.error(
                f"Invalid variable name {name!r}",
                start,
                start + len(name),
                suggestions=["Names start with a letter or '_' and contain letters, digits, '_', '.' or '-'"],
            )

        if constraint is not None:
            compiled = self._compile_constraint(constraint, start, end)
            if (
                self.validate_defaults
                and default is not None
                and compiled.fullmatch(default) is None
            ):
                raise self.error(
                    f"Default {default!r} of variable {name!r} does not satisfy constraint {constraint!r}",
                    start,
                    end,
                )

        return VariableSpec(
            name=name,
            default=default,
            constraint=constraint,
            start=start,
            end=end,
        )

    def _split(self, text: str):
        eq = text.find(DEFAULT_SEPARATOR)
        colon = text.find(CONSTRAINT_SEPARATOR)

        if eq < 0 and colon < 0:
            return text, None, None

        if colon >= 0 and (eq < 0 or colon < eq):
            # name:constraint - everything after the colon is the constraint
            return text[:colon], None, text[colon + 1:]

        # name=default[:constraint]
        rest = text[eq + 1:]
        colon = rest.find(CONSTRAINT_SEPARATOR)
        if colon < 0:
            return text[:eq], rest, None
        return text[:eq], rest[:colon], rest[colon + 1:]

    def _compile_constraint(self, constraint: str, start: int, end: int) -> "re.Pattern[str]":
        if not constraint:
            raise self.error(
                "Empty constraint",
                start,
                end,
                suggestions=["Drop the ':' or give a regular expression after it"],
            )
        # Checked as it will be embedded: inside a group, after other tokens
        try:
            with warnings.catch_warnings():
                warnings.simplefilter("error", DeprecationWarning)
                re.compile(embed_constraint(constraint))
            compiled = re.compile(constraint)
        except (re.error, DeprecationWarning) as exc:
            raise self.error(f"Invalid constraint {constraint!r}: {exc}", start, end) from exc

        if compiled.groups:
            raise self.error(
                f"Constraint {constraint!r} contains capturing groups",
                start,
                end,
                suggestions=["Use non-capturing groups '(?:...)' inside constraints"],
            )
        return compiled


def parse_variables(body: str, validate_defaults: bool = True) -> List[VariableSpec]:
    """Convenience function to parse an expansion body on its own."""
    return VariableSpecParser(validate_defaults=validate_defaults).parse(body)
