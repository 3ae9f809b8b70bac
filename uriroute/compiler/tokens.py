"""
Token definitions for uriroute templates.

A template is an ordered sequence of tokens. The token set is closed:
``Literal``, ``Variable`` and ``Wildcard``, each tagged with a ``TokenKind``.
Every variant-dependent behavior dispatches on that tag.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Union

from ..grammar import (
    CONSTRAINT_SEPARATOR,
    DEFAULT_SEPARATOR,
    DEFAULT_VARIABLE_FRAGMENT,
    REMAINDER_KEY,
    WILDCARD,
    WILDCARD_FRAGMENT,
)


class TokenKind(str, Enum):
    """Kind of template token."""
    LITERAL = "literal"
    VARIABLE = "variable"
    WILDCARD = "wildcard"


@dataclass(frozen=True)
class Literal:
    """Text copied verbatim."""
    text: str
    kind: TokenKind = field(default=TokenKind.LITERAL, init=False, repr=False)

    @property
    def expression(self) -> str:
        return self.text

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind.value, "text": self.text}


@dataclass(frozen=True)
class Variable:
    """
    A named variable, optionally with a default value and a regex constraint.

    ``expression`` is the exact slice of the template source this variable
    was parsed from, braces included where they belong to it. When built
    directly it is spelled out as ``{name=default:constraint}``.
    """
    name: str
    default: Optional[str] = field(default=None, compare=False)
    constraint: Optional[str] = field(default=None, compare=False)
    expression: str = ""
    kind: TokenKind = field(default=TokenKind.VARIABLE, init=False, repr=False)

    def __post_init__(self):
        if not self.expression:
            body = self.name
            if self.default is not None:
                body += DEFAULT_SEPARATOR + self.default
            if self.constraint is not None:
                body += CONSTRAINT_SEPARATOR + self.constraint
            object.__setattr__(self, "expression", "{" + body + "}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "name": self.name,
            "default": self.default,
            "constraint": self.constraint,
        }


@dataclass(frozen=True)
class Wildcard:
    """Trailing ``*``: consumes the remainder of a path."""
    expression: str = WILDCARD
    kind: TokenKind = field(default=TokenKind.WILDCARD, init=False, repr=False)

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind.value}


Token = Union[Literal, Variable, Wildcard]


def token_key(token: Token) -> tuple:
    """Structural identity of a token: variant and source expression."""
    return (token.kind, token.expression)


def expand_token(token: Token, parameters: Mapping[str, str]) -> str:
    """Expand one token against *parameters*."""
    kind = token.kind
    if kind is TokenKind.LITERAL:
        return token.text
    if kind is TokenKind.VARIABLE:
        value = parameters.get(token.name)
        if value is not None:
            return value
        return token.default if token.default is not None else ""
    if kind is TokenKind.WILDCARD:
        return parameters.get(REMAINDER_KEY) or ""
    raise AssertionError(f"Unhandled token kind: {kind!r}")


def is_matchable(token: Token, terminal: bool = True) -> bool:
    """
    Whether *token* can take part in a match.

    A wildcard consumes everything up to the end of the path, so it is only
    matchable as the last token of a pattern.
    """
    kind = token.kind
    if kind is TokenKind.LITERAL:
        return True
    if kind is TokenKind.VARIABLE:
        return True
    if kind is TokenKind.WILDCARD:
        return terminal
    raise AssertionError(f"Unhandled token kind: {kind!r}")


def pattern_fragment(token: Token) -> str:
    """Regex fragment matching *token*, without a surrounding group."""
    kind = token.kind
    if kind is TokenKind.LITERAL:
        return re.escape(token.text)
    if kind is TokenKind.VARIABLE:
        return token.constraint if token.constraint is not None else DEFAULT_VARIABLE_FRAGMENT
    if kind is TokenKind.WILDCARD:
        return WILDCARD_FRAGMENT
    raise AssertionError(f"Unhandled token kind: {kind!r}")
