"""
Specificity scoring for pattern ranking.

Formula:
--------
- Literal token: + number of characters of its text, path separators excluded
- Variable token: +0
- Wildcard: +0

Braces never count: they belong to variable expressions, not literals.
Separators are shared by every path, so only the named parts add weight:
``/a/{x}`` scores 1, ``/ab/{x}`` scores 2 and ``/{x}`` scores 0.
The score depends on the template source only, never on a match attempt.
The ``,`` between the variables of ``{a,b}`` is a ``Literal`` token and
counts like any other literal text: ``/geo/{lat,lng}`` scores 4.
"""

from typing import Iterable

from .tokens import Token, TokenKind

PATH_SEPARATOR = "/"


def literal_weight(text: str) -> int:
    """Characters of *text* that count towards a score."""
    return len(text) - text.count(PATH_SEPARATOR)


def calculate_score(tokens: Iterable[Token]) -> int:
    """Calculate specificity score for pattern ranking."""
    score = 0
    for token in tokens:
        kind = token.kind
        if kind is TokenKind.LITERAL:
            score += literal_weight(token.text)
        elif kind is TokenKind.VARIABLE or kind is TokenKind.WILDCARD:
            pass
        else:
            raise AssertionError(f"Unhandled token kind: {kind!r}")
    return score


def ranking_key(source: str, score: int) -> tuple:
    """
    Sort key putting the best candidate first.

    Highest score wins; equal scores fall back to the lexical order of the
    pattern source so that registration order never decides.
    """
    return (-score, source)
