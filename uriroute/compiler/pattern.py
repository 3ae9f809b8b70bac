"""
Compiler that turns a template into an executable URI pattern.

Each token is wrapped in exactly one capturing group, in token order, so a
successful match can be walked group by group against the token list.
"""

import re
from typing import Any, Dict, Iterable, Optional, Pattern as RegexPattern, Union

from ..diagnostics.errors import InvalidPatternError, Span, TemplateSyntaxError
from ..grammar import REMAINDER_KEY
from ..parameters import Parameters
from .specificity import calculate_score
from .template import Template
from .tokens import Token, TokenKind, is_matchable, pattern_fragment


class Pattern(Template):
    """
    A template in which every token is matchable.

    Usage::

        pattern = Pattern("/article/{id}")
        pattern.match("/article/3")     # True
        pattern.resolve("/article/3")   # Parameters({'id': '3'})
        pattern.score                   # 7
    """

    __slots__ = ("_regex", "_score")

    def __init__(self, template: Union[str, Template], *, validate_defaults: bool = True):
        if isinstance(template, Template):
            self._source = template.source
            self._tokens = template.tokens
        else:
            super().__init__(template, validate_defaults=validate_defaults)
        self._score = -1
        self._regex = self._compile()

    @classmethod
    def from_tokens(cls, tokens: Iterable[Token]) -> "Pattern":
        return cls(Template.from_tokens(tokens))

    @staticmethod
    def is_matchable(template: Template) -> bool:
        """Whether every token of *template* can take part in a match."""
        last = len(template.tokens) - 1
        return all(is_matchable(t, terminal=(i == last)) for i, t in enumerate(template.tokens))

    def _compile(self) -> RegexPattern:
        """Compile tokens into a regex, one capture group per token."""
        parts = []
        position = 0
        last = len(self._tokens) - 1
        for i, token in enumerate(self._tokens):
            expression = token.expression
            if not is_matchable(token, terminal=(i == last)):
                raise InvalidPatternError(
                    f"Token {expression!r} cannot be matched",
                    expression=expression,
                    span=Span(position, position + len(expression)),
                    source=self._source,
                    suggestions=["A wildcard '*' may only end a pattern"],
                )
            parts.append("(" + pattern_fragment(token) + ")")
            position += len(expression)
        # Composed tokens skip the parser's constraint checks
        try:
            regex = re.compile("".join(parts), re.DOTALL)
        except re.error as exc:
            raise TemplateSyntaxError(
                f"Pattern {self._source!r} does not compile: {exc}",
                source=self._source,
            ) from exc
        if regex.groups != len(self._tokens):
            raise TemplateSyntaxError(
                f"Pattern {self._source!r} has constraints with capturing groups",
                source=self._source,
                suggestions=["Use non-capturing groups '(?:...)' inside constraints"],
            )
        return regex

    @property
    def regex(self) -> RegexPattern:
        """The compiled regular expression."""
        return self._regex

    @property
    def score(self) -> int:
        """Count of literal characters in the pattern, separators excluded."""
        if self._score < 0:
            self._score = calculate_score(self._tokens)
        return self._score

    def match(self, path: str) -> bool:
        """Whether *path* matches this pattern in full."""
        return self._regex.fullmatch(path) is not None

    def resolve(self, path: str) -> Optional[Parameters]:
        """
        Extract variable values from *path*.

        Returns ``None`` when the path does not match.
        """
        m = self._regex.fullmatch(path)
        if m is None:
            return None

        values: Dict[str, str] = {}
        for token, captured in zip(self._tokens, m.groups()):
            kind = token.kind
            if kind is TokenKind.LITERAL:
                continue
            if kind is TokenKind.VARIABLE:
                if not captured and token.default is not None:
                    captured = token.default
                values[token.name] = captured or ""
            elif kind is TokenKind.WILDCARD:
                values[REMAINDER_KEY] = captured or ""
            else:
                raise AssertionError(f"Unhandled token kind: {kind!r}")
        return Parameters(values)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            **super().to_dict(),
            "regex": self._regex.pattern,
            "score": self.score,
        }
