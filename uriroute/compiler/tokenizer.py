"""
Tokenizer for uriroute templates.

Scans a template for ``{...}`` expansions. Text between expansions becomes
``Literal`` tokens, expansion bodies are handed to the variable-spec parser,
and a ``*`` ending the template becomes a terminal ``Wildcard``.
"""

import re
from typing import List, Tuple

from ..diagnostics.errors import Span, TemplateSyntaxError
from ..grammar import EXPANSION_START, SPEC_SEPARATOR, WILDCARD
from .tokens import Literal, Token, Variable, Wildcard
from .variables import VariableSpecParser

# Non-greedy, no nested braces
EXPANSION_RE = re.compile(r"\{[^{}]*\}")


class Tokenizer:
    """Tokenizer for URI templates."""

    def __init__(self, source: str, validate_defaults: bool = True):
        if source is None:
            raise TypeError("Cannot tokenize a null template")
        self.source = source
        self.validate_defaults = validate_defaults
        self.tokens: List[Token] = []

    def error(self, message: str, start: int, end: int) -> TemplateSyntaxError:
        """Create syntax error spanning source[start:end]."""
        return TemplateSyntaxError(
            message=message,
            span=Span(start, end),
            source=self.source,
        )

    def tokenize(self) -> Tuple[Token, ...]:
        """Tokenize the source into an ordered token tuple."""
        self.tokens = []
        pos = 0

        for m in EXPANSION_RE.finditer(self.source):
            if m.start() > pos:
                self._literal(pos, m.start())
            self._expansion(m.start(), m.end())
            pos = m.end()

        if pos < len(self.source):
            self._trailing(pos)

        return tuple(self.tokens)

    def _literal(self, start: int, end: int):
        text = self.source[start:end]
        brace = text.find(EXPANSION_START)
        if brace >= 0:
            raise self.error("Unterminated '{' in template", start + brace, end)
        self.tokens.append(Literal(text))

    def _trailing(self, start: int):
        text = self.source[start:]
        if text.endswith(WILDCARD):
            if len(text) > len(WILDCARD):
                self._literal(start, len(self.source) - len(WILDCARD))
            self.tokens.append(Wildcard())
        else:
            self._literal(start, len(self.source))

    def _expansion(self, start: int, end: int):
        body_start = start + 1
        body = self.source[body_start:end - 1]
        parser = VariableSpecParser(
            source=self.source,
            offset=body_start,
            validate_defaults=self.validate_defaults,
        )
        specs = parser.parse(body)

        # Slice expressions so that they concatenate back to source[start:end]
        last = len(specs) - 1
        for i, spec in enumerate(specs):
            if i > 0:
                sep_start = body_start + specs[i - 1].end
                self.tokens.append(Literal(self.source[sep_start:sep_start + len(SPEC_SEPARATOR)]))
            expr_start = start if i == 0 else body_start + spec.start
            expr_end = end if i == last else body_start + spec.end
            self.tokens.append(
                Variable(
                    name=spec.name,
                    default=spec.default,
                    constraint=spec.constraint,
                    expression=self.source[expr_start:expr_end],
                )
            )


def tokenize(source: str, validate_defaults: bool = True) -> Tuple[Token, ...]:
    """Convenience function to tokenize a template string."""
    return Tokenizer(source, validate_defaults=validate_defaults).tokenize()
