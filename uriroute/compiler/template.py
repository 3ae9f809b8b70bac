"""
URI templates: an ordered token sequence that expands to text.
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from ..parameters import EMPTY_PARAMETERS
from .tokens import Literal, Token, TokenKind, Variable, Wildcard, expand_token, token_key
from .tokenizer import tokenize


class Template:
    """
    A URI template such as ``/article/{id}``.

    Expansion is pure: the same parameters always give the same text.
    """

    __slots__ = ("_source", "_tokens")

    def __init__(self, source: str, *, validate_defaults: bool = True):
        if source is None:
            raise TypeError("Cannot create a template from a null source")
        self._source = source
        self._tokens: Tuple[Token, ...] = tokenize(source, validate_defaults=validate_defaults)

    @classmethod
    def from_tokens(cls, tokens: Iterable[Token]) -> "Template":
        """
        Compose a template from existing tokens.

        The source becomes the concatenation of the token expressions.
        """
        tokens = tuple(tokens)
        for t in tokens:
            if not isinstance(t, (Literal, Variable, Wildcard)):
                raise TypeError(f"Not a template token: {t!r}")
        template = cls.__new__(cls)
        template._source = "".join(t.expression for t in tokens)
        template._tokens = tokens
        return template

    @property
    def source(self) -> str:
        return self._source

    @property
    def tokens(self) -> Tuple[Token, ...]:
        """Ordered, read-only token sequence."""
        return self._tokens

    def expand(self, parameters: Optional[Mapping[str, str]] = None) -> str:
        """Expand the template with *parameters*."""
        if parameters is None:
            parameters = EMPTY_PARAMETERS
        return "".join(expand_token(t, parameters) for t in self._tokens)

    @staticmethod
    def expand_source(source: str, parameters: Optional[Mapping[str, str]] = None) -> str:
        """Tokenize *source* and expand it in one go."""
        return Template(source).expand(parameters)

    def variables(self) -> List[str]:
        """Names of the variables in this template, in order, without repeats."""
        names: List[str] = []
        for t in self._tokens:
            if t.kind is TokenKind.VARIABLE and t.name not in names:
                names.append(t.name)
        return names

    def to_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "source": self._source,
            "tokens": [t.to_dict() for t in self._tokens],
        }

    def _key(self) -> tuple:
        return (self._source, tuple(token_key(t) for t in self._tokens))

    def __eq__(self, other: object) -> bool:
        if other is self:
            return True
        if type(other) is not type(self):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._source)

    def __str__(self) -> str:
        return self._source

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._source!r})"
