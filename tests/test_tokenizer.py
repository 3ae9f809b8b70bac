"""
Unit tests for the template tokenizer.

Tests cover:
- Literal runs and expansions
- Trailing wildcard handling
- Multi-variable expansions
- Source round trip
- Error handling
"""

import pytest

from uriroute.compiler.tokenizer import Tokenizer, tokenize
from uriroute.compiler.tokens import Literal, TokenKind, Variable, Wildcard
from uriroute.diagnostics.errors import TemplateSyntaxError


def _kinds(tokens):
    return [t.kind for t in tokens]


class TestLiterals:
    """Test literal-only templates."""

    def test_empty_template(self):
        assert tokenize("") == ()

    def test_static_path(self):
        tokens = tokenize("/users/list")
        assert tokens == (Literal("/users/list"),)

    def test_star_inside_is_literal(self):
        tokens = tokenize("/a*b/c")
        assert tokens == (Literal("/a*b/c"),)

    def test_stray_closing_brace_is_literal(self):
        tokens = tokenize("/a}b")
        assert tokens == (Literal("/a}b"),)


class TestExpansions:
    """Test variable expansions."""

    def test_single_variable(self):
        tokens = tokenize("/article/{id}")
        assert _kinds(tokens) == [TokenKind.LITERAL, TokenKind.VARIABLE]
        assert tokens[0].text == "/article/"
        assert tokens[1].name == "id"
        assert tokens[1].expression == "{id}"

    def test_variable_with_default_and_constraint(self):
        tokens = tokenize("/page/{n=1:\\d+}")
        var = tokens[1]
        assert var.name == "n"
        assert var.default == "1"
        assert var.constraint == "\\d+"
        assert var.expression == "{n=1:\\d+}"

    def test_adjacent_variables(self):
        tokens = tokenize("/{year}-{month}")
        assert _kinds(tokens) == [
            TokenKind.LITERAL,
            TokenKind.VARIABLE,
            TokenKind.LITERAL,
            TokenKind.VARIABLE,
        ]
        assert tokens[2].text == "-"

    def test_multi_variable_expansion(self):
        tokens = tokenize("/geo/{lat,lng}")
        assert tokens == (
            Literal("/geo/"),
            Variable("lat", expression="{lat"),
            Literal(","),
            Variable("lng", expression="lng}"),
        )

    def test_three_variable_expansion(self):
        tokens = tokenize("{a,b,c}")
        assert [t.expression for t in tokens] == ["{a", ",", "b", ",", "c}"]

    def test_variable_only(self):
        tokens = tokenize("{x}")
        assert tokens == (Variable("x"),)


class TestWildcard:
    """Test trailing wildcard handling."""

    def test_trailing_wildcard(self):
        tokens = tokenize("/static/*")
        assert tokens == (Literal("/static/"), Wildcard())

    def test_wildcard_only(self):
        assert tokenize("*") == (Wildcard(),)

    def test_wildcard_after_expansion(self):
        tokens = tokenize("/files/{dir}*")
        assert _kinds(tokens) == [TokenKind.LITERAL, TokenKind.VARIABLE, TokenKind.WILDCARD]

    def test_wildcard_not_last_is_literal(self):
        tokens = tokenize("/*/x")
        assert tokens == (Literal("/*/x"),)


class TestRoundTrip:
    """Concatenated expressions reproduce the source."""

    @pytest.mark.parametrize("source", [
        "",
        "/",
        "/article/{id}",
        "/geo/{lat,lng}/map",
        "/page/{n=1:\\d+}/x",
        "/static/*",
        "{a}{b}*",
        "/a}b*",
    ])
    def test_round_trip(self, source):
        tokens = tokenize(source)
        assert "".join(t.expression for t in tokens) == source


class TestErrors:
    """Test syntax errors."""

    def test_unterminated_brace(self):
        with pytest.raises(TemplateSyntaxError) as exc_info:
            tokenize("/article/{id")
        assert exc_info.value.span.start == 9

    def test_unterminated_brace_before_expansion(self):
        with pytest.raises(TemplateSyntaxError):
            tokenize("/a{b/{c}")

    def test_empty_expansion(self):
        with pytest.raises(TemplateSyntaxError):
            tokenize("/a/{}")

    def test_unnamed_spec(self):
        with pytest.raises(TemplateSyntaxError):
            tokenize("/a/{=x}")

    def test_trailing_comma(self):
        with pytest.raises(TemplateSyntaxError):
            tokenize("/a/{x,}")

    def test_error_names_source(self):
        with pytest.raises(TemplateSyntaxError) as exc_info:
            tokenize("/a/{1x}")
        assert exc_info.value.source == "/a/{1x}"
        assert "1x" in exc_info.value.format()

    def test_null_template(self):
        with pytest.raises(TypeError):
            Tokenizer(None)
