"""
Unit tests for URI templates.
"""

import pytest

from uriroute import REMAINDER_KEY, Parameters, Template
from uriroute.compiler.tokens import Literal, Variable, Wildcard
from uriroute.diagnostics.errors import TemplateSyntaxError


class TestExpansion:
    """Test template expansion."""

    def test_literal_only(self):
        assert Template("/users/list").expand({}) == "/users/list"

    def test_no_parameters(self):
        assert Template("/users/list").expand() == "/users/list"

    def test_variable(self):
        assert Template("/article/{id}").expand({"id": "42"}) == "/article/42"

    def test_parameters_object(self):
        params = Parameters(id="42")
        assert Template("/article/{id}").expand(params) == "/article/42"

    def test_missing_variable_uses_default(self):
        assert Template("/page/{n=1}").expand({}) == "/page/1"

    def test_missing_variable_without_default_is_empty(self):
        assert Template("/article/{id}").expand({}) == "/article/"

    def test_supplied_value_beats_default(self):
        assert Template("/page/{n=1}").expand({"n": "7"}) == "/page/7"

    def test_multi_variable(self):
        assert Template("/geo/{lat,lng}").expand({"lat": "1.5", "lng": "2"}) == "/geo/1.5,2"

    def test_wildcard(self):
        template = Template("/static/*")
        assert template.expand({REMAINDER_KEY: "css/site.css"}) == "/static/css/site.css"
        assert template.expand({}) == "/static/"

    def test_expand_is_deterministic(self):
        template = Template("/{a}/{b}/*")
        params = {"a": "x", "b": "y", REMAINDER_KEY: "z"}
        assert template.expand(params) == template.expand(params) == "/x/y/z"

    def test_expand_source(self):
        assert Template.expand_source("/u/{id}", {"id": "1"}) == "/u/1"


class TestTemplateModel:
    """Test construction, tokens and equality."""

    def test_tokens_are_read_only(self):
        template = Template("/article/{id}")
        assert isinstance(template.tokens, tuple)
        with pytest.raises(AttributeError):
            template.tokens = ()

    def test_source(self):
        assert Template("/article/{id}").source == "/article/{id}"
        assert str(Template("/a")) == "/a"

    def test_variables(self):
        assert Template("/{a}/{b}/{a}").variables() == ["a", "b"]

    def test_equality_by_source(self):
        a = Template("/article/{id}")
        b = Template("/article/{id}")
        assert a == b
        assert hash(a) == hash(b)
        assert len({a, b}) == 1

    def test_inequality(self):
        assert Template("/a/{id}") != Template("/a/{ID}")

    def test_invalid_template(self):
        with pytest.raises(TemplateSyntaxError):
            Template("/a/{b")

    def test_null_source(self):
        with pytest.raises(TypeError):
            Template(None)

    def test_from_tokens(self):
        template = Template.from_tokens([Literal("/a/"), Variable("x"), Wildcard()])
        assert template.source == "/a/{x}*"
        assert template == Template("/a/{x}*")

    def test_to_dict(self):
        d = Template("/a/{x}").to_dict()
        assert d["source"] == "/a/{x}"
        assert [t["kind"] for t in d["tokens"]] == ["literal", "variable"]
