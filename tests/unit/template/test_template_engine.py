"""Unit tests for TemplateEngine."""

import pytest

from helper_cache.errors import HelperCacheError
from helper_cache.template import TemplateEngine, extract_templates, has_templates


@pytest.fixture
def engine() -> TemplateEngine:
    return TemplateEngine()


HELPERS = {
    "upper": lambda s: s.upper(),
    "join": lambda *parts, sep=" ": sep.join(parts),
    "mdu.heading": lambda text, level=1: "#" * level + " " + text,
}


class TestParser:
    def test_extract_templates(self):
        assert extract_templates("a {{ x }} b {{y}}") == ["x", "y"]

    def test_has_templates(self):
        assert has_templates("{{ x }}")
        assert not has_templates("no templates { here }")


class TestVariables:
    def test_plain_text_unchanged(self, engine):
        assert engine.render_string("hello world") == "hello world"

    def test_variable(self, engine):
        assert engine.render_string("Hi {{ name }}!", {"name": "Ana"}) == "Hi Ana!"

    def test_nested_access(self, engine):
        data = {"user": {"emails": ["a@x.io", "b@x.io"]}}
        assert engine.render_string("{{ user.emails[1] }}", data) == "b@x.io"

    def test_attribute_access(self, engine):
        class User:
            name = "ana"

        assert engine.render_string("{{ user.name }}", {"user": User()}) == "ana"

    def test_undefined_renders_empty(self, engine):
        assert engine.render_string("[{{ missing }}][{{ a.b.c }}]") == "[][]"

    def test_strict_undefined(self):
        engine = TemplateEngine(strict_undefined=True)
        with pytest.raises(HelperCacheError) as exc_info:
            engine.render_string("{{ missing }}")
        assert exc_info.value.code == "TEMPLATE_ERROR"

    def test_literal_aliases(self, engine):
        assert engine.render_string("{{ true }} {{ false }} [{{ null }}]") == "True False []"

    def test_numbers(self, engine):
        assert engine.render_string("{{ -3 }} {{ 2.5 }}") == "-3 2.5"


class TestHelperCalls:
    def test_call(self, engine):
        assert engine.render_string('{{ upper("abc") }}', helpers=HELPERS) == "ABC"

    def test_call_with_data(self, engine):
        text = engine.render_string("{{ upper(name) }}", {"name": "bob"}, HELPERS)
        assert text == "BOB"

    def test_keyword_arguments(self, engine):
        text = engine.render_string('{{ join("a", "b", sep="-") }}', helpers=HELPERS)
        assert text == "a-b"

    def test_dotted_helper(self, engine):
        text = engine.render_string('{{ mdu.heading("Title", level=2) }}', helpers=HELPERS)
        assert text == "## Title"

    def test_nested_calls(self, engine):
        text = engine.render_string('{{ upper(join("a", "b")) }}', helpers=HELPERS)
        assert text == "A B"

    def test_unknown_helper(self, engine):
        with pytest.raises(HelperCacheError) as exc_info:
            engine.render_string("{{ nope(1) }}", helpers=HELPERS)
        assert exc_info.value.code == "HELPER_NOT_FOUND"
        assert exc_info.value.helper_name == "nope"

    def test_helper_exception_propagates(self, engine):
        def broken():
            raise KeyError("gone")

        with pytest.raises(KeyError):
            engine.render_string("{{ broken() }}", helpers={"broken": broken})

    def test_call_order_follows_text(self, engine):
        order = []

        def track(name):
            order.append(name)
            return name

        engine.render_string("{{ track('a') }} {{ track('b') }}", helpers={"track": track})
        assert order == ["a", "b"]

    def test_literal_arguments(self, engine):
        helpers = {"show": lambda value: repr(value)}
        text = engine.render_string("{{ show({'a': [1, 2]}) }}", helpers=helpers)
        assert text == "{'a': [1, 2]}"


class TestFilters:
    def test_upper(self, engine):
        assert engine.render_string("{{ name | upper }}", {"name": "x"}) == "X"

    def test_default(self, engine):
        assert engine.render_string('{{ missing | default("n/a") }}') == "n/a"

    def test_length(self, engine):
        assert engine.render_string("{{ items | length }}", {"items": [1, 2, 3]}) == "3"

    def test_json(self, engine):
        assert engine.render_string("{{ data | json }}", {"data": {"a": 1}}) == '{"a": 1}'

    def test_chain(self, engine):
        assert engine.render_string("{{ name | trim | lower }}", {"name": "  AB "}) == "ab"

    def test_helper_used_as_filter(self, engine):
        helpers = {"wrap": lambda value, mark="*": f"{mark}{value}{mark}"}
        text = engine.render_string('{{ "x" | wrap("_") }}', helpers=helpers)
        assert text == "_x_"

    def test_unknown_filter(self, engine):
        with pytest.raises(HelperCacheError) as exc_info:
            engine.render_string("{{ x | nope }}", {"x": 1})
        assert exc_info.value.code == "TEMPLATE_ERROR"

    def test_filter_type_error(self, engine):
        with pytest.raises(HelperCacheError) as exc_info:
            engine.render_string("{{ n | length }}", {"n": 5})
        assert "length" in str(exc_info.value)

    def test_custom_filter(self):
        engine = TemplateEngine()
        engine.add_filter("reverse", lambda value: value[::-1])
        assert engine.render_string("{{ 'abc' | reverse }}") == "cba"


class TestRejectedExpressions:
    @pytest.mark.parametrize(
        "template",
        [
            "{{ 1 + 2 }}",
            "{{ x.__class__ }}",
            "{{ a if b else c }}",
            "{{ [x for x in y] }}",
            "{{ lambda: 1 }}",
            "{{ (lambda: 1)() }}",
            "{{ f(**kw) }}",
            "{{ }}",
            "{{ x = 1 }}",
        ],
    )
    def test_rejected(self, engine, template):
        with pytest.raises(HelperCacheError) as exc_info:
            engine.render_string(template, {"x": 1}, {"f": dict})
        assert exc_info.value.code == "TEMPLATE_ERROR"

    def test_validate(self, engine):
        assert engine.validate("{{ upper(name) }} {{ a | default(1) }}") == []
        errors = engine.validate("{{ 1 + 2 }} {{ ( }}")
        assert any("Arithmetic" in e for e in errors)
        assert any("Invalid expression" in e for e in errors)

    def test_extract_helper_calls(self, engine):
        template = "{{ upper(join(a, b)) }} {{ name | default('x') }} {{ mdu.heading(t) }}"
        assert engine.extract_helper_calls(template) == ["upper", "join", "mdu.heading"]


class TestRenderResult:
    def test_result_fields(self, engine):
        result = engine.render("a {{ x }} {{ y }}", {"x": 1, "y": 2})
        assert result.text == "a 1 2"
        assert result.had_templates is True
        assert result.expressions == ["x", "y"]

    def test_non_string_template(self, engine):
        with pytest.raises(HelperCacheError) as exc_info:
            engine.render(42)
        assert exc_info.value.code == "INVALID_ARGUMENT"
