"""
tests/test_renderer.py
Unit tests for crudgen.renderer (single-pass placeholder substitution).
"""

from __future__ import annotations

from typing import Dict

from crudgen.renderer import placeholders_in, render, unbound_placeholders


BODY: str = (
    "class {{modelName}}Controller:\n"
    "    table = \"{{tableName}}\"\n"
    "    route = \"/{{routeName}}\"\n"
    "    model = {{modelName}}\n"
)

BINDINGS: Dict[str, str] = {
    "{{modelName}}": "Post",
    "{{tableName}}": "posts",
    "{{routeName}}": "posts",
}


class TestRender:
    def test_every_occurrence_is_replaced(self) -> None:
        out = render(BODY, BINDINGS)
        assert out == (
            "class PostController:\n"
            "    table = \"posts\"\n"
            "    route = \"/posts\"\n"
            "    model = Post\n"
        )

    def test_substitution_is_complete(self) -> None:
        out = render(BODY, BINDINGS)
        for token in BINDINGS:
            assert token not in out
        assert placeholders_in(out) == ()

    def test_identity_without_tokens(self) -> None:
        body = "plain text with {braces} and {{ jinja_expression }}"
        assert render(body, BINDINGS) == body

    def test_identity_with_empty_bindings(self) -> None:
        assert render(BODY, {}) == BODY

    def test_empty_body(self) -> None:
        assert render("", BINDINGS) == ""

    def test_unbound_tokens_are_left_untouched(self) -> None:
        out = render("{{modelName}} / {{unknownToken}}", BINDINGS)
        assert out == "Post / {{unknownToken}}"

    def test_replacement_text_is_not_rescanned(self) -> None:
        bindings = {
            "{{modelName}}": "{{tableName}}",
            "{{tableName}}": "posts",
        }
        assert render("{{modelName}}:{{tableName}}", bindings) == "{{tableName}}:posts"

    def test_order_of_bindings_does_not_matter(self) -> None:
        reversed_bindings = dict(reversed(list(BINDINGS.items())))
        assert render(BODY, BINDINGS) == render(BODY, reversed_bindings)

    def test_longer_token_is_not_shadowed_by_prefix(self) -> None:
        bindings = {
            "{{model": "WRONG",
            "{{modelName}}": "Post",
            "{{modelNamePlural}}": "Posts",
        }
        assert render("{{modelNamePlural}} {{modelName}}", bindings) == "Posts Post"

    def test_regex_metacharacters_in_tokens_and_values(self) -> None:
        bindings = {"{{a.b}}": r"\1 $0 (x)"}
        assert render("[{{a.b}}] [{{aXb}}]", bindings) == r"[\1 $0 (x)] [{{aXb}}]"

    def test_deterministic(self) -> None:
        assert render(BODY, BINDINGS) == render(BODY, BINDINGS)


class TestPlaceholders:
    def test_placeholders_in_order_of_appearance(self) -> None:
        assert placeholders_in(BODY) == ("{{modelName}}", "{{tableName}}", "{{routeName}}")

    def test_jinja_expressions_are_not_placeholders(self) -> None:
        assert placeholders_in("{{ post.title }} {{column}}") == ("{{column}}",)

    def test_unbound_placeholders(self) -> None:
        assert unbound_placeholders("{{modelName}} {{form}}", BINDINGS) == ("{{form}}",)
