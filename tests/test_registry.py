"""Tests for the function registry pass."""
import pytest

from tmpl.engine.registry import (
    build_function_table,
    declaration_extent,
    parse_signature,
)


class TestParseSignature:
    """Test declaration header parsing."""

    def test_name_and_params(self):
        assert parse_signature(" greet(name, greeting) {") == ("greet", ["name", "greeting"])

    def test_bare_name(self):
        assert parse_signature("setup") == ("setup", [])

    def test_empty_params_dropped(self):
        assert parse_signature("f(a, , b,)") == ("f", ["a", "b"])

    def test_empty_parens(self):
        assert parse_signature("f()") == ("f", [])


class TestBuildFunctionTable:
    """Test pass-one collection of function definitions."""

    def test_brace_on_same_line(self):
        lines = ["function: greet(name) {", "create_file: $name", "}"]
        table = build_function_table(lines)

        definition = table.get("greet")
        assert definition.params == ("name",)
        assert (definition.start_line, definition.end_line) == (1, 2)
        assert not table.errors

    def test_brace_on_following_line(self):
        lines = ["function: setup", "", "{", "mkdir: src", "mkdir: docs", "}"]
        definition = build_function_table(lines).get("setup")

        assert definition.params == ()
        assert (definition.start_line, definition.end_line) == (3, 5)

    def test_nested_block_in_body(self):
        lines = [
            "function: f(x) {",
            "if: $x == yes",
            "{",
            "mkdir: a",
            "}",
            "}",
            "f(yes)",
        ]
        definition = build_function_table(lines).get("f")
        assert (definition.start_line, definition.end_line) == (1, 5)

    def test_redeclaration_last_wins(self):
        lines = ["function: f(a) {", "}", "function: f(a, b) {", "mkdir: x", "}"]
        table = build_function_table(lines)

        assert len(table) == 1
        assert table.get("f").params == ("a", "b")

    def test_declarations_inside_bodies_are_not_registered(self):
        lines = ["function: outer {", "function: inner {", "}", "}"]
        table = build_function_table(lines)
        assert "outer" in table
        assert "inner" not in table

    def test_missing_opening_brace_is_reported(self):
        lines = ["function: broken(a)", "mkdir: x", "function: ok {", "}"]
        table = build_function_table(lines)

        assert "ok" in table
        broken = table.get("broken")
        assert broken.start_line == broken.end_line == 1
        assert len(table.errors) == 1
        assert table.errors[0].line_number == 1
        assert "Expected '{'" in table.errors[0].message

    def test_missing_closing_brace_records_partial_range(self):
        lines = ["function: f {", "mkdir: a", "mkdir: b"]
        table = build_function_table(lines)

        assert (table.get("f").start_line, table.get("f").end_line) == (1, 3)
        assert "Missing closing '}'" in table.errors[0].message

    def test_table_is_read_only(self):
        table = build_function_table(["function: f {", "}"])
        with pytest.raises(TypeError):
            table.functions["g"] = table.get("f")


class TestDeclarationExtent:
    """Test how many lines execution steps over for a declaration."""

    def test_extent_covers_header_and_body(self):
        lines = ["function: f", "{", "mkdir: a", "}", "after"]
        assert declaration_extent(lines, 0) == 4

    def test_malformed_header_occupies_one_line(self):
        lines = ["function: f", "mkdir: a"]
        assert declaration_extent(lines, 0) == 1
