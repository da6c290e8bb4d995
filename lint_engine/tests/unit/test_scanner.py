"""Unit tests for the lexical scanner helpers."""

from __future__ import annotations

import pytest

from lint_engine.scanner import (
    is_all_caps,
    is_lower_camel_case,
    is_lower_snake_case,
    is_one_line_statement,
    is_upper_camel_case,
    iter_code,
    iter_line_comments,
    line_comment_marker,
    next_word,
    previous_word,
    skip_comment,
    skip_spaces_backward,
    skip_string,
)


# ---------------------------------------------------------------------------
# Strings
# ---------------------------------------------------------------------------


class TestSkipString:
    def test_lands_on_closing_quote(self) -> None:
        text = "A \"st'r'ing\"\nsecond"
        matched, end = skip_string(text, 2)
        assert matched is True
        assert end == 11
        assert text[end + 1] == "\n"

    def test_single_quotes(self) -> None:
        assert skip_string("x 'abc' y", 2) == (True, 6)

    def test_not_a_quote(self) -> None:
        assert skip_string("SELECT 1", 0) == (False, 0)

    def test_position_past_end(self) -> None:
        assert skip_string("abc", 3) == (False, 3)

    def test_escaped_quote_does_not_close(self) -> None:
        text = "'a\\'b'"
        assert skip_string(text, 0) == (True, 5)

    def test_escaped_backslash_before_quote_closes(self) -> None:
        text = "'a\\\\' tail"
        assert skip_string(text, 0) == (True, 4)

    def test_unterminated_runs_to_end(self) -> None:
        assert skip_string("'abc", 0) == (True, 3)


# ---------------------------------------------------------------------------
# Comments
# ---------------------------------------------------------------------------


class TestSkipComment:
    def test_block_comment_from_slash(self) -> None:
        text = "A /*comment*/\nsecond"
        assert skip_comment(text, 2) == (True, 12)
        assert text[12] == "/"

    def test_block_comment_from_star(self) -> None:
        assert skip_comment("A /*comment*/\nsecond", 3) == (True, 12)

    def test_line_comment_from_either_dash(self) -> None:
        text = "A --comment--\nsecond line"
        assert skip_comment(text, 2) == (True, 13)
        assert skip_comment(text, 3) == (True, 13)
        assert text[13] == "\n"

    def test_hash_comment(self) -> None:
        assert skip_comment("# note\nSELECT", 0) == (True, 6)

    def test_line_comment_on_last_line_runs_to_length(self) -> None:
        text = "SELECT 1 -- tail"
        assert skip_comment(text, 9) == (True, len(text))

    def test_custom_delimiter(self) -> None:
        assert skip_comment("-- a|b", 0, delimiter="|") == (True, 4)

    def test_single_line_can_be_disallowed(self) -> None:
        assert skip_comment("-- a", 0, allow_single_line=False) == (False, 0)

    def test_unterminated_block_runs_to_end(self) -> None:
        text = "/* never closed"
        assert skip_comment(text, 0) == (True, len(text) - 1)

    def test_slash_closing_block_is_not_an_opener(self) -> None:
        assert skip_comment("*/ x", 1) == (False, 1)

    def test_slash_after_block_close_is_not_a_line_comment(self) -> None:
        assert skip_comment("x*//y", 3) == (False, 3)

    def test_plain_code(self) -> None:
        assert skip_comment("SELECT", 0) == (False, 0)

    def test_line_comment_marker(self) -> None:
        assert line_comment_marker("-- x", 0) == "--"
        assert line_comment_marker("// x", 0) == "//"
        assert line_comment_marker("# x", 0) == "#"
        assert line_comment_marker("- x", 0) is None


class TestIterCode:
    def test_skips_strings_and_comments(self) -> None:
        # The delimiter closing a line comment is consumed with it.
        assert list(iter_code("a'b'c--d\ne")) == [0, 4, 9]

    def test_skips_block_comments(self) -> None:
        assert list(iter_code("/*x*/y")) == [5]


class TestIterLineComments:
    def test_yields_start_marker_and_end(self) -> None:
        text = "SELECT 1; -- one\n'--' # two"
        assert list(iter_line_comments(text)) == [(10, "--", 16), (22, "#", 27)]

    def test_markers_inside_block_comment_are_ignored(self) -> None:
        assert list(iter_line_comments("/* here is // and -- */SELECT 1")) == []

    def test_block_opener_inside_line_comment_is_ignored(self) -> None:
        text = "-- Comment /* unfinished comment"
        assert list(iter_line_comments(text)) == [(0, "--", len(text))]


# ---------------------------------------------------------------------------
# Words
# ---------------------------------------------------------------------------


class TestWords:
    def test_skip_spaces(self) -> None:
        assert skip_spaces_backward("a  \n b", 4) == 0
        assert skip_spaces_backward("   ", 2) == -1

    def test_next_word_stops_at_paren(self) -> None:
        assert next_word("SELECT  foo(bar)", 6) == ("foo", 11)

    def test_next_word_stops_at_semicolon(self) -> None:
        assert next_word("IMPORT MODULE a.b;", 6) == ("MODULE", 13)

    def test_previous_word(self) -> None:
        assert previous_word("a AS  b", 6) == ("AS", 2)

    def test_previous_word_missing(self) -> None:
        assert previous_word("(x", 1) == ("", -1)
        assert previous_word("x", 0) == ("", -1)


# ---------------------------------------------------------------------------
# Naming conventions
# ---------------------------------------------------------------------------


class TestNamingPredicates:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [("TableName", True), ("tableName", False), ("Table_Name", False), ("T", True)],
    )
    def test_upper_camel_case(self, name: str, expected: bool) -> None:
        assert is_upper_camel_case(name) is expected

    def test_lower_camel_case(self) -> None:
        assert is_lower_camel_case("columnName")
        assert not is_lower_camel_case("ColumnName")
        assert not is_lower_camel_case("column_name")

    def test_all_caps(self) -> None:
        assert is_all_caps("GROUP BY")
        assert is_all_caps("TWO_PI_2")
        assert not is_all_caps("Select")

    def test_lower_snake_case(self) -> None:
        assert is_lower_snake_case("column_name")
        assert not is_lower_snake_case("columnName")


class TestOneLineStatement:
    @pytest.mark.parametrize(
        "line",
        [
            "CREATE TABLE Foo",
            "IMPORT MODULE a.very.long.module.path",
            "CREATE TEMP FUNCTION f(",
            "create or replace table x",
        ],
    )
    def test_unbreakable_headers(self, line: str) -> None:
        assert is_one_line_statement(line)

    @pytest.mark.parametrize(
        "line",
        [
            "SELECT a, b, c FROM t",
            "CREATE TABLE Foo AS",
            "IMPORT MODULE a.b.c AS x",
            "",
        ],
    )
    def test_ordinary_lines(self, line: str) -> None:
        assert not is_one_line_statement(line)
