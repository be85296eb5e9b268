"""
Line splitting, continuation detection and field normalization.

Covers:
  - split_line reproduces the input when fields are rejoined
  - separators inside quoted spans are literal; doubled quotes stay quoted
  - a quote only opens a span as the first character of a field
  - trailing text after a closing quote stays in the same field
  - leading whitespace before a quote is ignored only when trimming
  - backslash-escaped quotes and single-quote enclosure are opt-in
  - is_unterminated / needs_continuation detect open quoted fields
  - normalize_field trims, unquotes and unescapes; it is idempotent on
    unquoted values
"""

from __future__ import annotations

import pytest

from csvline.models.models import Dialect, RawField
from csvline.transformers.continuation import (
    has_unterminated_field,
    join_physical,
    needs_continuation,
)
from csvline.transformers.normalizers import normalize_field, normalize_fields
from csvline.transformers.splitter import is_unterminated, split_line


# ============================================================================
# Helpers
# ============================================================================

def texts(line: str, dialect: Dialect | None = None) -> list[str]:
    return [f.text for f in split_line(line, dialect or Dialect())]


def field(text: str) -> RawField:
    return RawField(text, 0, len(text))


# ============================================================================
# Splitter
# ============================================================================

class TestSplitLine:
    def test_simple_line(self):
        assert texts("a,b,c") == ["a", "b", "c"]

    @pytest.mark.parametrize(
        "line",
        ["a,b,c", "", ",", "a,,b", " x , y ", "one", "1,2,3,4,5,6,7,8"],
    )
    def test_rejoin_reproduces_unquoted_line(self, line):
        fields = split_line(line, Dialect())
        assert ",".join(f.text for f in fields) == line

    def test_rejoin_reproduces_quoted_line(self):
        line = 'A,"B,and""C""",D'
        assert ",".join(texts(line)) == line

    def test_quoted_separator_and_doubled_quotes(self):
        fields = split_line('A,"B,and""C""",D', Dialect())
        assert len(fields) == 3
        assert fields[1].text == '"B,and""C"""'
        assert normalize_field(fields[1].text, Dialect()) == 'B,and"C"'

    def test_empty_line_is_one_empty_field(self):
        fields = split_line("", Dialect())
        assert len(fields) == 1
        assert fields[0].length == 0

    def test_trailing_separator_gives_empty_field(self):
        assert texts("a,") == ["a", ""]

    def test_quote_inside_field_is_literal(self):
        assert texts('ab"c,d') == ['ab"c', "d"]

    def test_text_after_closing_quote_stays_in_field(self):
        assert texts('"a"b,c') == ['"a"b', "c"]

    def test_leading_space_before_quote_when_trimming(self):
        assert texts(' "a,b",c') == [' "a,b"', "c"]

    def test_leading_space_before_quote_without_trimming(self):
        assert texts(' "a,b",c', Dialect(trim=False)) == [' "a', 'b"', "c"]

    def test_spans_point_into_the_line(self):
        line = "ab,cde"
        fields = split_line(line, Dialect())
        assert fields[1].line is line
        assert (fields[1].start, fields[1].length) == (3, 3)

    def test_tab_separator(self):
        assert texts("a\tb,c\td", Dialect(separator="\t")) == ["a", "b,c", "d"]

    def test_backslash_escape_keeps_quote_open(self):
        dialect = Dialect(allow_backslash_escape=True)
        fields = texts('"a\\",b",c', dialect)
        assert fields == ['"a\\",b"', "c"]

    def test_backslash_is_literal_by_default(self):
        assert len(texts('"a\\",b",c')) == 3

    def test_single_quote_enclosure(self):
        dialect = Dialect(allow_single_quote=True)
        assert texts("'a,b',c", dialect) == ["'a,b'", "c"]

    def test_single_quote_is_literal_by_default(self):
        assert texts("'a,b',c") == ["'a", "b'", "c"]

    def test_unterminated_quote_runs_to_end_of_line(self):
        assert texts('a,"b,c') == ["a", '"b,c']

    def test_split_is_idempotent(self):
        line = 'x,"y,z",w'
        assert split_line(line, Dialect()) == split_line(line, Dialect())


# ============================================================================
# Continuation
# ============================================================================

class TestUnterminated:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ('"abc', True),
            ('"abc"', False),
            ('"a""', True),
            ('"a"""', False),
            ('"', True),
            ("abc", False),
            ("", False),
            ('ab"c', False),
            ('"a"b', False),
        ],
    )
    def test_double_quote(self, text, expected):
        assert is_unterminated(field(text), Dialect()) is expected

    def test_leading_whitespace_when_trimming(self):
        assert is_unterminated(field('  "abc'), Dialect()) is True
        assert is_unterminated(field('  "abc'), Dialect(trim=False)) is False

    def test_backslash_escaped_closing_quote(self):
        dialect = Dialect(allow_backslash_escape=True)
        assert is_unterminated(field('"abc\\"'), dialect) is True
        assert is_unterminated(field('"abc\\"'), Dialect()) is False

    def test_single_quote(self):
        assert is_unterminated(field("'abc"), Dialect(allow_single_quote=True)) is True
        assert is_unterminated(field("'abc"), Dialect()) is False

    def test_field_in_the_middle_of_a_line(self):
        line = 'a,"bc",d'
        fields = split_line(line, Dialect())
        assert not has_unterminated_field(fields, Dialect())


class TestNeedsContinuation:
    def test_disabled_dialect_never_continues(self):
        more, fields = needs_continuation('A,"B', Dialect())
        assert more is False
        assert fields is None

    def test_open_quote_needs_more(self):
        dialect = Dialect(allow_newline_in_quotes=True)
        more, fields = needs_continuation('A,"B', dialect)
        assert more is True
        assert len(fields) == 2

    def test_joined_line_is_complete(self):
        dialect = Dialect(allow_newline_in_quotes=True)
        text = join_physical('A,"B', 'C",D', dialect)
        assert text == 'A,"B\nC",D'
        more, fields = needs_continuation(text, dialect)
        assert more is False
        assert normalize_fields(fields, dialect) == ["A", "B\nC", "D"]

    def test_custom_rejoin_string(self):
        dialect = Dialect(allow_newline_in_quotes=True, newline="\r\n")
        assert join_physical("a", "b", dialect) == "a\r\nb"


# ============================================================================
# Normalizer
# ============================================================================

class TestNormalizeField:
    def test_trims_by_default(self):
        assert normalize_field("  x  ", Dialect()) == "x"

    def test_keeps_whitespace_without_trim(self):
        assert normalize_field("  x  ", Dialect(trim=False)) == "  x  "

    def test_trim_happens_before_unquoting(self):
        assert normalize_field('  " x "  ', Dialect()) == " x "

    def test_empty_quoted_value(self):
        assert normalize_field('""', Dialect()) == ""

    def test_single_quote_character_is_unchanged(self):
        assert normalize_field('"', Dialect()) == '"'

    def test_doubled_quotes_unescaped(self):
        assert normalize_field('"a""b"', Dialect()) == 'a"b'

    def test_backslash_escape_enabled(self):
        dialect = Dialect(allow_backslash_escape=True)
        assert normalize_field('"a\\"b"', dialect) == 'a"b'

    def test_backslash_escape_disabled(self):
        assert normalize_field('"a\\"b"', Dialect()) == 'a\\"b'

    def test_single_quote_stripped_without_unescaping(self):
        dialect = Dialect(allow_single_quote=True)
        assert normalize_field("'it''s'", dialect) == "it''s"

    def test_single_quote_ignored_by_default(self):
        assert normalize_field("'abc'", Dialect()) == "'abc'"

    def test_text_after_closing_quote_left_alone(self):
        assert normalize_field('"a"b', Dialect()) == '"a"b'

    @pytest.mark.parametrize("value", ["abc", "a b", "x,y", "", "12.5", "  padded  "])
    def test_idempotent_on_unquoted_values(self, value):
        once = normalize_field(value, Dialect())
        assert normalize_field(once, Dialect()) == once

    def test_normalize_fields_preserves_order(self):
        dialect = Dialect()
        fields = split_line(' a ,"b", c', dialect)
        assert normalize_fields(fields, dialect) == ["a", "b", "c"]
