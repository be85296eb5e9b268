"""
Command-line interface.

Covers:
  - headers: index/name listing, aliases shown next to their column
  - dump: tsv and json output
  - validate: exit 0 when clean, 1 when a record has the wrong column count
  - strict duplicate headers → exit 1
  - missing source file → exit 2
  - option priority: CLI flag over environment variable over default
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from csvline.cli import _build_options, _build_parser, main
from csvline.configs.config import HeaderMode


# ============================================================================
# Helpers
# ============================================================================

def write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in (
        "CSVLINE_SEPARATOR",
        "CSVLINE_SKIP_ROWS",
        "CSVLINE_ENCODING",
        "CSVLINE_MULTILINE",
        "CSVLINE_TRIM",
    ):
        monkeypatch.delenv(key, raising=False)


# ============================================================================
# Commands
# ============================================================================

class TestHeadersCommand:
    def test_lists_resolved_headers(self, tmp_path, capsys):
        path = write(tmp_path / "d.csv", "Name,Name,Value\n1,2,3\n")
        assert main(["headers", "--source", str(path)]) == 0
        out = capsys.readouterr().out
        assert out.splitlines() == ["0\tName", "1\tName2", "2\tValue"]

    def test_shows_aliases(self, tmp_path, capsys):
        path = write(tmp_path / "d.csv", "Category,Price\n")
        assert main(["headers", "--source", str(path), "--alias", "Cat,Category"]) == 0
        assert "0\tCategory\t(Cat)" in capsys.readouterr().out

    def test_strict_duplicates_exit_1(self, tmp_path, capsys):
        path = write(tmp_path / "d.csv", "a,a\n")
        assert main(["headers", "--source", str(path), "--strict-headers"]) == 1
        assert "Duplicate headers" in capsys.readouterr().err

    def test_empty_file_exit_1(self, tmp_path):
        path = write(tmp_path / "d.csv", "# nothing here\n")
        assert main(["headers", "--source", str(path)]) == 1

    def test_missing_file_exit_2(self, tmp_path, capsys):
        assert main(["headers", "--source", str(tmp_path / "nope.csv")]) == 2
        assert "Cannot open" in capsys.readouterr().err


class TestDumpCommand:
    def test_tsv(self, tmp_path, capsys):
        path = write(tmp_path / "d.csv", 'a;b\n1;"x;y"\n')
        assert main(["dump", "--source", str(path)]) == 0
        assert capsys.readouterr().out.splitlines() == ["1\tx;y"]

    def test_json(self, tmp_path, capsys):
        path = write(tmp_path / "d.csv", 'a,b\n1,"two\nlines"\n')
        assert main(["dump", "--source", str(path), "--format", "json", "--multiline"]) == 0
        lines = capsys.readouterr().out.splitlines()
        assert json.loads(lines[0]) == {"a": "1", "b": "two\nlines"}


class TestValidateCommand:
    def test_clean_file(self, tmp_path, capsys):
        path = write(tmp_path / "d.csv", "a,b\n1,2\n3,4\n")
        assert main(["validate", "--source", str(path)]) == 0
        assert "VALID: 2 record(s)" in capsys.readouterr().out

    def test_mismatched_rows(self, tmp_path, capsys):
        path = write(tmp_path / "d.csv", "a,b\n1,2,3\n4,5\n6\n")
        assert main(["validate", "--source", str(path)]) == 1
        assert "2 of 3 record(s)" in capsys.readouterr().out


# ============================================================================
# Option building
# ============================================================================

class TestBuildOptions:
    def _args(self, *argv):
        return _build_parser().parse_args(["dump", "--source", "x.csv", *argv])

    def test_defaults(self):
        options = _build_options(self._args())
        assert options.separator is None
        assert options.rows_to_skip == 0
        assert options.trim_data is True
        assert options.header_mode is HeaderMode.PRESENT

    def test_env_used_when_flag_absent(self, monkeypatch):
        monkeypatch.setenv("CSVLINE_SEPARATOR", "\\t")
        monkeypatch.setenv("CSVLINE_SKIP_ROWS", "3")
        monkeypatch.setenv("CSVLINE_MULTILINE", "true")
        monkeypatch.setenv("CSVLINE_TRIM", "false")
        options = _build_options(self._args())
        assert options.separator == "\t"
        assert options.rows_to_skip == 3
        assert options.allow_newline_in_quotes is True
        assert options.trim_data is False

    def test_flag_beats_env(self, monkeypatch):
        monkeypatch.setenv("CSVLINE_SEPARATOR", ";")
        monkeypatch.setenv("CSVLINE_SKIP_ROWS", "3")
        options = _build_options(self._args("--separator", "|", "--skip-rows", "1"))
        assert options.separator == "|"
        assert options.rows_to_skip == 1

    def test_flags(self):
        options = _build_options(self._args(
            "--no-header", "--strict-headers", "--case-sensitive",
            "--backslash-escape", "--single-quote", "--no-trim",
            "--alias", "Cat, Category", "--alias", "Qty,Quantity",
        ))
        assert options.header_mode is HeaderMode.ABSENT
        assert options.fix_duplicate_headers is False
        assert options.case_sensitive is True
        assert options.allow_backslash_escape is True
        assert options.allow_single_quote is True
        assert options.trim_data is False
        assert options.aliases == [["Cat", "Category"], ["Qty", "Quantity"]]
