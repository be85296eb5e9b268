"""
Package surface.

Covers:
  - every csvline module imports cleanly
  - public scanner helpers keep their docstrings
"""

from __future__ import annotations

import importlib

import pytest

MODULES = [
    "csvline.cli",
    "csvline.pipeline",
    "csvline.configs.config",
    "csvline.configs.exceptions",
    "csvline.discovery.base",
    "csvline.discovery.dialect",
    "csvline.discovery.headers",
    "csvline.discovery.line_sources",
    "csvline.models.models",
    "csvline.models.record",
    "csvline.transformers.continuation",
    "csvline.transformers.normalizers",
    "csvline.transformers.row_generator",
    "csvline.transformers.splitter",
    "csvline.utils.string_pool",
    "csvline.utils.validation",
]


class TestImports:
    @pytest.mark.parametrize("name", MODULES)
    def test_module_imports(self, name):
        assert importlib.import_module(name).__name__ == name

    def test_splitter_docstrings(self):
        splitter = importlib.import_module("csvline.transformers.splitter")
        assert "doubled quote" in splitter.is_unterminated.__doc__
        assert splitter.split_line.__doc__
