"""
Tests for JavaScript Parsing.

Verifies:
1. Valid source parses into a `JSModule` with a `program` root.
2. Syntax errors raise `JSParseError` carrying a 1-based position.
3. `statements()` skips comments.
4. Node snapshots record 1-based line and column.
"""

import pytest

from js_switcheroo.core.errors import JSParseError
from js_switcheroo.core.parser import JSModule, parse_module


def test_parse_valid_module():
  module = parse_module("var a = require('a');\n")
  assert module.root.type == "program"
  assert not module.has_errors
  assert module.source == b"var a = require('a');\n"


def test_parse_error_position():
  with pytest.raises(JSParseError) as excinfo:
    parse_module("var a = 1;\nvar = ;\n")
  assert excinfo.value.line == 2
  assert "line 2" in str(excinfo.value)


def test_error_tolerant_module_reports_errors():
  module = JSModule("function (")
  assert module.has_errors
  assert module.first_error() is not None


def test_statements_skip_comments():
  module = parse_module("// header\nvar a = 1;\n/* block */\nfoo();\n")
  kinds = [stmt.type for stmt in module.statements()]
  assert kinds == ["variable_declaration", "expression_statement"]


def test_snapshot_positions():
  module = parse_module("var a = 1;\n  foo();\n")
  call = module.statements()[1]
  info = module.snapshot(call)

  assert info.type == "expression_statement"
  assert info.text == "foo();"
  assert info.line == 2
  assert info.column == 3
  assert info.start == 13


def test_scope_is_built_lazily():
  module = parse_module("var a = 1;")
  assert module._scope is None
  assert module.scope.program.has_own_binding("a")
  assert module.scope is module.scope
