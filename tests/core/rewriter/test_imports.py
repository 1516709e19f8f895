"""
Tests for Import Rewriting.

Verifies the four convertible `require` shapes, the safe boundary, and the
shapes that are left in place and reported.
"""

from js_switcheroo.config import RuntimeConfig
from js_switcheroo.core.bindings import Binding
from js_switcheroo.core.engine import ASTEngine
from js_switcheroo.enums import ImportKind, WarningKind


def run(code: str, **options):
  return ASTEngine(RuntimeConfig(**options)).run(code)


def kinds(result):
  return [w.kind for w in result.warnings]


def test_default_import():
  result = run("var foo = require('foo');")
  assert result.code == "import foo from 'foo';"
  assert result.metadata.imports[0].type == ImportKind.DEFAULT


def test_default_import_multiple_declarators():
  result = run("const a = require('a'), b = require(\"b\");\n")
  assert result.code == "import a from 'a';\nimport b from \"b\";\n"
  assert [r.path for r in result.metadata.imports] == ["a", "b"]


def test_named_import():
  result = run("var parse = require('espree').parse;")
  assert result.code == "import { parse } from 'espree';"
  record = result.metadata.imports[0]
  assert record.type == ImportKind.NAMED
  assert record.bindings == [Binding(local_name="parse", export_name="parse")]


def test_named_import_alias():
  assert run("let p = require('espree').parse;").code == "import { parse as p } from 'espree';"


def test_destructured_import():
  result = run("var { pow, sin, cos: cosine } = require('math');")
  assert result.code == "import { pow, sin, cos as cosine } from 'math';"


def test_bare_import():
  result = run("require('./polyfill');\n")
  assert result.code == "import './polyfill';\n"
  assert result.metadata.imports[0].type == ImportKind.BARE


def test_destructured_with_default_value_left_alone():
  code = "var { a = 1 } = require('m');"
  result = run(code)
  assert result.code == code
  assert kinds(result) == [WarningKind.UNSUPPORTED_IMPORT]


def test_mixed_declaration_left_alone():
  code = "var a = require('a'), b = 1;"
  result = run(code)
  assert result.code == code
  assert kinds(result) == [WarningKind.UNSUPPORTED_IMPORT]


def test_chained_call_reported():
  code = "require('debug')('mocha:debug');"
  result = run(code)
  assert result.code == code
  assert kinds(result) == [WarningKind.UNSUPPORTED_IMPORT]


def test_dynamic_path_not_matched():
  code = "var m = require(name);"
  result = run(code)
  assert result.code == code
  assert not result.warnings


def test_nested_require_reported():
  code = "function load() {\n  return require('lazy');\n}\n"
  result = run(code)
  assert result.code == code
  assert kinds(result) == [WarningKind.UNSUPPORTED_IMPORT]


def test_require_after_side_effect_kept():
  code = "var a = require('a');\nsetup();\nvar b = require('b');\n"
  result = run(code)
  assert result.code == "import a from 'a';\nsetup();\nvar b = require('b');\n"


def test_safe_function_extends_boundary():
  code = "var a = require('a');\nsetup();\nvar b = require('b');\n"
  result = run(code, safe_function_identifiers=["setup"])
  assert result.code == "import a from 'a';\nsetup();\nimport b from 'b';\n"
  assert not result.warnings


def test_local_require_disables_rewrite():
  code = "function require(p) { return p; }\nvar a = require('a');\n"
  result = run(code)
  assert result.code == code
  assert not result.warnings


def test_comments_preserved():
  code = "// deps\nvar a = require('a'); // the a\n\n/* b */\nvar b = require('b');\n"
  result = run(code)
  assert result.code == "// deps\nimport a from 'a'; // the a\n\n/* b */\nimport b from 'b';\n"
