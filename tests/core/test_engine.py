"""
Tests for the Conversion Engine.

Verifies:
1. Phase ordering (exports before boundary, boundary before imports).
2. Shebang lines survive untouched.
3. Parse errors produce an unsuccessful result instead of raising.
4. Output validation aborts (or only logs) when a pass emits broken code.
5. Warning and metadata positions refer to the caller's input.
6. The `on_warn` callback receives every warning in order.
"""

import pytest

from js_switcheroo import convert
from js_switcheroo.config import RuntimeConfig
from js_switcheroo.core.bindings import Binding
from js_switcheroo.core.engine import ASTEngine, OutputValidationError, split_shebang
from js_switcheroo.core.parser import parse_module
from js_switcheroo.core.rewriter import ConversionContext, RewritePass
from js_switcheroo.core.visitor import Replacement
from js_switcheroo.enums import DirectiveKind, ExportKind, ImportKind, WarningKind


class BreakEverything(RewritePass):
  name = "break-everything"

  def visit_program(self, root):
    return Replacement.of(root, "var = ;")


def test_split_shebang():
  assert split_shebang("#!/usr/bin/env node\nfoo();") == ("#!/usr/bin/env node\n", "foo();")
  assert split_shebang("foo();") == ("", "foo();")
  assert split_shebang("#!node") == ("#!node", "")


def test_shebang_preserved():
  code = "#!/usr/bin/env node\nvar a = require('a');\n"
  assert convert(code) == "#!/usr/bin/env node\nimport a from 'a';\n"


def test_parse_error_is_unsuccessful():
  result = ASTEngine().run("var = ;")
  assert not result.success
  assert result.has_errors
  assert result.errors[0].startswith("Parse Error")
  assert result.code == "var = ;"


def test_convert_raises_value_error_on_bad_input():
  with pytest.raises(ValueError, match="Conversion failed"):
    convert("function (")


def test_validation_aborts_pass():
  engine = ASTEngine(RuntimeConfig(validate_output=True))
  module = parse_module("foo();")
  with pytest.raises(OutputValidationError):
    engine._apply(BreakEverything, module, ConversionContext(engine.config))


def test_validation_disabled_keeps_output():
  engine = ASTEngine(RuntimeConfig(validate_output=False))
  module = parse_module("foo();")
  rewritten = engine._apply(BreakEverything, module, ConversionContext(engine.config))
  assert rewritten.code == "var = ;"
  assert rewritten.has_errors


def test_unchanged_pass_returns_same_module():
  engine = ASTEngine()
  module = parse_module("foo();")
  assert engine._apply(RewritePass, module, ConversionContext(engine.config)) is module


def test_import_metadata():
  result = ASTEngine().run("var foo = require('foo');")
  assert result.code == "import foo from 'foo';"
  record = result.metadata.imports[0]
  assert record.type == ImportKind.DEFAULT
  assert record.path == "foo"
  assert record.bindings == [Binding(local_name="foo", export_name="default")]


def test_export_metadata_positions_refer_to_input():
  code = "var a = require('a');\nexports.x = 1;\n"
  result = ASTEngine().run(code)

  assert result.code == "import a from 'a';\nexport let x = 1;\n"
  record = result.metadata.exports[0]
  assert record.type == ExportKind.NAMED
  assert record.node.line == 2
  assert record.node.column == 1
  assert record.node.text == "exports.x = 1;"


def test_warning_positions_refer_to_input():
  code = "var a = require('a');\nfoo();\nvar b = require('b');\n"
  result = ASTEngine().run(code)

  assert result.code == "import a from 'a';\nfoo();\nvar b = require('b');\n"
  assert len(result.warnings) == 1
  warning = result.warnings[0]
  assert warning.kind == WarningKind.UNSUPPORTED_IMPORT
  assert (warning.node.line, warning.node.column) == (3, 9)
  assert warning.node.start == code.index("require('b')")


def test_warning_positions_after_unwrap():
  code = "(function () {\n  require('x')('y');\n})();\n"
  result = ASTEngine().run(code)

  assert result.code == "require('x')('y');\n"
  assert (result.warnings[0].node.line, result.warnings[0].node.column) == (2, 3)
  assert result.metadata.unwrapped is not None
  assert result.metadata.unwrapped.line == 1


def test_shebang_shifts_positions():
  code = "#!/usr/bin/env node\nrequire('x')('y');\n"
  result = ASTEngine().run(code)
  assert result.warnings[0].node.line == 2


def test_strict_directive_removed():
  result = ASTEngine().run("'use strict';\nvar a = require('a');\n")
  assert result.code == "import a from 'a';\n"
  assert result.metadata.directives[0].type == DirectiveKind.REMOVED_STRICT_MODE


def test_iife_unwrap_can_be_disabled():
  code = "(function () {\n  exports.x = 1;\n})();\n"
  result = ASTEngine(RuntimeConfig(unwrap_iife=False)).run(code)

  assert result.code == code
  assert [w.kind for w in result.warnings] == [WarningKind.UNSUPPORTED_EXPORT]


def test_on_warn_receives_warnings_in_order():
  calls = []
  config = RuntimeConfig(on_warn=lambda node, kind, message: calls.append((node.line, kind)))
  ASTEngine(config).run("require('a')();\nif (x) { module.exports.y = 1; }\n")

  assert calls == [(1, "unsupported-import"), (2, "unsupported-export")]


def test_engine_is_reusable():
  engine = ASTEngine()
  first = engine.run("exports.a = 1;")
  second = engine.run("exports.a = 1;")
  assert first.code == second.code == "export let a = 1;"
