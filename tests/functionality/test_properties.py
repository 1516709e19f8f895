"""
Behavioural Properties of the Conversion.

Verifies:
1. Idempotence: converting converted output changes nothing.
2. Code without CommonJS constructs is returned byte-for-byte.
3. Adding safe function names never shrinks the set of converted requires.
4. Generated locals never collide with names already in the program.
5. Converted output always parses.
"""

import pytest

from js_switcheroo.config import RuntimeConfig
from js_switcheroo.core.engine import ASTEngine
from js_switcheroo.core.parser import parse_module
from js_switcheroo.enums import ImportKind

CORPUS = [
  "var foo = require('foo');\nfoo.default();\n",
  "const { a, b: c } = require('m');\nexports.sum = function (x) { return a + c + x; };\n",
  "var a = 1;\nexports.a = 2;\nexports.b = a;\n",
  "(function () {\n  'use strict';\n  var x = require('x');\n  module.exports = { x };\n})();\n",
  "exports.default = 1;\nexports.then = function then() {};\n",
  "exports.a = 1;\nexports.a = 2;\n",
  "require('a');\nsetup();\nrequire('b');\n",
  "#!/usr/bin/env node\nmodule.exports = require('./cli');\n",
]

UNRELATED = [
  "",
  "// just a comment\n",
  "function add(a, b) {\n  return a + b; // sum\n}\n\nconsole.log(add(1, 2));\n",
  "class Point {\n  constructor(x) { this.x = x; }\n}\n",
  "const s = `multi\n    line ${value}`;\n",
]


def run(code: str, **options):
  result = ASTEngine(RuntimeConfig(**options)).run(code)
  assert result.success, result.errors
  return result


@pytest.mark.parametrize("code", CORPUS)
def test_idempotent(code):
  once = run(code).code
  assert run(once).code == once


@pytest.mark.parametrize("code", CORPUS)
def test_output_parses(code):
  parse_module(run(code).code)


@pytest.mark.parametrize("code", UNRELATED)
def test_unrelated_code_untouched(code):
  result = run(code)
  assert result.code == code
  assert not result.warnings


def test_safe_functions_are_monotonic():
  code = "var a = require('a');\nsetup();\nvar b = require('b');\ninit();\nvar c = require('c');\n"

  def converted(safe):
    return {r.path for r in run(code, safe_function_identifiers=safe).metadata.imports if r.type == ImportKind.DEFAULT}

  none = converted([])
  some = converted(["setup"])
  every = converted(["setup", "init"])
  assert none == {"a"}
  assert none <= some <= every
  assert every == {"a", "b", "c"}


def test_generated_locals_do_not_collide():
  code = "var a = 1, _a = 2, a1 = 3;\nexports.a = 4;\nexports.b = a + _a + a1;\n"
  result = run(code)

  assert "let a2 = 4;" in result.code
  declared = [b.local_name for r in result.metadata.exports for b in r.bindings]
  assert declared == ["a2", "b"]
  assert len(set(declared)) == len(declared)
