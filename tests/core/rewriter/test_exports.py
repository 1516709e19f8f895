"""
Tests for Export Rewriting.

Verifies:
1. Named property exports of functions, identifiers and other values.
2. Function renaming with the name-mismatch warning.
3. Fresh locals when the export name is taken, with the conflict warning.
4. Whole-module exports: object literals, re-exports and default exports.
5. Export targets that are not top-level statements are reported, not rewritten.
6. Names already exported by ES `export` statements are never exported twice.
"""

from js_switcheroo.core.bindings import Binding
from js_switcheroo.core.engine import ASTEngine
from js_switcheroo.enums import ExportKind, WarningKind


def run(code: str):
  return ASTEngine().run(code)


def kinds(result):
  return [w.kind for w in result.warnings]


# --- Named property exports ---


def test_anonymous_function_export():
  result = run("exports.add = function(a, b) { return a + b; };")
  assert result.code == "export function add(a, b) { return a + b; }"
  assert result.metadata.exports[0].bindings == [Binding(local_name="add", export_name="add")]
  assert not result.warnings


def test_module_exports_property():
  result = run("module.exports.add = function (a) { return a; };")
  assert result.code == "export function add(a) { return a; }"


def test_top_level_this_property():
  assert run("this.version = '1.0';").code == "export let version = '1.0';"


def test_same_named_function_export():
  result = run("exports.add = function add(a, b) { return a + b; };")
  assert result.code == "export function add(a, b) { return a + b; }"
  assert not result.warnings


def test_mismatched_function_name_is_renamed():
  result = run("exports.add = function sum(a, b) { return a + b; };")
  assert result.code == "export function add(a, b) { return a + b; }"
  assert kinds(result) == [WarningKind.EXPORT_FUNCTION_NAME_MISMATCH]
  assert result.metadata.exports[0].bindings == [Binding(local_name="add", export_name="add")]


def test_self_referencing_function_keeps_its_name():
  code = "exports.fact = function f(n) { return n ? n * f(n - 1) : 1; };"
  result = run(code)
  assert result.code == "function f(n) { return n ? n * f(n - 1) : 1; }\nexport { f as fact };"
  assert not result.warnings


def test_generator_function_export():
  result = run("exports.gen = function* () { yield 1; };")
  assert result.code == "export function* gen() { yield 1; }"


def test_generator_star_stays_against_name():
  result = run("exports.gen = function *() { yield 1; };")
  assert result.code == "export function *gen() { yield 1; }"


def test_spaced_anonymous_function_export():
  result = run("exports.noop = function () {};")
  assert result.code == "export function noop() {}"


def test_function_export_name_taken():
  code = "var add = 1;\nexports.add = function () {};\n"
  result = run(code)
  assert result.code == "var add = 1;\nfunction _add() {}\nexport { _add as add };\n"


def test_identifier_export():
  code = "function helper() {}\nexports.run = helper;\n"
  assert run(code).code == "function helper() {}\nexport { helper as run };\n"


def test_identifier_export_same_name():
  code = "var run = 1;\nexports.run = run;\n"
  assert run(code).code == "var run = 1;\nexport { run };\n"


def test_unbound_identifier_gets_value_export():
  result = run("exports.log = console;")
  assert result.code == "export let log = console;"
  assert not result.warnings


def test_value_export():
  result = run("exports.answer = 6 * 7;")
  assert result.code == "export let answer = 6 * 7;"
  assert result.metadata.exports[0].type == ExportKind.NAMED


def test_value_export_conflicts_with_local_binding():
  result = run("var a = 1;\nexports.a = 2;\n")
  assert result.code == "var a = 1;\nlet _a = 2;\nexport { _a as a };\n"
  assert kinds(result) == [WarningKind.NAMED_EXPORT_CONFLICTS_WITH_LOCAL_BINDING]


def test_reserved_export_name_uses_local():
  result = run("exports.default = 1;")
  assert result.code == "let _default = 1;\nexport { _default as default };"


def test_duplicate_named_export_is_reported():
  result = run("exports.a = 1;\nexports.a = 2;\n")
  assert result.code == "export let a = 1;\nexports.a = 2;\n"
  assert kinds(result) == [WarningKind.UNSUPPORTED_EXPORT]


# --- Whole-module exports ---


def test_object_of_locals():
  code = "var a = 1, b = 2;\nmodule.exports = { a, b };\n"
  assert run(code).code == "var a = 1, b = 2;\nexport { a, b };\n"


def test_object_identifiers_become_specifiers_without_bindings():
  result = run("module.exports = { a, b: c };")
  assert result.code == "export { a, c as b };"
  assert result.metadata.exports[0].bindings == [
    Binding(local_name="a", export_name="a"),
    Binding(local_name="c", export_name="b"),
  ]


def test_object_with_aliases_values_and_reexports():
  code = "var a = 1;\nmodule.exports = { x: a, lib: require('./lib'), n: 3 };\n"
  result = run(code)
  assert result.code == (
    "var a = 1;\n"
    "export { a as x };\n"
    "export { default as lib } from './lib';\n"
    "export let n = 3;\n"
  )
  paths = [r.path for r in result.metadata.exports]
  assert "./lib" in paths


def test_object_with_method_is_default_export():
  code = "module.exports = { run() {} };"
  assert run(code).code == "export default { run() {} };"


def test_empty_object():
  assert run("module.exports = {};").code == "export {};"


def test_require_reexport():
  result = run("module.exports = require('./impl');")
  assert result.code == "export * from './impl';"
  assert result.metadata.exports[0].type == ExportKind.NAMESPACE
  assert result.metadata.exports[0].path == "./impl"


def test_default_export():
  result = run("module.exports = function () {};")
  assert result.code == "export default function () {};"
  assert result.metadata.exports[0].type == ExportKind.DEFAULT


def test_bare_exports_assignment():
  assert run("exports = 42;").code == "export default 42;"


def test_second_default_export_is_reported():
  result = run("module.exports = 1;\nmodule.exports = 2;\n")
  assert result.code == "export default 1;\nmodule.exports = 2;\n"
  assert kinds(result) == [WarningKind.UNSUPPORTED_EXPORT]


# --- Left alone ---


def test_nested_export_is_reported():
  code = "if (debug) {\n  exports.trace = true;\n}\n"
  result = run(code)
  assert result.code == code
  assert kinds(result) == [WarningKind.UNSUPPORTED_EXPORT]
  assert result.warnings[0].node.line == 2


def test_shadowed_exports_untouched():
  code = "function f(exports) { exports.a = 1; }\n"
  result = run(code)
  assert result.code == code
  assert not result.warnings


def test_computed_property_is_reported():
  code = "exports['a-b'] = 1;"
  result = run(code)
  assert result.code == code
  assert kinds(result) == [WarningKind.UNSUPPORTED_EXPORT]


# --- Modules that already use ES exports ---


def test_existing_export_declaration_is_not_duplicated():
  code = "export let a = 1;\nexports.a = 2;\n"
  result = run(code)
  assert result.code == code
  assert kinds(result) == [WarningKind.UNSUPPORTED_EXPORT]


def test_existing_export_names_block_rewrites():
  code = (
    "export function f() {}\n"
    "export { g as h };\n"
    "export default 1;\n"
    "exports.f = 1;\n"
    "exports.h = 2;\n"
    "module.exports = 3;\n"
  )
  result = run(code)
  assert result.code == code
  assert kinds(result) == [WarningKind.UNSUPPORTED_EXPORT] * 3


def test_fresh_export_alongside_existing_ones():
  code = "export const { x, y: [z] } = o;\nexports.w = 1;\nexports.z = 2;\n"
  result = run(code)
  assert result.code == "export const { x, y: [z] } = o;\nexport let w = 1;\nexports.z = 2;\n"
  assert kinds(result) == [WarningKind.UNSUPPORTED_EXPORT]
