"""
Tests for Collision-Free Identifier Generation.

Verifies:
1. Probe order: `name`, `_name`, `name1`, `name2`, ...
2. Bindings, globals, labels, reserved words and earlier claims are avoided.
3. An ignored range discounts occurrences inside it.
4. Exhausting the probe limit raises `UidExhaustedError`.
"""

import itertools

import pytest

from js_switcheroo.core.errors import UidExhaustedError
from js_switcheroo.core.parser import parse_module
from js_switcheroo.core.uid import UidGenerator, candidate_names


def make_generator(code: str) -> UidGenerator:
  return UidGenerator(parse_module(code).scope)


def test_candidate_order():
  assert list(itertools.islice(candidate_names("foo"), 4)) == ["foo", "_foo", "foo1", "foo2"]


def test_free_name_is_returned_unchanged():
  uids = make_generator("var a = 1;")
  assert uids.generate_uid(uids.analysis.program, "value") == "value"


def test_avoids_bindings():
  uids = make_generator("var a = 1; var _a = 2;")
  assert uids.generate_uid(uids.analysis.program, "a") == "a1"


def test_avoids_nested_bindings():
  # A nested binding would be captured by code moved into that function.
  uids = make_generator("function f() { var x = 1; }")
  assert uids.generate_uid(uids.analysis.program, "x") == "_x"


def test_avoids_globals_and_reserved_words():
  uids = make_generator("console.log(1);")
  program = uids.analysis.program
  assert uids.generate_uid(program, "console") == "_console"
  assert uids.generate_uid(program, "default") == "_default"


def test_avoids_labels():
  uids = make_generator("outer: for (;;) { break outer; }")
  assert uids.generate_uid(uids.analysis.program, "outer") == "_outer"


def test_claims_are_never_reused():
  uids = make_generator("")
  program = uids.analysis.program
  assert uids.generate_uid(program, "x") == "x"
  assert uids.generate_uid(program, "x") == "_x"
  assert uids.generate_uid(program, "x") == "x1"
  assert uids.is_claimed(program, "_x")


def test_ignore_range():
  code = "var f = function add() { return 1; };"
  module = parse_module(code)
  uids = UidGenerator(module.scope)
  start = code.index("function")
  end = code.index("};") + 1

  assert not uids.is_available(module.scope.program, "add")
  assert uids.is_available(module.scope.program, "add", ignore=(start, end))


def test_exhaustion_raises(monkeypatch):
  monkeypatch.setattr("js_switcheroo.core.uid.MAX_PROBES", 1)
  uids = make_generator("var a = 1;")

  with pytest.raises(UidExhaustedError):
    uids.generate_uid(uids.analysis.program, "a")
