"""
Tests for the Tracing System.
"""

from js_switcheroo.core.engine import ASTEngine
from js_switcheroo.core.tracer import TraceEventType, TraceLogger


def test_phase_nesting():
  logger = TraceLogger()

  p1 = logger.start_phase("Parent")
  logger.start_phase("Child")
  logger.end_phase()  # End Child
  logger.end_phase()  # End Parent

  events = logger.export()

  # 4 events: Start P, Start C, End C, End P
  assert len(events) == 4
  assert events[0]["type"] == TraceEventType.PHASE_START
  assert events[1]["parent_id"] == p1
  assert events[2]["type"] == TraceEventType.PHASE_END


def test_end_phase_without_start_is_ignored():
  logger = TraceLogger()
  logger.end_phase()
  assert logger.events == []


def test_mutation_recorded_under_active_phase():
  logger = TraceLogger()
  phase = logger.start_phase("rewrite-imports")
  logger.log_mutation("variable_declaration", "var a = require('a');", "import a from 'a';")

  events = logger.export()
  assert events[1]["type"] == TraceEventType.SOURCE_MUTATION
  assert events[1]["parent_id"] == phase
  assert events[1]["metadata"]["after"] == "import a from 'a';"


def test_engine_trace_contains_rewrites():
  result = ASTEngine().run("var a = require('a');\n")

  phases = [e["description"] for e in result.trace_events if e["type"] == TraceEventType.PHASE_START]
  assert "Parsing" in phases
  assert "rewrite-imports" in phases

  mutations = [e for e in result.trace_events if e["type"] == TraceEventType.SOURCE_MUTATION]
  assert len(mutations) == 1
  assert mutations[0]["metadata"]["before"] == "var a = require('a');"
  assert mutations[0]["metadata"]["after"] == "import a from 'a';"


def test_engine_trace_records_warnings():
  result = ASTEngine().run("require('debug')('x');\n")
  warnings = [e for e in result.trace_events if e["type"] == TraceEventType.ANALYSIS_WARNING]
  assert len(warnings) == 1
  assert warnings[0]["description"].startswith("unsupported-import")
