"""
Conversion Trace Logger.

Records the step-by-step execution of the rewrite pipeline:

1. Lifecycle phases (parsing, each rewrite pass, boundary analysis).
2. Source mutations (statement A rewritten to text B).
3. Diagnostics and decision points where no rewrite happened.

The output is a list of event dictionaries suitable for JSON serialization
(`js_switcheroo convert --json-trace trace.json`).
"""

import time
import uuid
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class TraceEventType(str, Enum):
  PHASE_START = "phase_start"
  PHASE_END = "phase_end"
  SOURCE_MUTATION = "source_mutation"
  ANALYSIS_WARNING = "analysis_warning"
  INSPECTION = "inspection"


@dataclass
class TraceEvent:
  id: str
  type: TraceEventType
  timestamp: float
  description: str
  parent_id: Optional[str] = None
  metadata: Dict[str, Any] = field(default_factory=dict)


class TraceLogger:
  """
  Collects pipeline events, nesting them under the active phase.
  """

  def __init__(self):
    self._events: List[TraceEvent] = []
    self._active_phases: List[str] = []

  @property
  def events(self) -> List[TraceEvent]:
    return list(self._events)

  def start_phase(self, name: str, description: str = "") -> str:
    """Opens a phase; events logged until `end_phase` are parented to it. Returns the phase ID."""
    phase_id = str(uuid.uuid4())
    parent = self._active_phases[-1] if self._active_phases else None
    self._events.append(
      TraceEvent(
        id=phase_id,
        type=TraceEventType.PHASE_START,
        timestamp=time.time(),
        description=name,
        parent_id=parent,
        metadata={"detail": description},
      )
    )
    self._active_phases.append(phase_id)
    return phase_id

  def end_phase(self) -> None:
    if not self._active_phases:
      return
    phase_id = self._active_phases.pop()
    self._events.append(
      TraceEvent(
        id=str(uuid.uuid4()),
        type=TraceEventType.PHASE_END,
        timestamp=time.time(),
        description="End Phase",
        parent_id=phase_id,
      )
    )

  def log_mutation(self, node_type: str, before: str, after: str) -> None:
    """Logs a source rewrite."""
    self._log_simple(TraceEventType.SOURCE_MUTATION, f"Rewrote {node_type}", {"before": before, "after": after})

  def log_warning(self, message: str) -> None:
    self._log_simple(TraceEventType.ANALYSIS_WARNING, message, {"level": "warning"})

  def log_inspection(self, node_str: str, outcome: str, detail: str = "") -> None:
    """Logs a decision point where no change occurred."""
    self._log_simple(TraceEventType.INSPECTION, f"Inspecting '{node_str}'", {"outcome": outcome, "detail": detail})

  def _log_simple(self, evt_type: TraceEventType, desc: str, meta: Dict[str, Any]) -> None:
    parent = self._active_phases[-1] if self._active_phases else None
    self._events.append(
      TraceEvent(
        id=str(uuid.uuid4()), type=evt_type, timestamp=time.time(), description=desc, parent_id=parent, metadata=meta
      )
    )

  def export(self) -> List[Dict[str, Any]]:
    """Returns list of dicts for JSON serialization."""
    return [asdict(e) for e in self._events]


_GLOBAL_TRACER = TraceLogger()


def get_tracer() -> TraceLogger:
  return _GLOBAL_TRACER


def reset_tracer() -> None:
  global _GLOBAL_TRACER
  _GLOBAL_TRACER = TraceLogger()
