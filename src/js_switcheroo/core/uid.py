"""
Collision-Free Identifier Generation.

The export pass sometimes needs a fresh local name (`let _foo = ...`). A name
is only usable if it cannot capture or shadow anything: it must not be a
reserved word, a label, a binding visible from the requesting scope, a
global, any identifier occurring in the program, or a name handed out
earlier in the same conversion.

Candidates are probed in a fixed order: `name`, `_name`, `name1`, `name2`,
and so on. Claims are remembered per program scope for the lifetime of the
generator, which lives exactly as long as one conversion.
"""

import itertools
import logging
from typing import Dict, Iterator, Optional, Set, Tuple

from js_switcheroo.analysis.scope import Scope, ScopeAnalysis
from js_switcheroo.core.errors import UidExhaustedError

logger = logging.getLogger(__name__)

MAX_PROBES = 10_000

RESERVED_WORDS = frozenset(
  {
    "arguments",
    "await",
    "break",
    "case",
    "catch",
    "class",
    "const",
    "continue",
    "debugger",
    "default",
    "delete",
    "do",
    "else",
    "enum",
    "eval",
    "export",
    "extends",
    "false",
    "finally",
    "for",
    "function",
    "if",
    "implements",
    "import",
    "in",
    "instanceof",
    "interface",
    "let",
    "new",
    "null",
    "package",
    "private",
    "protected",
    "public",
    "return",
    "static",
    "super",
    "switch",
    "this",
    "throw",
    "true",
    "try",
    "typeof",
    "undefined",
    "var",
    "void",
    "while",
    "with",
    "yield",
  }
)


def candidate_names(preferred: str) -> Iterator[str]:
  """Yields `preferred`, `_preferred`, `preferred1`, `preferred2`, ..."""
  yield preferred
  yield f"_{preferred}"
  for i in itertools.count(1):
    yield f"{preferred}{i}"


class UidGenerator:
  """
  Per-conversion allocator of fresh identifiers.

  Attributes:
      analysis (ScopeAnalysis): Binding oracle for the current tree.
  """

  def __init__(self, analysis: ScopeAnalysis):
    self.analysis = analysis
    self._claimed: Dict[Scope, Set[str]] = {}

  def is_claimed(self, scope: Scope, name: str) -> bool:
    return any(name in self._claimed.get(s, ()) for s in scope.lineage())

  def claim(self, scope: Scope, name: str) -> None:
    self._claimed.setdefault(scope.program(), set()).add(name)

  def is_available(self, scope: Scope, name: str, ignore: Optional[Tuple[int, int]] = None) -> bool:
    """
    Checks whether `name` can be introduced at program level without conflict.

    Args:
        scope (Scope): Scope the name would be visible from.
        name (str): Candidate identifier.
        ignore (Optional[Tuple[int, int]]): Byte range whose occurrences of
            `name` do not count, e.g. the body of a function being renamed.

    Returns:
        bool: True if the name is free.
    """
    analysis = self.analysis
    if name in RESERVED_WORDS or analysis.has_label(name) or analysis.has_global(name):
      return False
    if self.is_claimed(scope, name):
      return False
    if ignore is None:
      return not scope.has_binding(name) and not analysis.has_reference(name)
    # Bindings visible from `scope` always occur outside the ignored range.
    start, end = ignore
    return not analysis.occurs_outside(name, start, end)

  def generate_uid(self, scope: Scope, preferred: str, ignore: Optional[Tuple[int, int]] = None) -> str:
    """
    Returns and claims the first free name derived from `preferred`.

    Args:
        scope (Scope): Scope the name will be visible from.
        preferred (str): Base name.
        ignore (Optional[Tuple[int, int]]): Range passed to `is_available`
            for the first candidate only.

    Returns:
        str: A collision-free identifier.

    Raises:
        UidExhaustedError: If no candidate is free within the probe limit.
    """
    for i, candidate in enumerate(itertools.islice(candidate_names(preferred), MAX_PROBES)):
      if self.is_available(scope, candidate, ignore if i == 0 else None):
        self.claim(scope, candidate)
        if candidate != preferred:
          logger.debug("Generated uid %r for %r", candidate, preferred)
        return candidate
    raise UidExhaustedError(f"Could not generate a unique identifier for '{preferred}'")
