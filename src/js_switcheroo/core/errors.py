"""
Exception hierarchy for the conversion pipeline.

Two families exist:

1.  **Input errors** (`JSParseError`): the source is not valid JavaScript.
    The engine converts these into an unsuccessful `ConversionResult`.
2.  **Internal errors** (`SwitcherooInternalError` subclasses): an invariant
    of the rewriter itself was broken. These are fatal and propagate.

Unconvertible-but-valid constructs are never exceptions; they are reported
as `ConversionWarning` entries instead.
"""

from typing import Optional


class SwitcherooError(Exception):
  """Base class for all js-switcheroo exceptions."""


class JSParseError(SwitcherooError):
  """
  Raised when the input source cannot be parsed without errors.

  Attributes:
      line (Optional[int]): 1-based line of the first syntax error.
      column (Optional[int]): 1-based column of the first syntax error.
  """

  def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
    super().__init__(message)
    self.line = line
    self.column = column


class SwitcherooInternalError(SwitcherooError):
  """Raised when an internal invariant of the rewriter is violated."""


class EditConflictError(SwitcherooInternalError):
  """Raised when two recorded edits overlap the same source range."""


class UidExhaustedError(SwitcherooInternalError):
  """Raised when no collision-free identifier could be generated."""


class InvariantViolation(SwitcherooInternalError):
  """Raised when the tree is not in the shape a pass relies on."""
