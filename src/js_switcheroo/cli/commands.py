"""
CLI Command Handlers Facade.

Re-exports the handlers from `js_switcheroo.cli.handlers` so the dispatcher
(and tests patching it) have a single import location.
"""

from js_switcheroo.cli.handlers.audit import handle_audit
from js_switcheroo.cli.handlers.convert import (
  handle_convert,
  _convert_single_file,
  _print_batch_summary,
)

__all__ = [
  "handle_audit",
  "handle_convert",
  "_convert_single_file",
  "_print_batch_summary",
]
