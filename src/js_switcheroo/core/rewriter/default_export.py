"""
Forced Single-Default Export.

When `force_default_export` is enabled, every export target in the module is
redirected to one accumulator object which becomes the module's default
export:

    exports.a = 1;            var defaultExport = {};
    exports.b = 2;      ->    defaultExport.a = 1;
                              defaultExport.b = 2;
                              export default defaultExport;

The accumulator is declared immediately before the first top-level statement
that mentions an export target, and exported immediately after the last one.
A module whose only reference is a top-level `module.exports = value` is
rewritten directly to `export default value;`.

References inside functions are redirected too. The `var` declaration is
hoisted but its `{}` initializer is not: a function that writes to the
accumulator before the declaration statement executes sees `undefined`.
"""

from typing import List, Optional

from tree_sitter import Node

from js_switcheroo.core.bindings import Binding
from js_switcheroo.core.conversion_result import ExportRecord
from js_switcheroo.core.errors import InvariantViolation
from js_switcheroo.core.nodes import enclosing_statement, field, named_children, node_key
from js_switcheroo.core.parser import JSModule
from js_switcheroo.core.rewriter.base import ConversionContext, RewritePass
from js_switcheroo.core.rewriter.patterns import collect_export_targets
from js_switcheroo.core.uid import UidGenerator
from js_switcheroo.core.visitor import Replacement, VisitResult
from js_switcheroo.enums import ExportKind

ACCUMULATOR_NAME = "defaultExport"


class DefaultExportCollapser(RewritePass):
  """
  Redirects all export targets to a single default-exported accumulator.
  """

  name = "force-default-export"
  description = "Collapse all export targets into one default export"

  def __init__(self, module: JSModule, context: ConversionContext):
    super().__init__(module, context)
    if context.uids is None:
      context.uids = UidGenerator(module.scope)
    self.uids = context.uids

  def visit_program(self, root: Node) -> VisitResult:
    references = collect_export_targets(self.module)
    if not references:
      return False

    statements = [self._statement_of(ref) for ref in references]

    if len(references) == 1:
      direct = self._direct_assignment(statements[0], references[0])
      if direct is not None:
        self._record(statements[0], [])
        return direct

    name = self.uids.generate_uid(self.scope.program, ACCUMULATOR_NAME)
    replacement = Replacement().insert(statements[0].start_byte, f"var {name} = {{}};\n")
    for ref in references:
      replacement.replace(ref.start_byte, ref.end_byte, name)
    replacement.insert(statements[-1].end_byte, f"\nexport default {name};")

    self._record(statements[0], [Binding(local_name=name, export_name="default")])
    return replacement

  def _statement_of(self, ref: Node) -> Node:
    stmt = enclosing_statement(ref, self.module.root)
    if stmt is None:
      raise InvariantViolation(f"Export reference at byte {ref.start_byte} has no enclosing statement")
    return stmt

  def _direct_assignment(self, stmt: Node, ref: Node) -> Optional[Replacement]:
    if stmt.type != "expression_statement":
      return None
    inner = named_children(stmt)
    if len(inner) != 1 or inner[0].type != "assignment_expression":
      return None
    left = field(inner[0], "left")
    right = field(inner[0], "right")
    if left is None or right is None or node_key(left) != node_key(ref):
      return None
    return Replacement().replace(stmt.start_byte, right.start_byte, "export default ")

  def _record(self, stmt: Node, bindings: List[Binding]) -> None:
    self.context.metadata.exports.append(
      ExportRecord(type=ExportKind.DEFAULT, bindings=bindings, node=self.snapshot(stmt))
    )
