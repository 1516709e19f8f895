"""
Safe Rewrite Boundary Analysis.

`require` runs at the point it is called, whereas ES `import` declarations are
hoisted and evaluated before any module code. Turning a `require` into an
`import` is only safe if nothing that could observe the difference runs
before it.

This scanner finds the earliest source offset at which such a construct
appears. Only `require` statements that end before the boundary are
rewritten. Disqualifying constructs, found anywhere in the tree:

- assignments (plain or compound) whose target contains a member access,
  since they may mutate shared state;
- `++` / `--` applied to a member access;
- calls whose callee mentions no allowed name (`require` plus any configured
  safe functions); tagged templates are not calls;
- `return` and `throw` statements.

Once a construct is found, its subtree is not searched further. Nodes starting
at or after the current boundary are skipped, because they cannot lower it.
"""

from typing import FrozenSet, Iterable, Optional

from tree_sitter import Node

from js_switcheroo.core.nodes import MEMBER_ACCESS_TYPES, field, iter_tree, text_of
from js_switcheroo.core.parser import JSModule
from js_switcheroo.core.visitor import NodeVisitor


class BoundaryScanner(NodeVisitor):
  """
  Computes the safe rewrite boundary of a program.

  Attributes:
      boundary (int): Earliest offset of a disqualifying construct, or the
          source length if there is none.
      allowed (FrozenSet[str]): Callee names that keep a call safe.
  """

  def __init__(self, source_length: int, allowed: Iterable[str] = ()):
    self.boundary = source_length
    self.allowed: FrozenSet[str] = frozenset({"require", *allowed})

  def on_visit(self, node: Node) -> Optional[bool]:
    if node.start_byte >= self.boundary:
      return False
    return super().on_visit(node)

  def _flag(self, node: Node) -> bool:
    self.boundary = min(self.boundary, node.start_byte)
    return False

  def visit_assignment_expression(self, node: Node) -> Optional[bool]:
    if _contains_member_access(field(node, "left")):
      return self._flag(node)
    return None

  visit_augmented_assignment_expression = visit_assignment_expression

  def visit_update_expression(self, node: Node) -> Optional[bool]:
    if _contains_member_access(field(node, "argument")):
      return self._flag(node)
    return None

  def visit_call_expression(self, node: Node) -> Optional[bool]:
    args = field(node, "arguments")
    if args is not None and args.type != "arguments":
      # Tagged template.
      return None
    if not self._is_safe_callee(field(node, "function")):
      return self._flag(node)
    return None

  def visit_return_statement(self, node: Node) -> bool:
    return self._flag(node)

  def visit_throw_statement(self, node: Node) -> bool:
    return self._flag(node)

  def _is_safe_callee(self, callee: Optional[Node]) -> bool:
    if callee is None:
      return False
    return any(
      n.type in ("identifier", "property_identifier") and text_of(n) in self.allowed for n in iter_tree(callee)
    )


def _contains_member_access(node: Optional[Node]) -> bool:
  if node is None:
    return False
  return any(n.type in MEMBER_ACCESS_TYPES for n in iter_tree(node))


def compute_boundary(module: JSModule, safe_function_identifiers: Iterable[str] = ()) -> int:
  """
  Returns the offset before which `require` calls may become imports.

  Args:
      module (JSModule): Parsed program.
      safe_function_identifiers (Iterable[str]): Extra callee names treated
          like `require`.

  Returns:
      int: A byte offset in `[0, len(module.source)]`.
  """
  scanner = BoundaryScanner(len(module.source), safe_function_identifiers)
  scanner.walk(module.root)
  return scanner.boundary
