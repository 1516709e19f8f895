"""
Tree Traversal Base Classes.

`NodeVisitor` walks a tree-sitter tree in pre-order and dispatches on the node
type to `visit_<type>` and `leave_<type>` methods, in the manner of LibCST
visitors. Traversal is iterative so deeply nested sources never hit the
interpreter recursion limit.

`NodeTransformer` adds the rewrite protocol: a `visit_` method may return a
`Replacement`. The replacement's edits are recorded against the module source
and the node's subtree is not visited further, so a rewritten node is never
matched twice within one pass.
"""

from typing import List, Optional, Tuple, Union

from tree_sitter import Node

from js_switcheroo.core.edits import Edit, EditList
from js_switcheroo.core.parser import JSModule

VisitResult = Union[None, bool, "Replacement"]


class Replacement:
  """
  A set of source edits that supersede a visited node.

  Builder methods return `self` so edits can be chained.
  """

  def __init__(self) -> None:
    self.edits: List[Edit] = []

  @classmethod
  def of(cls, node: Node, text: str) -> "Replacement":
    """Replaces the whole of `node` with `text`."""
    return cls().replace(node.start_byte, node.end_byte, text)

  def replace(self, start: int, end: int, text: str) -> "Replacement":
    self.edits.append(Edit(start, end, text))
    return self

  def insert(self, offset: int, text: str) -> "Replacement":
    return self.replace(offset, offset, text)

  def remove(self, start: int, end: int) -> "Replacement":
    return self.replace(start, end, "")


class NodeVisitor:
  """
  Pre-order visitor over named nodes.

  Returning `False` from a `visit_` method skips the node's children. The
  matching `leave_` method is still called.
  """

  def on_visit(self, node: Node) -> VisitResult:
    method = getattr(self, f"visit_{node.type}", None)
    if method is None:
      return None
    return method(node)

  def on_leave(self, node: Node) -> None:
    method = getattr(self, f"leave_{node.type}", None)
    if method is not None:
      method(node)

  def walk(self, root: Node) -> None:
    stack: List[Tuple[Node, bool]] = [(root, False)]
    while stack:
      node, leaving = stack.pop()
      if leaving:
        self.on_leave(node)
        continue
      result = self.on_visit(node)
      stack.append((node, True))
      if result is False:
        continue
      for child in reversed(node.named_children):
        stack.append((child, False))


class NodeTransformer(NodeVisitor):
  """
  Visitor that accumulates source edits for one module.

  Attributes:
      module (JSModule): The module being rewritten.
      edits (EditList): Edits recorded so far.
  """

  def __init__(self, module: JSModule):
    self.module = module
    self.edits = EditList(module.source)

  def on_visit(self, node: Node) -> VisitResult:
    result = super().on_visit(node)
    if isinstance(result, Replacement):
      self.commit(node, result)
      return False
    return result

  def commit(self, node: Node, replacement: Replacement) -> None:
    """Records the edits of `replacement`. Subclasses may hook this for tracing."""
    self.edits.extend(replacement.edits)

  def transform(self, root: Optional[Node] = None) -> EditList:
    """
    Runs the traversal and returns the accumulated edits.

    Args:
        root (Optional[Node]): Subtree to walk; defaults to the program.

    Returns:
        EditList: Edits against `module.source`.
    """
    self.walk(root if root is not None else self.module.root)
    return self.edits
