"""
Default-Access Cleanup.

CommonJS consumers of transpiled ES modules often write `require('x').default`
or keep a handle and access `handle.default`. Once `handle` is a default
import, `handle.default` is redundant; this pass rewrites it to `handle`.

An access is left alone when `handle` resolves to a nested binding that
shadows the import, or when the access is itself assigned to.
"""

from typing import Optional

from tree_sitter import Node

from js_switcheroo.core.nodes import field, is_optional_chain, node_key, text_of
from js_switcheroo.core.rewriter.base import RewritePass
from js_switcheroo.core.visitor import Replacement

_WRITE_CONTEXTS = ("assignment_expression", "augmented_assignment_expression")


class DefaultAccessCleanup(RewritePass):
  """Rewrites `name.default` to `name` for default-import names."""

  name = "cleanup-default-access"
  description = "Simplify .default accesses on default imports"

  def visit_member_expression(self, node: Node) -> Optional[Replacement]:
    if is_optional_chain(node):
      return None
    obj = field(node, "object")
    prop = field(node, "property")
    if obj is None or prop is None or obj.type != "identifier" or prop.type != "property_identifier":
      return None
    name = text_of(obj)
    if text_of(prop) != "default" or name not in self.context.default_import_names:
      return None

    declaring = self.scope.resolve(node, name)
    if declaring is not None and declaring is not self.scope.program:
      return None
    if self._is_write_target(node):
      return None
    return Replacement().remove(obj.end_byte, node.end_byte)

  @staticmethod
  def _is_write_target(node: Node) -> bool:
    parent = node.parent
    if parent is None:
      return False
    if parent.type in _WRITE_CONTEXTS:
      left = field(parent, "left")
      return left is not None and node_key(left) == node_key(node)
    return parent.type == "update_expression"
