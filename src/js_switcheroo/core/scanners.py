"""
Leftover CommonJS Usage Scanner.

Runs on the final tree, after all rewrites, and reports CommonJS constructs
that survived because no supported pattern matched them:

- `require('path')` calls with an unshadowed `require` (`unsupported-import`);
- references to `module.exports`, a free `exports`, or module-level `this`
  (`unsupported-export`).
"""

from typing import Optional

from tree_sitter import Node

from js_switcheroo.core.nodes import is_top_level_this, text_of
from js_switcheroo.core.parser import JSModule
from js_switcheroo.core.rewriter.base import ConversionContext
from js_switcheroo.core.rewriter.patterns import is_exports_identifier, is_module_exports, require_path
from js_switcheroo.core.visitor import NodeVisitor
from js_switcheroo.enums import WarningKind

UNSUPPORTED_IMPORT_MESSAGE = "Unsupported 'require' call cannot be transformed into an import"
UNSUPPORTED_EXPORT_MESSAGE = "Unsupported export cannot be turned into an 'export' statement"


class UnsupportedUsageScanner(NodeVisitor):
  """
  Emits warnings for CommonJS constructs left in a converted module.
  """

  def __init__(self, module: JSModule, context: ConversionContext):
    self.module = module
    self.context = context

  def scan(self) -> None:
    self.walk(self.module.root)

  def _report(self, node: Node, kind: WarningKind, message: str) -> None:
    self.context.warn(self.module, node, kind, message)

  def visit_call_expression(self, node: Node) -> None:
    if require_path(self.module, node) is not None:
      self._report(node, WarningKind.UNSUPPORTED_IMPORT, UNSUPPORTED_IMPORT_MESSAGE)

  def visit_member_expression(self, node: Node) -> Optional[bool]:
    if is_module_exports(self.module, node):
      self._report(node, WarningKind.UNSUPPORTED_EXPORT, UNSUPPORTED_EXPORT_MESSAGE)
      return False
    return None

  def visit_identifier(self, node: Node) -> None:
    if is_exports_identifier(self.module, node):
      self._report(node, WarningKind.UNSUPPORTED_EXPORT, UNSUPPORTED_EXPORT_MESSAGE)

  def visit_shorthand_property_identifier(self, node: Node) -> None:
    if text_of(node) == "exports" and not self.module.scope.is_shadowed(node, "exports"):
      self._report(node, WarningKind.UNSUPPORTED_EXPORT, UNSUPPORTED_EXPORT_MESSAGE)

  def visit_this(self, node: Node) -> None:
    if is_top_level_this(node):
      self._report(node, WarningKind.UNSUPPORTED_EXPORT, UNSUPPORTED_EXPORT_MESSAGE)
