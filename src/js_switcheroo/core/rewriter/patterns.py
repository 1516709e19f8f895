"""
CommonJS Pattern Recognition.

Predicates that identify the CommonJS constructs the passes rewrite:

- `require('path')` calls with a literal path and an unshadowed `require`.
- Export targets: `module.exports`, the free `exports` identifier, and a
  module-level `this`.
- A module-wide IIFE wrapper.
"""

from typing import List, NamedTuple, Optional

from tree_sitter import Node

from js_switcheroo.core.nodes import (
  field,
  function_parameters,
  is_async,
  is_function_expression,
  is_generator,
  is_optional_chain,
  is_top_level_this,
  named_children,
  text_of,
  unwrap_parens,
)
from js_switcheroo.core.parser import JSModule
from js_switcheroo.core.visitor import NodeVisitor


def require_path(module: JSModule, node: Optional[Node]) -> Optional[Node]:
  """
  Matches `require('path')` and returns the string literal node.

  The callee must be the identifier `require` with no visible local binding,
  and the sole argument must be a plain string literal.

  Args:
      module (JSModule): Module the node belongs to.
      node (Optional[Node]): Candidate call expression.

  Returns:
      Optional[Node]: The `string` argument node, or None if not a match.
  """
  if node is None or node.type != "call_expression" or is_optional_chain(node):
    return None
  callee = field(node, "function")
  args = field(node, "arguments")
  if callee is None or callee.type != "identifier" or text_of(callee) != "require":
    return None
  if args is None or args.type != "arguments":
    return None
  values = named_children(args)
  if len(values) != 1 or values[0].type != "string":
    return None
  if module.scope.is_shadowed(node, "require"):
    return None
  return values[0]


def is_module_exports(module: JSModule, node: Optional[Node]) -> bool:
  """True for a non-computed `module.exports` with an unshadowed `module`."""
  if node is None or node.type != "member_expression" or is_optional_chain(node):
    return False
  obj = field(node, "object")
  prop = field(node, "property")
  if obj is None or prop is None:
    return False
  if obj.type != "identifier" or text_of(obj) != "module":
    return False
  if prop.type != "property_identifier" or text_of(prop) != "exports":
    return False
  return not module.scope.is_shadowed(node, "module")


def is_exports_identifier(module: JSModule, node: Optional[Node]) -> bool:
  if node is None or node.type != "identifier" or text_of(node) != "exports":
    return False
  return not module.scope.is_shadowed(node, "exports")


def is_export_target(module: JSModule, node: Optional[Node]) -> bool:
  """
  Checks whether `node` denotes the module's export object.

  Args:
      module (JSModule): Module the node belongs to.
      node (Optional[Node]): Candidate expression.

  Returns:
      bool: True for `module.exports`, a free `exports`, or module-level `this`.
  """
  if node is None:
    return False
  if node.type == "this":
    return is_top_level_this(node)
  return is_module_exports(module, node) or is_exports_identifier(module, node)


class ExportTargetCollector(NodeVisitor):
  """
  Gathers every export-target reference in source order.

  `module.exports` is collected as a whole; its children are not searched.

  Attributes:
      references (List[Node]): Matched nodes.
  """

  def __init__(self, module: JSModule):
    self.module = module
    self.references: List[Node] = []

  def visit_member_expression(self, node: Node) -> Optional[bool]:
    if is_module_exports(self.module, node):
      self.references.append(node)
      return False
    return None

  def visit_identifier(self, node: Node) -> None:
    if is_exports_identifier(self.module, node):
      self.references.append(node)

  def visit_this(self, node: Node) -> None:
    if is_top_level_this(node):
      self.references.append(node)


def collect_export_targets(module: JSModule) -> List[Node]:
  collector = ExportTargetCollector(module)
  collector.walk(module.root)
  return collector.references


class ModuleIIFE(NamedTuple):
  statement: Node
  function: Node
  body: Node


def match_module_iife(module: JSModule) -> Optional[ModuleIIFE]:
  """
  Recognises a program consisting of a single module-wrapping IIFE.

  Accepted shapes::

      (function () { ... })();
      (function () { ... }());
      (function () { ... }).call(this);
      void function () { ... }();

  The function must be anonymous, parameterless, not a generator, not
  `async`, and have a non-empty body.

  Args:
      module (JSModule): Parsed program.

  Returns:
      Optional[ModuleIIFE]: The statement, function, and body block.
  """
  statements = module.statements()
  if len(statements) != 1 or statements[0].type != "expression_statement":
    return None
  stmt = statements[0]
  inner = named_children(stmt)
  if len(inner) != 1:
    return None

  expr = unwrap_parens(inner[0])
  if expr is not None and expr.type == "unary_expression":
    operator = field(expr, "operator")
    if operator is None or text_of(operator) != "void":
      return None
    expr = unwrap_parens(field(expr, "argument"))
  if expr is None or expr.type != "call_expression" or is_optional_chain(expr):
    return None

  args_node = field(expr, "arguments")
  if args_node is None or args_node.type != "arguments":
    return None
  args = named_children(args_node)
  callee = unwrap_parens(field(expr, "function"))
  if callee is None:
    return None

  if callee.type == "member_expression":
    prop = field(callee, "property")
    if prop is None or text_of(prop) != "call" or is_optional_chain(callee):
      return None
    if len(args) != 1 or args[0].type != "this":
      return None
    fn = unwrap_parens(field(callee, "object"))
  else:
    if args:
      return None
    fn = callee

  if not is_function_expression(fn) or is_generator(fn) or is_async(fn):
    return None
  if field(fn, "name") is not None or function_parameters(fn):
    return None
  body = field(fn, "body")
  if body is None or not body.named_children:
    return None
  return ModuleIIFE(stmt, fn, body)
