"""
Export Rewriting.

Turns top-level assignments to the module's export object into ES `export`
declarations. Two families of statements are recognised:

**Named property exports** (`exports.NAME = value`, `module.exports.NAME =
value`, or `this.NAME = value` at module level):

- anonymous function  -> `export function NAME() {}`
- named function      -> `export function NAME() {}` or a declaration plus
  an aliasing `export { local as NAME };`
- bound identifier    -> `export { local as NAME };`
- anything else       -> `export let NAME = value;`

Whenever `NAME` cannot be introduced as a local (it is already bound,
referenced, reserved, or a label), a fresh local is generated and exported
under `NAME` via a specifier list.

**Whole-module exports** (`module.exports = value` / `exports = value`):

- simple object literal -> one `export` per property, specifiers batched
- `require('path')`     -> `export * from 'path';`
- anything else         -> `export default value;`

Anything not rewritten here is reported later as an unsupported export.
"""

import logging
from typing import List, Optional, Set, Tuple

from tree_sitter import Node

from js_switcheroo.core.bindings import Binding, render_export
from js_switcheroo.core.conversion_result import ExportRecord
from js_switcheroo.core.nodes import (
  field,
  function_name_anchor,
  is_function_expression,
  is_optional_chain,
  named_children,
  pattern_identifiers,
  string_value,
  text_of,
)
from js_switcheroo.core.rewriter.base import ConversionContext, TopLevelPass
from js_switcheroo.core.rewriter.patterns import is_export_target, require_path
from js_switcheroo.core.parser import JSModule
from js_switcheroo.core.tracer import get_tracer
from js_switcheroo.core.uid import UidGenerator
from js_switcheroo.core.visitor import Replacement
from js_switcheroo.enums import ExportKind, WarningKind

logger = logging.getLogger(__name__)

# Property value categories for whole-module object exports.
_SPECIFIER = "specifier"
_REEXPORT = "reexport"
_VALUE = "value"


class ExportRewriter(TopLevelPass):
  """
  Rewrites top-level CommonJS export assignments into `export` declarations.

  Attributes:
      uids (UidGenerator): Fresh-name generator shared with the context.
  """

  name = "rewrite-exports"
  description = "Convert export assignments to export declarations"

  def __init__(self, module: JSModule, context: ConversionContext):
    super().__init__(module, context)
    if context.uids is None:
      context.uids = UidGenerator(module.scope)
    self.uids = context.uids
    self._exported: Set[str] = existing_export_names(module.root)

  def visit_expression_statement(self, stmt: Node) -> Optional[Replacement]:
    inner = named_children(stmt)
    if len(inner) != 1 or inner[0].type != "assignment_expression":
      return None
    assignment = inner[0]
    left = field(assignment, "left")
    right = field(assignment, "right")
    if left is None or right is None:
      return None

    if is_export_target(self.module, left):
      return self._rewrite_module_export(stmt, right)

    if left.type == "member_expression" and not is_optional_chain(left):
      prop = field(left, "property")
      if prop is not None and prop.type == "property_identifier" and is_export_target(self.module, field(left, "object")):
        return self._rewrite_named_export(stmt, text_of(prop), right)
    return None

  # --- Named property exports ---

  def _rewrite_named_export(self, stmt: Node, name: str, value: Node) -> Optional[Replacement]:
    if name in self._exported:
      get_tracer().log_inspection(text_of(stmt), "skipped", f"'{name}' is already exported")
      return None

    if is_function_expression(value):
      replacement, binding = self._export_function(stmt, name, value)
    elif value.type == "identifier":
      replacement, binding = self._export_identifier(stmt, name, value)
    else:
      replacement, binding = self._export_value(stmt, name, value)

    self._exported.add(name)
    self._record(ExportKind.NAMED, [binding], stmt)
    return replacement

  def _export_function(self, stmt: Node, name: str, fn: Node) -> Tuple[Replacement, Binding]:
    program = self.scope.program
    name_node = field(fn, "name")
    fn_range = (fn.start_byte, fn.end_byte)

    if name_node is None:
      local = self.uids.generate_uid(program, name)
      if local == name:
        return self._as_declaration(stmt, fn, "export ", name), Binding(local_name=name, export_name=name)
      return self._as_declaration(stmt, fn, "", local, name), Binding(local_name=local, export_name=name)

    fn_name = text_of(name_node)
    if fn_name == name:
      if self.uids.is_available(program, name, ignore=fn_range):
        self.uids.claim(program, name)
        return self._as_declaration(stmt, fn, "export "), Binding(local_name=name, export_name=name)
      local = self.uids.generate_uid(program, name)
      return self._as_let(stmt, fn, local, name), Binding(local_name=local, export_name=name)

    # The function is renamed only if its body never refers to its own name.
    self_referencing = self.scope.occurs_within(fn_name, fn.start_byte, fn.end_byte, exclude=name_node)
    if not self_referencing and self.uids.is_available(program, name):
      self.uids.claim(program, name)
      self.warn(
        fn,
        WarningKind.EXPORT_FUNCTION_NAME_MISMATCH,
        f"Exported function '{fn_name}' does not match export name '{name}'",
      )
      return self._as_declaration(stmt, fn, "export ", name), Binding(local_name=name, export_name=name)

    if self.uids.is_available(program, fn_name, ignore=fn_range):
      self.uids.claim(program, fn_name)
      return self._as_declaration(stmt, fn, "", None, name), Binding(local_name=fn_name, export_name=name)

    local = self.uids.generate_uid(program, fn_name)
    return self._as_let(stmt, fn, local, name), Binding(local_name=local, export_name=name)

  def _export_identifier(self, stmt: Node, name: str, ident: Node) -> Tuple[Replacement, Binding]:
    local = text_of(ident)
    if self.scope.program.has_own_binding(local):
      binding = Binding(local_name=local, export_name=name)
      return Replacement.of(stmt, render_export([binding])), binding
    return self._export_value(stmt, name, ident, warn_conflict=False)

  def _export_value(
    self, stmt: Node, name: str, value: Node, warn_conflict: bool = True
  ) -> Tuple[Replacement, Binding]:
    local = self._value_local(stmt, name, warn_conflict)
    prefix = Replacement().replace(stmt.start_byte, value.start_byte, self._let_prefix(local, name))
    if local != name:
      prefix.insert(stmt.end_byte, "\n" + render_export([Binding(local_name=local, export_name=name)]))
    return prefix, Binding(local_name=local, export_name=name)

  def _value_local(self, node: Node, name: str, warn_conflict: bool) -> str:
    program = self.scope.program
    local = self.uids.generate_uid(program, name)
    if local != name and warn_conflict and program.has_own_binding(name):
      self.warn(
        node,
        WarningKind.NAMED_EXPORT_CONFLICTS_WITH_LOCAL_BINDING,
        f"Named export '{name}' conflicts with existing local binding",
      )
    return local

  @staticmethod
  def _let_prefix(local: str, name: str) -> str:
    return f"export let {name} = " if local == name else f"let {local} = "

  def _as_declaration(
    self,
    stmt: Node,
    fn: Node,
    prefix: str,
    rename: Optional[str] = None,
    alias_of: Optional[str] = None,
  ) -> Replacement:
    """
    Turns `target.NAME = function ...;` into a function declaration.

    Args:
        stmt (Node): The assignment statement.
        fn (Node): The function expression on the right-hand side.
        prefix (str): Text replacing everything before the function.
        rename (Optional[str]): Name to give (or replace on) the function.
        alias_of (Optional[str]): Export name for a trailing specifier
            statement; None when `prefix` already exports the declaration.

    Returns:
        Replacement: The edits.
    """
    replacement = Replacement().replace(stmt.start_byte, fn.start_byte, prefix)
    name_node = field(fn, "name")
    local = rename if rename is not None else text_of(name_node)
    if rename is not None:
      if name_node is None:
        anchor = function_name_anchor(fn)
        params = field(fn, "parameters")
        # `function *()` keeps the star against the name.
        spaced = anchor.type != "*" or anchor.prev_sibling is None or anchor.prev_sibling.end_byte == anchor.start_byte
        end = params.start_byte if params is not None else anchor.end_byte
        replacement.replace(anchor.end_byte, end, f" {rename}" if spaced else rename)
      elif text_of(name_node) != rename:
        replacement.replace(name_node.start_byte, name_node.end_byte, rename)
    if text_of(stmt).endswith(";"):
      replacement.remove(stmt.end_byte - 1, stmt.end_byte)
    if alias_of is not None:
      replacement.insert(stmt.end_byte, "\n" + render_export([Binding(local_name=local, export_name=alias_of)]))
    return replacement

  def _as_let(self, stmt: Node, fn: Node, local: str, name: str) -> Replacement:
    return (
      Replacement()
      .replace(stmt.start_byte, fn.start_byte, f"let {local} = ")
      .insert(stmt.end_byte, "\n" + render_export([Binding(local_name=local, export_name=name)]))
    )

  # --- Whole-module exports ---

  def _rewrite_module_export(self, stmt: Node, value: Node) -> Optional[Replacement]:
    path = require_path(self.module, value)
    if path is not None:
      self._record(ExportKind.NAMESPACE, [], stmt, path)
      return Replacement.of(stmt, f"export * from {text_of(path)};")

    if value.type == "object":
      items = self._object_items(value)
      if items is not None:
        names = [name for _, name, _ in items]
        if len(set(names)) != len(names) or self._exported.intersection(names):
          get_tracer().log_inspection(text_of(stmt), "skipped", "duplicate export names")
          return None
        return Replacement.of(stmt, self._render_object_exports(stmt, items))

    if "default" in self._exported:
      get_tracer().log_inspection(text_of(stmt), "skipped", "module already has a default export")
      return None
    self._exported.add("default")
    self._record(ExportKind.DEFAULT, [], stmt)
    return Replacement().replace(stmt.start_byte, value.start_byte, "export default ")

  def _object_items(self, obj: Node) -> Optional[List[Tuple[str, str, Node]]]:
    """
    Classifies the properties of a simple object literal.

    Args:
        obj (Node): The `object` node.

    Returns:
        Optional[List[Tuple[str, str, Node]]]: `(category, name, value)`
        triples, or None if the object is not simple.
    """
    items: List[Tuple[str, str, Node]] = []
    for prop in named_children(obj):
      if prop.type == "shorthand_property_identifier":
        name, value = text_of(prop), prop
      elif prop.type == "pair":
        key = field(prop, "key")
        value = field(prop, "value")
        if key is None or value is None or key.type != "property_identifier":
          return None
        name = text_of(key)
      else:
        return None

      if value.type in ("identifier", "shorthand_property_identifier"):
        items.append((_SPECIFIER, name, value))
      elif require_path(self.module, value) is not None:
        items.append((_REEXPORT, name, value))
      else:
        items.append((_VALUE, name, value))
    return items

  def _render_object_exports(self, stmt: Node, items: List[Tuple[str, str, Node]]) -> str:
    lines: List[str] = []
    pending: List[Binding] = []
    named: List[Binding] = []

    def flush() -> None:
      if pending:
        lines.append(render_export(pending))
        pending.clear()

    for category, name, value in items:
      self._exported.add(name)
      if category == _SPECIFIER:
        binding = Binding(local_name=text_of(value), export_name=name)
        pending.append(binding)
        named.append(binding)
      elif category == _REEXPORT:
        flush()
        path = require_path(self.module, value)
        binding = Binding(local_name="default", export_name=name)
        lines.append(render_export([binding], text_of(path)))
        self._record(ExportKind.NAMED, [binding], stmt, path)
      else:
        flush()
        local = self._value_local(value, name, warn_conflict=True)
        lines.append(f"{self._let_prefix(local, name)}{text_of(value)};")
        binding = Binding(local_name=local, export_name=name)
        if local != name:
          lines.append(render_export([binding]))
        named.append(binding)
    flush()

    if named or not lines:
      self._record(ExportKind.NAMED, named, stmt)
    return "\n".join(lines) if lines else "export {};"

  # --- Metadata ---

  def _record(self, kind: ExportKind, bindings: List[Binding], stmt: Node, path: Optional[Node] = None) -> None:
    self.context.metadata.exports.append(
      ExportRecord(
        type=kind,
        bindings=bindings,
        path=string_value(path) if path is not None else None,
        node=self.snapshot(stmt),
      )
    )
    logger.debug("Recorded %s for %r", kind.value, text_of(stmt)[:60])


def existing_export_names(root: Node) -> Set[str]:
  """
  Collects the names already exported by ES `export` statements.

  Args:
      root (Node): The program node.

  Returns:
      Set[str]: Exported names, including `default`.
  """
  names: Set[str] = set()
  for stmt in named_children(root):
    if stmt.type != "export_statement":
      continue
    if any(child.type == "default" for child in stmt.children):
      names.add("default")
      continue
    declaration = field(stmt, "declaration")
    if declaration is not None:
      if declaration.type in ("lexical_declaration", "variable_declaration"):
        for declarator in named_children(declaration):
          if declarator.type == "variable_declarator":
            names.update(text_of(n) for n in pattern_identifiers(field(declarator, "name")))
      else:
        name = field(declaration, "name")
        if name is not None:
          names.add(text_of(name))
      continue
    for part in named_children(stmt):
      if part.type == "namespace_export":
        names.update(text_of(n) for n in named_children(part))
      elif part.type == "export_clause":
        for spec in named_children(part):
          if spec.type == "export_specifier":
            exported = field(spec, "alias") or field(spec, "name")
            if exported is not None:
              names.add(string_value(exported) or text_of(exported))
  return names
