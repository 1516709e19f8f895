"""
Import Rewriting.

Converts top-level `require` statements that end at or before the safe
boundary into `import` declarations:

==============================================  ======================================
CommonJS                                        ES module
==============================================  ======================================
`var a = require('a'), b = require('b');`       `import a from 'a';` / `import b from 'b';`
`const x = require('m').y;`                     `import { y as x } from 'm';`
`const { a, b: c } = require('m');`             `import { a, b as c } from 'm';`
`require('m');`                                 `import 'm';`
==============================================  ======================================

Local names bound by default imports are recorded on the context so that
`name.default` accesses can be simplified afterwards. The whole pass is a
no-op when the program declares its own `require`.
"""

from typing import List, Optional, Tuple

from tree_sitter import Node

from js_switcheroo.core.bindings import Binding, render_import
from js_switcheroo.core.conversion_result import ImportRecord
from js_switcheroo.core.nodes import field, is_optional_chain, named_children, string_value, text_of
from js_switcheroo.core.parser import JSModule
from js_switcheroo.core.rewriter.base import ConversionContext, TopLevelPass
from js_switcheroo.core.rewriter.patterns import require_path
from js_switcheroo.core.tracer import get_tracer
from js_switcheroo.core.visitor import Replacement
from js_switcheroo.enums import ImportKind


class ImportRewriter(TopLevelPass):
  """
  Rewrites eligible top-level `require` statements into imports.

  Attributes:
      boundary (int): Statements ending after this offset are left alone.
  """

  name = "rewrite-imports"
  description = "Convert require statements to import declarations"

  def __init__(self, module: JSModule, context: ConversionContext, boundary: int):
    super().__init__(module, context)
    self.boundary = boundary
    self.enabled = not self.scope.program.has_own_binding("require")

  def _eligible(self, stmt: Node) -> bool:
    if not self.enabled:
      return False
    if stmt.end_byte > self.boundary:
      get_tracer().log_inspection(text_of(stmt)[:60], "skipped", "statement ends after the safe boundary")
      return False
    return True

  def visit_variable_declaration(self, decl: Node) -> Optional[Replacement]:
    if not self._eligible(decl):
      return None
    declarators = [d for d in named_children(decl) if d.type == "variable_declarator"]
    if not declarators:
      return None

    defaults = self._default_imports(declarators)
    if defaults is not None:
      lines = []
      for local, path in defaults:
        binding = Binding(local_name=local, export_name="default")
        lines.append(render_import([binding], text_of(path)))
        self.context.default_import_names.add(local)
        self._record(ImportKind.DEFAULT, [binding], path, decl)
      return Replacement.of(decl, "\n".join(lines))

    if len(declarators) != 1:
      return None
    target = field(declarators[0], "name")
    value = field(declarators[0], "value")
    if target is None or value is None:
      return None

    if target.type == "identifier" and value.type == "member_expression":
      return self._named_import(decl, target, value)
    if target.type == "object_pattern":
      return self._destructured_import(decl, target, value)
    return None

  visit_lexical_declaration = visit_variable_declaration

  def visit_expression_statement(self, stmt: Node) -> Optional[Replacement]:
    if not self._eligible(stmt):
      return None
    inner = named_children(stmt)
    if len(inner) != 1:
      return None
    path = require_path(self.module, inner[0])
    if path is None:
      return None
    self._record(ImportKind.BARE, [], path, stmt)
    return Replacement.of(stmt, render_import([], text_of(path)))

  def _default_imports(self, declarators: List[Node]) -> Optional[List[Tuple[str, Node]]]:
    found = []
    for declarator in declarators:
      target = field(declarator, "name")
      path = require_path(self.module, field(declarator, "value"))
      if target is None or target.type != "identifier" or path is None:
        return None
      found.append((text_of(target), path))
    return found

  def _named_import(self, decl: Node, target: Node, member: Node) -> Optional[Replacement]:
    if is_optional_chain(member):
      return None
    prop = field(member, "property")
    path = require_path(self.module, field(member, "object"))
    if path is None or prop is None or prop.type != "property_identifier":
      return None
    binding = Binding(local_name=text_of(target), export_name=text_of(prop))
    self._record(ImportKind.NAMED, [binding], path, decl)
    return Replacement.of(decl, render_import([binding], text_of(path)))

  def _destructured_import(self, decl: Node, pattern: Node, value: Node) -> Optional[Replacement]:
    path = require_path(self.module, value)
    if path is None:
      return None
    bindings = self._pattern_bindings(pattern)
    if bindings is None:
      get_tracer().log_inspection(text_of(pattern), "skipped", "pattern cannot be expressed as import specifiers")
      return None
    kind = ImportKind.NAMED if bindings else ImportKind.BARE
    self._record(kind, bindings, path, decl)
    return Replacement.of(decl, render_import(bindings, text_of(path)))

  @staticmethod
  def _pattern_bindings(pattern: Node) -> Optional[List[Binding]]:
    """
    Maps a flat object pattern to import bindings.

    Args:
        pattern (Node): `object_pattern` node.

    Returns:
        Optional[List[Binding]]: Bindings, or None when the pattern uses
        defaults, rest elements, nesting, or non-identifier keys.
    """
    bindings = []
    for prop in named_children(pattern):
      if prop.type == "shorthand_property_identifier_pattern":
        name = text_of(prop)
        bindings.append(Binding(local_name=name, export_name=name))
      elif prop.type == "pair_pattern":
        key = field(prop, "key")
        value = field(prop, "value")
        if key is None or value is None or key.type != "property_identifier" or value.type != "identifier":
          return None
        bindings.append(Binding(local_name=text_of(value), export_name=text_of(key)))
      else:
        return None
    return bindings

  def _record(self, kind: ImportKind, bindings: List[Binding], path: Node, stmt: Node) -> None:
    self.context.metadata.imports.append(
      ImportRecord(type=kind, bindings=bindings, path=string_value(path) or "", node=self.snapshot(stmt))
    )
