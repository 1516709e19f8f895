"""
Lexical Scope Analysis.

tree-sitter produces a syntax tree with no binding information. This module
computes the scope model the rewrite passes query:

- **Scopes**: program, function (including arrows and methods), block,
  catch clause, and named class expressions.
- **Bindings**: `var` hoists to the nearest function or program scope;
  `let`, `const`, classes and function declarations bind in the enclosing
  block; parameters, catch parameters and the names of function and class
  expressions bind in their own scope; imports bind at program scope.
- **References**: every other identifier. References that resolve to no
  binding are recorded as globals.
- **Labels**: statement labels, which share the identifier namespace for the
  purposes of fresh-name generation.

The analysis runs in two steps: a single traversal that creates scopes and
records declarations and identifier occurrences, then a resolution step so
that hoisted declarations are visible to earlier references.
"""

from typing import Dict, Iterator, List, Optional, Set, Tuple

from tree_sitter import Node

from js_switcheroo.core.nodes import (
  BLOCK_SCOPE_TYPES,
  FUNCTION_DECLARATION_TYPES,
  FUNCTION_EXPRESSION_TYPES,
  FUNCTION_TYPES,
  IDENTIFIER_TYPES,
  LOOP_SCOPE_TYPES,
  NodeKey,
  field,
  function_parameters,
  named_children,
  node_key,
  pattern_identifiers,
  text_of,
)
from js_switcheroo.enums import ScopeKind


class Scope:
  """
  A single lexical scope.

  Attributes:
      node (Node): The node that introduces the scope.
      kind (ScopeKind): Scope category.
      parent (Optional[Scope]): Enclosing scope, None for the program.
      bindings (Dict[str, List[Node]]): Declared names and their binding nodes.
  """

  def __init__(self, node: Node, kind: ScopeKind, parent: Optional["Scope"] = None):
    self.node = node
    self.kind = kind
    self.parent = parent
    self.bindings: Dict[str, List[Node]] = {}

  def __repr__(self) -> str:
    return f"<Scope {self.kind.value} {self.node.type}@{self.node.start_byte}>"

  def declare(self, name: str, node: Node) -> None:
    self.bindings.setdefault(name, []).append(node)

  def has_own_binding(self, name: str) -> bool:
    return name in self.bindings

  def lineage(self) -> Iterator["Scope"]:
    """Yields this scope followed by each enclosing scope."""
    current: Optional[Scope] = self
    while current is not None:
      yield current
      current = current.parent

  def resolve(self, name: str) -> Optional["Scope"]:
    """
    Finds the scope that declares `name`, searching outward.

    Args:
        name (str): Identifier to look up.

    Returns:
        Optional[Scope]: The declaring scope, or None for unbound names.
    """
    for scope in self.lineage():
      if scope.has_own_binding(name):
        return scope
    return None

  def has_binding(self, name: str) -> bool:
    return self.resolve(name) is not None

  def function_scope(self) -> "Scope":
    """Returns the nearest scope that receives hoisted `var` declarations."""
    for scope in self.lineage():
      if scope.kind in (ScopeKind.FUNCTION, ScopeKind.PROGRAM):
        return scope
    raise AssertionError("scope chain does not end at a program scope")

  def program(self) -> "Scope":
    scope = self
    while scope.parent is not None:
      scope = scope.parent
    return scope


class ScopeAnalysis:
  """
  Binding oracle for one parsed program.

  Attributes:
      program (Scope): The root scope.
      globals (Set[str]): Names referenced without any visible binding.
      labels (Set[str]): Statement label names.
  """

  def __init__(self, root: Node):
    self.root = root
    self.program = Scope(root, ScopeKind.PROGRAM)
    self.globals: Set[str] = set()
    self.labels: Set[str] = set()

    self._scopes: Dict[NodeKey, Scope] = {node_key(root): self.program}
    self._occurrences: Dict[str, List[int]] = {}
    self._binding_keys: Set[NodeKey] = set()
    self._ignored_keys: Set[NodeKey] = set()
    self._references: List[Tuple[str, Scope]] = []

    self._collect()
    for name, scope in self._references:
      if not scope.has_binding(name):
        self.globals.add(name)

  # --- Queries ---

  def scope_at(self, node: Node) -> Scope:
    """
    Returns the innermost scope containing `node`.

    A node that itself introduces a scope (a function, a block) maps to that
    scope.

    Args:
        node (Node): Any node of the analysed tree.

    Returns:
        Scope: The innermost enclosing scope.
    """
    current: Optional[Node] = node
    while current is not None:
      scope = self._scopes.get(node_key(current))
      if scope is not None:
        return scope
      current = current.parent
    return self.program

  def has_binding(self, name: str, scope: Optional[Scope] = None) -> bool:
    return (scope or self.program).has_binding(name)

  def is_shadowed(self, node: Node, name: str) -> bool:
    """True when `name` is bound in any scope visible from `node`."""
    return self.scope_at(node).has_binding(name)

  def resolve(self, node: Node, name: str) -> Optional[Scope]:
    return self.scope_at(node).resolve(name)

  def has_global(self, name: str) -> bool:
    return name in self.globals

  def has_label(self, name: str) -> bool:
    return name in self.labels

  def has_reference(self, name: str) -> bool:
    """True when `name` occurs anywhere in the program, bound or not."""
    return name in self._occurrences

  def occurs_outside(self, name: str, start: int, end: int) -> bool:
    """
    Checks for occurrences of `name` outside the byte range `[start, end)`.

    Args:
        name (str): Identifier to look for.
        start (int): Range start.
        end (int): Range end.

    Returns:
        bool: True if any occurrence lies outside the range.
    """
    return any(offset < start or offset >= end for offset in self._occurrences.get(name, ()))

  def occurs_within(self, name: str, start: int, end: int, exclude: Optional[Node] = None) -> bool:
    """Checks for occurrences inside `[start, end)`, optionally skipping one node."""
    skip = exclude.start_byte if exclude is not None else None
    return any(start <= offset < end and offset != skip for offset in self._occurrences.get(name, ()))

  # --- Construction ---

  def _bind(self, scope: Scope, ident: Node) -> None:
    scope.declare(text_of(ident), ident)
    self._binding_keys.add(node_key(ident))

  def _bind_pattern(self, scope: Scope, pattern: Optional[Node]) -> None:
    for ident in pattern_identifiers(pattern):
      self._bind(scope, ident)

  def _new_scope(self, node: Node, kind: ScopeKind, parent: Scope) -> Scope:
    scope = Scope(node, kind, parent)
    self._scopes[node_key(node)] = scope
    return scope

  def _collect(self) -> None:
    stack: List[Tuple[Node, Scope]] = [(self.root, self.program)]
    while stack:
      node, scope = stack.pop()
      inner = self._declare(node, scope)
      for child in reversed(node.named_children):
        stack.append((child, inner))

  def _declare(self, node: Node, scope: Scope) -> Scope:
    """
    Records what `node` declares and returns the scope for its children.
    """
    kind = node.type

    if kind == "variable_declaration":
      for declarator in named_children(node):
        if declarator.type == "variable_declarator":
          self._bind_pattern(scope.function_scope(), field(declarator, "name"))

    elif kind == "lexical_declaration":
      for declarator in named_children(node):
        if declarator.type == "variable_declarator":
          self._bind_pattern(scope, field(declarator, "name"))

    elif kind == "class_declaration":
      name = field(node, "name")
      if name is not None:
        self._bind(scope, name)

    elif kind == "import_statement":
      self._declare_imports(node)

    elif kind == "export_statement":
      self._ignore_export_names(node)

    elif kind == "labeled_statement":
      label = field(node, "label")
      if label is not None:
        self.labels.add(text_of(label))

    elif kind in IDENTIFIER_TYPES:
      key = node_key(node)
      name = text_of(node)
      if key not in self._ignored_keys:
        self._occurrences.setdefault(name, []).append(node.start_byte)
        if key not in self._binding_keys:
          self._references.append((name, scope))

    if kind in FUNCTION_TYPES:
      name = field(node, "name")
      if kind in FUNCTION_DECLARATION_TYPES and name is not None:
        self._bind(scope, name)
      inner = self._new_scope(node, ScopeKind.FUNCTION, scope)
      if kind in FUNCTION_EXPRESSION_TYPES and name is not None:
        self._bind(inner, name)
      for param in function_parameters(node):
        self._bind_pattern(inner, param)
      return inner

    if kind == "class":
      name = field(node, "name")
      if name is None:
        return scope
      inner = self._new_scope(node, ScopeKind.CLASS, scope)
      self._bind(inner, name)
      return inner

    if kind == "catch_clause":
      inner = self._new_scope(node, ScopeKind.CATCH, scope)
      self._bind_pattern(inner, field(node, "parameter"))
      return inner

    if kind in LOOP_SCOPE_TYPES:
      inner = self._new_scope(node, ScopeKind.BLOCK, scope)
      declared_kind = field(node, "kind")
      if kind == "for_in_statement" and declared_kind is not None:
        target = inner.function_scope() if text_of(declared_kind) == "var" else inner
        self._bind_pattern(target, field(node, "left"))
      return inner

    if kind in BLOCK_SCOPE_TYPES:
      return self._new_scope(node, ScopeKind.BLOCK, scope)

    return scope

  def _declare_imports(self, node: Node) -> None:
    for clause in named_children(node):
      if clause.type != "import_clause":
        continue
      for part in named_children(clause):
        if part.type == "identifier":
          self._bind(self.program, part)
        elif part.type == "namespace_import":
          for ident in named_children(part):
            if ident.type == "identifier":
              self._bind(self.program, ident)
        elif part.type == "named_imports":
          for spec in named_children(part):
            if spec.type != "import_specifier":
              continue
            alias = field(spec, "alias")
            imported = field(spec, "name")
            if alias is not None:
              self._bind(self.program, alias)
              if imported is not None:
                self._ignored_keys.add(node_key(imported))
            elif imported is not None and imported.type == "identifier":
              self._bind(self.program, imported)

  def _ignore_export_names(self, node: Node) -> None:
    # Re-export clauses name another module's bindings; aliases are export names.
    reexport = field(node, "source") is not None
    for clause in named_children(node):
      if clause.type != "export_clause":
        continue
      for spec in named_children(clause):
        if spec.type != "export_specifier":
          continue
        alias = field(spec, "alias")
        if alias is not None:
          self._ignored_keys.add(node_key(alias))
        name = field(spec, "name")
        if reexport and name is not None:
          self._ignored_keys.add(node_key(name))


def analyze_scopes(root: Node) -> ScopeAnalysis:
  return ScopeAnalysis(root)
