"""
Node-Type Vocabulary and Tree Helpers.

tree-sitter exposes untyped nodes tagged with a `type` string. This module
collects the node-type sets the passes dispatch on, plus small helpers for
common structural questions (is this a function expression, what does this
string literal contain, which identifiers does this pattern bind).
"""

from typing import Iterator, List, Optional, Tuple

from tree_sitter import Node

# Older grammar releases named function expressions plain `function`.
FUNCTION_EXPRESSION_TYPES = frozenset({"function_expression", "function", "generator_function"})
FUNCTION_DECLARATION_TYPES = frozenset({"function_declaration", "generator_function_declaration"})
FUNCTION_TYPES = FUNCTION_EXPRESSION_TYPES | FUNCTION_DECLARATION_TYPES | {"arrow_function", "method_definition"}

# Constructs that rebind `this`. Arrow functions inherit it.
THIS_BOUNDARY_TYPES = (FUNCTION_TYPES - {"arrow_function"}) | {"class_body", "class_static_block"}

BLOCK_SCOPE_TYPES = frozenset({"statement_block", "switch_body", "class_static_block"})
LOOP_SCOPE_TYPES = frozenset({"for_statement", "for_in_statement"})

COMMENT_TYPES = frozenset({"comment", "html_comment"})

IDENTIFIER_TYPES = frozenset({"identifier", "shorthand_property_identifier", "shorthand_property_identifier_pattern"})

MEMBER_ACCESS_TYPES = frozenset({"member_expression", "subscript_expression"})

NodeKey = Tuple[int, int, str]


def node_key(node: Node) -> NodeKey:
  """
  Returns a hashable identity for a node within a single parse.

  Args:
      node (Node): The tree-sitter node.

  Returns:
      NodeKey: `(start_byte, end_byte, type)`.
  """
  return (node.start_byte, node.end_byte, node.type)


def text_of(node: Node) -> str:
  return node.text.decode("utf-8")


def named_children(node: Node) -> List[Node]:
  """Named children of `node`, comments excluded."""
  return [child for child in node.named_children if child.type not in COMMENT_TYPES]


def field(node: Node, name: str) -> Optional[Node]:
  return node.child_by_field_name(name)


def unwrap_parens(node: Optional[Node]) -> Optional[Node]:
  """Strips any number of enclosing `parenthesized_expression` wrappers."""
  while node is not None and node.type == "parenthesized_expression":
    inner = named_children(node)
    if len(inner) != 1:
      return node
    node = inner[0]
  return node


def is_optional_chain(node: Node) -> bool:
  """True for `a?.b` and `f?.()` style accesses."""
  return any(child.type in ("optional_chain", "?.") for child in node.children)


def is_function_expression(node: Optional[Node]) -> bool:
  return node is not None and node.is_named and node.type in FUNCTION_EXPRESSION_TYPES


def is_generator(node: Node) -> bool:
  return node.type in ("generator_function", "generator_function_declaration")


def is_async(node: Node) -> bool:
  return any(child.type == "async" for child in node.children)


def function_name_anchor(node: Node) -> Node:
  """
  Locates the token after which a name belongs in an anonymous function.

  For `function (a) {}` that is the `function` keyword; for generators it is
  the `*` token.

  Args:
      node (Node): A function expression node.

  Returns:
      Node: The keyword or star token.
  """
  anchor = None
  for child in node.children:
    if child.type in ("function", "*"):
      anchor = child
    elif child.is_named:
      break
  if anchor is None:
    return node.children[0]
  return anchor


def function_parameters(node: Node) -> List[Node]:
  params = field(node, "parameters")
  if params is not None:
    return named_children(params)
  single = field(node, "parameter")
  return [single] if single is not None else []


def string_value(node: Node) -> Optional[str]:
  """
  Returns the raw contents of a plain string literal, without quotes.

  Template literals and other expressions yield None.

  Args:
      node (Node): Candidate literal node.

  Returns:
      Optional[str]: The unquoted text, escapes left as written.
  """
  if node.type != "string":
    return None
  raw = text_of(node)
  if len(raw) < 2:
    return None
  return raw[1:-1]


def pattern_identifiers(pattern: Optional[Node]) -> List[Node]:
  """
  Collects the identifier nodes bound by a declaration target or parameter.

  Handles plain identifiers and nested object/array destructuring, including
  default values and rest elements. Default value expressions are not
  searched; identifiers there are references.

  Args:
      pattern (Optional[Node]): A binding target.

  Returns:
      List[Node]: Binding identifier nodes, in source order.
  """
  found: List[Node] = []
  stack = [pattern] if pattern is not None else []
  while stack:
    node = stack.pop()
    kind = node.type
    if kind in ("identifier", "shorthand_property_identifier_pattern"):
      found.append(node)
    elif kind in ("object_pattern", "array_pattern", "formal_parameters"):
      stack.extend(reversed(named_children(node)))
    elif kind == "pair_pattern":
      value = field(node, "value")
      if value is not None:
        stack.append(value)
    elif kind in ("assignment_pattern", "object_assignment_pattern"):
      left = field(node, "left")
      if left is not None:
        stack.append(left)
    elif kind == "rest_pattern":
      inner = named_children(node)
      if inner:
        stack.append(inner[0])
  return found


def iter_tree(root: Node) -> Iterator[Node]:
  """Iterative pre-order traversal over named nodes."""
  stack = [root]
  while stack:
    node = stack.pop()
    yield node
    stack.extend(reversed(node.named_children))


def enclosing_statement(node: Node, root: Node) -> Optional[Node]:
  """
  Returns the top-level statement of `root` that contains `node`.

  Args:
      node (Node): Any node in the tree.
      root (Node): The program node.

  Returns:
      Optional[Node]: The direct child of `root` containing `node`.
  """
  current = node
  while current.parent is not None:
    parent = current.parent
    if node_key(parent) == node_key(root):
      return current
    current = parent
  return None


def is_top_level_this(node: Node) -> bool:
  """True when `this` at `node` refers to the module, not a function receiver."""
  current = node.parent
  while current is not None:
    if current.type in THIS_BOUNDARY_TYPES:
      return False
    current = current.parent
  return True
