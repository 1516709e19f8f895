"""
JavaScript Parsing.

Wraps the tree-sitter JavaScript grammar and exposes a `JSModule`: the parsed
tree together with its source bytes and a lazily computed scope analysis.

tree-sitter is error tolerant and always returns a tree; `parse_module`
turns a tree containing `ERROR` or `MISSING` nodes into a `JSParseError`.
"""

import logging
from typing import List, Optional

import tree_sitter_javascript
from tree_sitter import Language, Node, Parser

from js_switcheroo.analysis.scope import ScopeAnalysis
from js_switcheroo.core.conversion_result import NodeInfo
from js_switcheroo.core.errors import JSParseError
from js_switcheroo.core.nodes import COMMENT_TYPES, iter_tree, text_of

logger = logging.getLogger(__name__)

JS_LANGUAGE = Language(tree_sitter_javascript.language())

_PARSER = Parser(JS_LANGUAGE)


class JSModule:
  """
  A parsed JavaScript program.

  Attributes:
      code (str): The source text.
      source (bytes): UTF-8 encoding of `code`; node offsets index into it.
      tree: The tree-sitter tree.
      root (Node): The `program` node.
  """

  def __init__(self, code: str):
    self.code = code
    self.source = code.encode("utf-8")
    self.tree = _PARSER.parse(self.source)
    self.root: Node = self.tree.root_node
    self._scope: Optional[ScopeAnalysis] = None

  @property
  def scope(self) -> ScopeAnalysis:
    """The scope analysis of this tree, built on first access."""
    if self._scope is None:
      self._scope = ScopeAnalysis(self.root)
    return self._scope

  @property
  def has_errors(self) -> bool:
    return self.root.has_error

  def first_error(self) -> Optional[Node]:
    for node in iter_tree(self.root):
      if node.type == "ERROR" or node.is_missing:
        return node
    # MISSING tokens can be anonymous and are skipped by the named walk.
    stack = [self.root]
    while stack:
      node = stack.pop()
      if node.is_missing:
        return node
      stack.extend(reversed(node.children))
    return None

  def statements(self) -> List[Node]:
    """Top-level statements of the program, comments excluded."""
    return [
      child for child in self.root.named_children if child.type not in COMMENT_TYPES and child.type != "hash_bang_line"
    ]

  def snapshot(self, node: Node) -> NodeInfo:
    """
    Captures a node as a `NodeInfo`, with positions in this module's text.

    Args:
        node (Node): Node of this module's tree.

    Returns:
        NodeInfo: Detached snapshot.
    """
    row, column = node.start_point
    return NodeInfo(
      type=node.type,
      text=text_of(node),
      start=node.start_byte,
      end=node.end_byte,
      line=row + 1,
      column=column + 1,
    )


def parse_module(code: str) -> JSModule:
  """
  Parses JavaScript source, rejecting input with syntax errors.

  Args:
      code (str): JavaScript source text.

  Returns:
      JSModule: The parsed module.

  Raises:
      JSParseError: If the source contains syntax errors.
  """
  module = JSModule(code)
  if module.has_errors:
    bad = module.first_error()
    if bad is None:
      raise JSParseError("Syntax error")
    row, column = bad.start_point
    logger.debug("Syntax error at %d:%d in %r", row + 1, column + 1, text_of(bad)[:40])
    raise JSParseError(f"Syntax error at line {row + 1}, column {column + 1}", line=row + 1, column=column + 1)
  return module
