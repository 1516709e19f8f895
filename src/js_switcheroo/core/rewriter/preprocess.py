"""
Preprocessing Passes.

Two normalisations run before export rewriting:

1.  **IIFE unwrapping**: a file whose only statement is an immediately
    invoked wrapper function has the wrapper removed and its body
    de-indented one level, so that the body's statements become top-level
    and therefore eligible for rewriting.
2.  **Strict-mode directive removal**: ES modules are always strict, so
    leading `"use strict"` directives are dropped.
"""

from typing import List, Tuple

from tree_sitter import Node

from js_switcheroo.core.nodes import iter_tree, named_children, string_value
from js_switcheroo.core.rewriter.base import RewritePass
from js_switcheroo.core.rewriter.patterns import match_module_iife
from js_switcheroo.core.visitor import Replacement, VisitResult
from js_switcheroo.core.conversion_result import DirectiveRecord
from js_switcheroo.enums import DirectiveKind


class IIFEUnwrapper(RewritePass):
  """
  Hoists the body of a module-wide IIFE to the top level.

  The text from the start of the statement through the first line break
  after the opening brace is removed, as is the text from the last line
  break before the closing brace through the end of the statement. Body
  lines are then stripped of the indentation found on the first body line.
  Lines beginning inside a template literal are left untouched.
  """

  name = "unwrap-iife"
  description = "Remove a module-wide IIFE wrapper"

  def visit_program(self, root: Node) -> VisitResult:
    match = match_module_iife(self.module)
    if match is None:
      return False

    source = self.module.source
    stmt, fn, body = match
    contents = body.named_children
    first, last = contents[0], contents[-1]

    newline = source.find(b"\n", body.start_byte, first.start_byte)
    header_end = newline + 1 if newline != -1 else first.start_byte

    close_brace = body.end_byte - 1
    newline = source.rfind(b"\n", last.end_byte, close_brace)
    footer_start = newline if newline != -1 else last.end_byte
    if footer_start > last.end_byte and source[footer_start - 1 : footer_start] == b"\r":
      footer_start -= 1

    replacement = Replacement().remove(stmt.start_byte, header_end)
    indent = self._indentation(first, header_end)
    if indent:
      templates = [(n.start_byte, n.end_byte) for n in iter_tree(body) if n.type == "template_string"]
      for line_start in self._line_starts(header_end, footer_start):
        if any(start < line_start < end for start, end in templates):
          continue
        if source[line_start : line_start + len(indent)] == indent:
          replacement.remove(line_start, line_start + len(indent))
    replacement.remove(footer_start, stmt.end_byte)

    self.context.metadata.unwrapped = self.snapshot(fn)
    return replacement

  def _indentation(self, first: Node, header_end: int) -> bytes:
    source = self.module.source
    line_start = source.rfind(b"\n", 0, first.start_byte) + 1
    if line_start < header_end:
      return b""
    indent = source[line_start : first.start_byte]
    if indent.strip(b" \t"):
      return b""
    return indent

  def _line_starts(self, start: int, end: int) -> List[int]:
    source = self.module.source
    starts = [start]
    pos = source.find(b"\n", start, end)
    while pos != -1:
      if pos + 1 < end:
        starts.append(pos + 1)
      pos = source.find(b"\n", pos + 1, end)
    return starts


class StrictDirectiveRemover(RewritePass):
  """
  Removes `"use strict"` from the program's directive prologue.

  Each removal also consumes the line breaks that follow the directive.
  """

  name = "remove-strict-mode"
  description = "Drop redundant strict mode directives"

  def visit_program(self, root: Node) -> VisitResult:
    replacement = Replacement()
    for stmt, literal in self._prologue():
      if string_value(literal) != "use strict":
        continue
      end = stmt.end_byte
      source = self.module.source
      while source[end : end + 1] in (b"\n", b"\r"):
        end += 1
      replacement.remove(stmt.start_byte, end)
      self.context.metadata.directives.append(
        DirectiveRecord(type=DirectiveKind.REMOVED_STRICT_MODE, node=self.snapshot(stmt))
      )
    return replacement if replacement.edits else False

  def _prologue(self) -> List[Tuple[Node, Node]]:
    directives = []
    for stmt in self.module.statements():
      if stmt.type != "expression_statement":
        break
      inner = named_children(stmt)
      if len(inner) != 1 or inner[0].type != "string":
        break
      directives.append((stmt, inner[0]))
    return directives
