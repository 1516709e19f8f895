"""
Shared Infrastructure for Rewrite Passes.

- `ConversionContext`: per-conversion state shared by all passes (options,
  metadata, warnings, the fresh-name generator, and the chain of offset maps
  used to report positions against the caller's input).
- `RewritePass`: a `NodeTransformer` bound to a module and a context, with
  tracing of every committed rewrite.
- `TopLevelPass`: a `RewritePass` that only dispatches on the program's
  direct statements.
"""

import logging
from typing import List, Optional, Set, Tuple

from tree_sitter import Node

from js_switcheroo.config import RuntimeConfig
from js_switcheroo.core.conversion_result import ConversionWarning, ModuleMetadata, NodeInfo
from js_switcheroo.core.edits import OffsetMap, render_range
from js_switcheroo.core.nodes import text_of
from js_switcheroo.core.parser import JSModule
from js_switcheroo.core.tracer import get_tracer
from js_switcheroo.core.uid import UidGenerator
from js_switcheroo.core.visitor import NodeTransformer, Replacement, VisitResult
from js_switcheroo.enums import WarningKind

logger = logging.getLogger(__name__)


class ConversionContext:
  """
  Mutable state for a single module conversion.

  Node snapshots taken by passes are positioned in the text that pass saw.
  Each committed pass pushes the `OffsetMap` of its edits; `finalize` walks
  every snapshot back through the maps so that all reported positions refer
  to the original input.

  Attributes:
      config (RuntimeConfig): Options for this conversion.
      metadata (ModuleMetadata): Records of performed rewrites.
      warnings (List[ConversionWarning]): Diagnostics in emission order.
      default_import_names (Set[str]): Locals bound by default imports.
      uids (Optional[UidGenerator]): Fresh-name generator for export rewriting.
  """

  def __init__(self, config: RuntimeConfig):
    self.config = config
    self.metadata = ModuleMetadata()
    self.warnings: List[ConversionWarning] = []
    self.default_import_names: Set[str] = set()
    self.uids: Optional[UidGenerator] = None
    self._offset_maps: List[OffsetMap] = []
    self._snapshots: List[Tuple[NodeInfo, int]] = []

  def snapshot(self, module: JSModule, node: Node) -> NodeInfo:
    info = module.snapshot(node)
    self._snapshots.append((info, len(self._offset_maps)))
    return info

  def warn(self, module: JSModule, node: Node, kind: WarningKind, message: str) -> ConversionWarning:
    """
    Records a non-fatal diagnostic against `node`.

    Args:
        module (JSModule): Module the node belongs to.
        node (Node): Offending construct.
        kind (WarningKind): Category.
        message (str): Human-readable description.

    Returns:
        ConversionWarning: The recorded warning.
    """
    warning = ConversionWarning(node=self.snapshot(module, node), kind=kind, message=message)
    self.warnings.append(warning)
    get_tracer().log_warning(f"{kind.value}: {message}")
    logger.debug("%s at byte %d: %s", kind.value, node.start_byte, message)
    return warning

  def push_offsets(self, offsets: OffsetMap) -> None:
    self._offset_maps.append(offsets)

  def finalize(self, original: str, prefix_bytes: int = 0) -> None:
    """
    Rewrites every snapshot position in terms of the original input.

    Args:
        original (str): The caller's input text, shebang included.
        prefix_bytes (int): Length of the shebang line stripped before parsing.
    """
    data = original.encode("utf-8")
    for info, depth in self._snapshots:
      start, end = info.start, info.end
      for offsets in reversed(self._offset_maps[:depth]):
        start = offsets.to_original(start)
        end = offsets.to_original(end)
      start += prefix_bytes
      end = max(end + prefix_bytes, start)
      line_start = data.rfind(b"\n", 0, start) + 1
      info.start = start
      info.end = end
      info.line = data.count(b"\n", 0, start) + 1
      info.column = len(data[line_start:start].decode("utf-8", errors="replace")) + 1
    self._snapshots.clear()


class RewritePass(NodeTransformer):
  """
  Base class for the conversion passes.

  Attributes:
      name (str): Phase label used in traces.
      description (str): Longer phase description.
  """

  name = "rewrite"
  description = ""

  def __init__(self, module: JSModule, context: ConversionContext):
    super().__init__(module)
    self.context = context
    self.scope = module.scope

  def commit(self, node: Node, replacement: Replacement) -> None:
    super().commit(node, replacement)
    after = render_range(self.module.source, replacement.edits, node.start_byte, node.end_byte)
    get_tracer().log_mutation(node.type, text_of(node), after)

  def snapshot(self, node: Node) -> NodeInfo:
    return self.context.snapshot(self.module, node)

  def warn(self, node: Node, kind: WarningKind, message: str) -> ConversionWarning:
    return self.context.warn(self.module, node, kind, message)


class TopLevelPass(RewritePass):
  """
  A pass that only considers the program's direct children.

  Statements dispatch to `visit_<type>` as usual; nothing below them is
  visited.
  """

  def on_visit(self, node: Node) -> VisitResult:
    if node.type == "program":
      return None
    super().on_visit(node)
    return False
