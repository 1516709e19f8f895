"""
Data structures representing the output of the conversion pipeline.

This module defines the Pydantic models returned to callers:

- `NodeInfo`: a detached snapshot of a syntax node (type, text, position).
- `ConversionWarning`: a non-fatal diagnostic tied to a node.
- `ImportRecord` / `ExportRecord` / `DirectiveRecord`: metadata describing
  each rewrite that was performed.
- `ModuleMetadata`: the aggregate of those records.
- `ConversionResult`: the generated code plus everything above.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from js_switcheroo.core.bindings import Binding
from js_switcheroo.enums import DirectiveKind, ExportKind, ImportKind, WarningKind


class NodeInfo(BaseModel):
  """
  Snapshot of a syntax node, independent of the tree it came from.

  Offsets are byte offsets; `line` and `column` are 1-based.
  """

  type: str = Field(..., description="tree-sitter node type.")
  text: str = Field("", description="Source text of the node when it was captured.")
  start: int = Field(0, description="Start byte offset.")
  end: int = Field(0, description="End byte offset.")
  line: int = Field(1, description="1-based line of the node start.")
  column: int = Field(1, description="1-based column of the node start.")


class ConversionWarning(BaseModel):
  """
  A construct that could not be converted, or was converted with a caveat.
  """

  node: NodeInfo
  kind: WarningKind
  message: str

  def format(self, path: str = "<input>") -> str:
    """
    Renders the warning in `path:line:col  kind  message` form.

    Args:
        path (str): Label for the source, typically a file path.

    Returns:
        str: Single-line description.
    """
    return f"{path}:{self.node.line}:{self.node.column}  {self.kind.value}  {self.message}"


class ImportRecord(BaseModel):
  type: ImportKind
  bindings: List[Binding] = Field(default_factory=list)
  path: str = Field(..., description="Module specifier without quotes.")
  node: Optional[NodeInfo] = None


class ExportRecord(BaseModel):
  type: ExportKind
  bindings: List[Binding] = Field(default_factory=list)
  path: Optional[str] = Field(None, description="Module specifier for re-exports.")
  node: Optional[NodeInfo] = None


class DirectiveRecord(BaseModel):
  type: DirectiveKind
  node: Optional[NodeInfo] = None


class ModuleMetadata(BaseModel):
  """
  Everything the rewrite did to one module.
  """

  imports: List[ImportRecord] = Field(default_factory=list)
  exports: List[ExportRecord] = Field(default_factory=list)
  directives: List[DirectiveRecord] = Field(default_factory=list)
  unwrapped: Optional[NodeInfo] = Field(None, description="The IIFE whose body was hoisted, if any.")


class ConversionResult(BaseModel):
  """
  Container for the results of a conversion job.
  """

  code: str = Field(default="", description="The generated source code.")
  errors: List[str] = Field(default_factory=list, description="List of error messages encountered.")
  success: bool = Field(
    default=True,
    description="True if the pipeline completed without fatal crashes.",
  )
  warnings: List[ConversionWarning] = Field(default_factory=list, description="Non-fatal diagnostics.")
  metadata: ModuleMetadata = Field(default_factory=ModuleMetadata, description="Records of performed rewrites.")
  trace_events: List[Dict[str, Any]] = Field(default_factory=list, description="Execution trace log data.")

  @property
  def has_errors(self) -> bool:
    """
    Check if the result contains any error messages.

    Returns:
        True if one or more errors are present.
    """
    return len(self.errors) > 0

  @property
  def has_warnings(self) -> bool:
    return len(self.warnings) > 0
