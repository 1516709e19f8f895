"""
Local/Exported Name Pairs and Specifier Rendering.

A `Binding` pairs a module-local identifier with the name it is known by
across the module boundary. The same shape describes both directions:

- exports: `export { local as exported }`
- imports: `import { exported as local } from '...'`

The renderers here produce the source text of ES module declarations from
lists of bindings.
"""

from typing import List, Optional, Sequence

from pydantic import BaseModel, ConfigDict


class Binding(BaseModel):
  """
  A pair of names linking a local binding to a module-interface name.
  """

  model_config = ConfigDict(frozen=True)

  local_name: str
  export_name: str

  def is_aliased(self) -> bool:
    return self.local_name != self.export_name

  def is_default_export(self) -> bool:
    return self.export_name == "default"


def export_specifiers(bindings: Sequence[Binding]) -> str:
  """
  Renders an export specifier list, e.g. `{ a, b as c }`.

  Args:
      bindings: Names to export.

  Returns:
      str: Braced specifier list; `{}` when empty.
  """
  if not bindings:
    return "{}"
  parts = [f"{b.local_name} as {b.export_name}" if b.is_aliased() else b.local_name for b in bindings]
  return "{ " + ", ".join(parts) + " }"


def import_specifiers(bindings: Sequence[Binding]) -> str:
  """
  Renders the clause between `import` and `from`.

  The first default binding is emitted as a default import; all other
  bindings go in a braced list.

  Args:
      bindings: Names to import; `export_name` is the imported name.

  Returns:
      str: e.g. `foo`, `{ a, b as c }` or `foo, { a }`.
  """
  default_local: Optional[str] = None
  named: List[Binding] = []
  for binding in bindings:
    if binding.is_default_export() and default_local is None:
      default_local = binding.local_name
    else:
      named.append(binding)

  parts = []
  if default_local is not None:
    parts.append(default_local)
  if named:
    specs = [f"{b.export_name} as {b.local_name}" if b.is_aliased() else b.local_name for b in named]
    parts.append("{ " + ", ".join(specs) + " }")
  return ", ".join(parts)


def render_export(bindings: Sequence[Binding], source: Optional[str] = None) -> str:
  """
  Renders a complete `export { ... };` statement.

  Args:
      bindings: Names to export.
      source: Module specifier source text (with quotes) for re-exports.

  Returns:
      str: The statement text.
  """
  clause = export_specifiers(bindings)
  if source is not None:
    return f"export {clause} from {source};"
  return f"export {clause};"


def render_import(bindings: Sequence[Binding], source: str) -> str:
  """
  Renders a complete import declaration.

  Args:
      bindings: Names to import. Empty produces a side-effect import.
      source: Module specifier source text, quotes included.

  Returns:
      str: The statement text.
  """
  if not bindings:
    return f"import {source};"
  return f"import {import_specifiers(bindings)} from {source};"
