"""
Audit Command Handler.

Runs conversions without writing anything and reports the CommonJS usage that
would be left behind (unsupported requires and exports), so a codebase can be
assessed before migrating it.
"""

import json
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from rich.markup import escape
from rich.table import Table

from js_switcheroo.cli.handlers.convert import build_engine, collect_sources
from js_switcheroo.core.conversion_result import ConversionWarning
from js_switcheroo.core.errors import SwitcherooError
from js_switcheroo.utils.console import get_console, log_error, log_info, log_success


def handle_audit(
  path: Path,
  json_mode: bool = False,
  force_default_export: Optional[bool] = None,
  safe_functions: Optional[List[str]] = None,
) -> int:
  """
  Scans a file or directory for constructs that cannot be converted.

  Args:
      path: Input source file or directory.
      json_mode: If True, output JSON to stdout instead of a table.
      force_default_export: Override for the forced default export mode.
      safe_functions: Additional safe callee names.

  Returns:
      int: Exit code (0 if everything converts cleanly, 1 otherwise).
  """
  if not path.exists():
    log_error(f"Path not found: {escape(str(path))}")
    return 1

  files = [path] if path.is_file() else collect_sources(path)
  engine = build_engine(force_default_export, safe_functions, None, path if path.is_dir() else path.parent)
  if engine is None:
    return 1

  if not json_mode:
    log_info(f"Auditing {len(files)} files...")

  findings: List[Tuple[str, ConversionWarning]] = []
  failures: Dict[str, str] = {}

  for f in files:
    label = str(f.relative_to(path)) if path.is_dir() else f.name
    try:
      result = engine.run(f.read_text("utf-8"))
    except (OSError, UnicodeDecodeError, SwitcherooError) as e:
      log_error(f"Failed to audit {escape(label)}: {escape(str(e))}")
      failures[label] = str(e)
      continue
    if not result.success:
      failures[label] = "; ".join(result.errors)
      continue
    findings.extend((label, warning) for warning in result.warnings)

  if json_mode:
    output = [
      {
        "file": label,
        "line": w.node.line,
        "column": w.node.column,
        "kind": w.kind.value,
        "message": w.message,
      }
      for label, w in findings
    ]
    output.extend({"file": label, "error": error} for label, error in failures.items())
    print(json.dumps(output, indent=2))
  elif not findings and not failures:
    log_success(f"Audit passed: {len(files)} files convert cleanly.")
  else:
    _print_findings(findings, failures)

  return 1 if findings or failures else 0


def _print_findings(findings: List[Tuple[str, ConversionWarning]], failures: Dict[str, str]) -> None:
  table = Table(title="CommonJS Audit")
  table.add_column("File", style="cyan")
  table.add_column("Location", justify="right")
  table.add_column("Kind", style="magenta")
  table.add_column("Message")

  for label, warning in findings:
    table.add_row(escape(label), f"{warning.node.line}:{warning.node.column}", warning.kind.value, escape(warning.message))
  for label, error in failures.items():
    table.add_row(escape(label), "-", "[red]error[/red]", escape(error))

  console = get_console()
  console.print(table)
  console.print(f"\n[bold]Summary:[/bold] {len(findings)} warnings, {len(failures)} failed files.")
