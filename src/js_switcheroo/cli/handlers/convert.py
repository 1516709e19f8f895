"""
Convert Command Handler.

This module implements the logic for the `js_switcheroo convert` command.
It orchestrates:
1. Configuration loading (pyproject.toml plus CLI overrides).
2. Source discovery (single file, directory tree, or stdin).
3. Conversion via the Engine.
4. Output writing, warning reporting, and trace logging.
"""

import json
import sys
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import ValidationError
from rich.markup import escape
from rich.table import Table

from js_switcheroo.config import RuntimeConfig
from js_switcheroo.core.conversion_result import ConversionResult
from js_switcheroo.core.engine import ASTEngine
from js_switcheroo.core.errors import SwitcherooError
from js_switcheroo.utils.console import get_console, log_error, log_info, log_success, log_warning

SOURCE_SUFFIXES = (".js", ".cjs", ".mjs")
SKIPPED_DIRS = frozenset({"node_modules", ".git"})


def collect_sources(root: Path) -> List[Path]:
  """
  Lists the JavaScript files under `root`, skipping vendored directories.

  Args:
      root (Path): Directory to search.

  Returns:
      List[Path]: Sorted source paths.
  """
  found = []
  for path in root.rglob("*"):
    if path.suffix not in SOURCE_SUFFIXES or not path.is_file():
      continue
    if SKIPPED_DIRS.intersection(path.relative_to(root).parts):
      continue
    found.append(path)
  return sorted(found)


def build_engine(
  force_default_export: Optional[bool],
  safe_functions: Optional[List[str]],
  validate: Optional[bool],
  search_path: Path,
) -> Optional[ASTEngine]:
  """
  Resolves configuration and constructs an engine.

  Returns:
      Optional[ASTEngine]: The engine, or None if the configuration is invalid.
  """
  try:
    config = RuntimeConfig.load(
      force_default_export=force_default_export,
      safe_function_identifiers=safe_functions,
      validate_output=validate,
      search_path=search_path,
    )
  except ValidationError as e:
    log_error(f"Invalid configuration: {escape(str(e))}")
    return None
  return ASTEngine(config=config)


def handle_convert(
  input_path: Path,
  output_path: Optional[Path] = None,
  inline: bool = False,
  force_default_export: Optional[bool] = None,
  safe_functions: Optional[List[str]] = None,
  validate: Optional[bool] = None,
  json_trace_path: Optional[Path] = None,
) -> int:
  """
  Handles the 'convert' command execution.

  Args:
      input_path: Source file or directory; `-` reads from stdin.
      output_path: Destination file or directory. Output goes to stdout for
          single inputs when omitted.
      inline: Overwrite each input file with its converted code.
      force_default_export: Override for the forced default export mode.
      safe_functions: Additional safe callee names.
      validate: Override for output validation.
      json_trace_path: Optional path to dump execution trace JSON.

  Returns:
      int: Exit code (0 for success, 1 for failure).
  """
  if str(input_path) == "-":
    engine = build_engine(force_default_export, safe_functions, validate, Path.cwd())
    if engine is None:
      return 1
    return _convert_stream(engine, output_path, json_trace_path)

  if not input_path.exists():
    log_error(f"Input not found: {escape(str(input_path))}")
    return 1

  search_path = input_path if input_path.is_dir() else input_path.parent
  engine = build_engine(force_default_export, safe_functions, validate, search_path)
  if engine is None:
    return 1

  batch_results: Dict[str, ConversionResult] = {}

  if input_path.is_file():
    dest = input_path if inline else output_path
    result = _convert_single_file(input_path, dest, engine, json_trace_path)
    batch_results[input_path.name] = result
    if not result.success:
      return 1

  else:
    if not output_path and not inline:
      log_error("Directory conversion requires --out destination directory or --inline.")
      return 1

    sources = collect_sources(input_path)
    if not sources:
      log_warning(f"No JavaScript files found in {escape(str(input_path))}")
      return 0

    log_info(f"Processing {len(sources)} files from {escape(str(input_path))}...")

    for src_file in sources:
      rel_path = src_file.relative_to(input_path)
      dest_file = src_file if inline else output_path / rel_path

      batch_trace = None
      if json_trace_path:
        # One trace per file, mirrored under the trace path.
        batch_trace = (json_trace_path / rel_path).with_suffix(".trace.json")

      result = _convert_single_file(src_file, dest_file, engine, batch_trace, label=str(rel_path))
      batch_results[str(rel_path)] = result

  _print_batch_summary(batch_results)
  return 0 if all(r.success for r in batch_results.values()) else 1


def _convert_single_file(
  input_path: Path,
  output_path: Optional[Path],
  engine: ASTEngine,
  json_trace_path: Optional[Path] = None,
  label: Optional[str] = None,
) -> ConversionResult:
  """
  Helper to execute conversion logic on a single file.

  Args:
      input_path: Source file path.
      output_path: Destination file path; stdout when None.
      engine: Configured engine.
      json_trace_path: Path to save trace event logs.
      label: Name used for the file in messages.

  Returns:
      ConversionResult: Result object containing status and code.
  """
  label = label or str(input_path)
  try:
    with open(input_path, "rt", encoding="utf-8") as f:
      code = f.read()
    result = engine.run(code)
  except (OSError, UnicodeDecodeError, SwitcherooError) as e:
    log_error(f"Failed to convert {escape(label)}: {escape(str(e))}")
    return ConversionResult(success=False, errors=[str(e)])

  _write_trace(result, json_trace_path)
  _report_warnings(result, label)

  if not result.success:
    for error in result.errors:
      log_error(f"{escape(label)}: {escape(error)}")
    return result

  if output_path:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "wt", encoding="utf-8") as f:
      f.write(result.code)
    log_success(f"Converted: [path]{escape(str(input_path))}[/path] -> [path]{escape(str(output_path))}[/path]")
  else:
    sys.stdout.write(result.code)

  return result


def _convert_stream(engine: ASTEngine, output_path: Optional[Path], json_trace_path: Optional[Path]) -> int:
  """Converts source read from stdin."""
  code = sys.stdin.read()
  try:
    result = engine.run(code)
  except SwitcherooError as e:
    log_error(f"Failed to convert <stdin>: {escape(str(e))}")
    return 1

  _write_trace(result, json_trace_path)
  _report_warnings(result, "<stdin>")
  if not result.success:
    for error in result.errors:
      log_error(f"<stdin>: {escape(error)}")
    return 1

  if output_path:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(result.code, encoding="utf-8")
  else:
    sys.stdout.write(result.code)
  return 0


def _report_warnings(result: ConversionResult, label: str) -> None:
  for warning in result.warnings:
    log_warning(escape(warning.format(label)))


def _write_trace(result: ConversionResult, json_trace_path: Optional[Path]) -> None:
  if not json_trace_path or not result.trace_events:
    return
  try:
    json_trace_path.parent.mkdir(parents=True, exist_ok=True)
    with open(json_trace_path, "wt", encoding="utf-8") as f:
      json.dump(result.trace_events, f, indent=2)
    log_info(f"Trace saved to [path]{escape(str(json_trace_path))}[/path]")
  except OSError as e:
    log_error(f"Failed to write trace: {escape(str(e))}")


def _print_batch_summary(results: Dict[str, ConversionResult]) -> None:
  """
  Renders a summary table of conversion results to the console.

  Args:
      results: Dictionary mapping filenames to conversion results.
  """
  total = len(results)
  clean = sum(1 for r in results.values() if r.success and not r.has_warnings)
  flagged = total - clean

  if flagged == 0:
    log_success(f"Batch Complete: {clean}/{total} files converted cleanly.")
    return

  table = Table(title="Conversion Report")
  table.add_column("File", style="cyan")
  table.add_column("Status", justify="center")
  table.add_column("Issues", style="red")

  for filename, res in results.items():
    if res.success and not res.has_warnings:
      continue
    status = "❌ Failed" if not res.success else "⚠️ Warnings"
    if res.errors:
      issues = "; ".join(res.errors)
    else:
      issues = "; ".join(sorted({w.kind.value for w in res.warnings}))
    table.add_row(escape(filename), status, escape(issues))

  console = get_console()
  console.print(table)
  console.print(f"\n[bold]Summary:[/bold] {clean} Clean, {flagged} with Issues.")
