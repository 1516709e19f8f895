"""
Main Entry Point for js-switcheroo CLI.

This module handles argument parsing and dispatches to specific command
handlers defined in `js_switcheroo.cli.commands`.
"""

import argparse
from pathlib import Path
from typing import List, Optional

from js_switcheroo import __version__
from js_switcheroo.cli import commands
from js_switcheroo.utils.console import set_verbosity


def _add_conversion_options(cmd: argparse.ArgumentParser) -> None:
  cmd.add_argument(
    "--force-default-export",
    action="store_true",
    default=None,
    help="Collapse all exports into a single default-exported object (Overrides config)",
  )
  cmd.add_argument(
    "--safe-functions",
    nargs="+",
    default=None,
    metavar="NAME",
    help="Functions that, like require, may be called before imports without blocking conversion",
  )


def main(argv: Optional[List[str]] = None) -> int:
  """
  Main CLI entry point.

  Parses arguments via argparse and calls the appropriate handler function.

  Args:
      argv: Optional list of command line arguments (defaults to sys.argv).

  Returns:
      int: Exit code (0 for success, non-zero for failure).
  """
  parser = argparse.ArgumentParser(description="js-switcheroo: CommonJS to ES module rewriter")
  parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
  parser.add_argument("-v", "--verbose", action="store_true", help="Show debug output from the rewrite passes")
  parser.add_argument("-q", "--quiet", action="store_true", help="Only show warnings and errors")

  subparsers = parser.add_subparsers(dest="command", required=True)

  # --- Command: CONVERT ---
  cmd_conv = subparsers.add_parser("convert", help="Convert a JavaScript file or directory to ES modules")
  cmd_conv.add_argument("path", type=Path, help="Input source file or directory ('-' reads stdin)")
  out_group = cmd_conv.add_mutually_exclusive_group()
  out_group.add_argument("--out", type=Path, help="Output destination (file or dir)")
  out_group.add_argument("--inline", action="store_true", help="Rewrite input files in place")
  _add_conversion_options(cmd_conv)
  cmd_conv.add_argument(
    "--no-validate",
    action="store_true",
    help="Keep going even if a rewrite produces code that does not re-parse",
  )
  cmd_conv.add_argument(
    "--json-trace", type=Path, default=None, help="Dump full execution trace (phases, rewrites) to a JSON file."
  )

  # --- Command: AUDIT ---
  cmd_audit = subparsers.add_parser("audit", help="Report CommonJS usage that cannot be converted")
  cmd_audit.add_argument("path", type=Path, help="Input source file or directory")
  cmd_audit.add_argument("--json", action="store_true", help="Print findings as JSON to stdout")
  _add_conversion_options(cmd_audit)

  args = parser.parse_args(argv)
  set_verbosity(args.verbose, args.quiet)

  if args.command == "convert":
    return commands.handle_convert(
      input_path=args.path,
      output_path=args.out,
      inline=args.inline,
      force_default_export=args.force_default_export,
      safe_functions=args.safe_functions,
      validate=False if args.no_validate else None,
      json_trace_path=args.json_trace,
    )

  if args.command == "audit":
    return commands.handle_audit(
      path=args.path,
      json_mode=args.json,
      force_default_export=args.force_default_export,
      safe_functions=args.safe_functions,
    )

  return 0


if __name__ == "__main__":
  raise SystemExit(main())
