"""
Orchestration Engine for CommonJS to ES Module Conversion.

This module provides the `ASTEngine`, the primary driver of the rewrite. Each
phase is a complete traversal whose edits are committed, and the resulting
text re-parsed, before the next phase begins:

1.  **Ingestion**: a leading shebang line is set aside and the remainder is
    parsed with tree-sitter. Syntax errors end the run with an unsuccessful
    result.
2.  **IIFE Unwrapping**: a module-wide wrapper function is removed.
3.  **Strict Mode Removal**: redundant `"use strict"` directives are dropped.
4.  **Export Rewriting**: per-statement rewriting, or the forced single
    default export when `force_default_export` is set.
5.  **Boundary Analysis**: the earliest construct that makes import hoisting
    observable is located on the post-export tree.
6.  **Import Rewriting**: `require` statements before that boundary become
    imports.
7.  **Default-Access Cleanup**: `name.default` on default imports is
    simplified.
8.  **Leftover Scan**: surviving CommonJS usage is reported as warnings.

Positions in warnings and metadata are translated back to the caller's
input before the result is returned.
"""

import logging
from typing import Any, Optional, Tuple, Type

from js_switcheroo.analysis.boundary import compute_boundary
from js_switcheroo.config import RuntimeConfig
from js_switcheroo.core.conversion_result import ConversionResult
from js_switcheroo.core.errors import JSParseError
from js_switcheroo.core.parser import JSModule, parse_module
from js_switcheroo.core.rewriter import (
  ConversionContext,
  DefaultAccessCleanup,
  DefaultExportCollapser,
  ExportRewriter,
  IIFEUnwrapper,
  ImportRewriter,
  RewritePass,
  StrictDirectiveRemover,
)
from js_switcheroo.core.scanners import UnsupportedUsageScanner
from js_switcheroo.core.tracer import get_tracer, reset_tracer

logger = logging.getLogger(__name__)


class OutputValidationError(Exception):
  """Raised internally when a phase produces text that does not re-parse."""


def split_shebang(code: str) -> Tuple[str, str]:
  """
  Separates a leading `#!` line from the program text.

  Args:
      code (str): Raw source.

  Returns:
      Tuple[str, str]: The shebang line (with its newline, or empty) and the
      remaining source.
  """
  if not code.startswith("#!"):
    return "", code
  newline = code.find("\n")
  if newline == -1:
    return code, ""
  return code[: newline + 1], code[newline + 1 :]


class ASTEngine:
  """
  The main conversion unit.

  Encapsulates the configuration and runs the phase pipeline on one module
  at a time. Instances hold no per-module state and may be reused.
  """

  def __init__(self, config: Optional[RuntimeConfig] = None):
    """
    Initializes the Engine.

    Args:
        config (Optional[RuntimeConfig]): Conversion options. Defaults apply
            when omitted.
    """
    self.config = config or RuntimeConfig()

  def parse(self, code: str) -> JSModule:
    """
    Parses source code into a module.

    Args:
        code (str): JavaScript source.

    Returns:
        JSModule: The parsed module.

    Raises:
        JSParseError: On syntax errors.
    """
    return parse_module(code)

  def run(self, code: str) -> ConversionResult:
    """
    Converts one CommonJS module to ES module syntax.

    Args:
        code (str): JavaScript source.

    Returns:
        ConversionResult: The converted code, warnings, metadata, and trace.
    """
    reset_tracer()
    tracer = get_tracer()
    shebang, body = split_shebang(code)
    context = ConversionContext(self.config)

    tracer.start_phase("Parsing", "tree-sitter JavaScript grammar")
    try:
      module = self.parse(body)
    except JSParseError as e:
      tracer.end_phase()
      return ConversionResult(code=code, success=False, errors=[f"Parse Error: {e}"], trace_events=tracer.export())
    tracer.end_phase()

    try:
      if self.config.unwrap_iife:
        module = self._apply(IIFEUnwrapper, module, context)
      module = self._apply(StrictDirectiveRemover, module, context)

      exporter = DefaultExportCollapser if self.config.force_default_export else ExportRewriter
      module = self._apply(exporter, module, context)

      tracer.start_phase("Boundary Analysis", "Locate the end of the hoisting-safe region")
      boundary = compute_boundary(module, self.config.safe_function_identifiers)
      tracer.log_inspection("<program>", "boundary", f"byte {boundary} of {len(module.source)}")
      tracer.end_phase()

      module = self._apply(ImportRewriter, module, context, boundary=boundary)
      if context.default_import_names:
        module = self._apply(DefaultAccessCleanup, module, context)
    except OutputValidationError as e:
      return ConversionResult(code=code, success=False, errors=[str(e)], trace_events=tracer.export())

    tracer.start_phase("Leftover Scan", "Report CommonJS usage that was not converted")
    UnsupportedUsageScanner(module, context).scan()
    tracer.end_phase()

    context.finalize(code, len(shebang.encode("utf-8")))
    if self.config.on_warn is not None:
      for warning in context.warnings:
        self.config.on_warn(warning.node, warning.kind.value, warning.message)

    return ConversionResult(
      code=shebang + module.code,
      warnings=context.warnings,
      metadata=context.metadata,
      trace_events=tracer.export(),
    )

  def _apply(self, pass_cls: Type[RewritePass], module: JSModule, context: ConversionContext, **kwargs: Any) -> JSModule:
    """
    Runs one pass, commits its edits, and re-parses the result.

    Args:
        pass_cls (Type[RewritePass]): The pass to run.
        module (JSModule): Input module.
        context (ConversionContext): Shared conversion state.
        **kwargs: Extra constructor arguments for the pass.

    Returns:
        JSModule: The module after the pass; `module` itself if nothing changed.

    Raises:
        OutputValidationError: If validation is enabled and the rewritten text
            fails to parse.
    """
    tracer = get_tracer()
    tracer.start_phase(pass_cls.name, pass_cls.description)
    try:
      edits = pass_cls(module, context, **kwargs).transform()
      if not len(edits):
        return module
      new_code, offsets = edits.apply()
      context.push_offsets(offsets)
      logger.debug("%s applied %d edits", pass_cls.name, len(edits))
    finally:
      tracer.end_phase()

    rewritten = JSModule(new_code)
    if rewritten.has_errors:
      message = f"Output Validation Error: '{pass_cls.name}' produced code that does not parse"
      if self.config.validate_output:
        raise OutputValidationError(message)
      logger.warning(message)
    return rewritten
