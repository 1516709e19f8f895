"""
Rewrite Passes.

Each pass is a `RewritePass` run over a freshly parsed module; the engine
commits its edits and re-parses before the next pass.

Passes (in pipeline order):
    - ``IIFEUnwrapper``: hoist the body of a module-wide IIFE.
    - ``StrictDirectiveRemover``: drop `"use strict"` directives.
    - ``ExportRewriter`` / ``DefaultExportCollapser``: convert export targets.
    - ``ImportRewriter``: convert `require` statements.
    - ``DefaultAccessCleanup``: simplify `name.default` on default imports.
"""

from js_switcheroo.core.rewriter.base import ConversionContext, RewritePass, TopLevelPass
from js_switcheroo.core.rewriter.default_export import DefaultExportCollapser
from js_switcheroo.core.rewriter.defaults import DefaultAccessCleanup
from js_switcheroo.core.rewriter.exports import ExportRewriter
from js_switcheroo.core.rewriter.imports import ImportRewriter
from js_switcheroo.core.rewriter.preprocess import IIFEUnwrapper, StrictDirectiveRemover

__all__ = [
  "ConversionContext",
  "DefaultAccessCleanup",
  "DefaultExportCollapser",
  "ExportRewriter",
  "IIFEUnwrapper",
  "ImportRewriter",
  "RewritePass",
  "StrictDirectiveRemover",
  "TopLevelPass",
]
