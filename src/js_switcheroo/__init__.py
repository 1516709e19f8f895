"""
js-switcheroo Package.

A deterministic, format-preserving rewriter that converts CommonJS JavaScript
modules (`require`, `exports`, `module.exports`) into ES modules (`import`,
`export`).

This package exposes the conversion engine and configuration utilities for
programmatic usage.

Usage
-----

Simple String Conversion
^^^^^^^^^^^^^^^^^^^^^^^^

.. code-block:: python

    import js_switcheroo as jss
    code = "var fs = require('fs');\\nexports.read = fs.readFileSync;\\n"
    print(jss.convert(code))
    # import fs from 'fs';
    # export let read = fs.readFileSync;

Advanced Usage (AST Engine)
^^^^^^^^^^^^^^^^^^^^^^^^^^^

.. code-block:: python

    from js_switcheroo import ASTEngine, RuntimeConfig

    config = RuntimeConfig(force_default_export=True, safe_function_identifiers=["define"])
    engine = ASTEngine(config=config)
    res = engine.run("module.exports = 42;")

    if res.success:
        print(res.code)
        for warning in res.warnings:
            print(warning.format())
    else:
        print(f"Errors: {res.errors}")
"""

from typing import Callable, List, Optional

from js_switcheroo.config import RuntimeConfig
from js_switcheroo.core.conversion_result import ConversionResult
from js_switcheroo.core.engine import ASTEngine

__version__ = "0.0.1"


def convert(
  code: str,
  force_default_export: bool = False,
  safe_function_identifiers: Optional[List[str]] = None,
  on_warn: Optional[Callable[..., None]] = None,
) -> str:
  """
  Converts a string of CommonJS code to ES module syntax.

  This is a high-level convenience wrapper around the `ASTEngine`. For file-based
  conversions or batch processing, consider using `js_switcheroo.cli` or using
  `ASTEngine` directly.

  Args:
      code (str): The source code to convert.
      force_default_export (bool): If True, all export targets are collapsed
          into one default-exported object.
      safe_function_identifiers (list, optional): Call targets that, like
          `require`, do not stop later requires from becoming imports.
      on_warn (callable, optional): Called as `on_warn(node, kind, message)`
          for every warning.

  Returns:
      str: The converted source code.

  Raises:
      ValueError: If the conversion fails (e.g. syntax errors in the input).
  """
  config = RuntimeConfig(
    force_default_export=force_default_export,
    safe_function_identifiers=safe_function_identifiers or [],
    on_warn=on_warn,
  )
  engine = ASTEngine(config=config)
  result = engine.run(code)

  if not result.success:
    error_msg = "\n".join(result.errors)
    raise ValueError(f"Conversion failed:\n{error_msg}")

  return result.code


__all__ = [
  "ASTEngine",
  "ConversionResult",
  "RuntimeConfig",
  "convert",
  "__version__",
]
