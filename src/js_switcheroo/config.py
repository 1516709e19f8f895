"""
Runtime Configuration Store.

Options controlling a conversion, resolved from (in increasing precedence):

1. Model defaults.
2. The `[tool.js_switcheroo]` table of the nearest `pyproject.toml`.
3. Explicit arguments (CLI flags or API keyword arguments).

Example `pyproject.toml`::

    [tool.js_switcheroo]
    force_default_export = false
    safe_function_identifiers = ["define", "invariant"]
"""

import logging
import re
import sys
from pathlib import Path
from typing import Any, Callable, Dict, FrozenSet, List, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

if sys.version_info >= (3, 11):
  import tomllib
else:
  import tomli as tomllib

logger = logging.getLogger(__name__)

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


class RuntimeConfig(BaseModel):
  """
  Configuration container for the conversion engine.
  """

  force_default_export: bool = Field(
    False, description="Collapse every export target into a single default-exported object."
  )
  safe_function_identifiers: List[str] = Field(
    default_factory=list,
    description="Call targets (besides 'require') that do not end the region where requires become imports.",
  )
  validate_output: bool = Field(True, description="Fail the conversion if any rewritten text does not re-parse.")
  unwrap_iife: bool = Field(True, description="Hoist the body of a module-wide IIFE wrapper to top level.")
  on_warn: Optional[Callable[..., None]] = Field(
    None, exclude=True, description="Callback invoked as on_warn(node, kind, message) for each warning."
  )

  @field_validator("safe_function_identifiers")
  @classmethod
  def validate_identifiers(cls, v: List[str]) -> List[str]:
    """
    Ensures every safe function name is a plain JavaScript identifier.

    Args:
        v (List[str]): Raw names.

    Returns:
        List[str]: Stripped, de-duplicated names in their original order.

    Raises:
        ValueError: If a name is not a valid identifier.
    """
    cleaned: List[str] = []
    for name in v:
      name = name.strip()
      if not _IDENTIFIER_RE.match(name):
        raise ValueError(f"Invalid function identifier: '{name}'")
      if name not in cleaned:
        cleaned.append(name)
    return cleaned

  @property
  def allowed_callees(self) -> FrozenSet[str]:
    """Callee names that never end the import rewrite region."""
    return frozenset({"require", *self.safe_function_identifiers})

  @classmethod
  def load(
    cls,
    force_default_export: Optional[bool] = None,
    safe_function_identifiers: Optional[List[str]] = None,
    validate_output: Optional[bool] = None,
    unwrap_iife: Optional[bool] = None,
    on_warn: Optional[Callable[..., None]] = None,
    search_path: Optional[Path] = None,
  ) -> "RuntimeConfig":
    """
    Loads configuration from pyproject.toml and overrides with explicit arguments.

    Args:
        force_default_export (Optional[bool]): Override for the forced default mode.
        safe_function_identifiers (Optional[List[str]]): Extra safe callees;
            merged with those from the TOML file.
        validate_output (Optional[bool]): Override for output validation.
        unwrap_iife (Optional[bool]): Override for IIFE unwrapping.
        on_warn (Optional[Callable]): Warning callback.
        search_path (Optional[Path]): Directory to start searching for TOML config.

    Returns:
        RuntimeConfig: The fully resolved configuration object.
    """
    start_dir = search_path or Path.cwd()
    toml_config, _ = _load_toml_settings(start_dir)

    def pick(value: Optional[bool], key: str, default: bool) -> bool:
      if value is not None:
        return value
      return bool(toml_config.get(key, default))

    safe = list(toml_config.get("safe_function_identifiers", []))
    for name in safe_function_identifiers or []:
      if name not in safe:
        safe.append(name)

    return cls(
      force_default_export=pick(force_default_export, "force_default_export", False),
      safe_function_identifiers=safe,
      validate_output=pick(validate_output, "validate_output", True),
      unwrap_iife=pick(unwrap_iife, "unwrap_iife", True),
      on_warn=on_warn,
    )


def _load_toml_settings(start_path: Path) -> Tuple[Dict[str, Any], Optional[Path]]:
  """
  Searches `start_path` and its parents for 'pyproject.toml' and extracts config.

  Args:
      start_path (Path): Directory to start search from.

  Returns:
      Tuple[Dict, Optional[Path]]: The config dict and the directory it was found in.
  """
  current = start_path.resolve()

  for parent in [current, *current.parents]:
    toml_path = parent / "pyproject.toml"
    if toml_path.exists() and toml_path.is_file():
      try:
        with open(toml_path, "rb") as f:
          data = tomllib.load(f)
      except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Ignoring unreadable %s: %s", toml_path, e)
        return {}, None

      tool_section = data.get("tool", {})
      return tool_section.get("js_switcheroo", {}), parent

  return {}, None
