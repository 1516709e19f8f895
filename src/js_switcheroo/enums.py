"""
Enumerations for js-switcheroo.

This module defines the closed vocabularies that appear in conversion output:
warning categories and the record types stored in module metadata.
"""

from enum import Enum


class WarningKind(str, Enum):
  """
  Categories of non-fatal diagnostics emitted during conversion.

  A warning never aborts the conversion; the offending construct is left
  untouched (or rewritten with a caveat) and reported to the caller.
  """

  UNSUPPORTED_IMPORT = "unsupported-import"
  UNSUPPORTED_EXPORT = "unsupported-export"
  EXPORT_FUNCTION_NAME_MISMATCH = "export-function-name-mismatch"
  NAMED_EXPORT_CONFLICTS_WITH_LOCAL_BINDING = "named-export-conflicts-with-local-binding"


class ImportKind(str, Enum):
  """
  Shapes of `import` declarations produced from `require` calls.
  """

  DEFAULT = "default-import"
  NAMED = "named-import"
  BARE = "bare-import"


class ExportKind(str, Enum):
  """
  Shapes of `export` declarations produced from CommonJS export targets.
  """

  NAMED = "named-export"
  NAMESPACE = "namespace-export"
  DEFAULT = "default-export"


class DirectiveKind(str, Enum):
  """
  Directive edits recorded during preprocessing.
  """

  REMOVED_STRICT_MODE = "removed-strict-mode"


class ScopeKind(str, Enum):
  """
  Lexical scope categories built by the scope analysis.

  `PROGRAM` and `FUNCTION` scopes receive hoisted `var` declarations.
  """

  PROGRAM = "program"
  FUNCTION = "function"
  BLOCK = "block"
  CATCH = "catch"
  CLASS = "class"
