"""
Pytest Configuration and Fixtures.

Includes:
- Syspath patching for local imports.
- A recording console fixture for asserting on rendered log output.
- Log level isolation so CLI tests toggling `-v` / `-q` do not leak.
"""

import sys
from pathlib import Path

import pytest
from rich.console import Console

# Add src to path so we can import 'js_switcheroo' without installing it
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from js_switcheroo.utils.console import reset_console, set_console, set_verbosity  # noqa: E402


@pytest.fixture
def recorded_console():
  """
  Swaps the global console for a wide recording console.

  Yields:
      Console: Call `.export_text()` to read everything printed or logged.
  """
  console = Console(record=True, width=200, force_terminal=False)
  set_console(console)
  yield console
  reset_console()


@pytest.fixture(autouse=True)
def isolate_log_level():
  """Restores the default package log level after each test."""
  yield
  set_verbosity(False, False)
