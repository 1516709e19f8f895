"""
Central Logging and Console Utilities.

Routes the package's diagnostics through the standard `logging` library with a
`rich` handler for formatting.

- Log records from every `js_switcheroo.*` logger are rendered by a
  `RichHandler` attached to the package logger.
- Output goes to **stderr**, keeping stdout free for converted code
  (`js_switcheroo convert file.js > out.js`).
- The active console can be swapped (`set_console`) to capture output, e.g.
  with `Console(record=True)` in tests.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

LOGGER_NAME = "js_switcheroo"

# Between INFO and WARNING.
SUCCESS_LEVEL_NUM = 25
logging.addLevelName(SUCCESS_LEVEL_NUM, "SUCCESS")

_THEME = Theme(
  {
    "logging.level.success": "green",
    "info": "dim cyan",
    "warning": "yellow",
    "error": "bold red",
    "success": "green",
    "path": "bold blue",
    "kind": "magenta",
    "code": "bold magenta",
  }
)

_logger = logging.getLogger(LOGGER_NAME)
_console: Console = Console(theme=_THEME, stderr=True)


def _install_handler(target: Console) -> None:
  """
  Binds the package logger to `target`, replacing any previous rich handler.

  Args:
      target (Console): Destination console.
  """
  for handler in list(_logger.handlers):
    if isinstance(handler, RichHandler):
      _logger.removeHandler(handler)

  _logger.addHandler(
    RichHandler(
      console=target,
      show_time=False,
      omit_repeated_times=False,
      show_path=False,
      markup=True,
      rich_tracebacks=True,
    )
  )
  if _logger.level == logging.NOTSET:
    _logger.setLevel(logging.INFO)


def set_console(new_console: Console) -> None:
  """
  Redirects console output and log records to `new_console`.

  Args:
      new_console (Console): The configured Rich console to use globally.
  """
  global _console
  _console = new_console
  _install_handler(new_console)


def reset_console() -> None:
  """Restores the default stderr console."""
  set_console(Console(theme=_THEME, stderr=True))


def get_console() -> Console:
  """
  Retrieves the currently active console.

  Returns:
      Console: The active Rich Console.
  """
  return _console


def set_verbosity(verbose: bool, quiet: bool = False) -> None:
  """
  Adjusts the package log level.

  Args:
      verbose (bool): Show debug records from the passes.
      quiet (bool): Only show warnings and errors.
  """
  if verbose:
    _logger.setLevel(logging.DEBUG)
  elif quiet:
    _logger.setLevel(logging.WARNING)
  else:
    _logger.setLevel(logging.INFO)


def log_info(msg: str) -> None:
  """
  Logs an informational message.

  Args:
      msg (str): The message content. Can include rich markup like [bold].
  """
  _logger.info(f"ℹ️  {msg}", extra={"markup": True})


def log_success(msg: str) -> None:
  _logger.log(SUCCESS_LEVEL_NUM, f"✅ {msg}", extra={"markup": True})


def log_warning(msg: str) -> None:
  _logger.warning(f"⚠️  {msg}", extra={"markup": True})


def log_error(msg: str) -> None:
  _logger.error(f"❌ {msg}", extra={"markup": True})


_install_handler(_console)
