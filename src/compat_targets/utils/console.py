"""
Central Logging and Console Utilities.

Log records from every ``compat_targets.*`` module go through the standard
`logging` library and are rendered by a `rich` handler attached to the
package logger. The console behind that handler can be swapped at runtime via
`set_console`, e.g. to capture diagnostics into an in-memory buffer.

Attributes:
    console (_ConsoleProxy): A global, stable reference to the active Rich Console.
"""

import logging
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

PACKAGE_LOGGER = "compat_targets"

_THEME = Theme(
  {
    "info": "dim cyan",
    "warning": "yellow",
    "error": "bold red",
  }
)


class _ConsoleProxy:
  """
  A Proxy wrapper around `rich.console.Console`.

  Modules keep a reference to the module-level `console` object while the
  backend behind it is replaced. Swapping the backend also re-binds the
  package log handler so records follow the new destination.

  Attributes:
      _backend (Console): The active Rich Console instance.
  """

  def __init__(self) -> None:
    self._backend: Console = Console(theme=_THEME, stderr=True)
    self._configure_logging()

  def set_backend(self, new_console: Console) -> None:
    """
    Injects a new Console backend and updates logging handlers.

    Args:
        new_console (Console): The new Rich Console instance to use.
    """
    self._backend = new_console
    self._configure_logging()

  def reset(self) -> None:
    """Resets the proxy to a fresh standard error console."""
    self._backend = Console(theme=_THEME, stderr=True)
    self._configure_logging()

  @property
  def backend(self) -> Console:
    return self._backend

  def _configure_logging(self) -> None:
    # Root logger is left to the application.
    pkg_logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(pkg_logger.handlers):
      if isinstance(handler, RichHandler):
        pkg_logger.removeHandler(handler)

    rich_handler = RichHandler(
      console=self._backend,
      show_time=False,
      omit_repeated_times=False,
      show_path=False,
      markup=False,
      rich_tracebacks=True,
    )
    rich_handler.setLevel(logging.WARNING)
    pkg_logger.addHandler(rich_handler)

  def __getattr__(self, name: str) -> Any:
    return getattr(self._backend, name)


console = _ConsoleProxy()


def set_console(new_console: Console) -> None:
  """
  Global helper to inject a specific console instance.

  Args:
      new_console (Console): The configured Rich console to use globally.
  """
  console.set_backend(new_console)


def reset_console() -> None:
  """Global helper to reset logging output to standard error."""
  console.reset()


def get_console() -> Console:
  """
  Retrieves the currently active console backend.

  Returns:
      Console: The active Rich Console.
  """
  return console.backend


def set_verbosity(level: int) -> None:
  """
  Sets the level at which package records reach the console.

  Args:
      level (int): A `logging` level, e.g. ``logging.DEBUG`` to see dropped feed entries.
  """
  pkg_logger = logging.getLogger(PACKAGE_LOGGER)
  pkg_logger.setLevel(level)
  for handler in pkg_logger.handlers:
    if isinstance(handler, RichHandler):
      handler.setLevel(level)


def log_warning(msg: str, *args: Any) -> None:
  """
  Logs a warning on the package logger.

  Args:
      msg (str): Format string, `%`-style as in `logging`.
      *args: Format arguments.
  """
  logging.getLogger(PACKAGE_LOGGER).warning(msg, *args)


def log_debug(msg: str, *args: Any) -> None:
  """Logs a debug message on the package logger."""
  logging.getLogger(PACKAGE_LOGGER).debug(msg, *args)
