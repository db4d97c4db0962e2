"""Output formatting system with strict stdout/stderr discipline.

Follows `clig.dev <https://clig.dev/>`_ conventions:

* **stdout** -- the marshaled result only (JSON or YAML). This is what
  downstream tools pipe and parse.
* **stderr** -- all diagnostics (progress, warnings, errors). Never
  contaminates the data stream.
* **TTY detection** -- Rich syntax highlighting when stdout is an
  interactive terminal, plain text when piped to another process.
* **Colour control** -- respects ``NO_COLOR``, ``TERM=dumb``, and the
  ``--no-color`` CLI flag.

The module exposes three layers:

1. :class:`OutputManager` -- a stateful object holding the output format,
   Rich consoles, and the optional output file. Created once per command
   and installed via :func:`set_output`.
2. :func:`configure_logging` -- routes records of the ``apispec`` logger
   hierarchy to the active manager's stderr console through
   :class:`DiagnosticHandler`, filtered by the ``--loglevel`` flag.
3. Module-level convenience functions (:func:`emit`, :func:`error`, ...)
   that delegate to the global ``OutputManager`` instance.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from typing import Any, Optional

import yaml
from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax

from apispec.exceptions import InvalidUsageError
from apispec.models import DocumentFormat

LOGGER_NAME = "apispec"

_LEVELS = {
    "trace": logging.DEBUG,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "fatal": logging.CRITICAL,
    "panic": logging.CRITICAL,
    "critical": logging.CRITICAL,
}


class OutputManager:
    """Central manager for all CLI output with stdout/stderr discipline.

    Maintains two Rich :class:`~rich.console.Console` instances -- one for
    stdout (data) and one for stderr (diagnostics) -- and routes every
    output call to the correct stream with appropriate formatting.

    Args:
        format: Serialization used for the result.
        no_color: Disable all colour, highlighting, and Rich markup.
        output_file: If set, write the result to this file path instead of
            stdout.
    """

    def __init__(
        self,
        format: DocumentFormat = DocumentFormat.JSON,
        no_color: bool = False,
        output_file: Optional[str] = None,
    ) -> None:
        self._format = format
        self._no_color = no_color or _should_disable_color()
        self._output_file = output_file
        self._highlight = _is_tty() and not self._no_color

        # Console for stdout (data output)
        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=self._highlight,
        )

        # Console for stderr (diagnostics)
        self._stderr = Console(
            file=sys.stderr,
            no_color=self._no_color,
            stderr=True,
        )

    @property
    def format(self) -> DocumentFormat:
        """The serialization used for the result."""
        return self._format

    # ------------------------------------------------------------------ #
    # Data output (stdout)
    # ------------------------------------------------------------------ #

    def render(self, data: Any) -> str:
        """Marshal *data* in the configured format, without a trailing newline."""
        return marshal(data, self._format)

    def emit(self, data: Any) -> None:
        """Marshal *data* and write it to stdout (or the output file).

        Syntax highlighting is applied only when stdout is an interactive
        terminal and colour is enabled.
        """
        text = self.render(data)
        if self._output_file is None and self._highlight:
            syntax = Syntax(text, self._format.value, theme="monokai", word_wrap=True)
            self._stdout.print(syntax)
        else:
            self.print_data(text)

    def print_data(self, text: str) -> None:
        """Print raw text to stdout (or to the configured output file).

        Args:
            text: The string to write. A trailing newline is appended if
                missing.
        """
        if self._output_file:
            with open(self._output_file, "w", encoding="utf-8") as f:
                f.write(text)
                if not text.endswith("\n"):
                    f.write("\n")
        else:
            print(text, file=sys.stdout, flush=True)

    # ------------------------------------------------------------------ #
    # Diagnostics (stderr)
    # ------------------------------------------------------------------ #

    def info(self, message: str) -> None:
        """Print an informational message to stderr."""
        self._diagnostic(message, "{}")

    def warning(self, message: str) -> None:
        """Print a yellow warning to stderr."""
        self._diagnostic(message, "[yellow]Warning:[/yellow] {}", plain="Warning: {}")

    def error(self, message: str) -> None:
        """Print a bold-red error to stderr."""
        self._diagnostic(message, "[bold red]Error:[/bold red] {}", plain="Error: {}")

    def debug(self, message: str) -> None:
        """Print a dimmed debug message to stderr."""
        self._diagnostic(message, "[dim]\\[debug] {}[/dim]", plain="[debug] {}")

    def _diagnostic(self, message: str, styled: str, plain: str = "{}") -> None:
        if self._no_color:
            print(plain.format(message), file=sys.stderr, flush=True)
        else:
            self._stderr.print(styled.format(escape(message)), soft_wrap=True, highlight=False)


# ------------------------------------------------------------------ #
# Marshaling
# ------------------------------------------------------------------ #


def marshal(data: Any, fmt: DocumentFormat) -> str:
    """Serialize *data* as JSON (2-space indent) or block-style YAML.

    Key order is preserved in both formats. The result has no trailing
    newline.
    """
    if fmt is DocumentFormat.JSON:
        return json.dumps(data, indent=2, ensure_ascii=False, default=str)
    text = yaml.safe_dump(
        data, sort_keys=False, allow_unicode=True, default_flow_style=False
    )
    # Scalar documents end with an explicit "..." marker
    if text.endswith("\n...\n"):
        text = text[: -len("...\n")]
    return text.rstrip("\n")


def parse_format(name: str) -> DocumentFormat:
    """Parse an ``--output`` value (case-insensitive).

    Raises:
        InvalidUsageError: For anything other than ``json`` or ``yaml``.
    """
    try:
        return DocumentFormat(name.strip().lower())
    except ValueError:
        raise InvalidUsageError(
            f"Unsupported output format: {name!r} (expected 'json' or 'yaml')"
        ) from None


# ------------------------------------------------------------------ #
# Logging
# ------------------------------------------------------------------ #


class DiagnosticHandler(logging.Handler):
    """Logging handler writing records through the global OutputManager.

    The manager is looked up for every record, so a handler installed once
    keeps working when a later command installs a new manager.
    """

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = self.format(record)
            output = get_output()
            if record.levelno >= logging.ERROR:
                output.error(message)
            elif record.levelno >= logging.WARNING:
                output.warning(message)
            elif record.levelno >= logging.INFO:
                output.info(message)
            else:
                output.debug(message)
        except Exception:
            self.handleError(record)


def parse_level(name: str) -> int:
    """Map a ``--loglevel`` name to a :mod:`logging` level.

    Accepts the standard names plus ``trace`` (debug), ``warn`` (warning),
    ``fatal`` and ``panic`` (critical).

    Raises:
        InvalidUsageError: For an unknown level name.
    """
    try:
        return _LEVELS[name.strip().lower()]
    except KeyError:
        choices = ", ".join(_LEVELS)
        raise InvalidUsageError(
            f"Invalid log level: {name!r} (expected one of: {choices})"
        ) from None


def configure_logging(level: str) -> int:
    """Route ``apispec`` log records at *level* and above to stderr.

    Replaces any handler installed by a previous call.

    Returns:
        The numeric level that was applied.
    """
    numeric = parse_level(level)
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        if isinstance(handler, DiagnosticHandler):
            logger.removeHandler(handler)
    logger.addHandler(DiagnosticHandler())
    logger.setLevel(numeric)
    logger.propagate = False
    return numeric


def reset_logging() -> None:
    """Remove installed diagnostic handlers and restore default propagation."""
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        if isinstance(handler, DiagnosticHandler):
            logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


# ------------------------------------------------------------------ #
# Module-level helpers
# ------------------------------------------------------------------ #


def _is_tty() -> bool:
    """Check if stdout is a TTY."""
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """Check if color should be disabled per clig.dev.

    Returns True when NO_COLOR env var is set (any value) or TERM=dumb.
    """
    if os.environ.get("NO_COLOR") is not None:
        return True
    if os.environ.get("TERM") == "dumb":
        return True
    return False


# ------------------------------------------------------------------ #
# Global output instance (set per command)
# ------------------------------------------------------------------ #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the global :class:`OutputManager` instance.

    If no instance has been installed via :func:`set_output`, a default
    JSON ``OutputManager`` is created lazily.
    """
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    """Install *output* as the global :class:`OutputManager` instance."""
    global _output
    _output = output


def reset_output() -> None:
    """Reset the global :class:`OutputManager` to ``None``.

    Primarily useful in test suites to ensure a clean state between tests.
    """
    global _output
    _output = None


# ------------------------------------------------------------------ #
# Convenience functions that use the global instance
# ------------------------------------------------------------------ #


def emit(data: Any) -> None:
    """Marshal and print the result via the global OutputManager."""
    get_output().emit(data)


def error(message: str) -> None:
    """Print error to stderr via the global OutputManager."""
    get_output().error(message)


def warning(message: str) -> None:
    """Print warning to stderr via the global OutputManager."""
    get_output().warning(message)
