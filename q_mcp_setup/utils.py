"""Logging and formatting utilities for q-mcp-setup.

All user-visible progress goes through the ``q_mcp_setup`` logger so a
single ``configure_logging()`` call decides colors and verbosity for the
whole run. The ``log_*`` helpers are thin wrappers used by every module.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from q_mcp_setup.options import InstallOptions

SUCCESS = 25
logging.addLevelName(SUCCESS, "SUCCESS")

# ANSI color codes
BOLD = "\033[1m"
RESET = "\033[0m"
RED = "\033[0;31m"
GREEN = "\033[0;32m"
YELLOW = "\033[1;33m"
BLUE = "\033[0;34m"


class SetupFormatter(logging.Formatter):
    """Formatter producing the installer's leveled, optionally colored lines."""

    def __init__(self, use_colors: bool = True) -> None:
        """Initialize the formatter.

        Args:
            use_colors: Whether to use ANSI color codes in output.
        """
        super().__init__()
        self.use_colors = use_colors

    def _c(self, code: str) -> str:
        return code if self.use_colors else ""

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record.

        Args:
            record: The log record to format.

        Returns:
            The formatted log message.
        """
        msg = record.getMessage()
        reset = self._c(RESET)

        if getattr(record, "plain", False):
            return msg
        if record.levelno == logging.DEBUG:
            return f"{self._c(YELLOW)}DEBUG:{reset} {msg}"
        elif record.levelno == SUCCESS:
            return f"{self._c(GREEN)}✅ {msg}{reset}"
        elif record.levelno == logging.WARNING:
            return f"{self._c(YELLOW)}⚠️  WARNING:{reset} {msg}"
        elif record.levelno >= logging.ERROR:
            return f"{self._c(RED)}❌ ERROR:{reset} {msg}"

        return f"{self._c(BLUE)}INFO:{reset} {msg}"


class _MaxLevelFilter(logging.Filter):
    def __init__(self, max_level: int) -> None:
        super().__init__()
        self.max_level = max_level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno <= self.max_level


_logger = logging.getLogger("q_mcp_setup")
_logger.setLevel(logging.DEBUG)


def configure_logging(options: InstallOptions) -> None:
    """Install stdout/stderr handlers for one run.

    Info and success go to stdout, warnings and errors to stderr. Debug
    lines are shown only in debug or verbose mode. Calling this again
    replaces the previous handlers.
    """
    for handler in list(_logger.handlers):
        _logger.removeHandler(handler)

    formatter = SetupFormatter(use_colors=options.use_colors)

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setLevel(logging.DEBUG if options.show_debug else logging.INFO)
    stdout_handler.addFilter(_MaxLevelFilter(SUCCESS))
    stdout_handler.setFormatter(formatter)
    _logger.addHandler(stdout_handler)

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(logging.WARNING)
    stderr_handler.setFormatter(formatter)
    _logger.addHandler(stderr_handler)


def log_info(msg: str) -> None:
    """Log an info message."""
    _logger.info(msg)


def log_success(msg: str) -> None:
    """Log a success message."""
    _logger.log(SUCCESS, msg)


def log_debug(msg: str) -> None:
    """Log a debug message (shown in debug or verbose mode)."""
    _logger.debug(msg)


def log_warn(msg: str) -> None:
    """Log a warning message to stderr."""
    _logger.warning(msg)


def log_error(msg: str) -> None:
    """Log an error message to stderr."""
    _logger.error(msg)


def log_step(msg: str) -> None:
    """Log an unprefixed, 2-space indented line."""
    _logger.info(f"  {msg}", extra={"plain": True})


def log_plain(msg: str = "") -> None:
    """Log an unprefixed line (banners, blank separators, raw output)."""
    _logger.info(msg, extra={"plain": True})


def mask_secret(value: str) -> str:
    """Return a display-safe form of a secret: prefix and last 4 chars."""
    if not value:
        return ""
    if len(value) <= 8:
        return "****"
    return f"{value[:4]}…{value[-4:]}"
