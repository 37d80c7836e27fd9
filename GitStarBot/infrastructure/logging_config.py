"""
Console logging setup: timestamped single-line records with optional colour.
"""

import logging
import os
import sys
from typing import Optional, TextIO

SUCCESS = 25
logging.addLevelName(SUCCESS, "SUCCESS")
logging.addLevelName(logging.WARNING, "WARN")

LOG_FORMAT = "[%(asctime)s] %(levelname)s %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

RESET = "\x1b[0m"
LEVEL_COLORS = {
    logging.DEBUG: "\x1b[2m",
    logging.INFO: "\x1b[34m",
    SUCCESS: "\x1b[32m",
    logging.WARNING: "\x1b[33m",
    logging.ERROR: "\x1b[31m",
    logging.CRITICAL: "\x1b[1m\x1b[31m",
}


class ColorFormatter(logging.Formatter):
    """Formatter wrapping each record in the ANSI colour of its level."""

    def __init__(self, use_color: bool = True):
        super().__init__(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        color = LEVEL_COLORS.get(record.levelno)
        if not self.use_color or color is None:
            return text
        return f"{color}{text}{RESET}"


def color_enabled(stream: TextIO, no_color: bool = False) -> bool:
    """Colour is used only on a TTY and when NO_COLOR is unset."""
    if no_color or "NO_COLOR" in os.environ:
        return False
    return hasattr(stream, "isatty") and stream.isatty()


def configure_logging(
    verbose: bool = False,
    no_color: bool = False,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """
    Configure the root logger once for a process entry point.

    Args:
        verbose: Emit DEBUG records (also enabled by the DEBUG env var)
        no_color: Disable ANSI colours
        stream: Output stream (defaults to stderr)

    Returns:
        The ``git_star_bot`` logger handed to the use cases
    """
    stream = stream or sys.stderr
    level = logging.DEBUG if verbose or os.environ.get("DEBUG") else logging.INFO

    handler = logging.StreamHandler(stream)
    handler.setFormatter(ColorFormatter(use_color=color_enabled(stream, no_color)))

    logging.basicConfig(level=level, handlers=[handler], force=True)
    # urllib3 debug output is noise at our verbosity
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    return logging.getLogger("git_star_bot")
