"""Logging utilities with custom trace level."""

import logging
from typing import Any

# Define custom TRACE level (lower than DEBUG)
TRACE_LEVEL = 5


def add_trace_level() -> None:
    """Add a custom TRACE logging level."""
    logging.addLevelName(TRACE_LEVEL, "TRACE")

    def trace(self: logging.Logger, message: str, *args: Any, **kwargs: Any) -> None:
        """Log a message with severity 'TRACE'."""
        if self.isEnabledFor(TRACE_LEVEL):
            self._log(TRACE_LEVEL, message, args, **kwargs)

    logging.Logger.trace = trace  # type: ignore[attr-defined]


def configure_logging(verbose: bool = False, trace: bool = False) -> None:
    """
    Configure root logging for the command line tools.

    Args:
        verbose: Log at DEBUG with logger names
        trace: Log at TRACE, implies verbose
    """
    add_trace_level()

    if trace:
        logging.basicConfig(
            level=TRACE_LEVEL, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
    elif verbose:
        logging.basicConfig(
            level="DEBUG", format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
    else:
        logging.basicConfig(level="WARNING", format="%(asctime)s - %(levelname)s - %(message)s")

    # Third-party chatter stays at WARNING unless tracing
    for name in ("aiosqlite", "mcp", "fastmcp"):
        logging.getLogger(name).setLevel(TRACE_LEVEL if trace else logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a logger with trace support."""
    if not hasattr(logging.Logger, "trace"):
        add_trace_level()

    return logging.getLogger(name)
