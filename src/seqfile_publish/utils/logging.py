"""Logging helpers for seqfile-publish.

Two layers are provided:

- ``configure_logging()`` sets up structlog for the structured publish events
  (``publish.transition``, ``publish.completed``, ...).
- ``debug()`` prints low-level file-operation traces and is toggled via the
  SEQFILE_DEBUG environment variable, so collaborators stay quiet by default.

Usage:
    from seqfile_publish.utils.logging import configure_logging, debug

    configure_logging(verbose=True)
    debug(f"Renamed {src} -> {dst}")

Environment:
    SEQFILE_DEBUG: Set to '1', 'true', 'yes' or 'on' (case-insensitive) to
                   enable debug output. Any other value or unset disables it.
"""

import logging
import os
import sys
from typing import Any

import structlog

from seqfile_publish.core.constants import ENV_DEBUG, TRUTHY_VALUES

# Determine if debug mode is enabled at module import time
_DEBUG_ENABLED = os.environ.get(ENV_DEBUG, "").lower() in TRUTHY_VALUES


def debug(msg: Any) -> None:
    """Print debug message if SEQFILE_DEBUG is enabled.

    Args:
        msg: Message to print. Will be converted to string.

    Note:
        The environment variable is read at import time; reload the module
        to pick up a change.
    """
    if _DEBUG_ENABLED:
        print(f"[DEBUG] {msg}", file=sys.stdout)


def configure_logging(
    *, verbose: bool = False, json_output: bool = False, quiet: bool = False
) -> None:
    """Configure structlog processors for publish events.

    Args:
        verbose: Emit debug-level state transitions as well as outcomes
        json_output: Render events as JSON lines instead of console output
        quiet: Only emit warnings and errors (ignored when verbose)
    """
    level = logging.INFO
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    renderer: Any = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=False)
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
