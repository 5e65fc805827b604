"""
Logging setup shared by the HTTP API and the CLI.

Modules log through ``logging.getLogger(__name__)``; this module only
decides where those records go.
"""

from __future__ import annotations

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

DEFAULT_LOGGER_NAME = "workingdays"

_configured = False


def configure_logging(
    level: str | int = "INFO",
    *,
    console: Optional[Console] = None,
    force: bool = False,
) -> logging.Logger:
    """
    Install a rich handler on the root logger and return the service logger.

    Calling this more than once is a no-op unless ``force`` is set.

    Args:
        level: Level name (e.g. "DEBUG") or logging constant
        console: Optional rich console; defaults to stderr
        force: Reconfigure even if logging was already set up
    """
    global _configured

    if isinstance(level, str):
        level = logging.getLevelName(level.strip().upper())
        if not isinstance(level, int):
            level = logging.INFO

    if _configured and not force:
        logging.getLogger().setLevel(level)
        return logging.getLogger(DEFAULT_LOGGER_NAME)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    logging.basicConfig(
        level=level,
        format="%(name)s: %(message)s",
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )
    _configured = True

    return logging.getLogger(DEFAULT_LOGGER_NAME)
