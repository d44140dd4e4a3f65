"""Logging configuration for proto_tmpl.

All log output goes to stderr: when running as a protoc plugin, stdout
carries the serialized CodeGeneratorResponse.
"""

import logging
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "proto_tmpl"

_configured = False


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the package namespace."""
    if not name.startswith(PACKAGE_LOGGER):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)


def setup_logging(level: Union[int, str] = logging.WARNING,
                  console: Optional[Console] = None) -> logging.Logger:
    """
    Configure the package logger with a rich handler on stderr.

    Safe to call more than once; later calls only change the level.

    Args:
        level: Logging level name or number
        console: Console to log to (defaults to a stderr console)

    Returns:
        The configured package logger
    """
    global _configured

    logger = logging.getLogger(PACKAGE_LOGGER)
    if isinstance(level, str):
        level = level.upper()
    logger.setLevel(level)

    if not _configured:
        handler = RichHandler(
            console=console or Console(stderr=True),
            show_path=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
        logger.propagate = False
        _configured = True

    return logger
