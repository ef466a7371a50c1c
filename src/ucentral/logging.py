"""
Logging setup for the uCentral client.

Library modules only call ``get_logger(__name__)``. The CLI calls
``setup_logging`` once to attach a handler.
"""

from __future__ import annotations

import logging

import structlog
from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "ucentral"


def json_formatter() -> structlog.stdlib.ProcessorFormatter:
    """Formatter rendering each stdlib record as one JSON object."""
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=[
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
        ],
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
    )


def get_logger(name: str) -> logging.Logger:
    """Get a logger inside the ``ucentral`` namespace."""
    if name != ROOT_LOGGER and not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)


def setup_logging(
    level: str = "INFO",
    json_output: bool = False,
    console: Console | None = None,
) -> logging.Logger:
    """
    Configure the ``ucentral`` logger.

    Args:
        level: Log level name
        json_output: Emit JSON lines instead of rich-formatted records
        console: Console for the rich handler (defaults to stderr)

    Returns:
        The configured root ``ucentral`` logger
    """
    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    if json_output:
        handler: logging.Handler = logging.StreamHandler()
        handler.setFormatter(json_formatter())
    else:
        handler = RichHandler(
            console=console or Console(stderr=True),
            show_time=True,
            show_path=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))

    logger.addHandler(handler)
    logger.setLevel(getattr(logging, level.upper()))
    logger.propagate = False
    return logger


__all__ = ["get_logger", "setup_logging", "json_formatter", "ROOT_LOGGER"]
