"""Logging configuration for the treeseek CLI."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

from treeseek.config.models import LoggingSettings

_HANDLER_NAME = "treeseek-rich"


def configure_logging(settings: LoggingSettings, *, verbose: bool = False) -> logging.Logger:
    """Attach a stderr RichHandler to the ``treeseek`` logger.

    Calling this repeatedly replaces the previously installed handler instead of
    stacking another one.

    Args:
        settings: Logging section of the resolved configuration.
        verbose: Force DEBUG level regardless of ``settings.level``.

    Returns:
        logging.Logger: The configured package logger.
    """
    logger = logging.getLogger("treeseek")
    level = logging.DEBUG if verbose else logging.getLevelName(settings.level.upper())
    if not isinstance(level, int):
        level = logging.WARNING

    for handler in list(logger.handlers):
        if handler.get_name() == _HANDLER_NAME:
            logger.removeHandler(handler)

    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=False,
    )
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level)
    return logger


__all__ = ["configure_logging"]
