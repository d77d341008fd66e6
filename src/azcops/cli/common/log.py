"""Logging setup for the CLI."""

from __future__ import annotations

import logging

from rich.logging import RichHandler

from azcops.cli.common.output import err_console

LOGGER_NAME = "azcops"


def setup_logging(verbose: bool = False) -> logging.Logger:
    """
    Route ``azcops.*`` log records to a Rich console handler.

    Args:
        verbose: Log at DEBUG instead of WARNING.

    Returns:
        The configured package logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.handlers.clear()
    logger.addHandler(
        RichHandler(console=err_console, rich_tracebacks=True, show_time=False)
    )
    return logger
