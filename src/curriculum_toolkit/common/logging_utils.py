"""
Logging utilities for the command-line entry point.

Library modules only create ``logging.getLogger(__name__)`` loggers;
handlers are attached here, once, by the CLI.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

PACKAGE_LOGGER = "curriculum_toolkit"
CONSOLE_FORMAT = "%(levelname)s: %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def verbosity_to_level(verbose: int = 0, quiet: int = 0) -> int:
    """
    Map -v/-q counts to a logging level.

    WARNING by default; each -v steps down (INFO, DEBUG), each -q steps
    up (ERROR, CRITICAL).

    Example:
        >>> verbosity_to_level(verbose=1)
        20
    """
    levels = [logging.DEBUG, logging.INFO, logging.WARNING, logging.ERROR, logging.CRITICAL]
    index = 2 - verbose + quiet
    return levels[max(0, min(index, len(levels) - 1))]


def configure_logging(
    level: int = logging.WARNING,
    log_file: Optional[Path] = None,
) -> list[logging.Handler]:
    """
    Attach console (stderr) and optional file handlers to the package logger.

    Calling it again replaces previously attached handlers, so tests and
    repeated CLI invocations in one process do not duplicate output.

    Args:
        level: Console level
        log_file: Optional file that receives DEBUG and above

    Returns:
        The attached handlers (for later removal).
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        if getattr(handler, "_curriculum_handler", False):
            logger.removeHandler(handler)
            handler.close()

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    handlers: list[logging.Handler] = [console]

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        handlers.append(file_handler)

    for handler in handlers:
        handler._curriculum_handler = True  # type: ignore[attr-defined]
        logger.addHandler(handler)

    logger.setLevel(min(h.level for h in handlers))
    return handlers


def detach_handlers(handlers: list[logging.Handler]) -> None:
    """Remove and close handlers returned by configure_logging."""
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in handlers:
        logger.removeHandler(handler)
        handler.close()
