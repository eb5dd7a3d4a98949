"""Logging setup shared by the library and the command line tool.

Library modules only call :func:`get_logger`; handlers are installed once
by :func:`setup_logging`, normally from the CLI entry point.
"""

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "tl_bindgen"
FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

_configured = False


def get_logger(name: str) -> logging.Logger:
    """Return a logger below the package logger.

    Args:
        name: Usually ``__name__`` of the calling module.
    """
    if name != PACKAGE_LOGGER and not name.startswith(PACKAGE_LOGGER + "."):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)


def setup_logging(
    level: str | int = "WARNING",
    log_file: str | Path | None = None,
    console: Console | None = None,
) -> logging.Logger:
    """Configure package logging.

    Args:
        level: Console log level name or number.
        log_file: Optional file that receives DEBUG and above.
        console: Rich console for the console handler (stderr by default).

    Returns:
        The package logger.
    """
    global _configured

    logger = logging.getLogger(PACKAGE_LOGGER)
    if _configured:
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()

    if isinstance(level, str):
        level_name = level
        level = logging.getLevelName(level_name.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {level_name}")

    rich_handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    rich_handler.setLevel(level)
    logger.addHandler(rich_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(file_handler)

    logger.setLevel(logging.DEBUG if log_file else level)
    logger.propagate = False
    _configured = True

    logger.debug("Logging configured (level=%s, file=%s)", level, log_file)
    return logger
