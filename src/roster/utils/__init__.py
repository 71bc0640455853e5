"""Utility functions for roster."""

import sys
from pathlib import Path
from typing import Optional, Union

from loguru import logger

LOG_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}"


def setup_logging(
    level: str = "WARNING", log_file: Optional[Union[str, Path]] = None
) -> None:
    """
    Configure loguru sinks for the CLI.

    Removes the default handler, logs to stderr at ``level`` and, when
    ``log_file`` is given, to a rotating file at DEBUG level.
    """
    logger.remove()
    logger.add(sys.stderr, level=level.upper(), format=LOG_FORMAT, colorize=None)

    if log_file:
        log_path = Path(log_file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_path,
            level="DEBUG",
            rotation="10 MB",
            retention="10 days",
            backtrace=True,
            diagnose=False,
            enqueue=True,
        )
