"""Logging configuration."""

import logging
from pathlib import Path
from typing import Optional, Union
from rich.logging import RichHandler
from ..config import settings

FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_logger(
    name: str,
    level: Optional[str] = None,
    log_file: Optional[Union[str, Path]] = None,
) -> logging.Logger:
    """Get a configured logger instance.

    Handlers are attached once per logger name. ``level`` and ``log_file``
    fall back to the ``STERILIS_LOG_LEVEL`` / ``STERILIS_LOG_FILE`` settings.
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        level = level or settings.log_level
        logger.setLevel(getattr(logging, level.upper(), logging.INFO))

        console_handler = RichHandler(
            rich_tracebacks=True,
            show_time=True,
            show_path=False,
        )
        console_handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(console_handler)

        log_file = Path(log_file) if log_file else settings.log_file
        if log_file:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file)
            file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
            logger.addHandler(file_handler)

    return logger
