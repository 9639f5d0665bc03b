"""Logging setup.

All modules log through ``loguru.logger``. The terminal UI owns stdout, so the
stderr sink defaults to warnings only; a file sink can capture the rest.
"""

import sys
from pathlib import Path

from loguru import logger

LOG_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - {message}"
)


def configure_logging(level: str = "WARNING", log_file: Path | None = None) -> None:
    """Replace loguru's default sink with the application's sinks."""
    logger.remove()
    logger.add(sys.stderr, level=level.upper(), format=LOG_FORMAT)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            level="DEBUG",
            rotation="1 MB",
            retention=3,
            encoding="utf-8",
        )
