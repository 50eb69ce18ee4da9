"""Loguru-based logging setup."""

from __future__ import annotations

import os
import sys
from pathlib import Path

from loguru import logger

LOG_FILE_NAME = "save-exporter.log"


def setup_logger(log_dir: Path | None = None, console_level: str | None = None) -> None:
    """Configure loguru sinks.

    Console output goes to stderr at INFO unless *console_level* is given or
    ``SAVE_EXPORTER_DEBUG`` is set.  When *log_dir* is given, a rotating
    DEBUG file sink is added as well.
    """
    logger.remove()

    if console_level is None:
        console_level = "DEBUG" if os.environ.get("SAVE_EXPORTER_DEBUG") else "INFO"

    logger.add(
        sys.stderr,
        level=console_level,
        format="<green>{time:HH:mm:ss}</green> | <level>{level:<7}</level> | {message}",
        colorize=True,
    )

    if log_dir:
        log_dir.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(log_dir / LOG_FILE_NAME),
            level="DEBUG",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level:<7} | {thread.name} | {name}:{line} | {message}",
            rotation="5 MB",
            retention="7 days",
            encoding="utf-8",
            enqueue=True,
        )
