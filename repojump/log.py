"""Logging setup. stdout carries command output, so logs go to stderr."""

from __future__ import annotations

import os
import sys

from loguru import logger

LOG_LEVEL_ENV = "REPOJUMP_LOG_LEVEL"
DEFAULT_LEVEL = "WARNING"


def setup_logging(level: str | None = None) -> None:
    level = (level or os.environ.get(LOG_LEVEL_ENV) or DEFAULT_LEVEL).upper()
    logger.remove()
    logger.add(
        sys.stderr,
        level=level,
        format="<dim>{time:HH:mm:ss}</dim> <level>{level: <7}</level> {message}",
    )
