from __future__ import annotations

"""
loguru sink setup for command-line entry points.

Library modules only ever ``from loguru import logger`` and emit; they never
add sinks. Entry points call :func:`configure_logging` once.
"""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from .config import LOG_LEVEL

CONSOLE_FORMAT = "<level>{level: <8}</level> | {name}:{function} - {message}"
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} {level} [{name}] {message}"


def configure_logging(level: Optional[str] = None, log_file: Optional[Path] = None) -> None:
    """
    Replace loguru's default handler with a stderr sink at ``level``
    (falls back to RANKMATCH_LOG_LEVEL) and optionally a file sink.
    """
    lvl = (level or LOG_LEVEL).upper()
    logger.remove()
    logger.add(sys.stderr, level=lvl, format=CONSOLE_FORMAT)
    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(log_file, level=lvl, format=FILE_FORMAT, encoding="utf-8")
    logger.debug("Logging configured at level {}", lvl)
