"""Centralized logging setup for Dayboard.

Modules log through ``logging.getLogger(__name__)``; this helper attaches
handlers once to the package logger so every module shares one format.
"""

from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path

PACKAGE_LOGGER_NAME = __name__.rsplit(".", 2)[0]
_FILE_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
_CONSOLE_FORMAT = "%(asctime)s %(levelname)s %(message)s"


def configure_logging(level: str | int = "INFO", *, log_dir: str | Path | None = None) -> logging.Logger:
    """Return the configured package logger.

    * Console handler always; rotating file handler (5MB x5 backups) when
      `log_dir` is given. The directory is created if missing.
    * Repeated calls only adjust the level.
    """
    logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    resolved_level = logging.getLevelName(level.upper()) if isinstance(level, str) else int(level)
    if not isinstance(resolved_level, int):
        resolved_level = logging.INFO
    logger.setLevel(resolved_level)

    if logger.handlers:
        return logger

    console = logging.StreamHandler()
    console.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    logger.addHandler(console)

    if log_dir is not None:
        path = Path(log_dir)
        path.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            path / "dayboard.log", maxBytes=5_000_000, backupCount=5, encoding="utf-8"
        )
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(file_handler)

    return logger
