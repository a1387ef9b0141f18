# inventory/logging_setup.py
from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from inventory.constants import (
    APP_DIR_NAME,
    LOG_BACKUP_COUNT,
    LOG_FILE_NAME,
    LOG_MAX_BYTES,
)


def setup_logging(debug: bool = False, log_dir: Optional[Path] = None) -> None:
    """
    Configure application-wide logging.

    - Logs to ~/.inventory/app.log (rotating, max ~1 MB, 3 backups)
    - Also logs to console (stderr) for interactive runs
    """
    if log_dir is None:
        log_dir = Path.home() / APP_DIR_NAME
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    level = logging.DEBUG if debug else logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Clear existing handlers (useful if re-running in dev/REPL)
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=LOG_MAX_BYTES,
        backupCount=LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    file_fmt = logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s (%(threadName)s) - %(message)s"
    )
    file_handler.setFormatter(file_fmt)
    file_handler.setLevel(level)
    root_logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_fmt = logging.Formatter("[%(levelname)s] %(name)s - %(message)s")
    console_handler.setFormatter(console_fmt)
    console_handler.setLevel(level)
    root_logger.addHandler(console_handler)

    root_logger.info("Logging initialized")
    root_logger.info(f"Log file: {log_file}")
