"""
LC-3 Emulator — Logging Setup

One named logger with two handlers. The file handler captures
everything; the rich console handler only shows the important stuff. The core modules never call this; they log
through ``logging.getLogger(__name__)`` and leave configuration to the
driver.

Log files: ``<log_dir>/<name>_YYYYMMDD_HHMMSS.log``
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from rich.logging import RichHandler

from . import config


FILE_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(funcName)s:%(lineno)d | %(message)s"
FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    name: str = "lc3_emulator",
    level: int = logging.DEBUG,
    console_level: Optional[int] = None,
    log_dir: Optional[Path] = None,
    log_to_file: bool = True,
    rich_console: bool = True,
) -> logging.Logger:
    """
    Configure and return a logger.

    A logger that already has handlers is returned untouched, so calling
    this twice never duplicates output.
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger
    logger.setLevel(level)

    if console_level is None:
        console_level = config.LOG_LEVEL

    log_file = None
    if log_to_file:
        log_dir = Path(log_dir or config.LOG_DIR)
        log_dir.mkdir(parents=True, exist_ok=True)
        ts = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = log_dir / f"{name}_{ts}.log"
        fh = logging.FileHandler(str(log_file), encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=FILE_DATEFMT))
        logger.addHandler(fh)

    if rich_console:
        ch = RichHandler(
            level=console_level,
            show_time=True,
            show_path=False,
            markup=False,
            rich_tracebacks=True,
        )
    else:
        ch = logging.StreamHandler()
        ch.setFormatter(logging.Formatter(
            "%(asctime)s | %(levelname)-7s | %(message)s", datefmt="%H:%M:%S",
        ))
    ch.setLevel(console_level)
    logger.addHandler(ch)

    logger.info("Logger initialized: %s", name)
    if log_file is not None:
        logger.info("Log file: %s", log_file)
    logger.info("Console level: %s", logging.getLevelName(console_level))

    return logger
