from __future__ import annotations

"""
Output handlers behind the log queue.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import List

from coursecatalog.infra.logging.config import (
    CONSOLE_FORMAT,
    FILE_DATE_FORMAT,
    FILE_FORMAT,
    LoggingConfig,
)


def build_output_handlers(cfg: LoggingConfig) -> List[logging.Handler]:
    """
    Create the console and file handlers requested by `cfg`.

    A log file that cannot be opened is reported on stderr and left out;
    indexing goes ahead with the remaining outputs.
    """
    level = cfg.level_no
    handlers: List[logging.Handler] = []

    if cfg.console:
        console = logging.StreamHandler(sys.stderr)
        console.setLevel(level)
        console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        handlers.append(console)

    if cfg.log_file:
        try:
            os.makedirs(os.path.dirname(os.path.abspath(cfg.log_file)), exist_ok=True)
            rotating = RotatingFileHandler(
                cfg.log_file,
                maxBytes=cfg.max_bytes,
                backupCount=cfg.backup_count,
                encoding="utf-8",
            )
        except OSError as e:
            sys.stderr.write(f"WARNING: log file '{cfg.log_file}' unavailable, skipping it: {e}\n")
        else:
            rotating.setLevel(level)
            rotating.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=FILE_DATE_FORMAT))
            handlers.append(rotating)

    return handlers
