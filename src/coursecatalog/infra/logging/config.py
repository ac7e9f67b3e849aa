from __future__ import annotations

"""
Log Output Settings.

What the indexer writes to its log outputs and how much of it: a terse
console line for the operator and a thread-tagged file line, since crawl
records come from many worker threads at once.
"""

import logging
from dataclasses import dataclass
from typing import Optional

CONSOLE_FORMAT = "%(levelname)s | %(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)s | %(threadName)s | %(name)s | %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass(frozen=True)
class LoggingConfig:
    """
    Log outputs for one indexer process.

    Attributes:
        level: Level name ("DEBUG", "INFO", ...); unknown names mean INFO.
        console: Write records to stderr.
        log_file: Also write records to this rotating file.
        max_bytes: Size at which the log file rolls over.
        backup_count: Rolled-over files kept next to the active one.
    """
    level: str = "INFO"
    console: bool = True
    log_file: Optional[str] = None

    max_bytes: int = 2 * 1024 * 1024
    backup_count: int = 3

    @property
    def level_no(self) -> int:
        value = logging.getLevelName(str(self.level or "").strip().upper())
        return value if isinstance(value, int) else logging.INFO
