from __future__ import annotations

"""
Integration tests for Logging Infrastructure.

Verifies the queued delivery setup, idempotency of configuration, log file
rotation and the stderr fallback.
"""

import logging
import time
from logging.handlers import QueueHandler
from pathlib import Path
from unittest.mock import patch

import pytest

from coursecatalog.infra.logging import (
    LoggingConfig,
    configure_logging,
    shutdown_logging,
)
from coursecatalog.infra.logging import core as logging_core


@pytest.fixture(autouse=True)
def reset_logging() -> None:
    """Tear down any queued setup before and after each test."""
    shutdown_logging()
    yield
    shutdown_logging()


def _queue_handlers():
    return [h for h in logging.getLogger().handlers if isinstance(h, QueueHandler)]


def test_logging_idempotency() -> None:
    """TC-01: Repeated configuration does not duplicate handlers."""
    cfg = LoggingConfig(level="INFO", console=True)

    configure_logging(cfg)
    configure_logging(cfg)

    assert len(_queue_handlers()) == 1


def test_force_reconfigures() -> None:
    configure_logging(LoggingConfig(level="INFO", console=True))
    configure_logging(LoggingConfig(level="DEBUG", console=True), force=True)

    assert logging.getLogger().level == logging.DEBUG
    assert len(_queue_handlers()) == 1


@pytest.mark.parametrize("name, expected", [
    ("debug", logging.DEBUG),
    (" WARN ", logging.WARNING),
    ("verbose", logging.INFO),
    ("", logging.INFO),
])
def test_level_names(name: str, expected: int) -> None:
    assert LoggingConfig(level=name).level_no == expected


def test_log_rotation(tmp_path: Path) -> None:
    """TC-02: The log file rolls over when its size limit is exceeded."""
    log_file = tmp_path / "logs" / "rotate.log"
    cfg = LoggingConfig(
        level="DEBUG",
        console=False,
        log_file=str(log_file),
        max_bytes=100,
        backup_count=1
    )

    configure_logging(cfg)
    logger = logging.getLogger("coursecatalog.test_rotate")

    for _ in range(10):
        logger.debug("processing course: a long enough course name for rotation " * 3)

    shutdown_logging()
    time.sleep(0.1)

    assert log_file.exists()
    assert (tmp_path / "logs" / "rotate.log.1").exists(), "Rotation backup file was not created."
    assert "MainThread" in log_file.read_text(encoding="utf-8")


def test_queued_delivery_and_shutdown() -> None:
    """TC-03: The root logger feeds a listener thread, removed on shutdown."""
    configure_logging(LoggingConfig(level="INFO", console=True))

    assert len(_queue_handlers()) == 1
    assert logging_core._listener is not None

    shutdown_logging()

    assert _queue_handlers() == []
    assert logging_core._listener is None


def test_unopenable_log_file_is_skipped(tmp_path: Path, capsys) -> None:
    blocker = tmp_path / "not_a_dir"
    blocker.write_text("", encoding="utf-8")

    configure_logging(LoggingConfig(console=True, log_file=str(blocker / "app.log")))

    assert "unavailable" in capsys.readouterr().err
    assert len(_queue_handlers()) == 1
    assert len(logging_core._listener.handlers) == 1


def test_fallback_to_stderr_when_setup_fails() -> None:
    with patch.object(logging_core, "QueueListener", side_effect=RuntimeError("no threads")):
        configure_logging(LoggingConfig(console=True))

    root = logging.getLogger()
    assert _queue_handlers() == []
    assert logging_core._fallback_handler in root.handlers

    shutdown_logging()
    assert logging_core._fallback_handler is None
