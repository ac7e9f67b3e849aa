from __future__ import annotations

"""
Queued Log Delivery.

Crawler threads only put records on a queue; one listener thread formats
them and writes them to the console and the optional log file. The setup is
installed once per process and torn down by `shutdown_logging` (also run at
interpreter exit so queued records are not lost).
"""

import atexit
import logging
import queue
import sys
from logging.handlers import QueueHandler, QueueListener
from typing import Optional

from coursecatalog.infra.logging.config import LoggingConfig
from coursecatalog.infra.logging.handlers import build_output_handlers

_queue_handler: Optional[QueueHandler] = None
_listener: Optional[QueueListener] = None
_fallback_handler: Optional[logging.Handler] = None
_exit_hook_registered = False


def configure_logging(cfg: LoggingConfig, *, force: bool = False) -> logging.Logger:
    """
    Route root-logger records through a queue to the outputs in `cfg`.

    Repeated calls keep the first setup unless `force` is given.

    Returns:
        logging.Logger: The root logger.
    """
    global _queue_handler, _listener, _fallback_handler, _exit_hook_registered

    root = logging.getLogger()
    if _queue_handler is not None and not force:
        return root

    shutdown_logging()
    root.setLevel(cfg.level_no)

    try:
        outputs = build_output_handlers(cfg)
        if not outputs:
            return root

        records: queue.Queue[logging.LogRecord] = queue.Queue()
        _listener = QueueListener(records, *outputs, respect_handler_level=True)
        _listener.start()
        _queue_handler = QueueHandler(records)
        root.addHandler(_queue_handler)
    except Exception as e:
        shutdown_logging()
        _fallback_handler = logging.StreamHandler(sys.stderr)
        _fallback_handler.setFormatter(logging.Formatter("LOGGING FALLBACK | %(levelname)s | %(message)s"))
        root.addHandler(_fallback_handler)
        root.warning(f"Queued logging unavailable ({e}); writing straight to stderr.")
        return root

    if not _exit_hook_registered:
        atexit.register(shutdown_logging)
        _exit_hook_registered = True
    return root


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def shutdown_logging() -> None:
    """Flush queued records, close the outputs and detach the queue handler."""
    global _queue_handler, _listener, _fallback_handler

    root = logging.getLogger()
    if _fallback_handler is not None:
        root.removeHandler(_fallback_handler)
        _fallback_handler = None

    if _queue_handler is not None:
        root.removeHandler(_queue_handler)
        _queue_handler.close()
        _queue_handler = None

    listener, _listener = _listener, None
    if listener is None:
        return
    # stop() joins the thread; it is already gone if stopped elsewhere
    if getattr(listener, "_thread", None) is not None:
        listener.stop()
    for handler in listener.handlers:
        handler.close()
