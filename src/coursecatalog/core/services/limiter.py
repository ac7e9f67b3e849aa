from __future__ import annotations

"""
Bounded Concurrency for Directory Fan-Out.

A counting semaphore caps the number of directory reads in flight, and one
shared ThreadPoolExecutor of the same size runs sibling work. Fan-out is
re-entrant: the thread that calls `map` drains the work queue itself while
helper tasks lend a hand, and helpers that never got a worker are cancelled,
so nested fan-out (courses -> topics -> subtopics) cannot starve the pool.
"""

import logging
import threading
from collections import deque
from concurrent.futures import Future, ThreadPoolExecutor
from contextlib import contextmanager
from typing import Callable, Iterable, Iterator, List, Optional, TypeVar

from coursecatalog.domain.constants import MAX_CONCURRENT_OPERATIONS

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


class ConcurrencyLimiter:
    """
    Caps simultaneous directory reads at `limit`.

    Once `limit` reads are in flight, `slot()` blocks until one finishes.
    This is back-pressure only: nothing is cancelled or timed out.

    Args:
        limit: Maximum number of concurrent reads (and worker threads).
    """

    def __init__(self, limit: int = MAX_CONCURRENT_OPERATIONS) -> None:
        if limit < 1:
            raise ValueError(f"Concurrency limit must be >= 1, received {limit}.")
        self._limit = limit
        self._slots = threading.BoundedSemaphore(limit)
        self._stats_lock = threading.Lock()
        self._active = 0
        self._peak = 0
        self._executor: Optional[ThreadPoolExecutor] = None
        self._executor_lock = threading.Lock()

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def active(self) -> int:
        with self._stats_lock:
            return self._active

    @property
    def peak(self) -> int:
        """Highest number of simultaneously held slots observed so far."""
        with self._stats_lock:
            return self._peak

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def __enter__(self) -> "ConcurrencyLimiter":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()

    def shutdown(self) -> None:
        with self._executor_lock:
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=True)

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    @contextmanager
    def slot(self) -> Iterator[None]:
        """Hold one of the `limit` read slots for the duration of the block."""
        self._slots.acquire()
        with self._stats_lock:
            self._active += 1
            if self._active > self._peak:
                self._peak = self._active
        try:
            yield
        finally:
            with self._stats_lock:
                self._active -= 1
            self._slots.release()

    def map(self, fn: Callable[[T], R], items: Iterable[T]) -> List[R]:
        """
        Apply `fn` to every item using at most `limit` pool threads.

        Results come back in input order. `fn` is expected to handle its own
        recoverable errors; an exception that escapes it stops the remaining
        queued items and is re-raised here once running tasks have finished.

        Args:
            fn: Worker function.
            items: Inputs to process.

        Returns:
            List[R]: One result per item, in input order.
        """
        work = deque(enumerate(items))
        if not work:
            return []

        results: List[Optional[R]] = [None] * len(work)
        errors: List[BaseException] = []
        queue_lock = threading.Lock()

        def drain() -> None:
            while True:
                with queue_lock:
                    if errors or not work:
                        return
                    index, item = work.popleft()
                try:
                    results[index] = fn(item)
                except Exception as e:
                    with queue_lock:
                        errors.append(e)
                    return

        helpers: List[Future[None]] = []
        if len(work) > 1:
            executor = self._get_executor()
            for _ in range(min(self._limit, len(work) - 1)):
                helpers.append(executor.submit(drain))

        drain()

        for helper in helpers:
            # A helper still waiting for a worker has nothing left to do
            if not helper.cancel():
                helper.result()

        if errors:
            raise errors[0]
        return results  # type: ignore[return-value]

    # -------------------------------------------------------------------------
    # Private helpers
    # -------------------------------------------------------------------------

    def _get_executor(self) -> ThreadPoolExecutor:
        with self._executor_lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self._limit,
                    thread_name_prefix="CatalogReader",
                )
            return self._executor
