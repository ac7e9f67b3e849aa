from __future__ import annotations

"""
Unit tests for the Concurrency Limiter.

Verifies:
1. The hard cap on simultaneously held read slots.
2. Ordered results from `map`.
3. Nested fan-out completes with a small pool.
4. Error propagation from escaped worker exceptions.
"""

import threading
import time

import pytest

from coursecatalog.core.services.limiter import ConcurrencyLimiter


def test_rejects_non_positive_limit() -> None:
    with pytest.raises(ValueError):
        ConcurrencyLimiter(0)


def test_map_preserves_input_order() -> None:
    with ConcurrencyLimiter(3) as limiter:
        results = limiter.map(lambda x: x * 2, range(10))

    assert results == [x * 2 for x in range(10)]


def test_map_on_empty_input() -> None:
    with ConcurrencyLimiter(2) as limiter:
        assert limiter.map(lambda x: x, []) == []


def test_slots_never_exceed_limit() -> None:
    """Reads beyond the cap wait for a free slot."""
    limit = 3
    in_flight = 0
    observed = []
    lock = threading.Lock()

    with ConcurrencyLimiter(limit) as limiter:
        def work(_: int) -> None:
            nonlocal in_flight
            with limiter.slot():
                with lock:
                    in_flight += 1
                    observed.append(in_flight)
                time.sleep(0.01)
                with lock:
                    in_flight -= 1

        limiter.map(work, range(20))
        peak = limiter.peak

    assert max(observed) <= limit
    assert peak <= limit
    assert limiter.active == 0


def test_slot_blocks_when_exhausted() -> None:
    limiter = ConcurrencyLimiter(1)
    entered = threading.Event()

    def second() -> None:
        with limiter.slot():
            entered.set()

    with limiter.slot():
        t = threading.Thread(target=second)
        t.start()
        assert not entered.wait(0.05)

    t.join(timeout=1)
    assert entered.is_set()


def test_nested_map_does_not_deadlock() -> None:
    """Fan-out inside fan-out completes even with a single worker thread."""
    with ConcurrencyLimiter(1) as limiter:
        def outer(i: int) -> int:
            return sum(limiter.map(lambda j: i * j, range(4)))

        results = limiter.map(outer, range(5))

    assert results == [i * 6 for i in range(5)]


def test_escaped_exception_is_reraised() -> None:
    def boom(x: int) -> int:
        if x == 3:
            raise RuntimeError("bad item")
        return x

    with ConcurrencyLimiter(2) as limiter:
        with pytest.raises(RuntimeError, match="bad item"):
            limiter.map(boom, range(6))
