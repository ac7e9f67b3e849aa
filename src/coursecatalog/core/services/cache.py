from __future__ import annotations

"""
Directory Result Cache.

In-memory, process-lifetime cache mapping an absolute directory path to the
result computed for it, stamped with the directory's modification time.
An entry is reused only while the directory's current mtime still matches;
like the filesystem's own mtime semantics, a change deep inside a nested
subdirectory does not invalidate its ancestors.

Thread-safe: the mapping is guarded by a mutex, and `key_lock` holds a
re-entrant lock per path so that check -> compute -> store is serialized
for a given directory. Path locks live only while some thread holds or
waits on them.
"""

import logging
import os
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, Optional, Tuple

from coursecatalog.infra.fs import get_directory_mtime

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    """
    A cached directory result.

    Attributes:
        mtime_ns: Directory modification time when the result was computed.
        data: The computed topic tuple.
    """
    mtime_ns: int
    data: Tuple[Any, ...]


@dataclass
class _PathLock:
    lock: threading.RLock = field(default_factory=threading.RLock)
    users: int = 0


class DirectoryCache:
    """
    Modification-time validated cache of per-directory crawl results.

    Args:
        stat_fn: Returns a directory's current mtime (ns) or None on failure.
    """

    def __init__(self, stat_fn: Callable[[str], Optional[int]] = get_directory_mtime) -> None:
        self._stat_fn = stat_fn
        self._entries: Dict[str, CacheEntry] = {}
        self._key_locks: Dict[str, _PathLock] = {}
        self._lock = threading.Lock()

    # -------------------------------------------------------------------------
    # Entry access
    # -------------------------------------------------------------------------

    def get(self, path: str) -> Optional[CacheEntry]:
        with self._lock:
            return self._entries.get(_key(path))

    def put(self, path: str, mtime_ns: Optional[int], data: Tuple[Any, ...]) -> None:
        """
        Store a result. Results without a modification time are not cached,
        as they could never be validated.
        """
        if mtime_ns is None:
            logger.debug(f"DirectoryCache: no mtime for {path}, result not cached.")
            return
        with self._lock:
            self._entries[_key(path)] = CacheEntry(mtime_ns, tuple(data))

    def is_valid(self, path: str, entry: Optional[CacheEntry]) -> bool:
        """Re-stat the directory and compare its mtime with the entry's stamp."""
        if entry is None:
            return False
        current = self._stat_fn(_key(path))
        return current is not None and current == entry.mtime_ns

    def lookup(self, path: str) -> Optional[Tuple[Any, ...]]:
        """
        Return the cached data for `path` if present and still valid.

        Stale entries are evicted.
        """
        entry = self.get(path)
        if entry is None:
            return None
        if self.is_valid(path, entry):
            return entry.data
        with self._lock:
            if self._entries.get(_key(path)) is entry:
                del self._entries[_key(path)]
        return None

    def mtime_of(self, path: str) -> Optional[int]:
        return self._stat_fn(_key(path))

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    @contextmanager
    def key_lock(self, path: str) -> Iterator[None]:
        """Hold the lock serializing work on one directory path."""
        key = _key(path)
        with self._lock:
            slot = self._key_locks.get(key)
            if slot is None:
                slot = self._key_locks[key] = _PathLock()
            slot.users += 1
        try:
            with slot.lock:
                yield
        finally:
            with self._lock:
                slot.users -= 1
                if slot.users == 0:
                    del self._key_locks[key]

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, str):
            return False
        with self._lock:
            return _key(path) in self._entries


def _key(path: str) -> str:
    return os.path.abspath(path)
