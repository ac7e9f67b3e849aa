from __future__ import annotations

"""
Topic Discovery Service.

Walks a course subtree to arbitrary depth and emits one Topic for every
directory that directly contains classified files. Topics are named by
their '/'-joined path relative to the course root, so that same-named
folders at different depths stay distinct.

Each directory result is cached by path and modification time, sibling
subdirectories are fanned out through the shared ConcurrencyLimiter, and a
directory that cannot be read contributes no topics without disturbing its
siblings or ancestors.
"""

import logging
import os
from contextlib import nullcontext
from typing import Callable, List, Optional, Sequence, Tuple

from coursecatalog.core.pipeline.components.filters import ExtensionPolicy, classify_files
from coursecatalog.core.services.cache import DirectoryCache
from coursecatalog.core.services.limiter import ConcurrencyLimiter
from coursecatalog.domain.catalog_models import DirEntry, EntryKind, Topic
from coursecatalog.domain.constants import EXCLUDED_DIRECTORY
from coursecatalog.domain.errors import DirectoryReadError
from coursecatalog.infra.fs import read_directory

logger = logging.getLogger(__name__)

DirectoryReader = Callable[[str], List[DirEntry]]


# ==============================================================================
# PUBLIC API
# ==============================================================================

def split_entries(
        entries: Sequence[DirEntry],
        excluded_name: str = EXCLUDED_DIRECTORY,
) -> Tuple[List[str], List[str]]:
    """
    Partition a listing into file names and subdirectory names.

    Subdirectories named exactly `excluded_name` are dropped.

    Returns:
        Tuple[List[str], List[str]]: (file names, subdirectory names).
    """
    files = [e.name for e in entries if e.kind is EntryKind.FILE]
    subdirs = [
        e.name for e in entries
        if e.kind is EntryKind.DIR and e.name != excluded_name
    ]
    return files, subdirs


class TopicCollector:
    """
    Recursive, cached, concurrency-bounded topic walker.

    Args:
        policy: Extension policy deciding which files are catalogued.
        limiter: Shared limiter bounding reads and sibling fan-out.
        cache: Directory cache; None disables caching.
        excluded_name: Directory name skipped at every depth.
        reader: Directory listing function (injectable for tests).
    """

    def __init__(
            self,
            policy: ExtensionPolicy,
            limiter: ConcurrencyLimiter,
            cache: Optional[DirectoryCache] = None,
            excluded_name: str = EXCLUDED_DIRECTORY,
            reader: DirectoryReader = read_directory,
    ) -> None:
        self._policy = policy
        self._limiter = limiter
        self._cache = cache
        self._excluded_name = excluded_name
        self._reader = reader

    @property
    def policy(self) -> ExtensionPolicy:
        return self._policy

    @property
    def excluded_name(self) -> str:
        return self._excluded_name

    @property
    def limiter(self) -> ConcurrencyLimiter:
        return self._limiter

    @property
    def cache(self) -> Optional[DirectoryCache]:
        return self._cache

    def read(self, dir_path: str) -> List[DirEntry]:
        """
        List a directory while holding one limiter slot.

        Raises:
            DirectoryReadError: If the directory cannot be listed.
        """
        with self._limiter.slot():
            return self._reader(dir_path)

    def collect(self, dir_path: str, relative_path: str = "") -> Tuple[Topic, ...]:
        """
        Collect every topic at or below `dir_path`.

        Args:
            dir_path: Directory to walk.
            relative_path: Path of `dir_path` relative to the course root
                           ("" for the root itself).

        Returns:
            Tuple[Topic, ...]: This directory's topic (if it holds classified
                               files) followed by the topics of its subtrees.
        """
        dir_path = os.path.abspath(dir_path)
        cache = self._cache
        guard = cache.key_lock(dir_path) if cache is not None else nullcontext()
        mtime: Optional[int] = None

        with guard:
            if cache is not None:
                cached = cache.lookup(dir_path)
                if cached is not None:
                    logger.debug(f"Cache hit: {dir_path}")
                    return cached
                # Stamp before reading so a concurrent change invalidates the entry
                mtime = cache.mtime_of(dir_path)

            try:
                entries = self.read(dir_path)
            except DirectoryReadError as e:
                logger.error(f"Error processing directory at {dir_path}: {e}")
                return ()

            topics = self.collect_entries(dir_path, relative_path, entries)

            if cache is not None:
                cache.put(dir_path, mtime, topics)

        return topics

    def collect_entries(
            self,
            dir_path: str,
            relative_path: str,
            entries: Sequence[DirEntry],
    ) -> Tuple[Topic, ...]:
        """
        Build topics from an already-read listing of `dir_path`.

        Used directly by callers that have listed the directory themselves,
        so the directory is not read twice. No caching happens at this level.
        """
        files, subdirs = split_entries(entries, self._excluded_name)

        topics: List[Topic] = []
        classified = classify_files(files, self._policy)
        if classified:
            topics.append(Topic(
                name=relative_path or os.path.basename(dir_path),
                files=tuple(classified),
            ))

        def visit(sub_name: str) -> Tuple[Topic, ...]:
            sub_relative = f"{relative_path}/{sub_name}" if relative_path else sub_name
            return self.collect(os.path.join(dir_path, sub_name), sub_relative)

        for sub_topics in self._limiter.map(visit, subdirs):
            topics.extend(sub_topics)

        return tuple(topics)
