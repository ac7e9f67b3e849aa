from __future__ import annotations

"""
Course Discovery Stage.

Lists the immediate children of the catalog root (each one a course),
optionally restricted to an explicit set of course names, and resolves the
topics of each course. A course without subdirectories becomes a single
"topicless" topic; otherwise its whole subtree is handed to the
TopicCollector. Courses that end up without topics are left out.
"""

import logging
import os
from contextlib import nullcontext
from typing import List, Optional, Sequence, Tuple

from coursecatalog.core.pipeline.components.filters import classify_files
from coursecatalog.core.services.scanner import TopicCollector, split_entries
from coursecatalog.domain.catalog_models import Course, DirEntry, EntryKind, Topic
from coursecatalog.domain.errors import DirectoryReadError
from coursecatalog.infra.fs import validate_directory

logger = logging.getLogger(__name__)


class CourseBuilder:
    """
    Builds the list of courses found under a root directory.

    Shares the collector's policy, limiter, cache and reader so that the
    course level and the topic levels obey the same rules.

    Args:
        collector: Topic walker used for courses with subdirectories.
        log_course_details: Log one INFO line per course instead of DEBUG.
    """

    def __init__(self, collector: TopicCollector, log_course_details: bool = False) -> None:
        self._collector = collector
        self._log_level = logging.INFO if log_course_details else logging.DEBUG

    def build(
            self,
            root_path: str,
            courses_to_process: Optional[Sequence[str]] = None,
    ) -> List[Course]:
        """
        Crawl `root_path` and return its courses in directory-read order.

        An invalid root or an unreadable root listing is logged and yields an
        empty list rather than an exception.

        Args:
            root_path: Directory whose immediate subdirectories are courses.
            courses_to_process: Exact course names to restrict the crawl to;
                                empty or None means every course.

        Returns:
            List[Course]: Courses with at least one topic.
        """
        root_path = os.path.abspath(root_path)
        if not validate_directory(root_path):
            return []

        try:
            entries = self._collector.read(root_path)
        except DirectoryReadError as e:
            logger.error(f"Error reading directory \"{root_path}\": {e}")
            return []

        if courses_to_process:
            wanted = set(courses_to_process)
            entries = [e for e in entries if e.name in wanted]
            self._report_missing(courses_to_process, entries)

        _, course_names = split_entries(entries, self._collector.excluded_name)

        courses = self._collector.limiter.map(
            lambda name: self._build_course(os.path.join(root_path, name), name),
            course_names,
        )
        return [c for c in courses if c.topics]

    # -------------------------------------------------------------------------
    # Private helpers
    # -------------------------------------------------------------------------

    def _build_course(self, course_path: str, course_name: str) -> Course:
        cache = self._collector.cache
        guard = cache.key_lock(course_path) if cache is not None else nullcontext()
        mtime: Optional[int] = None

        with guard:
            if cache is not None:
                cached = cache.lookup(course_path)
                if cached is not None:
                    logger.log(
                        self._log_level,
                        f"processing course: {course_name} topics found: {len(cached)} (cached)",
                    )
                    return Course(name=course_name, topics=cached)
                mtime = cache.mtime_of(course_path)

            try:
                entries = self._collector.read(course_path)
            except DirectoryReadError as e:
                logger.error(f"Error processing course \"{course_name}\" at {course_path}: {e}")
                return Course(name=course_name)

            topics = self._resolve_topics(course_path, course_name, entries)

            if cache is not None:
                cache.put(course_path, mtime, topics)

        logger.log(
            self._log_level,
            f"processing course: {course_name} topics found: {len(topics)}",
        )
        return Course(name=course_name, topics=topics)

    def _resolve_topics(self, course_path: str, course_name: str, entries: Sequence[DirEntry]) -> Tuple[Topic, ...]:
        files, subdirs = split_entries(entries, self._collector.excluded_name)

        if not subdirs:
            classified = classify_files(files, self._collector.policy)
            if not classified:
                return ()
            return (Topic(name=course_name, files=tuple(classified), is_topic_less=True),)

        return self._collector.collect_entries(course_path, "", entries)

    @staticmethod
    def _report_missing(requested: Sequence[str], entries: Sequence[DirEntry]) -> None:
        found = {e.name for e in entries if e.kind is EntryKind.DIR}
        missing = [name for name in requested if name not in found]
        if missing:
            logger.warning(f"Requested courses not found under root: {', '.join(missing)}")
