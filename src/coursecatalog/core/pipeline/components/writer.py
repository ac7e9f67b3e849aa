from __future__ import annotations

"""
Catalog Persistence.

Reads and writes the catalog file, the only durable artifact of a crawl.
Full crawls replace the file wholesale, except that an empty result never
overwrites a usable catalog. Incremental crawls append the newly indexed
courses to the existing catalog. Writes go through a temporary file and an
atomic rename so a failed write never leaves a truncated catalog behind.
"""

import json
import logging
import os
import tempfile
from enum import Enum
from typing import Any, List, Optional, Sequence

from coursecatalog.domain.catalog_models import Course, catalog_to_data
from coursecatalog.domain.errors import (
    CatalogParseError,
    CatalogWriteError,
    EmptyCatalogError,
)

logger = logging.getLogger(__name__)


class PersistOutcome(str, Enum):
    WRITTEN = "written"
    MERGED = "merged"
    PRESERVED = "preserved"


class CatalogStore:
    """
    Persistence gateway for one catalog file.

    Args:
        catalog_path: Location of the catalog JSON file.
    """

    def __init__(self, catalog_path: str) -> None:
        self._path = os.path.abspath(catalog_path)

    @property
    def path(self) -> str:
        return self._path

    # -------------------------------------------------------------------------
    # Reading
    # -------------------------------------------------------------------------

    def read_existing(self) -> Optional[List[Any]]:
        """
        Load the current catalog.

        Returns:
            Optional[List[Any]]: The parsed array, or None if the file does not exist.

        Raises:
            CatalogParseError: If the file is not valid JSON or not an array,
                               is not UTF-8 text, or cannot be read.
        """
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                raw = f.read()
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise CatalogParseError(self._path, str(e)) from e

        try:
            data = json.loads(raw)
        except ValueError as e:
            raise CatalogParseError(self._path, str(e)) from e

        if not isinstance(data, list):
            raise CatalogParseError(
                self._path, f"expected a JSON array, found {type(data).__name__}"
            )
        return data

    # -------------------------------------------------------------------------
    # Writing
    # -------------------------------------------------------------------------

    def write(self, entries: Sequence[Any]) -> None:
        """
        Atomically replace the catalog file with `entries`.

        Raises:
            CatalogWriteError: If the file cannot be written.
        """
        directory = os.path.dirname(self._path) or "."
        tmp_path = ""
        try:
            fd, tmp_path = tempfile.mkstemp(
                prefix=".catalog-", suffix=".tmp", dir=directory
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(list(entries), f, ensure_ascii=False, separators=(",", ":"))
            # mkstemp files are owner-only
            os.chmod(tmp_path, 0o644)
            os.replace(tmp_path, self._path)
        except OSError as e:
            if tmp_path and os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise CatalogWriteError(self._path, str(e)) from e

        logger.debug(f"Catalog written to {self._path} ({len(entries)} courses)")

    def persist(
            self,
            courses: Sequence[Course],
            courses_to_process: Optional[Sequence[str]] = None,
            *,
            root_path: str = "",
            dedupe: bool = False,
    ) -> PersistOutcome:
        """
        Store a crawl result.

        Full crawl (no course filter): replace the catalog. An empty result
        keeps a non-empty existing catalog untouched; with nothing usable to
        keep, the crawl is a failure.

        Incremental crawl (course filter given): append the new courses to
        the existing catalog. Duplicates by course name are kept unless
        `dedupe` is set, in which case older same-named entries are dropped.

        Args:
            courses: Freshly built courses.
            courses_to_process: Course filter used for the crawl, if any.
            root_path: Crawled root, used in error messages.
            dedupe: Drop existing entries superseded by a newly indexed course.

        Returns:
            PersistOutcome: What happened to the catalog file.

        Raises:
            EmptyCatalogError: Full crawl found nothing and no usable catalog exists.
            CatalogParseError: The existing catalog is malformed (incremental crawl).
            CatalogWriteError: The catalog could not be written.
        """
        new_entries = catalog_to_data(courses)

        if courses_to_process:
            return self._merge(new_entries, dedupe)

        if not new_entries:
            return self._preserve_existing(root_path)

        self.write(new_entries)
        return PersistOutcome.WRITTEN

    # -------------------------------------------------------------------------
    # Private helpers
    # -------------------------------------------------------------------------

    def _merge(self, new_entries: List[Any], dedupe: bool) -> PersistOutcome:
        existing = self.read_existing()
        if existing is None:
            logger.info(f"No existing catalog at {self._path}; starting a new one.")
            existing = []

        if dedupe:
            new_names = {e["name"] for e in new_entries}
            kept = [
                e for e in existing
                if not (isinstance(e, dict) and e.get("name") in new_names)
            ]
            dropped = len(existing) - len(kept)
            if dropped:
                logger.info(f"Replacing {dropped} previously indexed course entries.")
            existing = kept

        self.write(existing + new_entries)
        return PersistOutcome.MERGED

    def _preserve_existing(self, root_path: str) -> PersistOutcome:
        try:
            existing = self.read_existing()
        except CatalogParseError as e:
            logger.error(f"Existing catalog cannot be used as fallback: {e}")
            raise EmptyCatalogError(self._path, root_path) from e

        if existing:
            logger.warning(
                f"No courses found, preserving existing catalog {self._path} "
                f"with {len(existing)} courses."
            )
            return PersistOutcome.PRESERVED

        raise EmptyCatalogError(self._path, root_path)
