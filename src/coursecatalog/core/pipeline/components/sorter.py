from __future__ import annotations

"""
Catalog Ordering.

Natural, case- and accent-insensitive ordering of topics and files, so that
'2. Basics' sorts before '10. Advanced' and 'é' ties with 'e'.
"""

import re
import unicodedata
from dataclasses import replace
from typing import Any, Iterable, List, Tuple

from coursecatalog.domain.catalog_models import Course, FileEntry, Topic

_DIGITS_RX = re.compile(r"(\d+)")


def natural_sort_key(value: str) -> Tuple[Tuple[int, Any], ...]:
    """
    Build a sort key that compares digit runs numerically.

    Text chunks are case-folded and stripped of diacritics. Numbers rank
    before text at the same position.
    """
    folded = _fold(value)
    key = []
    for i, chunk in enumerate(_DIGITS_RX.split(folded)):
        # re.split with a capture group puts the digit runs at odd indexes
        if i % 2:
            key.append((0, int(chunk)))
        elif chunk:
            key.append((1, chunk))
    return tuple(key)


def sort_files(files: Iterable[FileEntry]) -> Tuple[FileEntry, ...]:
    return tuple(sorted(files, key=lambda f: natural_sort_key(f.name)))


def sort_topics(topics: Iterable[Topic]) -> Tuple[Topic, ...]:
    """Order topics by name and the files of each topic by stem."""
    ordered = sorted(topics, key=lambda t: natural_sort_key(t.name))
    return tuple(replace(t, files=sort_files(t.files)) for t in ordered)


def sort_catalog(courses: Iterable[Course]) -> List[Course]:
    """
    Return the courses with their topics and files in natural order.

    Course order itself is left untouched. New objects are returned; the
    inputs may be shared with the directory cache and are never mutated.
    """
    return [replace(c, topics=sort_topics(c.topics)) for c in courses]


def _fold(value: str) -> str:
    decomposed = unicodedata.normalize("NFKD", value)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.casefold()
