from __future__ import annotations

"""
Unit tests for Catalog Ordering.
"""

from coursecatalog.core.pipeline.components.sorter import (
    natural_sort_key,
    sort_catalog,
    sort_files,
)
from coursecatalog.domain.catalog_models import Course, FileEntry, Topic


def _file(file_name: str) -> FileEntry:
    stem, _, ext = file_name.rpartition(".")
    return FileEntry(file_name, stem, "." + ext)


def test_numeric_runs_compare_as_numbers() -> None:
    names = ["10. Advanced", "2. Basics", "1. Intro"]
    assert sorted(names, key=natural_sort_key) == ["1. Intro", "2. Basics", "10. Advanced"]


def test_case_and_accent_insensitive() -> None:
    assert natural_sort_key("Émile") == natural_sort_key("emile")
    assert sorted(["b", "A", "c"], key=natural_sort_key) == ["A", "b", "c"]


def test_sort_files_by_stem() -> None:
    files = [_file("02 Video.mp4"), _file("01 Video.mp4")]
    assert [f.file_name for f in sort_files(files)] == ["01 Video.mp4", "02 Video.mp4"]


def test_sort_catalog_orders_topics_and_files_not_courses() -> None:
    course_b = Course("B", (
        Topic("10. Deploy", (_file("2.mp4"), _file("1.mp4"))),
        Topic("2. Setup", (_file("b.mp4"), _file("a.mp4"))),
    ))
    course_a = Course("A", (Topic("Only", (_file("x.mp4"),)),))

    result = sort_catalog([course_b, course_a])

    assert [c.name for c in result] == ["B", "A"]
    assert [t.name for t in result[0].topics] == ["2. Setup", "10. Deploy"]
    assert [f.file_name for f in result[0].topics[0].files] == ["a.mp4", "b.mp4"]
    assert [f.file_name for f in result[0].topics[1].files] == ["1.mp4", "2.mp4"]


def test_sort_catalog_does_not_mutate_input() -> None:
    original = Course("C", (Topic("2"), Topic("1")))
    sort_catalog([original])
    assert [t.name for t in original.topics] == ["2", "1"]


def test_topicless_flag_survives_sorting() -> None:
    course = Course("C", (Topic("C", (_file("b.mp4"), _file("a.mp4")), is_topic_less=True),))
    (topic,) = sort_catalog([course])[0].topics
    assert topic.is_topic_less is True
    assert [f.name for f in topic.files] == ["a", "b"]
