from __future__ import annotations

"""
Unit tests for the Course Discovery Stage.

Verifies topicless courses, the reference catalog shape, course filtering,
dropping of empty courses and error isolation at the course level.
"""

import logging
import os
from pathlib import Path
from typing import Callable
from unittest.mock import MagicMock

import pytest

from coursecatalog.core.pipeline.components.filters import VIDEO_ALLOWLIST
from coursecatalog.core.pipeline.stages.course_builder import CourseBuilder
from coursecatalog.core.services.cache import DirectoryCache
from coursecatalog.core.services.limiter import ConcurrencyLimiter
from coursecatalog.core.services.scanner import TopicCollector
from coursecatalog.domain.catalog_models import catalog_to_data
from coursecatalog.domain.constants import EXCLUDED_DIRECTORY
from coursecatalog.domain.errors import DirectoryReadError
from coursecatalog.infra.fs import read_directory


@pytest.fixture
def limiter():
    lim = ConcurrencyLimiter(4)
    yield lim
    lim.shutdown()


def _builder(limiter, cache=None, reader=read_directory, details=False) -> CourseBuilder:
    collector = TopicCollector(VIDEO_ALLOWLIST, limiter, cache=cache, reader=reader)
    return CourseBuilder(collector, log_course_details=details)


def test_reference_catalog(make_tree: Callable, limiter) -> None:
    root = make_tree({"Course1": {"Topic1": {"video.mp4": "", "video.srt": ""}}})

    courses = _builder(limiter).build(str(root))

    assert catalog_to_data(courses) == [{
        "name": "Course1",
        "topics": [{
            "name": "Topic1",
            "files": [{"fileName": "video.mp4", "name": "video", "ext": ".mp4"}],
        }],
    }]


def test_topicless_course(make_tree: Callable, limiter) -> None:
    root = make_tree({
        "Flat": {"1.mp4": "", "2.mkv": "", "notes.pdf": "", "sub.srt": ""},
    })

    (course,) = _builder(limiter).build(str(root))

    assert len(course.topics) == 1
    topic = course.topics[0]
    assert topic.is_topic_less is True
    assert topic.name == "Flat"
    assert sorted(f.file_name for f in topic.files) == ["1.mp4", "2.mkv"]
    assert course.to_dict()["topics"][0]["isTopicLess"] is True


def test_courses_without_topics_are_dropped(make_tree: Callable, limiter) -> None:
    root = make_tree({
        "Docs only": {"readme.txt": ""},
        "Empty": {},
        "Empty topics": {"T": {"x.pdf": ""}},
        "Real": {"T": {"x.mp4": ""}},
        "stray.mp4": "",
    })

    courses = _builder(limiter).build(str(root))

    assert [c.name for c in courses] == ["Real"]


def test_excluded_directory_is_not_a_course(make_tree: Callable, limiter) -> None:
    root = make_tree({
        EXCLUDED_DIRECTORY: {"ad.mp4": ""},
        "Real": {"x.mp4": ""},
    })

    courses = _builder(limiter).build(str(root))

    assert [c.name for c in courses] == ["Real"]


def test_course_filter_uses_exact_names(make_tree: Callable, limiter, caplog) -> None:
    root = make_tree({
        "Python": {"a.mp4": ""},
        "Python Advanced": {"b.mp4": ""},
        "Go": {"c.mp4": ""},
    })

    with caplog.at_level(logging.WARNING):
        courses = _builder(limiter).build(str(root), ["Python", "Rust"])

    assert [c.name for c in courses] == ["Python"]
    assert "Rust" in caplog.text


def test_invalid_root_yields_empty_catalog(tmp_path: Path, limiter) -> None:
    assert _builder(limiter).build(str(tmp_path / "missing")) == []

    a_file = tmp_path / "file.txt"
    a_file.write_text("x", encoding="utf-8")
    assert _builder(limiter).build(str(a_file)) == []


def test_unreadable_course_is_skipped(make_tree: Callable, limiter) -> None:
    root = make_tree({"Ok": {"a.mp4": ""}, "Locked": {"b.mp4": ""}})
    locked = os.path.abspath(str(root / "Locked"))

    def reader(path: str):
        if os.path.abspath(path) == locked:
            raise DirectoryReadError(path, "permission denied")
        return read_directory(path)

    courses = _builder(limiter, reader=reader).build(str(root))

    assert [c.name for c in courses] == ["Ok"]


def test_unchanged_course_reuses_cache(make_tree: Callable, limiter) -> None:
    root = make_tree({
        "Flat": {"1.mp4": ""},
        "Nested": {"T": {"2.mp4": ""}},
    })
    spy = MagicMock(wraps=read_directory)
    builder = _builder(limiter, cache=DirectoryCache(), reader=spy)

    first = builder.build(str(root))
    reads = spy.call_count
    second = builder.build(str(root))

    # Root listing is always fresh; courses and topics come from the cache
    assert spy.call_count == reads + 1
    assert sorted(c.name for c in first) == sorted(c.name for c in second)


def test_course_details_logged_at_info(make_tree: Callable, limiter, caplog) -> None:
    root = make_tree({"Course": {"T": {"a.mp4": ""}}})

    with caplog.at_level(logging.INFO):
        _builder(limiter, details=True).build(str(root))

    assert "processing course: Course topics found: 1" in caplog.text
