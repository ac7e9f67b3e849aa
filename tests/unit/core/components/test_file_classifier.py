from __future__ import annotations

"""
Unit tests for the File Classification Engine.

Verifies filename splitting and both extension policies.
"""

import pytest

from coursecatalog.core.pipeline.components.filters import (
    JUNK_DENYLIST,
    VIDEO_ALLOWLIST,
    classify_files,
    get_extension_policy,
    split_file_name,
)
from coursecatalog.domain.catalog_models import FileEntry


@pytest.mark.parametrize("file_name, stem, ext", [
    ("video.mp4", "video", ".mp4"),
    ("Lecture 01.MKV", "Lecture 01", ".mkv"),
    ("archive.tar.gz", "archive.tar", ".gz"),
    (".DS_Store", ".DS_Store", ""),
    ("README", "README", ""),
])
def test_split_file_name(file_name: str, stem: str, ext: str) -> None:
    assert split_file_name(file_name) == FileEntry(file_name, stem, ext)


def test_allowlist_keeps_only_videos() -> None:
    files = ["a.mp4", "b.srt", "c.TS", "d.url", "notes.txt", "e.webm"]

    kept = classify_files(files, VIDEO_ALLOWLIST)

    assert [f.file_name for f in kept] == ["a.mp4", "c.TS", "e.webm"]
    assert kept[1].ext == ".ts"


def test_denylist_drops_junk_only() -> None:
    files = ["a.mp4", "b.srt", "link.url", "LINK2.URL", "noext", ".DS_Store"]

    kept = classify_files(files, JUNK_DENYLIST)

    assert [f.file_name for f in kept] == ["a.mp4", "b.srt"]


def test_get_extension_policy_by_name() -> None:
    assert get_extension_policy("allowlist") is VIDEO_ALLOWLIST
    assert get_extension_policy(" DenyList ") is JUNK_DENYLIST


def test_get_extension_policy_unknown() -> None:
    with pytest.raises(ValueError):
        get_extension_policy("everything")


def test_file_entry_wire_format() -> None:
    entry = split_file_name("video.mp4")
    assert entry.to_dict() == {"fileName": "video.mp4", "name": "video", "ext": ".mp4"}
