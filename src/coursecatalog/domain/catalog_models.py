from __future__ import annotations

"""
Catalog Data Models.

Immutable value types for directory entries, classified files, topics and
courses, plus their JSON representation. The JSON keys (`fileName`,
`isTopicLess`) are the wire format consumed by the viewing application.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Tuple

# -----------------------------------------------------------------------------
# DIRECTORY ENTRIES
# -----------------------------------------------------------------------------

class EntryKind(str, Enum):
    DIR = "dir"
    FILE = "file"


@dataclass(frozen=True)
class DirEntry:
    """
    One child of a directory listing.

    Attributes:
        kind: Whether the child is a directory or a regular file.
        name: Base name of the child.
    """
    kind: EntryKind
    name: str

# -----------------------------------------------------------------------------
# CATALOG STRUCTURE
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class FileEntry:
    """
    A classified file.

    Attributes:
        file_name: Raw filename as found on disk.
        name: Filename without its extension.
        ext: Lower-cased extension including the leading dot ("" if none).
    """
    file_name: str
    name: str
    ext: str

    def to_dict(self) -> Dict[str, str]:
        return {"fileName": self.file_name, "name": self.name, "ext": self.ext}


@dataclass(frozen=True)
class Topic:
    """
    A directory that directly contains classified files.

    Attributes:
        name: Path relative to the course root, '/'-joined for nested folders.
        files: Classified files in this directory.
        is_topic_less: True for the synthetic topic of a course without subfolders.
    """
    name: str
    files: Tuple[FileEntry, ...] = ()
    is_topic_less: bool = False

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "name": self.name,
            "files": [f.to_dict() for f in self.files],
        }
        if self.is_topic_less:
            data["isTopicLess"] = True
        return data


@dataclass(frozen=True)
class Course:
    """A root-level directory and every topic found beneath it."""
    name: str
    topics: Tuple[Topic, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "topics": [t.to_dict() for t in self.topics]}


def catalog_to_data(courses: Iterable[Course]) -> List[Dict[str, Any]]:
    """Convert a sequence of courses into its JSON-ready representation."""
    return [c.to_dict() for c in courses]
