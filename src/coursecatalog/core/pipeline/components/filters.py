from __future__ import annotations

"""
File Classification Engine.

Turns raw filenames into catalog file entries and decides which of them
belong in the catalog according to an explicit extension policy.
"""

import os
from dataclasses import dataclass
from typing import FrozenSet, Iterable, List

from coursecatalog.domain.catalog_models import FileEntry
from coursecatalog.domain.constants import (
    JUNK_EXTENSIONS,
    POLICY_ALLOWLIST,
    POLICY_DENYLIST,
    VIDEO_EXTENSIONS,
)

# -----------------------------------------------------------------------------
# EXTENSION POLICIES
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class ExtensionPolicy:
    """
    Inclusion rule keyed on the lower-cased file extension.

    Attributes:
        name: Policy identifier ("allowlist" or "denylist").
        extensions: Extensions listed by the policy.
        allow: True if `extensions` is an allow-list, False for a deny-list.
    """
    name: str
    extensions: FrozenSet[str]
    allow: bool

    def includes(self, entry: FileEntry) -> bool:
        listed = entry.ext in self.extensions
        return listed if self.allow else not listed


VIDEO_ALLOWLIST = ExtensionPolicy(POLICY_ALLOWLIST, VIDEO_EXTENSIONS, allow=True)
JUNK_DENYLIST = ExtensionPolicy(POLICY_DENYLIST, JUNK_EXTENSIONS, allow=False)


def get_extension_policy(name: str) -> ExtensionPolicy:
    """
    Resolve a policy by name.

    Args:
        name: "allowlist" or "denylist" (case-insensitive).

    Returns:
        ExtensionPolicy: The matching policy.

    Raises:
        ValueError: If the name is unknown.
    """
    key = (name or "").strip().lower()
    if key == POLICY_ALLOWLIST:
        return VIDEO_ALLOWLIST
    if key == POLICY_DENYLIST:
        return JUNK_DENYLIST
    raise ValueError(f"Unknown extension policy: '{name}'")

# -----------------------------------------------------------------------------
# CLASSIFICATION
# -----------------------------------------------------------------------------

def split_file_name(file_name: str) -> FileEntry:
    """
    Split a filename into stem and lower-cased extension.

    Dot-files such as '.DS_Store' have no extension; only the last suffix
    counts ('a.tar.gz' -> 'a.tar', '.gz').
    """
    stem, ext = os.path.splitext(file_name)
    return FileEntry(file_name=file_name, name=stem, ext=ext.lower())


def classify_files(file_names: Iterable[str], policy: ExtensionPolicy) -> List[FileEntry]:
    """
    Keep the files accepted by the policy, preserving input order.

    Rejected files are dropped silently.

    Args:
        file_names: Raw filenames from a directory listing.
        policy: Inclusion rule to apply.

    Returns:
        List[FileEntry]: Entries for the accepted files.
    """
    entries: List[FileEntry] = []
    for file_name in file_names:
        entry = split_file_name(file_name)
        if policy.includes(entry):
            entries.append(entry)
    return entries
