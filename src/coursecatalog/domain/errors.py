from __future__ import annotations

"""
Catalog Error Hierarchy.

Typed failures raised by the indexer. Read errors are recovered locally by
the crawler; parse and write errors are fatal and reach the caller.
"""

from typing import Optional


class CatalogError(Exception):
    """Base class for every indexer failure."""


class CatalogPathError(CatalogError):
    """
    A root or course path is missing or is not a directory.

    Attributes:
        path: The offending path.
        reason: One of "not_found", "not_a_directory", "inaccessible".
    """

    def __init__(self, path: str, reason: str, detail: Optional[str] = None) -> None:
        self.path = path
        self.reason = reason
        msg = f"Invalid directory '{path}' ({reason})"
        if detail:
            msg = f"{msg}: {detail}"
        super().__init__(msg)


class DirectoryReadError(CatalogError):
    """A directory listing could not be read (permissions, I/O failure)."""

    def __init__(self, path: str, detail: str) -> None:
        self.path = path
        super().__init__(f"Cannot read directory '{path}': {detail}")


class CatalogParseError(CatalogError):
    """The existing catalog file is not a valid JSON array."""

    def __init__(self, path: str, detail: str) -> None:
        self.path = path
        super().__init__(f"Malformed catalog '{path}': {detail}")


class CatalogWriteError(CatalogError):
    """The catalog file could not be persisted."""

    def __init__(self, path: str, detail: str) -> None:
        self.path = path
        super().__init__(f"Failed to write catalog '{path}': {detail}")


class EmptyCatalogError(CatalogError):
    """A full crawl found no courses and there is no catalog to fall back to."""

    def __init__(self, catalog_path: str, root_path: str) -> None:
        self.catalog_path = catalog_path
        self.root_path = root_path
        super().__init__(
            f"No courses found under '{root_path}' and no existing catalog "
            f"at '{catalog_path}' to fall back to."
        )
