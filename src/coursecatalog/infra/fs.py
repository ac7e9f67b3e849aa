from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Provides path normalization, directory validation and typed directory
listings. Acts as the only place where the indexer touches 'os' directly,
so that crawling logic can be exercised with substituted readers.
"""

import logging
import os
import stat
from typing import List, Optional

from coursecatalog.domain.catalog_models import DirEntry, EntryKind
from coursecatalog.domain.errors import CatalogPathError, DirectoryReadError

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# GLOBAL CONSTANTS
# -----------------------------------------------------------------------------

APP_DIR_NAME = "CourseCatalog"
UNIX_APP_DIR_NAME = ".coursecatalog"

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def get_user_data_dir() -> str:
    """
    Resolve the standard OS-specific directory for persistent application data.

    Automatically creates the hierarchy if it does not exist.
    Standards:
    - Windows: %LOCALAPPDATA%/CourseCatalog
    - Linux/Mac: ~/.coursecatalog

    Returns:
        str: Absolute path to the application data directory.
    """
    path: str = ""

    if os.name == "nt":
        base = os.environ.get("LOCALAPPDATA") or os.environ.get("APPDATA")
        if base:
            path = os.path.join(base, APP_DIR_NAME)

    if not path:
        path = os.path.join(os.path.expanduser("~"), UNIX_APP_DIR_NAME)

    try:
        os.makedirs(path, exist_ok=True)
    except OSError as e:
        logger.debug(f"Could not create user data dir '{path}': {e}")

    return os.path.abspath(path)


def normalize_path(path: Optional[str], fallback: str) -> str:
    """
    Normalize a path string into an absolute filesystem path.

    Handles environment variable expansion ($VAR/%VAR%) and user home
    shortcuts (~/). Reverts to fallback if the input is empty.

    Args:
        path: Raw input path string.
        fallback: Default path to use if the input is blank.

    Returns:
        str: Normalized absolute path.
    """
    p = (path or "").strip()
    if not p:
        p = fallback
    p = os.path.expandvars(os.path.expanduser(p))
    return os.path.abspath(p)

# -----------------------------------------------------------------------------
# DIRECTORY VALIDATION API
# -----------------------------------------------------------------------------

def check_directory(path: str) -> None:
    """
    Ensure that a path exists and is a directory.

    Args:
        path: Directory to verify.

    Raises:
        CatalogPathError: With reason "not_found", "not_a_directory" or
                          "inaccessible".
    """
    try:
        st = os.stat(path)
    except FileNotFoundError as e:
        raise CatalogPathError(path, "not_found") from e
    except OSError as e:
        raise CatalogPathError(path, "inaccessible", str(e)) from e

    if not stat.S_ISDIR(st.st_mode):
        raise CatalogPathError(path, "not_a_directory")


def validate_directory(path: str) -> bool:
    """
    Non-raising variant of check_directory that logs the failure reason.

    Returns:
        bool: True if the path is an accessible directory.
    """
    try:
        check_directory(path)
    except CatalogPathError as e:
        if e.reason == "not_found":
            logger.error(f"Directory does not exist: '{path}'")
        elif e.reason == "not_a_directory":
            logger.error(f"Path is not a directory: '{path}'")
        else:
            logger.error(f"Cannot access directory '{path}': {e}")
        return False
    return True


def get_directory_mtime(path: str) -> Optional[int]:
    """Return the directory's modification time in nanoseconds, or None on stat failure."""
    try:
        return int(os.stat(path).st_mtime_ns)
    except OSError:
        return None

# -----------------------------------------------------------------------------
# DIRECTORY LISTING API
# -----------------------------------------------------------------------------

def read_directory(path: str) -> List[DirEntry]:
    """
    List the immediate children of a directory as typed entries.

    Symbolic links and special files are neither directories nor files and
    are left out. Order follows the underlying directory read.

    Args:
        path: Directory to list.

    Returns:
        List[DirEntry]: Children classified as DIR or FILE.

    Raises:
        DirectoryReadError: If the directory cannot be listed.
    """
    entries: List[DirEntry] = []
    try:
        with os.scandir(path) as it:
            for child in it:
                try:
                    if child.is_dir(follow_symlinks=False):
                        entries.append(DirEntry(EntryKind.DIR, child.name))
                    elif child.is_file(follow_symlinks=False):
                        entries.append(DirEntry(EntryKind.FILE, child.name))
                except OSError:
                    continue
    except OSError as e:
        raise DirectoryReadError(path, e.strerror or str(e)) from e
    return entries
