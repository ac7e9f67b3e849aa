from __future__ import annotations

"""
Domain Constants.

Centralizes the literals shared by the indexer: file extension policies,
the excluded directory name, catalog defaults and the environment keys
read by the configuration layer.
"""

from typing import FrozenSet

DEFAULT_CATALOG_FILE = "courses.json"
MAX_CONCURRENT_OPERATIONS = 50

# Skipped at any depth, exact match only
EXCLUDED_DIRECTORY = "0. Websites you may like"

# -----------------------------------------------------------------------------
# EXTENSION POLICIES
# -----------------------------------------------------------------------------

POLICY_ALLOWLIST = "allowlist"
POLICY_DENYLIST = "denylist"

VIDEO_EXTENSIONS: FrozenSet[str] = frozenset({
    ".mp4", ".avi", ".mkv", ".mov", ".wmv", ".flv",
    ".webm", ".m4v", ".mpeg", ".mpg", ".3gp", ".ogv", ".ts",
})

# Legacy deny-list. The empty string covers extensionless files and dot-files.
JUNK_EXTENSIONS: FrozenSet[str] = frozenset({".url", "", ".ds_store"})

# -----------------------------------------------------------------------------
# ENVIRONMENT
# -----------------------------------------------------------------------------

ENV_COURSES_FOLDER = "COURSES_FOLDER"
ENV_ENABLE_LOGGING = "ENABLE_LOGGING"
ENV_SKIP_CRAWL = "SKIP_COURSE_FETCH"

# Upload notification payload key
UPLOAD_MESSAGE_KEY = "new_uploads"
