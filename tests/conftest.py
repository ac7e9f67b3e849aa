from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Isolation from the environment variables read by the default config.
3. A builder for throwaway course trees on disk.
"""

import os
import sys
from pathlib import Path
from typing import Any, Callable, Dict

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from coursecatalog.domain.constants import (  # noqa: E402
    ENV_COURSES_FOLDER,
    ENV_ENABLE_LOGGING,
    ENV_SKIP_CRAWL,
)

TreeSpec = Dict[str, Any]


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove the environment variables that feed the default configuration."""
    for name in (ENV_COURSES_FOLDER, ENV_ENABLE_LOGGING, ENV_SKIP_CRAWL):
        monkeypatch.delenv(name, raising=False)


def build_tree(root: Path, spec: TreeSpec) -> Path:
    """
    Materialize a nested dict as files and directories under `root`.

    Dict values become directories, anything else becomes a file whose
    content is the value's string form.
    """
    root.mkdir(parents=True, exist_ok=True)
    for name, value in spec.items():
        target = root / name
        if isinstance(value, dict):
            build_tree(target, value)
        else:
            target.write_text(str(value), encoding="utf-8")
    return root


@pytest.fixture
def make_tree(tmp_path: Path) -> Callable[[TreeSpec], Path]:
    """
    Return a factory creating a course root from a nested dict.

    Returns:
        Callable: spec -> path of the created root ('<tmp>/courses').
    """
    def _make(spec: TreeSpec) -> Path:
        return build_tree(tmp_path / "courses", spec)
    return _make


@pytest.fixture
def mock_config_dict(tmp_path: Path) -> Dict[str, Any]:
    """
    Return a valid, complete configuration dictionary for testing.

    Reflects the structure defined in 'coursecatalog.domain.config'.
    """
    return {
        # IO Paths
        "root_path": str(tmp_path / "courses"),
        "catalog_file": str(tmp_path / "courses.json"),

        # Crawl Scope
        "courses_to_process": [],
        "extension_policy": "allowlist",

        # Crawl Behaviour
        "sorted": True,
        "use_cache": True,
        "max_concurrency": 4,

        # Persistence
        "dedupe_on_merge": False,
        "skip_crawl": False,

        # Diagnostics
        "log_course_details": False,
    }
