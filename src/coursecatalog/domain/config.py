from __future__ import annotations

"""
Configuration Domain Management.

Builds the runtime configuration from environment defaults and an optional
JSON config file. The dictionary produced here drives the indexing pipeline
after it has been normalized by the validator.
"""

import json
import logging
import os
from typing import Any, Dict, Optional

from coursecatalog.domain.constants import (
    DEFAULT_CATALOG_FILE,
    ENV_COURSES_FOLDER,
    ENV_ENABLE_LOGGING,
    ENV_SKIP_CRAWL,
    MAX_CONCURRENT_OPERATIONS,
    POLICY_ALLOWLIST,
)
from coursecatalog.infra.fs import get_user_data_dir

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "config.json"


# -----------------------------------------------------------------------------
# Configuration Models (Dict-based)
# -----------------------------------------------------------------------------
def get_default_config() -> Dict[str, Any]:
    """
    Generate the default runtime configuration.

    Environment variables are read at call time so that tests and long-running
    triggers observe the current process environment.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        # IO Paths
        "root_path": os.environ.get(ENV_COURSES_FOLDER) or os.getcwd(),
        "catalog_file": DEFAULT_CATALOG_FILE,

        # Crawl Scope
        "courses_to_process": [],
        "extension_policy": POLICY_ALLOWLIST,

        # Crawl Behaviour
        "sorted": True,
        "use_cache": True,
        "max_concurrency": MAX_CONCURRENT_OPERATIONS,

        # Persistence
        "dedupe_on_merge": False,
        "skip_crawl": _env_flag(ENV_SKIP_CRAWL),

        # Diagnostics
        "log_course_details": _env_flag(ENV_ENABLE_LOGGING),
    }


def get_config_path() -> str:
    """Return the default location of the JSON configuration file."""
    return os.path.join(get_user_data_dir(), CONFIG_FILE_NAME)


# -----------------------------------------------------------------------------
# Persistence Logic
# -----------------------------------------------------------------------------
def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load the configuration file and layer it over the defaults.

    A missing file yields the defaults. A corrupt file is logged and ignored,
    since configuration is never worth aborting a re-index for.

    Args:
        config_path: Explicit config file; defaults to the user data dir.

    Returns:
        Dict[str, Any]: Defaults updated with the file's values.
    """
    config = get_default_config()
    path = config_path or get_config_path()

    if not os.path.exists(path):
        logger.debug(f"Config file not found at {path}. Using defaults.")
        return config

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load config from {path}: {e}. Using defaults.")
        return config

    if not isinstance(data, dict):
        logger.warning(f"Corrupted config file {path}: expected an object. Using defaults.")
        return config

    config.update(data)
    return config


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() == "true"
