from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line interface schema and translates the parsed
argparse namespace into configuration overrides for the indexing pipeline.
"""

import argparse
from typing import Any, Dict, List, Optional

from coursecatalog.domain.constants import POLICY_ALLOWLIST, POLICY_DENYLIST

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the coursecatalog CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="coursecatalog",
        description="Index a course media tree into a JSON catalog.",
    )

    # --- Path Management ---
    p.add_argument(
        "-r", "--root",
        dest="root_path",
        default=None,
        help="Root directory whose subdirectories are courses.",
    )
    p.add_argument(
        "-o", "--catalog-file",
        dest="catalog_file",
        default=None,
        help="Catalog file to write (default: courses.json in the working directory).",
    )

    # --- Crawl Scope ---
    p.add_argument(
        "-c", "--courses",
        dest="courses",
        action="append",
        default=None,
        help="Course name for an incremental crawl (repeat for several; matched exactly).",
    )
    p.add_argument(
        "--policy",
        dest="extension_policy",
        choices=[POLICY_ALLOWLIST, POLICY_DENYLIST],
        default=None,
        help="File inclusion policy: video allow-list or junk deny-list.",
    )

    # --- Crawl Behaviour ---
    p.add_argument(
        "--unsorted",
        action="store_true",
        help="Keep directory-read order instead of natural sorting.",
    )
    p.add_argument(
        "--no-cache",
        action="store_true",
        help="Disable the directory modification-time cache.",
    )
    p.add_argument(
        "--max-concurrency",
        dest="max_concurrency",
        type=int,
        default=None,
        help="Maximum number of directories read at the same time.",
    )
    p.add_argument(
        "--dedupe",
        action="store_true",
        help="On incremental crawls, replace existing entries of re-indexed courses.",
    )
    p.add_argument(
        "--skip-crawl",
        action="store_true",
        help="Do not crawl; only check that the existing catalog is usable.",
    )

    # --- Trigger ---
    p.add_argument(
        "--message",
        dest="message",
        default=None,
        help="Upload notification JSON, e.g. '{\"new_uploads\": [\"Course\"]}'.",
    )

    # --- Configuration and Diagnostic Tools ---
    p.add_argument(
        "--config",
        dest="config_path",
        default=None,
        help="JSON configuration file to load.",
    )
    p.add_argument(
        "--use-defaults",
        action="store_true",
        help="Ignore the configuration file.",
    )
    p.add_argument(
        "--dump-config",
        action="store_true",
        help="Print the effective configuration and exit.",
    )
    p.add_argument(
        "--details",
        action="store_true",
        help="Log one line per processed course.",
    )
    p.add_argument(
        "--log-file",
        dest="log_file",
        default=None,
        help="Also write logs to this rotating file.",
    )
    p.add_argument(
        "--debug",
        action="store_true",
        help="Elevate logging verbosity to DEBUG.",
    )

    # --- Format Selection ---
    p.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Print the run result as JSON.",
    )

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into a domain configuration dictionary.

    Flags that were not given produce no override, so values from the
    configuration file survive.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Configuration overrides subset.
    """
    overrides: Dict[str, Any] = {}

    overrides["root_path"] = args.root_path
    overrides["catalog_file"] = args.catalog_file
    overrides["extension_policy"] = args.extension_policy
    overrides["max_concurrency"] = args.max_concurrency

    if args.courses:
        overrides["courses_to_process"] = _course_names(args.courses)

    if args.unsorted:
        overrides["sorted"] = False
    if args.no_cache:
        overrides["use_cache"] = False
    if args.dedupe:
        overrides["dedupe_on_merge"] = True
    if args.skip_crawl:
        overrides["skip_crawl"] = True
    if args.details:
        overrides["log_course_details"] = True

    return overrides

# -----------------------------------------------------------------------------
# HELPERS
# -----------------------------------------------------------------------------

def _course_names(values: Optional[List[str]]) -> Optional[List[str]]:
    """
    Keep repeated course names verbatim, dropping blank ones.
    """
    if values is None:
        return None
    return [v for v in values if v.strip()]
