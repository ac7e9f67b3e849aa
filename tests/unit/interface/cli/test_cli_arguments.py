from __future__ import annotations

"""
Unit tests for CLI Argument Parsing.

Verifies:
1. Mapping of CLI flags to configuration keys.
2. Repeatable course name parsing.
3. Flags that were not given leave the configuration untouched.
"""

import pytest

from coursecatalog.interface.cli.app import _merge_config
from coursecatalog.interface.cli.args import _course_names, args_to_overrides, build_parser


def parse_args(arg_list):
    """Helper to simulate CLI argument parsing."""
    parser = build_parser()
    return parser.parse_args(arg_list)


def test_cli_simple_flags_mapping():
    """Verify boolean flags are mapped correctly to config overrides."""
    args = parse_args([
        "--unsorted",
        "--no-cache",
        "--dedupe",
        "--skip-crawl",
        "--details",
    ])

    overrides = args_to_overrides(args)

    assert overrides["sorted"] is False
    assert overrides["use_cache"] is False
    assert overrides["dedupe_on_merge"] is True
    assert overrides["skip_crawl"] is True
    assert overrides["log_course_details"] is True


def test_cli_course_list_parsing():
    args = parse_args(["-c", "Python 101", "--courses", "Go Basics", "-c", " "])

    overrides = args_to_overrides(args)

    assert overrides["courses_to_process"] == ["Python 101", "Go Basics"]


def test_cli_course_name_with_comma_is_kept_whole():
    overrides = args_to_overrides(parse_args(["-c", "Docker, Kubernetes"]))

    assert overrides["courses_to_process"] == ["Docker, Kubernetes"]


def test_cli_path_and_value_arguments():
    args = parse_args([
        "-r", "/media/courses",
        "-o", "/srv/courses.json",
        "--policy", "denylist",
        "--max-concurrency", "8",
    ])

    overrides = args_to_overrides(args)

    assert overrides["root_path"] == "/media/courses"
    assert overrides["catalog_file"] == "/srv/courses.json"
    assert overrides["extension_policy"] == "denylist"
    assert overrides["max_concurrency"] == 8


def test_cli_rejects_unknown_policy():
    with pytest.raises(SystemExit):
        parse_args(["--policy", "everything"])


def test_absent_flags_do_not_override_base_config():
    base = {"sorted": False, "use_cache": False, "root_path": "/from/file", "courses_to_process": ["A"]}

    merged = _merge_config(base, args_to_overrides(parse_args([])))

    assert merged == base


def test_course_names_none():
    assert _course_names(None) is None
    assert _course_names([" a ", ""]) == [" a "]
