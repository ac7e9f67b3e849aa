from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: logging bootstrap, merging of configuration
sources (defaults, config file and CLI overrides), pipeline execution (a
direct crawl or an upload-triggered incremental crawl) and result rendering.

Exit codes: 0 on success (including a preserved catalog), 1 on failure,
130 when interrupted.
"""

import json
import os
import sys
from dataclasses import asdict
from typing import Any, Dict, List, Optional

from coursecatalog.core.pipeline.engine import run_pipeline
from coursecatalog.core.pipeline.stages.validator import validate_config
from coursecatalog.core.services.upload_trigger import UploadTrigger
from coursecatalog.domain.config import get_default_config, load_config
from coursecatalog.domain.constants import ENV_COURSES_FOLDER
from coursecatalog.domain.errors import CatalogError
from coursecatalog.domain.pipeline_models import PipelineResult
from coursecatalog.infra.logging import LoggingConfig, configure_logging, get_logger
from coursecatalog.interface.cli import args as cli_args

logger = get_logger(__name__)

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the main CLI application workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code.
    """
    if sys.platform == "win32":
        if hasattr(sys.stdout, "reconfigure"):
            sys.stdout.reconfigure(encoding="utf-8")
        if hasattr(sys.stderr, "reconfigure"):
            sys.stderr.reconfigure(encoding="utf-8")

    # 1. Argument parsing phase
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    # 2. Logging bootstrap (console plus optional rotating file)
    log_level = "DEBUG" if args.debug else "INFO"
    logging_conf = LoggingConfig(level=log_level, console=True, log_file=args.log_file)
    configure_logging(logging_conf)

    logger.debug("CLI execution initiated. Resolving configuration hierarchy...")

    # 3. Resolve base configuration (defaults vs config file)
    if args.use_defaults:
        base_conf = get_default_config()
    else:
        base_conf = load_config(args.config_path)

    # 4. Map and merge command-line overrides
    overrides = cli_args.args_to_overrides(args)
    raw_conf = _merge_config(base_conf, overrides)

    # 5. Schema validation and normalization
    clean_conf, warnings = validate_config(raw_conf, strict=False)

    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")

    if args.root_path is None and not os.environ.get(ENV_COURSES_FOLDER) \
            and clean_conf["root_path"] == os.getcwd():
        logger.warning(
            f"{ENV_COURSES_FOLDER} is not set; indexing the working directory {clean_conf['root_path']}"
        )

    if args.dump_config:
        print(json.dumps(clean_conf, ensure_ascii=False, indent=2))
        return 0

    # 6. Pipeline execution phase
    try:
        if args.message is not None:
            result = _run_from_message(clean_conf, args.message)
            if result is None:
                print("Upload message names no courses; nothing to index.")
                return 0
        else:
            result = run_pipeline(clean_conf)
    except KeyboardInterrupt:
        msg = "Indexing interrupted by user."
        logger.warning(msg)
        print(msg, file=sys.stderr)
        return 130
    except (CatalogError, ValueError) as e:
        logger.error(str(e))
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    # 7. Output rendering phase
    if args.json_output:
        print(json.dumps(asdict(result), ensure_ascii=False, indent=2))
    else:
        _print_human_summary(result)

    return 0 if result.ok else 1


def _run_from_message(cfg: Dict[str, Any], message: str) -> Optional[PipelineResult]:
    trigger = UploadTrigger(cfg)
    return trigger.handle_message(message)

# -----------------------------------------------------------------------------
# CONFIGURATION MERGING
# -----------------------------------------------------------------------------

def _merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """
    Perform a shallow merge of override values into the base configuration.

    Only known keys with a non-None value are merged.

    Args:
        base: The primary configuration dictionary.
        overrides: New values to inject.

    Returns:
        Dict[str, Any]: The merged configuration state.
    """
    out = dict(base)
    keys_to_merge = [
        "root_path", "catalog_file", "courses_to_process", "extension_policy",
        "sorted", "use_cache", "max_concurrency", "dedupe_on_merge",
        "skip_crawl", "log_course_details",
    ]
    for k in keys_to_merge:
        if k in overrides and overrides[k] is not None:
            out[k] = overrides[k]
    return out

# -----------------------------------------------------------------------------
# VIEW RENDERING (HUMAN READABLE)
# -----------------------------------------------------------------------------

def _print_human_summary(result: PipelineResult) -> None:
    """
    Format and print the execution result.

    Args:
        result: The pipeline result to render.
    """
    if not result.ok:
        print(f"ERROR: {result.error}", file=sys.stderr)
        return

    if result.outcome == "skipped":
        print(f"Crawl skipped. Existing catalog: {result.catalog_path}")
        print(f"Courses in catalog: {result.course_count}")
        return

    if result.outcome == "preserved":
        print(f"WARNING: no courses found under {result.root_path}; "
              f"existing catalog kept: {result.catalog_path}")
        return

    label = "Catalog merged" if result.outcome == "merged" else "Catalog written"
    print(f"{label}: {result.catalog_path}")

    stats = {
        "Courses": result.course_count,
        "Topics": result.topic_count,
        "Files": result.file_count,
    }
    for name, value in stats.items():
        print(f"{name}: {value}")

    if "elapsed_seconds" in result.summary:
        print(f"Elapsed: {result.summary['elapsed_seconds']}s")

# -----------------------------------------------------------------------------
# CLI ENTRYPOINT
# -----------------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(main())
