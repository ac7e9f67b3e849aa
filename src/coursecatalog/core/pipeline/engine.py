from __future__ import annotations

"""
Core orchestration pipeline.

This module coordinates one indexing run:
1. Validates configuration and resolves paths.
2. Short-circuits when crawling is disabled, reporting the existing catalog.
3. Crawls courses and topics under a bounded concurrency limiter.
4. Orders topics and files when requested.
5. Persists (or merges into, or preserves) the catalog file.
"""

import logging
import os
import time
from typing import Any, Dict, Optional

from coursecatalog.core.pipeline.components.filters import get_extension_policy
from coursecatalog.core.pipeline.components.sorter import sort_catalog
from coursecatalog.core.pipeline.components.writer import CatalogStore, PersistOutcome
from coursecatalog.core.pipeline.stages.course_builder import CourseBuilder
from coursecatalog.core.pipeline.stages.validator import validate_config
from coursecatalog.core.services.cache import DirectoryCache
from coursecatalog.core.services.limiter import ConcurrencyLimiter
from coursecatalog.core.services.scanner import TopicCollector
from coursecatalog.domain.errors import EmptyCatalogError
from coursecatalog.domain.pipeline_models import (
    PipelineResult,
    create_error_result,
    create_success_result,
)
from coursecatalog.infra.fs import normalize_path

logger = logging.getLogger(__name__)


def run_pipeline(
        config: Optional[Dict[str, Any]],
        *,
        cache: Optional[DirectoryCache] = None,
) -> PipelineResult:
    """
    Execute one indexing run.

    A full crawl that finds nothing and has no catalog to fall back to
    returns a failed result. Malformed existing catalogs and write failures
    are raised, never reported as success.

    Args:
        config: The configuration dictionary (raw or partial).
        cache: Long-lived directory cache to reuse across runs. When omitted
               and caching is enabled, a cache scoped to this run is used.

    Returns:
        PipelineResult: Status, counts and persistence outcome.

    Raises:
        CatalogParseError: The existing catalog is malformed.
        CatalogWriteError: The catalog could not be written.
    """
    logger.info("fetching courses...")

    # -------------------------------------------------------------------------
    # 1) Config & Path Normalization
    # -------------------------------------------------------------------------
    cfg, warnings = validate_config(config, strict=False)

    for warning in warnings:
        logger.warning(f"Configuration Warning: {warning}")

    cwd = os.getcwd()
    root_path = normalize_path(cfg["root_path"], cwd)
    store = CatalogStore(normalize_path(cfg["catalog_file"], cwd))
    courses_to_process = cfg["courses_to_process"]

    # -------------------------------------------------------------------------
    # 2) Skip Mode
    # -------------------------------------------------------------------------
    if cfg["skip_crawl"]:
        return _report_existing(cfg, root_path, store)

    # -------------------------------------------------------------------------
    # 3) Crawl
    # -------------------------------------------------------------------------
    if cfg["use_cache"] and cache is None:
        cache = DirectoryCache()
    elif not cfg["use_cache"]:
        cache = None

    started = time.monotonic()
    with ConcurrencyLimiter(cfg["max_concurrency"]) as limiter:
        collector = TopicCollector(
            policy=get_extension_policy(cfg["extension_policy"]),
            limiter=limiter,
            cache=cache,
        )
        builder = CourseBuilder(collector, log_course_details=cfg["log_course_details"])
        courses = builder.build(root_path, courses_to_process)
        peak_reads = limiter.peak
    elapsed = time.monotonic() - started

    # -------------------------------------------------------------------------
    # 4) Ordering
    # -------------------------------------------------------------------------
    if cfg["sorted"]:
        courses = sort_catalog(courses)

    logger.info(f"{len(courses)} courses were found")

    summary = {
        "elapsed_seconds": round(elapsed, 3),
        "peak_concurrent_reads": peak_reads,
        "extension_policy": cfg["extension_policy"],
        "cache_entries": len(cache) if cache is not None else 0,
    }

    # -------------------------------------------------------------------------
    # 5) Persistence
    # -------------------------------------------------------------------------
    try:
        outcome = store.persist(
            courses,
            courses_to_process,
            root_path=root_path,
            dedupe=cfg["dedupe_on_merge"],
        )
    except EmptyCatalogError as e:
        logger.error(str(e))
        return create_error_result(str(e), cfg, root_path, store.path, summary)

    if outcome is not PersistOutcome.PRESERVED:
        logger.info(f"courses fetched and catalog updated: {store.path}")

    return create_success_result(
        cfg, root_path, store.path, outcome.value, courses, summary_extra=summary
    )


def _report_existing(cfg: Dict[str, Any], root_path: str, store: CatalogStore) -> PipelineResult:
    """Validate the current catalog without crawling."""
    logger.info("Skipping course crawl; using the existing catalog.")
    existing = store.read_existing()
    if existing is None:
        msg = f"Crawl skipping is enabled but {store.path} does not exist."
        logger.error(msg)
        return create_error_result(msg, cfg, root_path, store.path)

    logger.info(f"Using existing {store.path} with {len(existing)} courses")
    return create_success_result(
        cfg, root_path, store.path, "skipped", course_count=len(existing)
    )
