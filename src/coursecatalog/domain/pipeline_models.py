from __future__ import annotations

"""
Pipeline Domain Data Models.

Defines the result object handed from the indexing pipeline to its callers
(CLI, upload trigger) and the factory functions that build it.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from coursecatalog.domain.catalog_models import Course

# -----------------------------------------------------------------------------
# CORE DATA MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class PipelineResult:
    """
    Outcome of one indexing run.

    Attributes:
        ok: Flag indicating success or failure.
        error: Descriptive message in case of failure.
        root_path: Normalized root directory that was crawled.
        catalog_path: Absolute path of the catalog file.
        courses_to_process: Course filter of an incremental crawl (empty for full).
        outcome: "written", "merged", "preserved", "skipped" or "" on failure.
        course_count: Courses found by the crawl (or in the catalog when skipped).
        topic_count: Topics across the crawled courses.
        file_count: Catalogued files across the crawled courses.
        summary: Additional execution details.
    """
    ok: bool
    error: str

    root_path: str
    catalog_path: str
    courses_to_process: List[str] = field(default_factory=list)

    outcome: str = ""
    course_count: int = 0
    topic_count: int = 0
    file_count: int = 0

    summary: Dict[str, Any] = field(default_factory=dict)

# -----------------------------------------------------------------------------
# FACTORY FUNCTIONS
# -----------------------------------------------------------------------------

def create_error_result(
        error: str,
        cfg: Dict[str, Any],
        root_path: str,
        catalog_path: str,
        summary_extra: Optional[Dict[str, Any]] = None
) -> PipelineResult:
    """
    Create a failed pipeline result.

    Args:
        error: Detailed error description.
        cfg: The configuration used during the failed run.
        root_path: The crawled root directory.
        catalog_path: The catalog file that was targeted.
        summary_extra: Additional metadata for the summary payload.

    Returns:
        PipelineResult: An immutable error result object.
    """
    return PipelineResult(
        ok=False,
        error=error,
        root_path=root_path,
        catalog_path=catalog_path,
        courses_to_process=list(cfg.get("courses_to_process", [])),
        summary=summary_extra or {},
    )


def create_success_result(
        cfg: Dict[str, Any],
        root_path: str,
        catalog_path: str,
        outcome: str,
        courses: Sequence[Course] = (),
        course_count: Optional[int] = None,
        summary_extra: Optional[Dict[str, Any]] = None
) -> PipelineResult:
    """
    Create a successful pipeline result, deriving counts from `courses`.

    Args:
        cfg: Final configuration used during execution.
        root_path: The crawled root directory.
        catalog_path: The catalog file that was written or kept.
        outcome: Persistence outcome label.
        courses: Courses found by the crawl.
        course_count: Explicit course count (overrides len(courses)).
        summary_extra: Additional execution metadata.

    Returns:
        PipelineResult: An immutable success result object.
    """
    topics = [t for c in courses for t in c.topics]
    return PipelineResult(
        ok=True,
        error="",
        root_path=root_path,
        catalog_path=catalog_path,
        courses_to_process=list(cfg.get("courses_to_process", [])),
        outcome=outcome,
        course_count=len(courses) if course_count is None else course_count,
        topic_count=len(topics),
        file_count=sum(len(t.files) for t in topics),
        summary=summary_extra or {},
    )
