from __future__ import annotations

"""
Upload Notification Trigger.

Turns upload notifications (JSON payloads naming newly uploaded courses)
into incremental indexing runs. The trigger owns one DirectoryCache for its
whole lifetime so that repeated notifications reuse unchanged directories.
Subscribers are notified with the raw message after each successful run.
"""

import json
import logging
import threading
from typing import Any, Callable, Dict, List, Optional

from coursecatalog.core.pipeline.engine import run_pipeline
from coursecatalog.core.services.cache import DirectoryCache
from coursecatalog.domain.constants import UPLOAD_MESSAGE_KEY
from coursecatalog.domain.pipeline_models import PipelineResult

logger = logging.getLogger(__name__)

MessageCallback = Callable[[str], None]
PipelineRunner = Callable[..., PipelineResult]


class UploadTrigger:
    """
    Incremental re-indexing driven by upload notifications.

    Args:
        base_config: Configuration applied to every triggered run.
        cache: Directory cache shared across runs; a new one is created if omitted.
        runner: Pipeline entrypoint (injectable for tests).
    """

    def __init__(
            self,
            base_config: Dict[str, Any],
            cache: Optional[DirectoryCache] = None,
            runner: PipelineRunner = run_pipeline,
    ) -> None:
        self._base_config = dict(base_config)
        self._cache = cache if cache is not None else DirectoryCache()
        self._runner = runner
        self._subscribers: List[MessageCallback] = []
        # One run at a time against the shared catalog file
        self._run_lock = threading.Lock()

    @property
    def cache(self) -> DirectoryCache:
        return self._cache

    def subscribe(self, callback: MessageCallback) -> None:
        """Register a callback invoked with the raw message after each indexing run."""
        self._subscribers.append(callback)

    @staticmethod
    def parse_message(raw: Any) -> List[str]:
        """
        Extract the uploaded course names from a notification payload.

        Args:
            raw: JSON text (str or bytes) of an object holding the course list.

        Returns:
            List[str]: Course names; empty if the payload names none.

        Raises:
            ValueError: If the payload is not JSON, not an object, or the
                        course list is not a list of strings.
        """
        if isinstance(raw, (bytes, bytearray)):
            raw = raw.decode("utf-8")

        try:
            payload = json.loads(raw)
        except (TypeError, ValueError) as e:
            raise ValueError(f"Upload message is not valid JSON: {e}") from e

        if not isinstance(payload, dict):
            raise ValueError("Upload message must be a JSON object.")

        courses = payload.get(UPLOAD_MESSAGE_KEY, [])
        if not isinstance(courses, list) or not all(isinstance(c, str) for c in courses):
            raise ValueError(f"'{UPLOAD_MESSAGE_KEY}' must be a list of course names.")

        return [c for c in courses if c.strip()]

    def handle_message(self, raw: Any) -> Optional[PipelineResult]:
        """
        Run an incremental crawl for the courses named in `raw`.

        Returns:
            Optional[PipelineResult]: The run result, or None when the message
                                      names no courses.

        Raises:
            ValueError: If the payload is malformed.
        """
        courses = self.parse_message(raw)
        if not courses:
            logger.debug("Upload message names no courses; ignoring.")
            return None

        logger.info(f"Processing upload message, courses to add: {courses}")
        cfg = dict(self._base_config)
        cfg["courses_to_process"] = courses
        cfg["skip_crawl"] = False

        with self._run_lock:
            result = self._runner(cfg, cache=self._cache)

        if result.ok:
            self._notify(raw if isinstance(raw, str) else bytes(raw).decode("utf-8"))
        return result

    def _notify(self, message: str) -> None:
        for callback in list(self._subscribers):
            try:
                callback(message)
            except Exception as e:
                logger.error(f"Upload subscriber failed: {e}", exc_info=True)
