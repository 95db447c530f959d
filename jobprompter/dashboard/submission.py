"""Manual import submission with optimistic local updates."""

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

import requests

from jobprompter.api.validators import TriggerImportRequest
from jobprompter.backend.client import ImportBackendClient
from jobprompter.dashboard.normalize import field, first_present, literal
from jobprompter.dashboard.scheduler import RecheckScheduler
from jobprompter.store.manager import LocalCache
from jobprompter.store.models import ImportRecord, StatsSnapshot, utc_now_iso


logger = logging.getLogger("jobprompter.dashboard.submission")

JOB_ID_FIELDS = [
    field("data", "jobId"),
    field("jobId"),
    field("id"),
    literal("Unknown"),
]


class SubmissionError(Exception):
    """Raised when the backend does not accept an import trigger."""
    pass


@dataclass
class SubmissionResult:
    """Outcome of a successful manual import trigger."""
    record: ImportRecord
    stats: StatsSnapshot
    job_id: Any
    message: str


class ImportSubmitter:
    """Triggers imports and records them optimistically in the local cache."""

    def __init__(
        self,
        client: ImportBackendClient,
        cache: LocalCache,
        scheduler: Optional[RecheckScheduler] = None,
        clock: Callable[[], float] = time.time
    ):
        self.client = client
        self.cache = cache
        self.scheduler = scheduler
        self.clock = clock

    def _now_ms(self) -> int:
        return int(self.clock() * 1000)

    def submit(
        self,
        request: TriggerImportRequest,
        prior_stats: Optional[StatsSnapshot] = None
    ) -> SubmissionResult:
        """Trigger an import and apply the optimistic local update.

        Args:
            request: Validated import request
            prior_stats: Stats currently on display, if any

        Returns:
            SubmissionResult with the new pending record and updated stats

        Raises:
            SubmissionError: If the backend rejects or cannot be reached.
                Nothing is cached in that case.
        """
        try:
            response = self.client.trigger_import(
                request.api_name,
                request.api_url,
                request.type
            )
        except requests.RequestException as e:
            logger.error(f"Import trigger failed: {e}")
            raise SubmissionError(str(e)) from e

        if not response.ok:
            logger.error(f"Import trigger rejected with HTTP {response.status_code}")
            raise SubmissionError("Failed to trigger import")

        try:
            body = response.json()
        except ValueError as e:
            raise SubmissionError(f"Invalid response from backend: {e}") from e
        if not isinstance(body, dict):
            body = {}

        logger.debug(f"Import trigger response: {body}")

        job_id = first_present(body, JOB_ID_FIELDS)
        record_id = field("data", "importLogId")(body) or self._now_ms()

        record = ImportRecord(
            id=record_id,
            api_name=request.api_name,
            api_url=request.api_url,
            type=request.type,
            status="pending",
            jobs_found=0,
            created_at=utc_now_iso()
        )
        self.cache.push_record(record)

        stats = self._bump_stats(prior_stats)
        self.cache.set_stats(stats, self._now_ms())

        logger.info(f"Import started for {request.api_name}, job {job_id}")

        if self.scheduler is not None:
            self.scheduler.schedule(record.id)

        return SubmissionResult(
            record=record,
            stats=stats,
            job_id=job_id,
            message=f"Import started successfully! Job ID: {job_id}"
        )

    @staticmethod
    def _bump_stats(prior: Optional[StatsSnapshot]) -> StatsSnapshot:
        if prior is None:
            return StatsSnapshot(total_jobs=1, pending_jobs=1)
        return prior.with_new_pending()
