"""Data reconciler for the dashboard.

Produces one consistent (records, stats) pair from three sources that may
disagree: the live backend, the locally cached import records, and the
locally cached stats snapshot written right after a manual import.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, List

from jobprompter.backend.client import ImportBackendClient
from jobprompter.store.manager import LocalCache
from jobprompter.store.models import ImportRecord, StatsSnapshot
from jobprompter.dashboard import mock
from jobprompter.dashboard.normalize import (
    count_pending,
    import_logs_of,
    normalize_records,
    normalize_stats,
    overview_of,
)


logger = logging.getLogger("jobprompter.dashboard.reconciler")

SOURCE_BACKEND = "backend"
SOURCE_CACHE = "cache"
SOURCE_MOCK = "mock"
SOURCE_LOCAL_STATS = "local-stats"


@dataclass
class ReconcileResult:
    """Display state produced by one reconcile pass."""
    records: List[ImportRecord]
    stats: StatsSnapshot
    source: str


class Reconciler:
    """Merges backend, cached and built-in data into one display state."""

    def __init__(
        self,
        client: ImportBackendClient,
        cache: LocalCache,
        clock: Callable[[], float] = time.time,
        stats_max_age_sec: float = 30.0
    ):
        self.client = client
        self.cache = cache
        self.clock = clock
        self.stats_max_age_sec = stats_max_age_sec

    def _now_ms(self) -> int:
        return int(self.clock() * 1000)

    def reconcile(self) -> ReconcileResult:
        """Fetch from the backend and reconcile with the local cache.

        Raises:
            requests.RequestException: If either request fails in transport
            ValueError: If a success response carries malformed JSON
        """
        logs_response, stats_response = self.client.fetch_dashboard()

        logger.debug(
            f"API response status - logs: {logs_response.status_code}, "
            f"stats: {stats_response.status_code}"
        )

        cached_records = self.cache.get_records()

        if not logs_response.ok or not stats_response.ok:
            logger.warning("Backend not responding, using fallback mock data")
            raw_records = cached_records + mock.mock_import_logs()
            overview = mock.mock_overview(pending_jobs=count_pending(cached_records))
            source = SOURCE_MOCK
        else:
            logs_body = logs_response.json()
            stats_body = stats_response.json()
            raw_records = import_logs_of(logs_body)
            overview = overview_of(stats_body)
            source = SOURCE_BACKEND

            if not raw_records and cached_records:
                logger.info("Backend reported no imports, using cached records")
                raw_records = cached_records
                overview = dict(overview)
                overview["pendingJobs"] = count_pending(cached_records)
                overview["totalJobs"] = max(
                    normalize_stats(overview).total_jobs, len(cached_records)
                )
                source = SOURCE_CACHE

        records = normalize_records(raw_records)
        stats = normalize_stats(overview)

        stored_stats, stored_at = self.cache.get_stats()
        if stored_stats is not None and stored_at is not None:
            if self._prefer_stored(stored_stats, stored_at, records, stats):
                logger.info("Using locally stored stats (recent manual import)")
                return ReconcileResult(records, stored_stats, SOURCE_LOCAL_STATS)

            logger.info("Clearing outdated local stats")
            self.cache.clear_stats()

        return ReconcileResult(records, stats, source)

    def _prefer_stored(
        self,
        stored: StatsSnapshot,
        stored_at_ms: int,
        records: List[ImportRecord],
        fresh: StatsSnapshot
    ) -> bool:
        """Whether the optimistic snapshot still looks newer than the server."""
        age_ms = self._now_ms() - stored_at_ms
        visible_pending = sum(1 for record in records if record.is_pending)

        return (
            age_ms < self.stats_max_age_sec * 1000
            and stored.pending_jobs >= visible_pending
            and stored.pending_jobs > fresh.pending_jobs
        )
