"""Dashboard view state and user actions.

The controller owns what the dashboard shows (import history, stats,
loading and error flags) and the three user actions: refresh, start a new
import, and clear the local cache.
"""

import logging
import threading
import time
from typing import Any, Callable, Dict, List, Optional, Sequence

from jobprompter.api.validators import TriggerImportRequest
from jobprompter.backend.client import ImportBackendClient
from jobprompter.dashboard.reconciler import Reconciler
from jobprompter.dashboard.scheduler import RecheckScheduler
from jobprompter.dashboard.submission import ImportSubmitter, SubmissionResult
from jobprompter.store.manager import JSONFileStore, LocalCache
from jobprompter.store.models import ImportRecord, StatsSnapshot, utc_now_iso
from jobprompter.utils.logging_config import log_with_fields


logger = logging.getLogger("jobprompter.dashboard")

LOAD_ERROR_MESSAGE = "Failed to load data"


class DashboardController:
    """Holds dashboard state and runs refresh/submit/clear actions.

    Refreshes are not serialized against each other: when two overlap the
    one that finishes last wins. The lock only keeps records and stats
    swapped together.
    """

    def __init__(
        self,
        client: ImportBackendClient,
        cache: LocalCache,
        clock: Callable[[], float] = time.time,
        stats_max_age_sec: float = 30.0,
        recheck_delays: Optional[Sequence[float]] = None,
        schedule_rechecks: bool = True
    ):
        """Initialize dashboard controller.

        Args:
            client: Backend client
            cache: Local cache for optimistic state
            clock: Returns current time in seconds
            stats_max_age_sec: How long optimistic stats are trusted
            recheck_delays: Delays (seconds) of refreshes after a submission
            schedule_rechecks: Set False to skip delayed refreshes (tests)
        """
        self.client = client
        self.cache = cache
        self.clock = clock

        self.scheduler = (
            RecheckScheduler(self.refresh, recheck_delays)
            if schedule_rechecks else None
        )
        self.reconciler = Reconciler(
            client, cache, clock=clock, stats_max_age_sec=stats_max_age_sec
        )
        self.submitter = ImportSubmitter(
            client, cache, scheduler=self.scheduler, clock=clock
        )

        self.records: List[ImportRecord] = []
        self.stats: Optional[StatsSnapshot] = None
        self.is_loading = False
        self.error: Optional[str] = None
        self.source: Optional[str] = None
        self.last_refreshed: Optional[str] = None

        self._loaded = False
        self._state_lock = threading.Lock()

    @classmethod
    def from_config(cls, config) -> "DashboardController":
        """Create a controller wired to the configured backend and store."""
        return cls(
            client=ImportBackendClient.from_config(config.backend),
            cache=LocalCache(
                JSONFileStore(config.cache.store_file),
                max_records=config.cache.max_records
            ),
            stats_max_age_sec=config.cache.stats_max_age_sec,
            recheck_delays=config.cache.recheck_delays_sec
        )

    def ensure_loaded(self):
        """Run the initial refresh the first time the dashboard is opened."""
        if not self._loaded:
            self.refresh()

    def refresh(self) -> bool:
        """Reload records and stats from the backend and local cache.

        Returns:
            True if the display state was updated, False if an error was flagged
        """
        self.is_loading = True
        self.error = None
        self._loaded = True

        try:
            result = self.reconciler.reconcile()
        except Exception:
            logger.exception("Dashboard refresh failed")
            self.error = LOAD_ERROR_MESSAGE
            return False
        finally:
            self.is_loading = False

        with self._state_lock:
            self.records = result.records
            self.stats = result.stats
            self.source = result.source
            self.last_refreshed = utc_now_iso()

        log_with_fields(
            logger, "info", "Dashboard refreshed",
            source=result.source,
            imports=len(result.records),
            pending_jobs=result.stats.pending_jobs
        )
        return True

    def submit_import(self, request: TriggerImportRequest) -> SubmissionResult:
        """Start a manual import and show it immediately as pending.

        Raises:
            SubmissionError: If the backend rejects the import
        """
        self.is_loading = True
        try:
            with self._state_lock:
                prior_stats = self.stats
            result = self.submitter.submit(request, prior_stats)
        finally:
            self.is_loading = False

        with self._state_lock:
            self.records = [result.record] + self.records
            self.stats = result.stats

        return result

    def clear_cache(self) -> bool:
        """Delete all locally cached state and reload from the backend."""
        self.cache.clear_all()
        logger.info("Local data cleared, refreshing from backend")
        return self.refresh()

    def close(self):
        """Cancel outstanding delayed refreshes."""
        if self.scheduler is not None:
            cancelled = self.scheduler.cancel_all()
            logger.debug(f"Dashboard closed, {cancelled} re-checks cancelled")

    def snapshot(self) -> Dict[str, Any]:
        """Current display state as a JSON-ready dict."""
        with self._state_lock:
            records = list(self.records)
            stats = self.stats

        return {
            'importLogs': [record.to_dict() for record in records],
            'stats': stats.to_dict() if stats else None,
            'isLoading': self.is_loading,
            'error': self.error,
            'source': self.source,
            'lastRefreshed': self.last_refreshed
        }
