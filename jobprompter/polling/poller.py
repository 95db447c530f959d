"""Simple interval polling.

Regular API calls at a fixed interval without a socket connection. Each
tick fetches in its own worker thread, so a slow response may still be in
flight when the next tick starts; requests are neither cancelled nor
coalesced.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Optional

import requests

from jobprompter.backend.client import (
    DEFAULT_BASE_URL,
    IMPORT_LOGS_PATH,
    JOB_STATS_PATH,
    QUEUE_STATS_PATH,
)


logger = logging.getLogger("jobprompter.polling")


@dataclass
class PollingConfig:
    """Polling configuration.

    ``max_retries`` is accepted for compatibility but not enforced: a poller
    keeps ticking after any number of failures.
    """
    interval: float  # seconds
    max_retries: Optional[int] = None
    on_success: Optional[Callable[[Any], None]] = None
    on_error: Optional[Callable[[Exception], None]] = None


class IntervalPoller:
    """Repeatedly fetches a URL and hands the JSON body to a callback."""

    def __init__(self, session: Optional[requests.Session] = None, timeout: float = 10.0):
        self._session = session or requests.Session()
        self.timeout = timeout
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()
        self._lock = threading.Lock()
        self._is_polling = False
        self.url: Optional[str] = None

    def start(self, url: str, config: PollingConfig) -> None:
        """Start polling url every config.interval seconds.

        Does nothing if this poller is already active.
        """
        with self._lock:
            if self._is_polling:
                logger.info("Polling already started")
                return

            self._is_polling = True
            self.url = url
            self._stop_event = threading.Event()
            self._thread = threading.Thread(
                target=self._run,
                args=(url, config, self._stop_event),
                daemon=True
            )

        logger.info(f"Starting polling for: {url}")
        self._thread.start()

    def _run(self, url: str, config: PollingConfig, stop_event: threading.Event):
        # first fetch happens one interval after start
        while not stop_event.wait(timeout=config.interval):
            worker = threading.Thread(
                target=self._tick, args=(url, config), daemon=True
            )
            worker.start()

    def _tick(self, url: str, config: PollingConfig):
        try:
            response = self._session.get(url, timeout=self.timeout)
            data = response.json()
            if config.on_success:
                config.on_success(data)
        except Exception as e:
            logger.error(f"Polling error for {url}: {e}")
            if config.on_error:
                config.on_error(e)

    def stop(self) -> None:
        """Stop polling. Requests already in flight still complete."""
        with self._lock:
            if not self._is_polling:
                return
            self._stop_event.set()
            self._thread = None
            self._is_polling = False

        logger.info("Polling stopped")

    def is_active(self) -> bool:
        return self._is_polling


def _start_poller(
    path: str,
    interval: float,
    on_update: Callable[[Any], None],
    base_url: str,
    label: str
) -> IntervalPoller:
    poller = IntervalPoller()
    poller.start(
        f"{base_url.rstrip('/')}{path}",
        PollingConfig(
            interval=interval,
            on_success=on_update,
            on_error=lambda error: logger.error(f"{label} polling error: {error}")
        )
    )
    return poller


def poll_job_stats(
    on_update: Callable[[Any], None],
    base_url: str = DEFAULT_BASE_URL,
    interval: float = 2.0
) -> IntervalPoller:
    """Poll /jobs/stats (every 2 seconds by default)."""
    return _start_poller(JOB_STATS_PATH, interval, on_update, base_url, "Job stats")


def poll_import_logs(
    on_update: Callable[[Any], None],
    base_url: str = DEFAULT_BASE_URL,
    interval: float = 3.0
) -> IntervalPoller:
    """Poll /import-logs (every 3 seconds by default)."""
    return _start_poller(IMPORT_LOGS_PATH, interval, on_update, base_url, "Import logs")


def poll_queue_stats(
    on_update: Callable[[Any], None],
    base_url: str = DEFAULT_BASE_URL,
    interval: float = 2.0
) -> IntervalPoller:
    """Poll /queue/stats (every 2 seconds by default)."""
    return _start_poller(QUEUE_STATS_PATH, interval, on_update, base_url, "Queue stats")
