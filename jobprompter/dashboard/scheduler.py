"""Delayed re-checks after a manual import.

After an import is triggered the backend needs a few seconds to record
progress, so the dashboard refreshes itself a fixed number of times. Timers
are keyed by submission id: resubmitting the same id replaces its pending
re-checks, and teardown cancels everything.
"""

import logging
import threading
from typing import Callable, Dict, Hashable, List, Optional, Sequence


logger = logging.getLogger("jobprompter.dashboard.scheduler")


class RecheckScheduler:
    """Schedules one-shot delayed callbacks with threading.Timer."""

    DEFAULT_DELAYS = (2.0, 5.0, 10.0)  # seconds

    def __init__(
        self,
        callback: Callable[[], object],
        delays: Optional[Sequence[float]] = None
    ):
        """Initialize scheduler.

        Args:
            callback: Called (without arguments) when a timer fires
            delays: Seconds after scheduling at which to fire
        """
        self.callback = callback
        self.delays = tuple(delays) if delays is not None else self.DEFAULT_DELAYS
        self._timers: Dict[Hashable, List[threading.Timer]] = {}
        self._lock = threading.Lock()

    def schedule(self, key: Hashable) -> List[threading.Timer]:
        """Start one timer per delay for key, replacing any still pending."""
        self.cancel(key)

        timers: List[threading.Timer] = []
        for index, delay in enumerate(self.delays, start=1):
            timer = threading.Timer(delay, self._fire, args=(key, index, timers))
            timer.daemon = True
            timers.append(timer)

        with self._lock:
            self._timers[key] = timers
        for timer in timers:
            timer.start()

        logger.debug(f"Scheduled {len(timers)} re-checks for submission {key}")
        return timers

    def _fire(self, key: Hashable, index: int, timers: List[threading.Timer]):
        logger.info(
            f"Checking for backend updates ({index}/{len(timers)}) "
            f"for submission {key}"
        )
        try:
            self.callback()
        except Exception:
            logger.exception(f"Re-check for submission {key} failed")
        finally:
            # the firing timer only marks itself finished after we return
            remaining = [
                timer for position, timer in enumerate(timers, start=1)
                if position != index and not timer.finished.is_set()
            ]
            with self._lock:
                if not remaining and self._timers.get(key) is timers:
                    del self._timers[key]

    def pending(self, key: Hashable) -> int:
        """Number of re-checks for key that have not fired yet."""
        with self._lock:
            timers = self._timers.get(key, [])
            return sum(1 for timer in timers if not timer.finished.is_set())

    def cancel(self, key: Hashable) -> int:
        """Cancel pending re-checks for key. Returns how many were cancelled."""
        with self._lock:
            timers = self._timers.pop(key, [])

        cancelled = 0
        for timer in timers:
            if not timer.finished.is_set():
                timer.cancel()
                cancelled += 1
        if cancelled:
            logger.debug(f"Cancelled {cancelled} re-checks for submission {key}")
        return cancelled

    def cancel_all(self) -> int:
        """Cancel every pending re-check (component teardown)."""
        with self._lock:
            keys = list(self._timers)
        return sum(self.cancel(key) for key in keys)
