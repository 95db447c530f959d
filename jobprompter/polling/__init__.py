"""Interval polling utilities."""

from .poller import (
    IntervalPoller,
    PollingConfig,
    poll_job_stats,
    poll_import_logs,
    poll_queue_stats,
)

__all__ = [
    "IntervalPoller",
    "PollingConfig",
    "poll_job_stats",
    "poll_import_logs",
    "poll_queue_stats",
]
