"""Normalization of heterogeneous backend payloads.

Backend versions name the same attribute differently (``fileName`` vs
``apiName``, nested ``source`` objects, ...). Each canonical field has an
ordered list of extractors; the first one that yields a present value wins.
"""

from typing import Any, Callable, Dict, List, Optional, Sequence

from jobprompter.store.models import ImportRecord, StatsSnapshot, utc_now_iso


Extractor = Callable[[Dict[str, Any]], Any]


def _present(value: Any) -> bool:
    return value is not None and value != ""


def field(*path: str) -> Extractor:
    """Extractor reading a (possibly nested) key path, None if missing."""
    def extract(raw: Dict[str, Any]) -> Any:
        current: Any = raw
        for key in path:
            if not isinstance(current, dict):
                return None
            current = current.get(key)
        return current
    return extract


def literal(value: Any) -> Extractor:
    return lambda raw: value


def now_iso() -> Extractor:
    return lambda raw: utc_now_iso()


def first_present(raw: Dict[str, Any], extractors: Sequence[Extractor]) -> Any:
    """Run extractors in order and return the first present value.

    When nothing is present the last extractor's value is returned, so a
    trailing literal("") default survives.
    """
    value = None
    for extract in extractors:
        value = extract(raw)
        if _present(value):
            return value
    return value


RECORD_FIELDS: Dict[str, List[Extractor]] = {
    "id": [field("_id"), field("id")],
    "api_name": [
        field("fileName"),
        field("apiName"),
        field("source", "name"),
        field("source", "apiName"),
        literal("Unknown API"),
    ],
    "api_url": [
        field("source", "url"),
        field("source", "apiUrl"),
        field("apiUrl"),
        field("endpoint"),
        literal(""),
    ],
    "type": [field("source", "type"), field("type"), literal("json")],
    "status": [field("status"), literal("unknown")],
    "jobs_found": [
        field("stats", "newJobs"),
        field("stats", "jobsProcessed"),
        field("jobsProcessed"),
        field("jobsFound"),
        literal(0),
    ],
    "created_at": [field("importTime"), field("createdAt"), now_iso()],
}

STATS_FIELDS: Dict[str, List[Extractor]] = {
    "total_jobs": [field("totalJobs"), literal(0)],
    # older backends report pending imports as activeJobs
    "pending_jobs": [field("pendingJobs"), field("activeJobs"), literal(0)],
    "completed_jobs": [field("completedJobs"), literal(0)],
    "failed_jobs": [field("failedJobs"), literal(0)],
}


def normalize_record(raw: Dict[str, Any]) -> ImportRecord:
    """Map a raw backend (or cached) record to an ImportRecord."""
    values = {
        name: first_present(raw, extractors)
        for name, extractors in RECORD_FIELDS.items()
    }
    return ImportRecord(**values)


def normalize_records(raw_records: Optional[List[Any]]) -> List[ImportRecord]:
    return [
        normalize_record(raw)
        for raw in (raw_records or [])
        if isinstance(raw, dict)
    ]


def _as_count(value: Any) -> int:
    """Counts may arrive as numeric strings; anything unparseable is 0."""
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def normalize_stats(overview: Optional[Dict[str, Any]]) -> StatsSnapshot:
    """Map a backend stats overview to a StatsSnapshot."""
    overview = overview if isinstance(overview, dict) else {}
    return StatsSnapshot(**{
        name: _as_count(first_present(overview, extractors))
        for name, extractors in STATS_FIELDS.items()
    })


def import_logs_of(body: Any) -> List[Any]:
    """``data.importLogs`` of an /import-logs response body."""
    logs = field("data", "importLogs")(body) if isinstance(body, dict) else None
    return logs if isinstance(logs, list) else []


def overview_of(body: Any) -> Dict[str, Any]:
    """``data.statistics.overview`` of a /jobs/stats response body."""
    if not isinstance(body, dict):
        return {}
    overview = field("data", "statistics", "overview")(body)
    return overview if isinstance(overview, dict) else {}


def count_pending(raw_records: List[Dict[str, Any]]) -> int:
    return sum(1 for raw in raw_records if raw.get("status") == "pending")
