"""Built-in dataset shown when the backend is unavailable."""

import copy
from typing import Any, Dict, List


MOCK_IMPORT_LOGS: List[Dict[str, Any]] = [
    {
        "id": 1,
        "apiName": "Indeed Jobs API",
        "apiUrl": "https://api.indeed.com/jobs",
        "type": "json",
        "status": "completed",
        "stats": {"newJobs": 150},
        "createdAt": "2025-01-13T10:30:00Z",
    },
    {
        "id": 2,
        "apiName": "LinkedIn Jobs API",
        "apiUrl": "https://api.linkedin.com/jobs",
        "type": "xml",
        "status": "pending",
        "stats": {"newJobs": 0},
        "createdAt": "2025-01-13T11:00:00Z",
    },
]

MOCK_OVERVIEW: Dict[str, int] = {
    "totalJobs": 1250,
    "pendingJobs": 0,
    "completedJobs": 1180,
    "failedJobs": 25,
}


def mock_import_logs() -> List[Dict[str, Any]]:
    return copy.deepcopy(MOCK_IMPORT_LOGS)


def mock_overview(pending_jobs: int = 0) -> Dict[str, int]:
    """Mock stats overview; pending count comes from the cached records."""
    overview = dict(MOCK_OVERVIEW)
    overview["pendingJobs"] = pending_jobs
    return overview
