"""Data models for the job import dashboard."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Dict, Any, Union


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string with a Z suffix."""
    return datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z')


@dataclass
class ImportRecord:
    """A single import run as shown in the import history."""
    id: Union[int, str]
    api_name: str
    api_url: str
    type: str
    status: str
    jobs_found: int = 0
    created_at: Optional[str] = None

    @property
    def is_pending(self) -> bool:
        return self.status == "pending"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ImportRecord":
        """Create ImportRecord from its canonical (camelCase) dictionary."""
        return cls(
            id=data.get("id"),
            api_name=data.get("apiName", ""),
            api_url=data.get("apiUrl", ""),
            type=data.get("type", "json"),
            status=data.get("status", "unknown"),
            jobs_found=data.get("jobsFound", 0),
            created_at=data.get("createdAt")
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert ImportRecord to its canonical dictionary."""
        return {
            "id": self.id,
            "apiName": self.api_name,
            "apiUrl": self.api_url,
            "type": self.type,
            "status": self.status,
            "jobsFound": self.jobs_found,
            "createdAt": self.created_at
        }


@dataclass
class StatsSnapshot:
    """Aggregate job counts."""
    total_jobs: int = 0
    pending_jobs: int = 0
    completed_jobs: int = 0
    failed_jobs: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StatsSnapshot":
        """Create StatsSnapshot from dictionary."""
        return cls(
            total_jobs=data.get("totalJobs", 0),
            pending_jobs=data.get("pendingJobs", 0),
            completed_jobs=data.get("completedJobs", 0),
            failed_jobs=data.get("failedJobs", 0)
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert StatsSnapshot to dictionary."""
        return {
            "totalJobs": self.total_jobs,
            "pendingJobs": self.pending_jobs,
            "completedJobs": self.completed_jobs,
            "failedJobs": self.failed_jobs
        }

    def with_new_pending(self) -> "StatsSnapshot":
        """Copy with one more pending (and total) job."""
        return StatsSnapshot(
            total_jobs=self.total_jobs + 1,
            pending_jobs=self.pending_jobs + 1,
            completed_jobs=self.completed_jobs,
            failed_jobs=self.failed_jobs
        )
