"""Job-import backend REST client.

Thin wrapper over the backend endpoints the dashboard consumes. Methods
return the raw ``requests.Response`` so callers decide how to treat
non-success statuses; transport errors propagate.
"""

import concurrent.futures
import logging
from typing import Optional, Tuple

import requests


logger = logging.getLogger("jobprompter.backend")

DEFAULT_BASE_URL = "http://localhost:5000/api"

IMPORT_LOGS_PATH = "/import-logs"
JOB_STATS_PATH = "/jobs/stats"
QUEUE_STATS_PATH = "/queue/stats"
TRIGGER_IMPORT_PATH = "/jobs/trigger-import"


class ImportBackendClient:
    """Client for the job-import backend API."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None
    ):
        """Initialize backend client.

        Args:
            base_url: API root, e.g. http://localhost:5000/api
            timeout: Per-request timeout in seconds
            session: Optional session (a new one is created for connection pooling)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()

        logger.info(f"Backend client initialized for {self.base_url}")

    @classmethod
    def from_config(cls, backend_config) -> "ImportBackendClient":
        """Create client from a BackendConfig."""
        return cls(
            base_url=backend_config.base_url,
            timeout=backend_config.timeout_sec
        )

    def url_for(self, path: str) -> str:
        """Absolute URL for an API path."""
        return f"{self.base_url}/{path.lstrip('/')}"

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        url = self.url_for(path)
        logger.debug(f"{method} {url}")
        return self._session.request(
            method=method,
            url=url,
            timeout=kwargs.pop("timeout", self.timeout),
            **kwargs
        )

    def get_import_logs(self) -> requests.Response:
        """GET /import-logs."""
        return self._request("GET", IMPORT_LOGS_PATH)

    def get_job_stats(self) -> requests.Response:
        """GET /jobs/stats."""
        return self._request("GET", JOB_STATS_PATH)

    def fetch_dashboard(self) -> Tuple[requests.Response, requests.Response]:
        """Fetch import logs and job stats concurrently.

        Both requests are issued together and both must finish before this
        returns. The first exception raised by either request propagates.

        Returns:
            (import logs response, job stats response)
        """
        with concurrent.futures.ThreadPoolExecutor(max_workers=2) as pool:
            logs_future = pool.submit(self.get_import_logs)
            stats_future = pool.submit(self.get_job_stats)
            return logs_future.result(), stats_future.result()

    def trigger_import(
        self,
        api_name: str,
        api_url: str,
        import_type: str
    ) -> requests.Response:
        """POST /jobs/trigger-import for a manual import.

        Args:
            api_name: Display name of the feed
            api_url: Feed URL
            import_type: "json" or "xml"

        Returns:
            Response object
        """
        payload = {
            "apiName": api_name,
            "apiUrl": api_url,
            "type": import_type,
            "triggeredBy": "manual"
        }

        logger.info(f"Triggering import for {api_name} ({import_type})")

        return self._request(
            "POST",
            TRIGGER_IMPORT_PATH,
            json=payload,
            headers={"Content-Type": "application/json"}
        )

    def ping(self) -> bool:
        """True if the backend answers the stats endpoint with a success status."""
        try:
            return self.get_job_stats().ok
        except requests.RequestException as e:
            logger.warning(f"Backend unreachable: {e}")
            return False

    def close(self):
        self._session.close()
