# Job Prompter Admin - Job Import Dashboard
""" Job Prompter Admin: job import monitoring dashboard.

This package serves the admin dashboard for the job-import backend.

Core Components:
- Local Cache: key-value store (JSON file with atomic writes and file locking)
- Dashboard: reconciles backend data with locally cached optimistic state
- API Layer: Flask REST API with Pydantic validation
- Polling: interval poller and delayed re-checks after manual imports
"""

__version__ = "0.1.0"
