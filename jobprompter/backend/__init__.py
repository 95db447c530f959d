"""Job-import backend REST API integration module."""

from .client import ImportBackendClient, DEFAULT_BASE_URL

__all__ = ["ImportBackendClient", "DEFAULT_BASE_URL"]
