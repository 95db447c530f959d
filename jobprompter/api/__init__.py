# Job Prompter API Layer
"""API routes and validation for the job import dashboard."""

from .validators import TriggerImportRequest
from .errors import error_response, register_error_handlers

__all__ = ["TriggerImportRequest", "error_response", "register_error_handlers"]
