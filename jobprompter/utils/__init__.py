# Job Prompter Utilities
"""Utility functions for Job Prompter Admin."""

from .logging_config import setup_logging, get_logger, log_with_fields

__all__ = ["setup_logging", "get_logger", "log_with_fields"]
