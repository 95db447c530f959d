"""Logging configuration for Job Prompter Admin with structured JSON output."""

import logging
import json
import sys
import os
from typing import Optional


class JSONFormatter(logging.Formatter):
    """Custom JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON.

        Args:
            record: LogRecord to format

        Returns:
            JSON string
        """
        log_data = {
            'timestamp': self.formatTime(record),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }

        if hasattr(record, 'extra_fields'):
            log_data.update(record.extra_fields)

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def setup_logging(
    level: Optional[str] = None,
    handler: Optional[logging.Handler] = None,
    fmt: str = 'json'
) -> logging.Logger:
    """Setup Job Prompter logging configuration.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        handler: Custom handler (stdout stream handler by default)
        fmt: 'json' for structured output, anything else for plain text

    Returns:
        Configured logger instance
    """
    log_level = level or os.environ.get('JOBPROMPTER_LOG_LEVEL', 'INFO')
    if isinstance(log_level, str):
        log_level = getattr(logging, log_level.upper(), logging.INFO)

    logger = logging.getLogger('jobprompter')
    logger.setLevel(log_level)

    # Remove existing handlers
    logger.handlers = []

    if fmt == 'json':
        formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

    if handler is None:
        handler = logging.StreamHandler(sys.stdout)

    handler.setLevel(log_level)
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    return logger


def get_logger(name: str = 'jobprompter') -> logging.Logger:
    """Get a logger instance under the jobprompter namespace."""
    if name != 'jobprompter' and not name.startswith('jobprompter.'):
        name = f'jobprompter.{name}'
    return logging.getLogger(name)


def log_with_fields(
    logger: logging.Logger,
    level: str,
    message: str,
    **fields
):
    """Log with extra fields.

    Args:
        logger: Logger instance
        level: Log level name
        message: Log message
        **fields: Extra fields to include
    """
    extra = {'extra_fields': fields} if fields else None

    log_func = getattr(logger, level.lower(), logger.info)
    log_func(message, extra=extra)
