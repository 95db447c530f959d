"""Error handlers and response formatters for the dashboard API."""

from flask import jsonify
from typing import Dict, Any


def error_response(code: str, message: str, details: Dict[str, Any] = None, status_code: int = None) -> tuple:
    """Create standard error response.

    Args:
        code: Error code (e.g., 'INVALID_TYPE')
        message: Human-readable error message
        details: Optional additional details
        status_code: HTTP status code (uses ERROR_CODES mapping if not provided)

    Returns:
        Tuple of (json response, status code)
    """
    if status_code is None and code in ERROR_CODES:
        status_code = ERROR_CODES[code].get('status', 400)
    elif status_code is None:
        status_code = 400

    response = {
        'success': False,
        'error': {
            'code': code,
            'message': message
        }
    }

    if details:
        response['error']['details'] = details

    return jsonify(response), status_code


# Error code definitions
ERROR_CODES = {
    'INVALID_REQUEST': {
        'message': 'Invalid request payload',
        'status': 400,
    },
    'INVALID_TYPE': {
        'message': 'Type must be one of: json, xml',
        'status': 400,
    },
    'NOT_FOUND': {
        'message': 'Resource not found',
        'status': 404,
    },
    'RATE_LIMITED': {
        'message': 'Rate limit exceeded',
        'status': 429,
    },
    'STORE_ERROR': {
        'message': 'Local cache read/write error',
        'status': 500,
    },
    'IMPORT_FAILED': {
        'message': 'Failed to start import',
        'status': 502,
    },
    'INTERNAL_ERROR': {
        'message': 'Internal server error',
        'status': 500,
    },
}


def register_error_handlers(app):
    """Register custom error handlers with Flask app.

    Args:
        app: Flask application instance
    """

    @app.errorhandler(400)
    def bad_request(error):
        return error_response(
            'INVALID_REQUEST',
            'Bad request',
            {'description': str(error.description)}
        )

    @app.errorhandler(404)
    def not_found(error):
        return error_response(
            'NOT_FOUND',
            'Resource not found'
        )

    @app.errorhandler(429)
    def rate_limited(error):
        return error_response(
            'RATE_LIMITED',
            'Rate limit exceeded'
        )

    @app.errorhandler(500)
    def internal_error(error):
        return error_response(
            'INTERNAL_ERROR',
            'Internal server error'
        )
