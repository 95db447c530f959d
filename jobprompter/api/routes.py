"""Flask routes for the job import dashboard API."""

from typing import Optional

from flask import Blueprint, jsonify, request
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from pydantic import ValidationError

from ..config import Config
from ..dashboard.controller import DashboardController
from ..dashboard.submission import SubmissionError
from ..store.manager import StoreError
from .validators import TriggerImportRequest
from .errors import error_response
from ..utils.logging_config import get_logger


logger = get_logger("api")

# Create API blueprint
api_v1 = Blueprint('api_v1', __name__, url_prefix='/api/v1')

# Bound to the application by the app factory (limiter.init_app)
limiter = Limiter(
    get_remote_address,
    default_limits=["100 per minute"],
    storage_uri="memory://",
    strategy="fixed-window",
    headers_enabled=True,
)

# Global dashboard controller (set by app factory or built on first use)
_controller: Optional[DashboardController] = None


def set_controller(controller: Optional[DashboardController]):
    """Set the global dashboard controller from app factory."""
    global _controller
    _controller = controller


def _get_controller() -> DashboardController:
    """Get or initialize the dashboard controller."""
    global _controller
    if _controller is None:
        _controller = DashboardController.from_config(Config.from_env())
    return _controller


def _dashboard_response(controller: DashboardController):
    return jsonify({
        'success': True,
        'data': controller.snapshot()
    }), 200


@api_v1.route('/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    controller = _get_controller()
    checks = {
        'local_cache': 'ok',
        'backend_api': 'ok',
        'last_refresh': controller.last_refreshed
    }

    try:
        controller.cache.get_records()
    except StoreError as e:
        checks['local_cache'] = f'error: {str(e)}'

    if not controller.client.ping():
        checks['backend_api'] = 'unreachable'

    all_healthy = checks['local_cache'] == 'ok' and checks['backend_api'] == 'ok'

    return jsonify({
        'success': True,
        'data': {
            'status': 'healthy' if all_healthy else 'degraded',
            'checks': checks
        }
    }), 200


@api_v1.route('/dashboard', methods=['GET'])
def get_dashboard():
    """Current dashboard state (loads it on first access)."""
    controller = _get_controller()
    controller.ensure_loaded()
    return _dashboard_response(controller)


@api_v1.route('/dashboard/refresh', methods=['POST'])
def refresh_dashboard():
    """Reload dashboard data from the backend."""
    controller = _get_controller()
    controller.refresh()
    return _dashboard_response(controller)


@api_v1.route('/imports', methods=['POST'])
@limiter.limit("20 per minute")
def trigger_import():
    """Start a new manual import."""
    try:
        data = request.get_json(silent=True)
        if data is None:
            return error_response('INVALID_REQUEST', 'Invalid JSON payload')

        validated = TriggerImportRequest(**data)
    except ValidationError as e:
        errors = e.errors(include_url=False, include_context=False)
        for error in errors:
            field = error.get('loc', [None])[0]
            msg = error.get('msg', 'Invalid value')

            if field == 'type':
                return error_response('INVALID_TYPE', f'Invalid type: {msg}')

        return error_response(
            'INVALID_REQUEST',
            'Validation error',
            {'errors': [
                {'field': '.'.join(str(part) for part in error['loc']), 'message': error['msg']}
                for error in errors
            ]}
        )
    except TypeError as e:
        return error_response('INVALID_REQUEST', str(e))

    controller = _get_controller()
    try:
        result = controller.submit_import(validated)
    except SubmissionError as e:
        logger.error(f"Import failed: {e}")
        return error_response('IMPORT_FAILED', f'Failed to start import: {e}')
    except StoreError as e:
        return error_response('STORE_ERROR', str(e))

    return jsonify({
        'success': True,
        'message': result.message,
        'data': {
            'jobId': result.job_id,
            'importLog': result.record.to_dict(),
            'dashboard': controller.snapshot()
        }
    }), 201


@api_v1.route('/cache/clear', methods=['POST'])
@limiter.limit("10 per minute")
def clear_cache():
    """Delete locally cached dashboard state and refresh."""
    controller = _get_controller()
    try:
        controller.clear_cache()
    except StoreError as e:
        return error_response('STORE_ERROR', str(e))
    return _dashboard_response(controller)
