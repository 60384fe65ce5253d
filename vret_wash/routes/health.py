"""
Health Check and Monitoring Endpoints
Provides endpoints for application health monitoring, readiness checks, and metrics.
"""
from flask import Blueprint, jsonify, current_app
from datetime import datetime
import sys
import psutil
import os

from vret_wash.services.record_store import get_record_store
from vret_wash.services.webhook_service import get_notifier

health_bp = Blueprint('health', __name__, url_prefix='/health')


@health_bp.route('/ping', methods=['GET'])
def ping():
    """
    Simple ping endpoint for basic connectivity checks.
    Returns: 200 OK with pong message
    """
    return jsonify({
        'status': 'ok',
        'message': 'pong',
        'timestamp': datetime.utcnow().isoformat()
    }), 200


@health_bp.route('/live', methods=['GET'])
def liveness():
    """
    Liveness probe - checks if application is running.

    Returns:
        200: Application is alive
    """
    return jsonify({
        'status': 'alive',
        'timestamp': datetime.utcnow().isoformat()
    }), 200


@health_bp.route('/ready', methods=['GET'])
def readiness():
    """
    Readiness probe - checks that the snapshot directory is writable.

    Returns:
        200: Application is ready
        503: Application is not ready
    """
    checks = {
        'store': False,
        'webhook_configured': get_notifier().is_configured,
    }
    errors = []

    store = get_record_store()
    directory = os.path.dirname(store.path) or '.'
    if os.path.isdir(directory) and os.access(directory, os.W_OK):
        checks['store'] = True
    elif not os.path.exists(directory) and os.access(os.path.dirname(directory) or '.', os.W_OK):
        # Created on first write
        checks['store'] = True
    else:
        errors.append(f"Store: {directory} is not writable")

    # A missing webhook is a supported configuration, not a readiness failure
    ready = checks['store']
    response = {
        'status': 'ready' if ready else 'not_ready',
        'checks': checks,
        'timestamp': datetime.utcnow().isoformat()
    }

    if errors:
        response['errors'] = errors

    return jsonify(response), 200 if ready else 503


@health_bp.route('/status', methods=['GET'])
def status():
    """
    Detailed application status and metrics.

    Returns:
        200: Status information
        500: Status could not be collected
    """
    try:
        process = psutil.Process()
        memory_info = process.memory_info()
        store = get_record_store()

        snapshot_size = os.path.getsize(store.path) if os.path.exists(store.path) else 0

        return jsonify({
            'status': 'operational',
            'timestamp': datetime.utcnow().isoformat(),
            'application': {
                'name': 'VRET WASH Board',
                'version': '1.0.0',
                'environment': os.environ.get('FLASK_ENV', 'unknown'),
                'debug': current_app.debug,
            },
            'system': {
                'python_version': sys.version,
                'platform': sys.platform,
                'memory_mb': round(memory_info.rss / (1024 * 1024), 2),
                'memory_percent': round(process.memory_percent(), 2),
            },
            'store': {
                'entries': len(store.list_entries()),
                'actions': len(store.list_actions()),
                'week_locks': len(store.list_week_locks()),
                'snapshot_bytes': snapshot_size,
            },
        }), 200
    except (psutil.Error, OSError) as e:
        current_app.logger.error(f"Error collecting status: {e}", exc_info=True)
        return jsonify({
            'status': 'error',
            'error': str(e),
            'timestamp': datetime.utcnow().isoformat()
        }), 500
