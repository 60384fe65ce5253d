"""
Flask application factory.

This module implements the application factory pattern for creating
VRET WASH board instances with different configurations.
"""
from flask import Flask
import os

from .extensions import socketio, cors, limiter
from .config import get_config


def create_app(config_name=None, **overrides):
    """
    Application factory function.

    Args:
        config_name: Configuration name (development, testing, production)
                    If None, determined from environment
        overrides: Extra config values applied after the config class

    Returns:
        Flask application instance
    """
    app = Flask(__name__)

    # Correct IP and scheme handling behind a reverse proxy (rate limiting keys on IP)
    from werkzeug.middleware.proxy_fix import ProxyFix
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_prefix=1)

    # Load configuration
    config_class = get_config(config_name)
    app.config.from_object(config_class)
    app.config.update(overrides)

    # Configure logging and error handling
    from vret_wash.error_handlers import setup_logging, register_error_handlers
    setup_logging(app)
    register_error_handlers(app)

    # Initialize extensions
    origins = app.config.get('CORS_ORIGINS', '*')
    cors.init_app(app, resources={r"/api/*": {"origins": origins}})
    limiter.init_app(app)

    # Socket handlers must be registered before the server is created
    from vret_wash.routes import socket_events  # noqa: F401
    socketio.init_app(
        app,
        cors_allowed_origins=origins,
        async_mode=app.config.get('SOCKETIO_ASYNC_MODE', 'threading'),
    )

    # Record store and Slack notifier
    from vret_wash.services.record_store import RecordStore
    from vret_wash.services.webhook_service import WebhookNotifier
    RecordStore(app=app)
    WebhookNotifier(app=app)

    register_blueprints(app)

    app.logger.info(
        f"VRET WASH board ready (store: {app.extensions['record_store'].path}, "
        f"Slack: {'on' if app.extensions['webhook_notifier'].is_configured else 'off'})"
    )
    return app


def register_blueprints(app):
    """Register all Flask blueprints."""
    from vret_wash.routes import api_bp, health_bp

    app.register_blueprint(api_bp)
    app.register_blueprint(health_bp)

    # Probes must never be throttled
    limiter.exempt(health_bp)


def run():
    """Development entry point: python -m vret_wash"""
    app = create_app()
    socketio.run(
        app,
        host=os.environ.get('HOST', '0.0.0.0'),
        port=app.config.get('PORT', 3002),
        debug=app.config.get('DEBUG', False),
        allow_unsafe_werkzeug=True,
    )
