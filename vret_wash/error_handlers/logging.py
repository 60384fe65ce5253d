"""
Error handling and logging utilities for the VRET WASH board
Provides centralized logging setup and global Flask error handlers
"""
import logging
import traceback
from datetime import datetime
from flask import jsonify, request
import os


def setup_logging(app):
    """Configure application logging"""
    log_level = getattr(logging, app.config.get('LOG_LEVEL', 'INFO').upper())
    log_file = app.config.get('LOG_FILE')

    formatter = logging.Formatter(
        '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
    )

    # The factory runs once per app; drop handlers left by a previous app
    # sharing the same logger name
    for handler in list(app.logger.handlers):
        if getattr(handler, '_vret_wash', False):
            app.logger.removeHandler(handler)
            handler.close()

    handlers = []

    if log_file:
        # Make log file path absolute if it's not
        if not os.path.isabs(log_file):
            basedir = os.path.abspath(os.path.dirname(os.path.dirname(os.path.dirname(__file__))))
            log_file = os.path.join(basedir, log_file)

        os.makedirs(os.path.dirname(log_file), exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    handlers.append(logging.StreamHandler())

    for handler in handlers:
        handler.setLevel(log_level)
        handler.setFormatter(formatter)
        handler._vret_wash = True
        app.logger.addHandler(handler)

    app.logger.setLevel(log_level)

    # Configure werkzeug logger (Flask's request logger)
    werkzeug_logger = logging.getLogger('werkzeug')
    werkzeug_logger.setLevel(log_level)

    return app.logger


def _error_response(status_code, error, message, **extra):
    body = {
        'error': error,
        'message': message,
        'status_code': status_code
    }
    body.update(extra)
    return jsonify(body), status_code


def register_error_handlers(app):
    """Register global error handlers for the Flask app"""

    @app.errorhandler(400)
    def bad_request_error(error):
        """Handle 400 Bad Request errors"""
        app.logger.warning(f"Bad request from {request.remote_addr}: {request.url}")
        return _error_response(400, 'Bad Request', 'The request could not be understood by the server')

    @app.errorhandler(404)
    def not_found_error(error):
        """Handle 404 Not Found errors"""
        app.logger.info(f"404 Not Found: {request.url} from {request.remote_addr}")
        return _error_response(404, 'Not Found', 'The requested resource was not found')

    @app.errorhandler(405)
    def method_not_allowed_error(error):
        """Handle 405 Method Not Allowed errors"""
        app.logger.warning(f"Method not allowed: {request.method} {request.url} from {request.remote_addr}")
        return _error_response(
            405, 'Method Not Allowed',
            f'The {request.method} method is not allowed for this endpoint'
        )

    @app.errorhandler(429)
    def rate_limited_error(error):
        """Handle 429 Too Many Requests from Flask-Limiter"""
        app.logger.warning(f"Rate limit exceeded by {request.remote_addr}: {request.url}")
        return _error_response(429, 'Too Many Requests', str(getattr(error, 'description', error)))

    @app.errorhandler(500)
    def internal_error(error):
        """Handle 500 Internal Server Error"""
        from vret_wash.utils.validators import sanitize_request_data

        error_id = datetime.utcnow().strftime('%Y%m%d_%H%M%S_%f')
        app.logger.error(f"Internal Server Error [{error_id}]: {str(error)}")
        app.logger.error(f"Traceback [{error_id}]: {traceback.format_exc()}")

        app.logger.error(f"Request details [{error_id}]: {request.method} {request.url}")
        request_data = sanitize_request_data(request.get_data(as_text=True)[:1000])
        app.logger.error(f"Request data [{error_id}]: {request_data}")

        return _error_response(500, 'Internal Server Error', 'An unexpected error occurred', error_id=error_id)

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        """Handle any unexpected errors"""
        from werkzeug.exceptions import HTTPException
        from vret_wash.utils.validators import sanitize_request_data

        if isinstance(error, HTTPException):
            return _error_response(error.code, error.name, error.description)

        error_id = datetime.utcnow().strftime('%Y%m%d_%H%M%S_%f')
        app.logger.critical(f"Unexpected error [{error_id}]: {str(error)}")
        app.logger.critical(f"Traceback [{error_id}]: {traceback.format_exc()}")

        request_data = sanitize_request_data(request.get_data(as_text=True)[:1000])
        app.logger.critical(f"Request data [{error_id}]: {request_data}")

        return _error_response(500, 'Unexpected Error', 'An unexpected error occurred', error_id=error_id)


def log_dispatch_failure(operation, error, context=None):
    """Log a failed outbound notification and return its error record"""
    logger = logging.getLogger('vret_wash.notifications')
    error_id = datetime.utcnow().strftime('%Y%m%d_%H%M%S_%f')

    log_message = f"DISPATCH ERROR [{error_id}] in {operation}: {str(error)}"
    if context:
        log_message += f" | Context: {context}"

    logger.error(log_message)
    logger.debug(f"DISPATCH ERROR TRACEBACK [{error_id}]: {traceback.format_exc()}")

    return {
        'error_id': error_id,
        'operation': operation,
        'error_message': str(error),
        'timestamp': datetime.utcnow().isoformat()
    }
