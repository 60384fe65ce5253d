"""
Unified Error Handling System

Provides centralized, consistent error handling across the application.

Usage:
    from vret_wash.error_handlers import handle_errors, ValidationException

    @api_bp.route('/endpoint')
    @handle_errors
    def my_endpoint():
        if not valid:
            raise ValidationException('Invalid data')
        return jsonify({'success': True})
"""
from .exceptions import (
    AppException,
    ValidationException,
    ResourceNotFoundException,
    ConflictException,
    NotificationDeliveryException,
    ConfigurationException
)
from .decorators import handle_errors


__all__ = [
    # Exceptions
    'AppException',
    'ValidationException',
    'ResourceNotFoundException',
    'ConflictException',
    'NotificationDeliveryException',
    'ConfigurationException',
    # Decorators
    'handle_errors',
    # Setup
    'setup_logging',
    'register_error_handlers',
]


def setup_logging(app):
    """Configure application logging"""
    from vret_wash.error_handlers import logging as eh_logging
    return eh_logging.setup_logging(app)


def register_error_handlers(app):
    """Register global error handlers for the Flask app"""
    from vret_wash.error_handlers import logging as eh_logging
    eh_logging.register_error_handlers(app)
