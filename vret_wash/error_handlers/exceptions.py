"""
Custom exception hierarchy for type-safe error handling

Provides a structured exception hierarchy that maps to HTTP status codes
and enables consistent error responses across REST and Socket.IO handlers.

Usage:
    from vret_wash.error_handlers.exceptions import ValidationException

    def upsert(payload):
        if not payload.get('date'):
            raise ValidationException('date is required')

Exception Hierarchy:
    AppException (base)
    ├── ValidationException (400)
    ├── ResourceNotFoundException (404)
    ├── ConflictException (409)
    ├── NotificationDeliveryException (500)
    └── ConfigurationException (500)
"""
from typing import Dict, Any, Optional


class AppException(Exception):
    """
    Base exception for all application errors

    Attributes:
        status_code: HTTP status code for the error
        error_type: String identifier for the error type
        message: Human-readable error message
        details: Additional context about the error
    """
    status_code = 500
    error_type = 'ApplicationError'

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        if status_code:
            self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to JSON-serializable dictionary

        Returns:
            Dictionary suitable for JSON response
        """
        result = {
            'error': self.error_type,
            'message': self.message,
            'status_code': self.status_code
        }

        if self.details:
            result.update(self.details)

        return result

    def __str__(self) -> str:
        return f"{self.error_type}: {self.message}"

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}('{self.message}', status_code={self.status_code})>"


class ValidationException(AppException):
    """
    Validation errors (HTTP 400)

    Raised when a REST body or socket payload fails validation checks.

    Example:
        >>> if team not in TEAM_IDS:
        ...     raise ValidationException(f'Unknown team: {team}')
    """
    status_code = 400
    error_type = 'ValidationError'


class ResourceNotFoundException(AppException):
    """
    Resource not found (HTTP 404)

    Example:
        >>> if store.get_entry(date, team) is None:
        ...     raise ResourceNotFoundException(f'No entry for {team} on {date}')
    """
    status_code = 404
    error_type = 'NotFound'


class ConflictException(AppException):
    """
    State conflict (HTTP 409)

    Raised when a lock is requested for something already locked.
    """
    status_code = 409
    error_type = 'Conflict'


class NotificationDeliveryException(AppException):
    """
    Webhook delivery failed (HTTP 500)

    Only surfaced to the caller on the week-lock path.
    """
    status_code = 500
    error_type = 'NotificationDeliveryError'


class ConfigurationException(AppException):
    """
    Configuration errors (HTTP 500)

    Example:
        >>> if not app.config.get('DATA_FILE'):
        ...     raise ConfigurationException('DATA_FILE not configured')
    """
    status_code = 500
    error_type = 'ConfigurationError'
