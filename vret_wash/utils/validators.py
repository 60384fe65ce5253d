"""
Validation utilities for the VRET WASH board
Provides reusable validation functions for REST bodies and socket payloads
"""
import re
from datetime import datetime, date
from typing import Any, Dict, List, Optional

from vret_wash.error_handlers.exceptions import ValidationException


def validate_date_param(date_str: Optional[str], param_name: str = 'date') -> date:
    """
    Validate and parse date parameter from string.

    Args:
        date_str: Date string in YYYY-MM-DD format
        param_name: Name of parameter for error messages (default: 'date')

    Returns:
        date: Parsed date object

    Raises:
        ValidationException: If date is missing or its format is invalid

    Examples:
        >>> validate_date_param('2025-10-15')
        datetime.date(2025, 10, 15)
    """
    if not date_str or not isinstance(date_str, str):
        raise ValidationException(f"{param_name} is required (YYYY-MM-DD)")
    try:
        return datetime.strptime(date_str, '%Y-%m-%d').date()
    except ValueError:
        raise ValidationException(
            f"Invalid {param_name} format. Use YYYY-MM-DD (e.g., 2025-10-15)"
        )


def validate_required_fields(data: Optional[Dict[str, Any]], required_fields: List[str]) -> None:
    """
    Validate that all required fields are present and non-blank.

    Raises:
        ValidationException: If the body is not an object or a field is missing
    """
    if not isinstance(data, dict):
        raise ValidationException('Request body must be a JSON object')

    missing = [
        field for field in required_fields
        if data.get(field) is None or (isinstance(data.get(field), str) and not data[field].strip())
    ]
    if missing:
        raise ValidationException(f"Missing required fields: {', '.join(missing)}")


def require_confirmation(data: Optional[Dict[str, Any]]) -> None:
    """
    Lock and unlock requests must be explicitly confirmed by the actor.

    Raises:
        ValidationException: If ``confirm`` is not true
    """
    if not isinstance(data, dict) or data.get('confirm') is not True:
        raise ValidationException('This action must be confirmed; resend with "confirm": true')


def sanitize_request_data(data: str) -> str:
    """
    Remove sensitive data from request strings for safe logging.

    Examples:
        >>> sanitize_request_data('{"token": "abc"}')
        '{"token": "[REDACTED]"}'
    """
    for key in ('password', 'token', 'api_key', 'secret', 'webhook_url'):
        data = re.sub(rf'("{key}"\s*:\s*")[^"]*(")', r'\1[REDACTED]\2', data, flags=re.IGNORECASE)
    return data
