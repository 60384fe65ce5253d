"""
Configuration management for the VRET WASH board
Handles environment-based settings and Slack webhook configuration

Credentials are validated lazily so development and tests run without
a populated .env file.
"""
import os
import secrets
from decouple import config
from typing import Optional


class Config:
    """Base configuration class"""
    # Flask settings
    SECRET_KEY = config('SECRET_KEY', default=secrets.token_hex(32))

    # Snapshot store
    DATA_FILE = config('DATA_FILE', default='database/vret-wash.json')

    # Slack webhook (external sink)
    SLACK_WEBHOOK_URL = config('SLACK_WEBHOOK_URL', default='')
    WEBHOOK_TIMEOUT = config('WEBHOOK_TIMEOUT', default=10, cast=int)
    NOTIFY_ASYNC = config('NOTIFY_ASYNC', default=True, cast=bool)

    # Realtime / CORS
    CORS_ORIGINS = config('CORS_ORIGINS', default='*')
    SOCKETIO_ASYNC_MODE = config('SOCKETIO_ASYNC_MODE', default='threading')

    # Logging settings
    LOG_LEVEL = config('LOG_LEVEL', default='INFO')
    LOG_FILE = config('LOG_FILE', default='logs/vret-wash.log')

    # Rate limiting (read by Flask-Limiter)
    RATELIMIT_ENABLED = config('RATELIMIT_ENABLED', default=True, cast=bool)
    RATELIMIT_DEFAULT = config('RATELIMIT_DEFAULT', default='600 per minute')

    PORT = config('PORT', default=3002, cast=int)

    @classmethod
    def validate(cls) -> None:
        """
        Validate configuration - can be called explicitly or on-demand

        Raises:
            ValueError: If required configuration is missing
        """
        pass  # Base config has no required validation


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True
    TESTING = False


class TestingConfig(Config):
    """Testing configuration"""
    TESTING = True
    DATA_FILE = os.path.join('instance', 'test-vret-wash.json')
    SLACK_WEBHOOK_URL = ''
    NOTIFY_ASYNC = False
    LOG_FILE = ''
    RATELIMIT_ENABLED = False


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False
    TESTING = False

    SECRET_KEY = config('SECRET_KEY', default='change-this-to-a-random-secret-key-in-production')
    LOG_LEVEL = config('LOG_LEVEL', default='WARNING')

    @classmethod
    def validate(cls) -> None:
        """
        Production mode: validate all required settings

        Raises:
            ValueError: If any required configuration is missing
        """
        try:
            secret_key = config('SECRET_KEY')
        except Exception:
            raise ValueError(
                "SECRET_KEY environment variable must be set in production. "
                "Generate a secure key with: python -c 'import secrets; print(secrets.token_hex(32))'"
            )

        if len(secret_key) < 32:
            raise ValueError(
                f"SECRET_KEY must be at least 32 characters in production (current: {len(secret_key)})."
            )


# Configuration mapping
config_mapping = {
    'development': DevelopmentConfig,
    'testing': TestingConfig,
    'production': ProductionConfig,
    'default': DevelopmentConfig
}


def get_config(config_name: Optional[str] = None, validate: bool = False) -> type:
    """
    Get configuration class based on environment.

    Args:
        config_name: Environment name ('development', 'testing', 'production')
        validate: Whether to validate configuration immediately (default: False)

    Returns:
        Config class for the specified environment

    Raises:
        ValueError: If validation is enabled and required variables are missing
    """
    if config_name is None:
        config_name = config('FLASK_ENV', default='development')

    config_class = config_mapping.get(config_name, DevelopmentConfig)

    if validate:
        config_class.validate()

    return config_class
