"""
Configuration classes for Flask application.

Usage:
    from config import config
    app.config.from_object(config[config_name])
"""
import os
from datetime import timedelta


class Config:
    """Base configuration with defaults."""

    # Token signing
    JWT_SECRET_KEY = os.environ.get('JWT_SECRET_KEY')
    JWT_ALGORITHM = 'HS256'
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(
        minutes=int(os.environ.get('JWT_ACCESS_TOKEN_EXPIRES_MINUTES', 60))
    )

    # Password hashing (werkzeug method string, includes the work factor)
    PASSWORD_HASH_METHOD = os.environ.get('PASSWORD_HASH_METHOD', 'pbkdf2:sha256:600000')

    # Database
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    AUTO_MIGRATE_SCHEMA = os.environ.get('AUTO_MIGRATE_SCHEMA', 'True').lower() == 'true'

    # Rate limiting (Flask-Limiter config keys)
    RATELIMIT_DEFAULT = "2000 per day; 300 per hour"
    # Use Redis for persistent rate limiting if REDIS_URL is set, otherwise memory
    RATELIMIT_STORAGE_URI = os.environ.get('REDIS_URL', 'memory://')

    # CORS
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*')

    # Logging
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    PORT = int(os.environ.get('PORT', 5000))

    REQUIRED_SETTINGS = ('JWT_SECRET_KEY', 'SQLALCHEMY_DATABASE_URI')

    @classmethod
    def validate(cls, settings):
        """Fail fast when a required setting is missing.

        Args:
            settings: Mapping of configuration values (usually app.config)

        Raises:
            RuntimeError: If any required setting is empty
        """
        missing = [key for key in cls.REQUIRED_SETTINGS if not settings.get(key)]
        if missing:
            raise RuntimeError(
                f"Missing required configuration: {', '.join(missing)}. "
                "Set the corresponding environment variables before starting."
            )


class DevelopmentConfig(Config):
    """Development configuration."""

    DEBUG = True
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        'DATABASE_URL',
        'sqlite:///expenses.db'
    )


class ProductionConfig(Config):
    """Production configuration."""

    DEBUG = False


class TestingConfig(Config):
    """Testing configuration."""

    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'

    JWT_SECRET_KEY = 'testing-secret-key-not-for-production'

    # Cheap hashes keep the suite fast
    PASSWORD_HASH_METHOD = 'pbkdf2:sha256:1000'

    # Disable rate limiting for tests
    RATELIMIT_ENABLED = False


# Configuration dictionary for easy access
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig,
}


def get_config_name():
    """Get configuration name from environment."""
    flask_env = os.environ.get('FLASK_ENV', 'development')
    if flask_env == 'production':
        return 'production'
    elif os.environ.get('TESTING'):
        return 'testing'
    return 'development'
