"""
Flask application configuration classes.
Provides configuration for development, production, and testing environments.
"""

import os


class Config:
    """Base configuration class with common settings."""

    # Secret key for session signing
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'

    # Database configuration
    DATABASE_PATH = os.environ.get('DATABASE_PATH') or 'instance/camrent.db'
    # Seconds a writer waits for the SQLite write lock
    DATABASE_TIMEOUT = float(os.environ.get('DATABASE_TIMEOUT', 5.0))

    # JSON output keeps the declared key order of records
    JSON_SORT_KEYS = False

    # Timezone used to resolve "today" and log timestamps
    TIMEZONE = os.environ.get('TIMEZONE') or 'Asia/Ho_Chi_Minh'

    # Availability engine
    AVAILABILITY_HORIZON_DAYS = int(os.environ.get('AVAILABILITY_HORIZON_DAYS', 14))

    # Calendar projection defaults (hour of day)
    DEFAULT_DELIVERY_HOUR = 9
    DEFAULT_RETURN_HOUR = 18

    # Notification surface
    NOTIFICATION_BUFFER_SIZE = int(os.environ.get('NOTIFICATION_BUFFER_SIZE', 100))

    # Application settings
    APP_NAME = 'CamRent'
    APP_VERSION = '1.0.0'


class DevelopmentConfig(Config):
    """Development environment configuration."""

    DEBUG = True
    TESTING = False


class ProductionConfig(Config):
    """Production environment configuration."""

    DEBUG = False
    TESTING = False

    SECRET_KEY = os.environ.get('SECRET_KEY') or Config.SECRET_KEY
    DATABASE_PATH = os.environ.get('DATABASE_PATH') or Config.DATABASE_PATH

    @classmethod
    def validate(cls) -> None:
        """Validate that required production environment variables are set."""
        secret_key = os.environ.get('SECRET_KEY')
        if not secret_key:
            raise ValueError("SECRET_KEY environment variable must be set in production")
        if len(secret_key) < 32:
            raise ValueError("SECRET_KEY must be at least 32 characters in production")
        if not os.environ.get('DATABASE_PATH'):
            raise ValueError("DATABASE_PATH environment variable must be set in production")


class TestConfig(Config):
    """Testing environment configuration."""

    TESTING = True
    DEBUG = True
    DATABASE_PATH = os.environ.get('DATABASE_PATH', ':memory:')
    SECRET_KEY = 'test-secret-key'


# Configuration dictionary
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'test': TestConfig,
    'default': DevelopmentConfig
}
