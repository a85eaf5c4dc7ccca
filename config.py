import os
from dotenv import load_dotenv

# Load variables from .env
load_dotenv()


def _database_uri():
    """DATABASE_URL wins; otherwise build a MySQL URI from DB_* variables."""
    url = os.getenv('DATABASE_URL')
    if url:
        return url
    return (
        f"mysql+pymysql://{os.getenv('DB_USER', 'root')}:"
        f"{os.getenv('DB_PASSWORD', '')}@"
        f"{os.getenv('DB_HOST', 'localhost')}:"
        f"{os.getenv('DB_PORT', '3306')}/"
        f"{os.getenv('DB_NAME', 'insighthub')}"
        f"?charset=utf8mb4"
    )


class Config:
    """Base configuration shared by every environment"""

    APP_NAME = 'InsightHub'

    # Flask Core
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-this')

    # Database
    SQLALCHEMY_DATABASE_URI = _database_uri()
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_pre_ping': True,
        'pool_recycle': 3600,
    }

    # Session Configuration
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'
    PERMANENT_SESSION_LIFETIME = int(os.getenv('SESSION_LIFETIME', 604800))  # 7 days

    # Pagination
    ITEMS_PER_PAGE = 20

    # Reports: question sections per exported page
    REPORT_QUESTIONS_PER_PAGE = int(os.getenv('REPORT_QUESTIONS_PER_PAGE', 5))

    # Email Configuration
    MAIL_SERVER = os.getenv('MAIL_SERVER', 'localhost')
    MAIL_PORT = int(os.getenv('MAIL_PORT', 587))
    MAIL_USE_TLS = os.getenv('MAIL_USE_TLS', 'True').lower() == 'true'
    MAIL_USE_SSL = False
    MAIL_USERNAME = os.getenv('MAIL_USERNAME')
    MAIL_PASSWORD = os.getenv('MAIL_PASSWORD')
    MAIL_DEFAULT_SENDER = os.getenv('MAIL_DEFAULT_SENDER', 'noreply@insighthub.local')

    # Send an email alongside each in-app notification
    NOTIFY_BY_EMAIL = os.getenv('NOTIFY_BY_EMAIL', 'False').lower() == 'true'

    # Background jobs (notification emails)
    EXECUTOR_TYPE = 'thread'
    EXECUTOR_MAX_WORKERS = int(os.getenv('EXECUTOR_MAX_WORKERS', 2))
    EXECUTOR_PROPAGATE_EXCEPTIONS = False

    # Rate limiting
    RATELIMIT_ENABLED = True
    RATELIMIT_STORAGE_URI = os.getenv('RATELIMIT_STORAGE_URI', 'memory://')
    LOGIN_RATE_LIMIT = os.getenv('LOGIN_RATE_LIMIT', '10 per minute')

    # Security
    WTF_CSRF_ENABLED = True
    WTF_CSRF_TIME_LIMIT = None  # Token does not expire
    WTF_CSRF_HEADERS = ['X-CSRFToken', 'X-CSRF-Token']

    @classmethod
    def init_app(cls, app):
        pass


class DevelopmentConfig(Config):
    """Local development"""

    DEBUG = True
    TESTING = False
    SESSION_COOKIE_SECURE = False  # plain HTTP allowed locally

    SQLALCHEMY_ECHO = False  # True to print SQL queries


class ProductionConfig(Config):
    """Production server"""

    DEBUG = False
    TESTING = False
    SESSION_COOKIE_SECURE = True  # requires HTTPS

    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Strict'

    @classmethod
    def init_app(cls, app):
        Config.init_app(app)

        if app.config['SECRET_KEY'] == 'dev-secret-key-change-this':
            raise ValueError(
                'SECRET_KEY must be changed in production! '
                'Set it in the .env file'
            )


class TestingConfig(Config):
    """Test suite"""

    TESTING = True
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'  # in-memory database
    SQLALCHEMY_ENGINE_OPTIONS = {}
    WTF_CSRF_ENABLED = False
    RATELIMIT_ENABLED = False
    MAIL_SUPPRESS_SEND = True
    NOTIFY_BY_EMAIL = False
    EXECUTOR_TYPE = 'thread'


# Configuration lookup by name
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
