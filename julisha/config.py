import os
from datetime import timedelta

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in ("1", "true", "yes", "on")


class Config:
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", "postgresql://localhost:5432/julisha"
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {
        "pool_pre_ping": True,
        "pool_timeout": int(os.environ.get("DB_POOL_TIMEOUT", "10")),
        "connect_args": {
            "connect_timeout": 5,
            "options": "-c statement_timeout=%s" % os.environ.get("DB_STATEMENT_TIMEOUT_MS", "5000"),
        },
    }

    # Create tables at startup instead of requiring `flask db upgrade`
    AUTO_CREATE_SCHEMA = _env_bool("AUTO_CREATE_SCHEMA", "false")

    # Hashing
    SERVER_SALT = os.environ.get("SERVER_SALT", "dev-server-salt-change-me")
    PUBLIC_SALT = os.environ.get("PUBLIC_SALT", "JULISHA_KENYA_2026_PUBLIC_SALT")

    # Admin bearer token; empty disables the admin endpoints
    ADMIN_TOKEN = os.environ.get("ADMIN_TOKEN", "")

    PORT = int(os.environ.get("PORT", "3000"))

    # Petition settings
    SIGNATURE_TARGET = int(os.environ.get("SIGNATURE_TARGET", "1000000"))
    COMMENT_MAX_LENGTH = 500
    ADMIN_RECENT_LIMIT = 50
    ADMIN_COMMENT_PREVIEW = 100

    # Phone verification
    VERIFICATION_CODE_TTL = timedelta(minutes=10)
    SMS_DEMO_MODE = _env_bool("SMS_DEMO_MODE", "true")

    # Request-rate limiter (attempts per client IP, fixed window)
    RATE_LIMIT_WINDOW = timedelta(minutes=15)
    RATE_LIMIT_MAX_ATTEMPTS = int(os.environ.get("RATE_LIMIT_MAX_ATTEMPTS", "3"))

    # Successful signatures per hashed IP, rolling window
    IP_SIGNATURE_WINDOW = timedelta(hours=24)
    IP_SIGNATURE_LIMIT = int(os.environ.get("IP_SIGNATURE_LIMIT", "3"))

    # HTTP
    CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*")
    TRUST_PROXY = _env_bool("TRUST_PROXY", "false")
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    SQLALCHEMY_ENGINE_OPTIONS = {}
    AUTO_CREATE_SCHEMA = True
    SERVER_SALT = "test-server-salt"
    PUBLIC_SALT = "JULISHA_KENYA_2026_PUBLIC_SALT"
    ADMIN_TOKEN = "test-admin-token"
    SMS_DEMO_MODE = True
    RATE_LIMIT_MAX_ATTEMPTS = 3
    IP_SIGNATURE_LIMIT = 3
    TRUST_PROXY = False
