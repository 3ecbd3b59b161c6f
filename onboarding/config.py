"""
Application configuration, one class per environment.

Each threshold carries a comment saying what it bounds.
"""

import logging
import os
import secrets

from onboarding.form.client import DEFAULT_ENDPOINT


class BaseConfig:
    """Shared configuration for all environments."""

    # --- Flask Core ---
    # Signs the session cookie that carries the CSRF token.
    # Generated per process unless provided by the environment.
    SECRET_KEY = os.environ.get('SECRET_KEY') or secrets.token_hex(32)

    # The onboarding form posts ~300 bytes; reject anything over 16KB.
    MAX_CONTENT_LENGTH = 16 * 1024  # 16KB

    # --- Session Cookie Flags ---
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'

    # --- Submission ---
    # Remote endpoint receiving the JSON-encoded form values.
    ONBOARDING_ENDPOINT = os.environ.get('ONBOARDING_ENDPOINT', DEFAULT_ENDPOINT)
    # Seconds before the outbound POST gives up. None = wait indefinitely.
    SUBMIT_TIMEOUT = None

    # --- Logging ---
    # Field-level events are DEBUG; submissions are INFO/WARNING.
    AUDIT_LOG_LEVEL = logging.INFO


class ProductionConfig(BaseConfig):
    """Production environment."""

    DEBUG = False
    TESTING = False

    # SECRET_KEY MUST be set via environment variable in production.
    # A random per-process key breaks CSRF tokens across gunicorn workers.
    SECRET_KEY = os.environ.get('SECRET_KEY')

    SESSION_COOKIE_SECURE = True

    @classmethod
    def init_app(cls, app):
        """Validate required configuration at startup."""
        if not cls.SECRET_KEY:
            raise RuntimeError(
                'SECRET_KEY environment variable is required in production. '
                'Generate one with: python -c "import secrets; print(secrets.token_hex(32))"'
            )


class DevelopmentConfig(BaseConfig):
    """Development environment, served over plain HTTP."""

    DEBUG = True
    SESSION_COOKIE_SECURE = False
    AUDIT_LOG_LEVEL = logging.DEBUG


class TestConfig(BaseConfig):
    """Test environment. CSRF off by default, endpoint never reachable."""

    TESTING = True
    SESSION_COOKIE_SECURE = False
    WTF_CSRF_ENABLED = False
    # Tests replace the submission client; a stray real POST fails fast here.
    ONBOARDING_ENDPOINT = 'http://127.0.0.1:9/api/users'
    SUBMIT_TIMEOUT = 1


class CSRFTestConfig(TestConfig):
    """Test config with CSRF protection enabled."""

    WTF_CSRF_ENABLED = True
