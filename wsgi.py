"""
WSGI entry point for production deployment (gunicorn).

Usage:
    gunicorn -c gunicorn.conf.py wsgi:app

Creates the Flask app with ProductionConfig, which refuses to start
without SECRET_KEY.
"""

import sys

from onboarding.config import ProductionConfig

if not ProductionConfig.SECRET_KEY:
    print(
        'FATAL: SECRET_KEY environment variable is required.\n'
        'Generate one with: python -c "import secrets; print(secrets.token_hex(32))"',
        file=sys.stderr,
    )
    sys.exit(1)

from onboarding import create_app  # noqa: E402

app = create_app(config_class=ProductionConfig)
