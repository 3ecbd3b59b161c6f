"""
Flask extension instances, created here and initialized in the app factory.

Kept apart from __init__.py so the blueprint can import them without
a circular import.
"""

from flask_wtf.csrf import CSRFProtect

# CSRF protection: validates tokens on the form POST and on the JSON
# validation endpoint (sent there as the X-CSRFToken header).
csrf = CSRFProtect()
