"""
Response headers middleware.

Applied via @app.after_request to every response. The form page runs one
inline script, allowed through a per-request CSP nonce.
"""

import secrets

from flask import Flask, g, request


def generate_csp_nonce() -> str:
    """Random nonce for the Content-Security-Policy, new on every request."""
    return secrets.token_urlsafe(32)


def init_security_headers(app: Flask) -> None:
    """Register header hooks on the Flask app."""

    @app.before_request
    def set_csp_nonce() -> None:
        g.csp_nonce = generate_csp_nonce()

    @app.context_processor
    def inject_csp_nonce() -> dict:
        """Make the CSP nonce available in all Jinja2 templates."""
        return {'csp_nonce': g.get('csp_nonce', '')}

    @app.after_request
    def set_security_headers(response):
        nonce = g.get('csp_nonce', '')

        # Only the nonce-tagged inline script runs; it may only call back
        # to this origin (connect-src) and the form only posts here.
        csp_directives = [
            "default-src 'self'",
            f"script-src 'nonce-{nonce}'",
            f"style-src 'self' 'nonce-{nonce}'",
            "connect-src 'self'",
            "img-src 'self'",
            "frame-ancestors 'none'",
            "form-action 'self'",
            "base-uri 'self'",
            "object-src 'none'",
        ]
        response.headers['Content-Security-Policy'] = '; '.join(csp_directives)
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['X-Frame-Options'] = 'DENY'
        response.headers['Referrer-Policy'] = 'strict-origin-when-cross-origin'

        # The page echoes back what the user typed, password included.
        if not request.path.startswith('/static/'):
            response.headers['Cache-Control'] = (
                'no-store, no-cache, must-revalidate, max-age=0'
            )
            response.headers['Pragma'] = 'no-cache'

        response.headers.pop('Server', None)
        return response
