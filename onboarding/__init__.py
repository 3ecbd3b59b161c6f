"""
Flask application factory.

Creates and configures the onboarding app: CSRF protection, response
headers, audit logging, the form blueprint and the error pages. Uses the
factory pattern so each test can create an app with its own config class.
"""

from flask import Flask, flash, redirect, render_template, url_for

from onboarding.config import DevelopmentConfig


def create_app(config_class=None, submission_client=None):
    """
    Create and configure the Flask application.

    Args:
        config_class: Configuration class to use. Defaults to DevelopmentConfig.
                      Tests pass TestConfig or CSRFTestConfig.
        submission_client: Client used to post completed forms. Defaults to a
                      SubmissionClient built from ONBOARDING_ENDPOINT.

    Returns:
        Configured Flask application instance.
    """
    if config_class is None:
        config_class = DevelopmentConfig

    app = Flask(
        __name__,
        static_folder='static',
        static_url_path='/static',
    )
    app.config.from_object(config_class)

    init_app = getattr(config_class, 'init_app', None)
    if init_app is not None:
        init_app(app)

    # --- Initialize Extensions ---
    from onboarding.extensions import csrf
    csrf.init_app(app)

    # --- Response Headers ---
    from onboarding.headers import init_security_headers
    init_security_headers(app)

    # --- Logging ---
    from onboarding.logging_config import setup_audit_logging
    setup_audit_logging(app)

    # --- Submission Client ---
    from onboarding.form.client import client_from_config
    if submission_client is None:
        submission_client = client_from_config(app.config)
    app.extensions['onboarding.client'] = submission_client

    # --- Register Blueprints ---
    from onboarding.form import form_bp
    app.register_blueprint(form_bp)

    # --- CSRF Error Handler ---
    from flask_wtf.csrf import CSRFError

    @app.errorhandler(CSRFError)
    def handle_csrf_error(e):
        """The user only needs to reload the form to get a fresh token."""
        flash('Your form session has expired. Please try again.', 'warning')
        return redirect(url_for('form.onboarding'))

    # --- HTTP Error Handlers ---

    @app.errorhandler(404)
    def handle_not_found(e):
        return render_template('errors/404.html'), 404

    @app.errorhandler(500)
    def handle_server_error(e):
        """Internal server error. No stack traces or internal details."""
        return render_template('errors/500.html'), 500

    @app.errorhandler(413)
    def handle_request_too_large(e):
        """Request body exceeds MAX_CONTENT_LENGTH (16KB)."""
        return render_template('errors/413.html'), 413

    return app
