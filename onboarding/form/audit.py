"""
Audit helpers for form events.

The controller runs both inside Flask requests and on its own (tests,
scripts), so the request id is attached only when a request is active.
"""

from flask import g, has_request_context

from onboarding.logging_config import audit_log, sanitize_log_value


def get_request_context() -> dict:
    """Return the request id for log correlation, if inside a request."""
    if not has_request_context():
        return {}
    return {'request_id': g.get('request_id', 'unknown')}


def log_field_invalid(field: str, message: str) -> None:
    """Audit log: a field failed its inline validation."""
    audit_log(
        event='field_invalid',
        message=f'Field {sanitize_log_value(field)} failed validation',
        field=field,
        reason=message,
        **get_request_context(),
    )


def log_form_validity(valid: bool) -> None:
    """Audit log: whole-form validity re-checked."""
    audit_log(
        event='form_validity',
        message=f'Is form valid? {valid}',
        valid=valid,
        **get_request_context(),
    )


def log_submission_success(endpoint: str) -> None:
    """Audit log: the remote endpoint accepted the submission."""
    audit_log(
        event='submission_success',
        message='Onboarding form submitted',
        endpoint=endpoint,
        **get_request_context(),
    )


def log_submission_failed(endpoint: str, reason: str, status=None) -> None:
    """Audit log: the submission POST failed."""
    audit_log(
        event='submission_failed',
        message=f'Onboarding form submission failed: {sanitize_log_value(reason)}',
        endpoint=endpoint,
        reason=reason,
        status=status,
        **get_request_context(),
    )
