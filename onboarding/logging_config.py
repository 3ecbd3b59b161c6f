"""
Structured audit logging for the onboarding form.

One JSON object per line on the 'onboarding.audit' logger. The event
name decides the level:

    field_invalid       DEBUG    a field failed its inline check
    form_validity       DEBUG    submit button enabled or disabled
    submission_success  INFO     remote endpoint accepted the form
    submission_failed   WARNING  POST failed (status or network reason)

NEVER logs field values. The form carries a password, and names and
emails are personal data; events record which field failed, not what
was typed.
"""

import json
import logging
import re
import time
from typing import Any, Dict


AUDIT_LOGGER = 'onboarding.audit'

EVENT_LEVELS: Dict[str, int] = {
    'field_invalid': logging.DEBUG,
    'form_validity': logging.DEBUG,
    'submission_success': logging.INFO,
    'submission_failed': logging.WARNING,
}

# Context keys copied from the record into the JSON entry.
# Booleans and numbers are kept as JSON values, text is sanitized.
CONTEXT_FIELDS = ('field', 'valid', 'status', 'endpoint', 'request_id', 'reason')

# All C0 control characters, CR/LF/TAB included, plus DEL.
# A newline in a failure reason must not start a forged log line.
_CONTROL_CHARS = re.compile(r'[\x00-\x1f\x7f]')


def sanitize_log_value(value: str, max_length: int = 256) -> str:
    """Strip control characters and truncate to `max_length`."""
    cleaned = _CONTROL_CHARS.sub('', str(value))
    return cleaned[:max_length]


class OnboardingAuditFormatter(logging.Formatter):
    """JSON formatter for onboarding audit events."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry: Dict[str, Any] = {
            'timestamp': time.strftime('%Y-%m-%dT%H:%M:%S%z', time.gmtime(record.created)),
            'level': record.levelname,
            'event': getattr(record, 'event', 'unknown'),
            'message': sanitize_log_value(record.getMessage()),
        }

        for key in CONTEXT_FIELDS:
            value = getattr(record, key, None)
            if value is None:
                continue
            if isinstance(value, (bool, int)):
                log_entry[key] = value
            else:
                log_entry[key] = sanitize_log_value(value)

        return json.dumps(log_entry)


def setup_audit_logging(app) -> logging.Logger:
    """
    Attach the JSON stderr handler to the audit logger.

    The threshold comes from AUDIT_LOG_LEVEL: DEBUG shows every keystroke
    check, INFO only submissions.
    """
    logger = logging.getLogger(AUDIT_LOGGER)
    logger.setLevel(app.config.get('AUDIT_LOG_LEVEL', logging.INFO))

    # Repeated create_app() calls (tests) must not stack handlers.
    if logger.handlers:
        return logger

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(OnboardingAuditFormatter())
    logger.addHandler(console_handler)

    return logger


def audit_log(event: str, message: str, **context) -> None:
    """
    Log a form event at the level EVENT_LEVELS assigns to it.

    Unknown events are logged at INFO.
    """
    logger = logging.getLogger(AUDIT_LOGGER)
    extra = {'event': event}
    extra.update(context)
    logger.log(EVENT_LEVELS.get(event, logging.INFO), message, extra=extra)
