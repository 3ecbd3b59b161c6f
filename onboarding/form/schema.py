"""
Validation schema: one tuple of rules per form field.

Each rule is a pure predicate plus the message shown when it fails.
Rules for a field run in declaration order and the first failure wins,
so an empty password reports "required" rather than "too short".

The same schema drives both checks the form needs:
- validate_field: inline validation of the field that just changed
- validate_all:   the yes/no answer that enables the submit button
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Tuple

import email_validator
from email_validator import EmailNotValidError, validate_email

from onboarding.form.errors import FieldValidationError


ROLES = (
    'Customer Service Agent',
    'Floor Supervisor',
    'Help-Desk',
    'Engineer',
)

PASSWORD_MIN_LENGTH = 6

# Email is checked for syntax only. email-validator rejects IANA special-use
# names (.local, .test, .invalid, ...) even with globally_deliverable off;
# emptying its list is the library's switch for accepting them.
email_validator.SPECIAL_USE_DOMAIN_NAMES.clear()


@dataclass(frozen=True)
class FieldRule:
    """A predicate over one field's value and the message shown on failure."""

    predicate: Callable[[Any], bool]
    message: str

    def check(self, value: Any) -> bool:
        return bool(self.predicate(value))


def _required(value: Any) -> bool:
    return isinstance(value, str) and value != ''


def _min_length(length: int) -> Callable[[Any], bool]:
    def predicate(value: Any) -> bool:
        return isinstance(value, str) and len(value) >= length
    return predicate


def _email(value: Any) -> bool:
    """Empty passes (email has no required rule); anything else must parse."""
    if not isinstance(value, str):
        return False
    if value == '':
        return True
    try:
        # No DNS lookups, and no dotted TLD required.
        validate_email(value, check_deliverability=False, globally_deliverable=False)
    except EmailNotValidError:
        return False
    return True


def _one_of(choices) -> Callable[[Any], bool]:
    def predicate(value: Any) -> bool:
        return value in choices
    return predicate


def _is_true(value: Any) -> bool:
    return value is True


SCHEMA: Mapping[str, Tuple[FieldRule, ...]] = {
    'name': (
        FieldRule(_required, 'Name is required.'),
    ),
    'pronoun': (
        FieldRule(_required, 'Pronoun is required.'),
    ),
    'email': (
        FieldRule(_email, 'Email must be a valid email.'),
    ),
    'password': (
        FieldRule(_required, 'Password is required.'),
        FieldRule(
            _min_length(PASSWORD_MIN_LENGTH),
            f'Passwords must be at least {PASSWORD_MIN_LENGTH} characters long.',
        ),
    ),
    'roles': (
        FieldRule(
            _one_of(ROLES),
            'Roles must be one of the following values: ' + ', '.join(ROLES) + '.',
        ),
    ),
    'terms': (
        FieldRule(_is_true, 'Terms must be accepted.'),
    ),
}

FIELDS: Tuple[str, ...] = tuple(SCHEMA)


def rules_for(name: str) -> Tuple[FieldRule, ...]:
    """Return the rules of a field. Raises KeyError for unknown fields."""
    try:
        return SCHEMA[name]
    except KeyError:
        raise KeyError(f'Unknown form field: {name!r}') from None


def first_error(name: str, value: Any) -> str:
    """Return the message of the first failing rule, or '' if the value passes."""
    for rule in rules_for(name):
        if not rule.check(value):
            return rule.message
    return ''


def validate_field(name: str, value: Any) -> None:
    """
    Validate one field's value.

    Returns None on success.

    Raises:
        FieldValidationError: the value broke a rule; carries its message.
        KeyError: the field is not part of the form.
    """
    message = first_error(name, value)
    if message:
        raise FieldValidationError(name, message)


def validate_all(values: Mapping[str, Any]) -> bool:
    """True only if every field of the form passes all of its rules."""
    for name in FIELDS:
        if first_error(name, values.get(name)):
            return False
    return True


# --- Async forms used by the form state controller ---

async def avalidate_field(name: str, value: Any) -> None:
    # Yield once so each check resolves as its own step on the event loop.
    await asyncio.sleep(0)
    validate_field(name, value)


async def avalidate_all(values: Mapping[str, Any]) -> bool:
    await asyncio.sleep(0)
    return validate_all(values)


class Validator:
    """
    The schema packaged as an object, so the controller can be given a
    different validator (e.g. one with artificial latency in tests).
    """

    async def validate_field(self, name: str, value: Any) -> None:
        await avalidate_field(name, value)

    async def validate_all(self, values: Mapping[str, Any]) -> bool:
        return await avalidate_all(values)


default_validator = Validator()
