"""
WTForms definition of the onboarding form.

Server-side validation is the authoritative check; the in-page script
only mirrors it. Every field carries a SchemaRules validator, which
applies that field's rules from schema.py, so WTForms, the JSON endpoint
and the form state controller all report the same messages.
"""

from flask_wtf import FlaskForm
from wtforms import BooleanField, PasswordField, SelectField, StringField
from wtforms.validators import ValidationError
from wtforms.widgets import PasswordInput

from onboarding.form.schema import FIELDS, ROLES, first_error
from onboarding.form.state import INPUT_TYPES, normalize_value


class SchemaRules:
    """
    WTForms validator running a field's schema rules.

    The field's data is normalized the way the controller normalizes a
    change, then the first failing rule's message becomes the error.
    """

    def __init__(self, name: str):
        self.name = name

    def __call__(self, form, field):
        value = normalize_value(field.data, INPUT_TYPES.get(self.name, 'text'))
        message = first_error(self.name, value)
        if message:
            raise ValidationError(message)


def _cy(name: str) -> dict:
    """Stable hooks for browser tests."""
    return {'data-cy': name}


class OnboardingForm(FlaskForm):
    """Name, pronoun, email, password, role and terms."""

    name = StringField('Name', validators=[SchemaRules('name')], render_kw=_cy('name'))

    pronoun = StringField('Pronoun', validators=[SchemaRules('pronoun')], render_kw=_cy('pronoun'))

    email = StringField(
        'Email',
        validators=[SchemaRules('email')],
        render_kw={**_cy('email'), 'autocomplete': 'email'},
    )

    # The page re-renders typed values after a failed submission,
    # the password included.
    password = PasswordField(
        'Password',
        validators=[SchemaRules('password')],
        widget=PasswordInput(hide_value=False),
        render_kw={**_cy('password'), 'autocomplete': 'new-password'},
    )

    roles = SelectField(
        'Roles',
        choices=[('', '--Choose One--')] + [(role, role) for role in ROLES],
        # The schema decides what is acceptable, including the blank choice.
        validate_choice=False,
        validators=[SchemaRules('roles')],
        render_kw=_cy('roles'),
    )

    terms = BooleanField('Terms', validators=[SchemaRules('terms')], render_kw=_cy('terms'))

    def values(self) -> dict:
        """Field data normalized the way the controller expects it."""
        return {
            name: normalize_value(getattr(self, name).data, INPUT_TYPES.get(name, 'text'))
            for name in FIELDS
        }
