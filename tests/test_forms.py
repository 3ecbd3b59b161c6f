"""
Tests for the WTForms onboarding form.

Every field runs its schema rules through SchemaRules, so form.errors
carries the same messages as the JSON endpoint and the controller.
"""

import pytest
from werkzeug.datastructures import MultiDict
from wtforms.validators import ValidationError

from onboarding.form.forms import OnboardingForm, SchemaRules
from onboarding.form.schema import FIELDS


def posted(values, **overrides):
    data = dict(values, **overrides)
    if data.pop('terms'):
        data['terms'] = 'y'
    return MultiDict(data)


@pytest.fixture
def bind(app):
    """Bind posted values to an OnboardingForm inside a request."""
    def _bind(formdata):
        with app.test_request_context('/', method='POST'):
            form = OnboardingForm(formdata=formdata)
            valid = form.validate()
            return form, valid
    return _bind


class TestSchemaRulesAttached:

    def test_every_field_carries_schema_rules(self, app):
        with app.test_request_context('/'):
            form = OnboardingForm(formdata=None)
            for name in FIELDS:
                rules = [v for v in form[name].validators if isinstance(v, SchemaRules)]
                assert [r.name for r in rules] == [name]


class TestValidation:

    def test_complete_form_validates(self, bind, patrice):
        form, valid = bind(posted(patrice))
        assert valid is True
        assert form.errors == {}

    @pytest.mark.parametrize('name, bad, message', [
        ('name', '', 'Name is required.'),
        ('pronoun', '', 'Pronoun is required.'),
        ('email', 'nope', 'Email must be a valid email.'),
        ('password', '', 'Password is required.'),
        ('password', 'abc', 'Passwords must be at least 6 characters long.'),
        ('terms', False, 'Terms must be accepted.'),
    ])
    def test_failing_rule_message_reported(self, bind, patrice, name, bad, message):
        form, valid = bind(posted(patrice, **{name: bad}))
        assert valid is False
        assert form.errors == {name: [message]}

    def test_blank_role_reported_by_schema(self, bind, patrice):
        form, valid = bind(posted(patrice, roles=''))
        assert valid is False
        assert 'Help-Desk' in form.errors['roles'][0]

    def test_reserved_email_domain_validates(self, bind, patrice):
        form, valid = bind(posted(patrice, email='jane@company.local'))
        assert valid is True

    def test_missing_fields_reported(self, bind):
        form, valid = bind(MultiDict())
        assert valid is False
        assert {'name', 'pronoun', 'password', 'roles', 'terms'} <= set(form.errors)
        assert 'email' not in form.errors


class TestPostGate:

    def test_form_rejection_blocks_submission(self, client, fake_client, patrice, monkeypatch):
        # The controller would accept these values; the WTForms check alone refuses them.
        def refuse(self, form, field):
            if field.name == 'pronoun':
                raise ValidationError('refused')
        monkeypatch.setattr(SchemaRules, '__call__', refuse)

        response = client.post('/', data=posted(patrice))

        assert response.status_code == 200
        assert fake_client.calls == []
