"""
Pytest fixtures for the onboarding form test suite.

The remote endpoint is never contacted: the app gets a FakeClient that
records every submission and either echoes the payload back or fails.

- app/client: Base test config (CSRF off)
- csrf_app/csrf_client: CSRF enabled
- failing_app/failing_client: every submission fails
"""

import pytest

from onboarding import create_app
from onboarding.config import CSRFTestConfig, TestConfig
from onboarding.form.errors import SubmissionError


PATRICE = {
    'name': 'Patrice',
    'pronoun': 'She/Her',
    'email': 'patrice@email.com',
    'password': 'secret123',
    'roles': 'Customer Service Agent',
    'terms': True,
}


class FakeClient:
    """Stands in for SubmissionClient; records what would have been posted."""

    endpoint = 'https://api.test/api/users'

    def __init__(self, fail=False):
        self.fail = fail
        self.calls = []

    async def async_post(self, values):
        self.calls.append(dict(values))
        if self.fail:
            raise SubmissionError('unexpected_status', status_code=500)
        return dict(values, id='42', createdAt='2026-10-19T00:00:00.000Z')


@pytest.fixture
def anyio_backend():
    return 'asyncio'


@pytest.fixture
def patrice():
    """A complete, valid set of form values."""
    return dict(PATRICE)


@pytest.fixture
def fake_client():
    return FakeClient()


@pytest.fixture
def failing_fake_client():
    return FakeClient(fail=True)


@pytest.fixture
def app(fake_client):
    """Create a Flask app with the base test configuration."""
    yield create_app(TestConfig, submission_client=fake_client)


@pytest.fixture
def client(app):
    """Test client for the base app configuration."""
    return app.test_client()


@pytest.fixture
def failing_app(failing_fake_client):
    """App whose submissions always fail."""
    yield create_app(TestConfig, submission_client=failing_fake_client)


@pytest.fixture
def failing_client(failing_app):
    return failing_app.test_client()


@pytest.fixture
def csrf_app(fake_client):
    """Create a Flask app with CSRF protection enabled."""
    yield create_app(CSRFTestConfig, submission_client=fake_client)


@pytest.fixture
def csrf_client(csrf_app):
    """Test client with CSRF protection enabled."""
    return csrf_app.test_client()
