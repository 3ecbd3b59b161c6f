"""
Outbound submission client.

Sends the collected form values as JSON to the configured endpoint.
One attempt per call: no retries, no backoff. A timeout is only applied
when SUBMIT_TIMEOUT is configured.

Never logs field values. The payload contains the user's password.
"""

import asyncio
from typing import Any, Mapping, Optional

import requests

from onboarding.form.errors import SubmissionError


DEFAULT_ENDPOINT = 'https://reqres.in/api/users'


class SubmissionClient:
    """POST form values to a remote JSON endpoint.

    `post` returns the decoded response body on any 2xx status and raises
    SubmissionError for everything else, including network failures.
    """

    def __init__(
        self,
        endpoint: str = DEFAULT_ENDPOINT,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.endpoint = endpoint
        self.timeout = timeout
        self.session = session or requests.Session()

    def post(self, values: Mapping[str, Any]) -> Any:
        try:
            r = self.session.post(
                self.endpoint,
                json=dict(values),
                headers={'Accept': 'application/json'},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise SubmissionError(f'request_failed: {exc.__class__.__name__}') from exc

        if not 200 <= r.status_code < 300:
            raise SubmissionError('unexpected_status', status_code=r.status_code)

        try:
            return r.json()
        except ValueError:
            # 2xx with a non-JSON body is still a success; surface it as text.
            return r.text

    async def async_post(self, values: Mapping[str, Any]) -> Any:
        """Run the blocking POST in a worker thread."""
        return await asyncio.to_thread(self.post, values)


def client_from_config(config: Mapping[str, Any]) -> SubmissionClient:
    """Build a client from a Flask config mapping."""
    return SubmissionClient(
        endpoint=config.get('ONBOARDING_ENDPOINT', DEFAULT_ENDPOINT),
        timeout=config.get('SUBMIT_TIMEOUT'),
    )
