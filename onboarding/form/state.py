"""
Form state controller.

The form's state is one immutable FormSnapshot, replaced on every event:

    change(field, raw)  -> values merged now; the field's own check and
                           the whole-form check are scheduled as tasks
    field check resolves -> that field's error set or cleared
    form check resolves  -> submit_enabled set to the result
    submit()            -> one POST; reset values on success,
                           set server_error on failure

Validation tasks are fire-and-forget and never cancelled. When a field
changes twice in quick succession both checks run, and whichever
resolves last writes the error (last-resolved wins, not last-issued).
Each write applies to the snapshot current at resolution time, so a
field's check never touches another field's error.
"""

import asyncio
from dataclasses import asdict, dataclass, field, replace
from typing import Any, Callable, Dict, List, Mapping, Optional, Set

from onboarding.form import audit
from onboarding.form.errors import FieldValidationError, SubmissionError
from onboarding.form.schema import FIELDS, ROLES, default_validator, rules_for


DEFAULT_ROLE = ROLES[0]

# Shown for any failed submission. The reason goes to the audit log only.
SERVER_ERROR_MESSAGE = 'Error Message'

# How each field's raw input is normalized; everything else is text.
INPUT_TYPES: Dict[str, str] = {'terms': 'checkbox'}

_CHECKED = ('on', 'true', '1', 'y', 'yes')


@dataclass(frozen=True)
class FormValues:
    """Current value of every form field."""

    name: str = ''
    pronoun: str = ''
    email: str = ''
    password: str = ''
    roles: str = DEFAULT_ROLE
    terms: bool = False

    def merge(self, name: str, value: Any) -> 'FormValues':
        return replace(self, **{name: value})

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class FieldErrors:
    """Per-field messages; '' means the field has no error."""

    name: str = ''
    pronoun: str = ''
    email: str = ''
    password: str = ''
    roles: str = ''
    terms: str = ''

    def set(self, name: str, message: str) -> 'FieldErrors':
        return replace(self, **{name: message})

    def as_dict(self) -> Dict[str, str]:
        return asdict(self)


@dataclass(frozen=True)
class FormSnapshot:
    """Everything the page renders, at one point in time."""

    values: FormValues = field(default_factory=FormValues)
    errors: FieldErrors = field(default_factory=FieldErrors)
    submit_enabled: bool = False
    server_error: str = ''
    # Body of the last successful submission, shown under the form.
    response: Any = None


def normalize_value(raw_value: Any, input_type: str = 'text') -> Any:
    """Checkbox input becomes a bool; any other input becomes text."""
    if input_type == 'checkbox':
        if isinstance(raw_value, str):
            return raw_value.strip().lower() in _CHECKED
        return bool(raw_value)
    if raw_value is None:
        return ''
    return str(raw_value)


class FormController:
    """
    Owns the onboarding form's snapshot and reacts to form events.

    `change` must be called while an asyncio event loop is running,
    because it schedules the validation tasks on that loop.

    Args:
        client: Object with an `endpoint` attribute and an async
                `async_post(values)` method (see SubmissionClient).
        validator: Object with async `validate_field` and `validate_all`.
                   Defaults to the static schema.
    """

    def __init__(self, client, validator=None) -> None:
        self.client = client
        self.validator = validator or default_validator
        self._snapshot = FormSnapshot()
        self._pending: Set[asyncio.Task] = set()
        self._subscribers: List[Callable[[FormSnapshot], None]] = []

    @property
    def snapshot(self) -> FormSnapshot:
        return self._snapshot

    @property
    def pending(self) -> int:
        """Number of validation tasks that have not resolved yet."""
        return len(self._pending)

    def subscribe(self, callback: Callable[[FormSnapshot], None]) -> Callable[[], None]:
        """Call `callback` with every new snapshot. Returns an unsubscribe function."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _replace(self, **changes) -> FormSnapshot:
        self._snapshot = replace(self._snapshot, **changes)
        for callback in list(self._subscribers):
            callback(self._snapshot)
        return self._snapshot

    def _spawn(self, coro) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    # --- Events ---

    def change(self, name: str, raw_value: Any, input_type: Optional[str] = None) -> FormSnapshot:
        """
        Handle a change of one field.

        The merged values are visible immediately in the returned snapshot;
        the field's error and submit_enabled follow once the scheduled
        checks resolve.

        Raises:
            KeyError: `name` is not a form field. Nothing is changed.
        """
        rules_for(name)
        if input_type is None:
            input_type = INPUT_TYPES.get(name, 'text')
        value = normalize_value(raw_value, input_type)

        snapshot = self._replace(values=self._snapshot.values.merge(name, value))
        self._spawn(self._validate_change(name, value))
        self._spawn(self._check_validity(snapshot.values))
        return snapshot

    async def load(self, values: Mapping[str, Any]) -> FormSnapshot:
        """
        Apply a change for every form field from a posted form, then settle.

        Missing text fields count as empty and a missing checkbox as
        unchecked, which is how browsers post HTML forms.
        """
        for name in FIELDS:
            self.change(name, values.get(name))
        return await self.settle()

    async def settle(self) -> FormSnapshot:
        """Wait until every scheduled validation task has resolved."""
        while self._pending:
            await asyncio.gather(*list(self._pending))
        return self._snapshot

    async def submit(self) -> FormSnapshot:
        """
        Send the current values to the remote endpoint, once.

        Does nothing while submission is disabled, like the disabled
        submit button it stands for.

        Success: response stored, server_error cleared, values reset.
        Errors and submit_enabled are left for the next check to derive.
        Failure: server_error set, values kept.
        """
        if not self._snapshot.submit_enabled:
            return self._snapshot

        endpoint = self.client.endpoint
        try:
            payload = await self.client.async_post(self._snapshot.values.as_dict())
        except SubmissionError as exc:
            audit.log_submission_failed(endpoint, exc.reason, status=exc.status_code)
            return self._replace(server_error=SERVER_ERROR_MESSAGE)

        audit.log_submission_success(endpoint)
        snapshot = self._replace(response=payload, server_error='', values=FormValues())
        self._spawn(self._check_validity(snapshot.values))
        return snapshot

    # --- Scheduled checks ---

    async def _validate_change(self, name: str, value: Any) -> None:
        try:
            await self.validator.validate_field(name, value)
        except FieldValidationError as exc:
            audit.log_field_invalid(name, exc.message)
            self._replace(errors=self._snapshot.errors.set(name, exc.message))
        else:
            self._replace(errors=self._snapshot.errors.set(name, ''))

    async def _check_validity(self, values: FormValues) -> None:
        valid = await self.validator.validate_all(values.as_dict())
        audit.log_form_validity(valid)
        self._replace(submit_enabled=valid)
