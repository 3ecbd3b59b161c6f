"""
Onboarding form routes.

Request flow (form POST):
1. CSRF validation (flask-wtf before_request hook)
2. Posted fields bound to OnboardingForm and validated by WTForms
3. Every field loaded into a fresh FormController and validated
4. If both agree the form is valid: one POST to the remote endpoint
5. Page re-rendered from the controller's final snapshot

The in-page script uses /api/validate to validate each field as it
changes and to toggle the submit button without a page load.
"""

import asyncio
import json
import uuid

from flask import current_app, g, jsonify, render_template, request

from onboarding.form import form_bp
from onboarding.form.forms import OnboardingForm
from onboarding.form.schema import FIELDS
from onboarding.form.state import FormController


# --- Helpers ---

def get_controller() -> FormController:
    """A controller bound to the app's submission client, one per request."""
    return FormController(current_app.extensions['onboarding.client'])


def render_form(form: OnboardingForm, snapshot):
    response = snapshot.response
    return render_template(
        'form.html',
        form=form,
        snapshot=snapshot,
        errors=snapshot.errors.as_dict(),
        response_json=json.dumps(response, indent=2) if response is not None else '',
    )


async def _load_and_submit(controller: FormController, values: dict, accepted: bool):
    snapshot = await controller.load(values)
    if accepted and snapshot.submit_enabled:
        snapshot = await controller.submit()
        snapshot = await controller.settle()
    return snapshot


async def _validate_one(controller: FormController, values: dict, name: str):
    # Earlier fields are loaded first so the changed field's check is
    # the last one scheduled.
    for other in FIELDS:
        if other != name:
            controller.change(other, values.get(other))
    controller.change(name, values.get(name))
    return await controller.settle()


# --- Request Hooks ---

@form_bp.before_app_request
def set_request_id() -> None:
    """Short unique id for correlating the audit log entries of one request."""
    g.request_id = str(uuid.uuid4())[:8]


# --- Routes ---

@form_bp.route('/', methods=['GET', 'POST'])
def onboarding():
    """
    Onboarding form.

    GET renders the empty form with submission disabled.
    POST validates every field and submits when the form is valid; on
    success the form comes back empty with the response shown below it,
    on failure the typed values are kept and the server error is shown.
    """
    controller = get_controller()
    form = OnboardingForm()

    if not form.is_submitted():
        form = OnboardingForm(formdata=None, data=controller.snapshot.values.as_dict())
        return render_form(form, controller.snapshot)

    accepted = form.validate()
    snapshot = asyncio.run(_load_and_submit(controller, form.values(), accepted))

    if snapshot.response is not None and not snapshot.server_error:
        # Submitted: show the reset values, not what was posted.
        form = OnboardingForm(formdata=None, data=snapshot.values.as_dict())

    return render_form(form, snapshot)


@form_bp.route('/api/validate', methods=['POST'])
def validate():
    """
    Validate the field that just changed.

    Body: {"field": "<name>", "values": {<all current form values>}}
    Returns the field's error ('' when it passes) and whether the whole
    form can be submitted.
    """
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        return jsonify({'error': 'Expected a JSON object.'}), 400

    name = body.get('field')
    values = body.get('values') or {}
    if name not in FIELDS:
        return jsonify({'error': f'Unknown field: {name!r}'}), 400
    if not isinstance(values, dict):
        return jsonify({'error': 'values must be an object.'}), 400

    snapshot = asyncio.run(_validate_one(get_controller(), values, name))

    return jsonify({
        'field': name,
        'error': getattr(snapshot.errors, name),
        'submit_enabled': snapshot.submit_enabled,
    })
