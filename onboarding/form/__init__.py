"""
Onboarding form blueprint: the page, its submission and the JSON
validation endpoint.
"""

from flask import Blueprint

form_bp = Blueprint(
    'form',
    __name__,
    template_folder='../templates',
)

# Import routes to register them with the blueprint.
# This import must be at the bottom to avoid circular imports.
from onboarding.form import routes  # noqa: E402, F401
