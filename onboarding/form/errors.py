"""
Exception types for the onboarding form.

Both error classes are recoverable: a field error is shown next to its
input and clears once the value passes, a submission error is shown once
at the top of the form and clears after the next successful submission.
"""


class OnboardingError(Exception):
    """Base class for all onboarding form errors."""


class FieldValidationError(OnboardingError):
    """A single field's value broke one of its rules."""

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field
        self.message = message


class SubmissionError(OnboardingError):
    """The outbound POST failed (network error or non-2xx response)."""

    def __init__(self, reason: str, status_code=None):
        super().__init__(reason)
        self.reason = reason
        self.status_code = status_code
