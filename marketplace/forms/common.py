from __future__ import annotations

from django import forms

from ..exceptions import ValidationError


def form_errors(form: forms.BaseForm) -> dict[str, list[str]]:
    errors: dict[str, list[str]] = {}
    for field, messages in form.errors.items():
        errors[field] = [str(message) for message in messages]
    return errors


def validated(form: forms.BaseForm) -> forms.BaseForm:
    """Return ``form`` if it is valid, else raise a domain ValidationError."""
    if not form.is_valid():
        raise ValidationError(errors=form_errors(form))
    return form


def clean_reason(reason, field: str = "reason") -> str:
    """Optional free-text reason, trimmed. Anything other than text is rejected."""
    if reason is None:
        return ""
    if not isinstance(reason, str):
        raise ValidationError(errors={field: ["This field must be text."]})
    return reason.strip()


def require_reason(reason: str | None, field: str = "reason", label: str = "A reason") -> str:
    """Destructive actions (reject, disable, suspend) must carry a non-empty reason."""
    text = clean_reason(reason, field)
    if not text:
        raise ValidationError(errors={field: [f"{label} is required for this action."]})
    return text
