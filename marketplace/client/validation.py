"""Checks run before a request is issued, so malformed input never reaches the server."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

from ..exceptions import ValidationError

REJECT_OUTCOMES = {"reject", "rejected"}


def required_reason(reason: str | None, field: str = "reason", label: str = "A reason") -> str:
    text = (reason or "").strip()
    if not text:
        raise ValidationError(errors={field: [f"{label} is required for this action."]})
    return text


def decision_reason(status: str, reason: str | None) -> str | None:
    if str(status).lower() in REJECT_OUTCOMES:
        return required_reason(reason, label="A rejection reason")
    return reason


def booking_dates(start_date: date, end_date: date, today: date | None = None) -> None:
    today = today or datetime.now(timezone.utc).date()
    errors = {}
    if start_date < today + timedelta(days=1):
        errors["startDate"] = ["Start date must be tomorrow or later."]
    if end_date <= start_date:
        errors["endDate"] = ["End date must be after the start date."]
    if errors:
        raise ValidationError(errors=errors)


def rating(value) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not 1 <= value <= 5:
        raise ValidationError(errors={"rating": ["Rating must be a whole number from 1 to 5."]})
    return value
