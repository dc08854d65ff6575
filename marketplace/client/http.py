from __future__ import annotations

import logging
import os
from datetime import date
from typing import Any

import requests

from ..exceptions import (
    AuthorizationError,
    InvalidTransitionError,
    MarketplaceError,
    NotFoundError,
    TransientError,
    ValidationError,
)
from . import validation

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:8000/api"
DEFAULT_TIMEOUT = 10.0

ERRORS_BY_STATUS: dict[int, type[MarketplaceError]] = {
    400: ValidationError,
    422: ValidationError,
    401: AuthorizationError,
    403: AuthorizationError,
    404: NotFoundError,
    409: InvalidTransitionError,
}


def error_for_response(response: requests.Response) -> MarketplaceError:
    try:
        body = response.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}
    message = body.get("message")
    errors = body.get("errors")
    if response.status_code >= 500:
        return TransientError(message, status_code=response.status_code)
    error_class = ERRORS_BY_STATUS.get(response.status_code, MarketplaceError)
    if error_class is AuthorizationError:
        return AuthorizationError(message)
    if error_class is InvalidTransitionError:
        return InvalidTransitionError(message)
    return error_class(message, errors=errors)


class ApiClient:
    """Thin wrapper over the JSON API.

    Every call returns the ``data`` member of the response envelope or raises a
    domain error. Nothing is retried; the caller decides whether to try again.
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        timeout: float | None = None,
        token: str | None = None,
        session: requests.Session | None = None,
    ):
        self.base_url = (base_url or os.environ.get("HOSTEL_CONNECT_API_URL", DEFAULT_API_URL)).rstrip("/")
        self.timeout = timeout if timeout is not None else float(
            os.environ.get("HOSTEL_CONNECT_API_TIMEOUT", DEFAULT_TIMEOUT)
        )
        self.token = token
        self.session = session or requests.Session()
        self.last_message = ""

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def request(self, method: str, path: str, *, json: Any = None, params: dict | None = None) -> Any:
        url = f"{self.base_url}/{path.lstrip('/')}"
        logger.debug("%s %s", method, url)
        try:
            response = self.session.request(
                method,
                url,
                json=json,
                params=params,
                headers=self._headers(),
                timeout=self.timeout,
            )
        except (requests.ConnectionError, requests.Timeout) as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise TransientError() from exc
        except requests.RequestException as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise TransientError() from exc

        if not response.ok:
            error = error_for_response(response)
            if isinstance(error, TransientError):
                logger.warning("%s %s returned %s", method, url, response.status_code)
            raise error

        if not response.content:
            self.last_message = ""
            return None
        try:
            body = response.json()
        except ValueError as exc:
            raise TransientError("The server sent an unreadable response.", status_code=response.status_code) from exc
        self.last_message = body.get("message") or ""
        return body.get("data")

    # identity
    def me(self) -> dict:
        return self.request("GET", "auth/me")

    # verification
    def decide_landlord_verification(self, landlord_id: int, status: str, reason: str | None = None) -> dict:
        reason = validation.decision_reason(status, reason)
        return self.request("PATCH", f"landlords/{landlord_id}/verify", json={"status": status, "reason": reason})

    def decide_hostel_verification(self, hostel_id: int, status: str, reason: str | None = None) -> dict:
        reason = validation.decision_reason(status, reason)
        return self.request("PATCH", f"hostels/{hostel_id}/verify", json={"status": status, "reason": reason})

    def resubmit_landlord_verification(self) -> dict:
        return self.request("POST", "landlords/me/resubmit")

    def disable_hostel(self, hostel_id: int, reason: str) -> dict:
        reason = validation.required_reason(reason)
        return self.request("PATCH", f"hostels/{hostel_id}/disable", json={"reason": reason})

    def enable_hostel(self, hostel_id: int) -> dict:
        return self.request("PATCH", f"hostels/{hostel_id}/enable")

    # catalog
    def list_hostels(self, **filters) -> dict:
        return self.request("GET", "hostels", params=filters)

    def get_hostel(self, hostel_id: int) -> dict:
        return self.request("GET", f"hostels/{hostel_id}")

    def estimate(self, room_id: int, start_date: date, end_date: date) -> dict:
        return self.request(
            "GET",
            f"rooms/{room_id}/estimate",
            params={"startDate": start_date.isoformat(), "endDate": end_date.isoformat()},
        )

    # bookings
    def create_booking(self, room_id: int, start_date: date, end_date: date) -> dict:
        validation.booking_dates(start_date, end_date)
        return self.request(
            "POST",
            f"rooms/{room_id}/book",
            json={"startDate": start_date.isoformat(), "endDate": end_date.isoformat()},
        )

    def decide_booking(self, booking_id: int, action: str, reason: str | None = None) -> dict:
        if action == "reject":
            reason = validation.required_reason(reason)
        return self.request("PATCH", f"bookings/{booking_id}/decision", json={"action": action, "reason": reason})

    def cancel_booking(self, booking_id: int, reason: str | None = None) -> dict:
        return self.request("PATCH", f"bookings/{booking_id}/cancel", json={"reason": reason})

    def my_bookings(self, status: str | None = None) -> dict:
        return self.request("GET", "bookings/mine", params={"status": status} if status else None)

    def admin_bookings(self, status: str | None = None, hostel_id: int | None = None) -> dict:
        params = {key: value for key, value in (("status", status), ("hostelId", hostel_id)) if value}
        return self.request("GET", "admin/bookings", params=params or None)

    def force_cancel_booking(self, booking_id: int, reason: str) -> dict:
        reason = validation.required_reason(reason)
        return self.request("PATCH", f"admin/bookings/{booking_id}/force-cancel", json={"reason": reason})

    # reviews
    def submit_review(self, hostel_id: int, rating: int, comment: str | None = None) -> dict:
        validation.rating(rating)
        return self.request("POST", f"hostels/{hostel_id}/reviews", json={"rating": rating, "comment": comment or ""})

    def update_review(self, hostel_id: int, review_id: int, rating: int, comment: str | None = None) -> dict:
        validation.rating(rating)
        return self.request(
            "PUT",
            f"hostels/{hostel_id}/reviews/{review_id}",
            json={"rating": rating, "comment": comment or ""},
        )

    def delete_review(self, hostel_id: int, review_id: int) -> dict:
        return self.request("DELETE", f"hostels/{hostel_id}/reviews/{review_id}")

    # moderation
    def file_report(self, hostel_id: int, reason: str, description: str) -> dict:
        description = validation.required_reason(description, field="description", label="A description")
        return self.request("POST", f"hostels/{hostel_id}/reports", json={"reason": reason, "description": description})

    def update_report(self, report_id: int, status: str, admin_notes: str = "", disable_listing: bool = False) -> dict:
        if disable_listing:
            admin_notes = validation.required_reason(admin_notes, field="adminNotes", label="Admin notes")
        return self.request(
            "PATCH",
            f"admin/reports/{report_id}",
            json={"status": status, "adminNotes": admin_notes, "disableListing": disable_listing},
        )

    def change_user_status(self, user_id: int, status: str, reason: str | None = None) -> dict:
        if status in {"suspended", "deactivated"}:
            reason = validation.required_reason(reason)
        return self.request("PATCH", f"admin/users/{user_id}/status", json={"status": status, "reason": reason})

    def admin_overview(self) -> dict:
        return self.request("GET", "admin/overview")

    # saved hostels
    def saved_hostels(self) -> list:
        return self.request("GET", "students/saved-hostels")

    def save_hostel(self, hostel_id: int) -> dict:
        return self.request("POST", f"students/saved-hostels/{hostel_id}")

    def remove_saved_hostel(self, hostel_id: int) -> dict:
        return self.request("DELETE", f"students/saved-hostels/{hostel_id}")

    # notifications
    def notifications(self, is_read: bool | None = None) -> dict:
        params = None if is_read is None else {"isRead": "true" if is_read else "false"}
        return self.request("GET", "notifications", params=params)

    def mark_notification_read(self, notification_id: int) -> dict:
        return self.request("PATCH", f"notifications/{notification_id}/read")

    def mark_all_notifications_read(self) -> dict:
        return self.request("PATCH", "notifications/read-all")
