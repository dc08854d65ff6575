import json
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest import mock

import requests
from django.test import SimpleTestCase

from ..client import ApiClient, SavedHostelsState, SessionStore
from ..exceptions import (
    AuthorizationError,
    InvalidTransitionError,
    NotFoundError,
    TransientError,
    ValidationError,
)


def utc_today():
    return datetime.now(timezone.utc).date()


def fake_response(status_code, body=None):
    response = requests.Response()
    response.status_code = status_code
    response._content = json.dumps(body).encode("utf-8") if body is not None else b""
    response.headers["Content-Type"] = "application/json"
    return response


class ClientTestCase(SimpleTestCase):
    def setUp(self):
        self.session = mock.Mock(spec=requests.Session)
        self.api = ApiClient("http://api.test/api/", session=self.session, timeout=5)

    def reply(self, status_code, body=None):
        self.session.request.return_value = fake_response(status_code, body)


class ApiClientTest(ClientTestCase):
    def test_unwraps_envelope_and_sends_bearer_token(self):
        self.api.token = "abc"
        self.reply(200, {"data": {"id": 1}, "message": "ok"})
        self.assertEqual(self.api.me(), {"id": 1})
        self.assertEqual(self.api.last_message, "ok")
        _, kwargs = self.session.request.call_args
        self.assertEqual(self.session.request.call_args.args[:2], ("GET", "http://api.test/api/auth/me"))
        self.assertEqual(kwargs["headers"]["Authorization"], "Bearer abc")
        self.assertEqual(kwargs["timeout"], 5)

    def test_status_codes_map_to_domain_errors(self):
        cases = [
            (400, ValidationError),
            (422, ValidationError),
            (401, AuthorizationError),
            (403, AuthorizationError),
            (404, NotFoundError),
            (409, InvalidTransitionError),
            (500, TransientError),
            (503, TransientError),
        ]
        for status_code, error_class in cases:
            with self.subTest(status_code=status_code):
                self.reply(status_code, {"message": "nope", "errors": {"field": ["bad"]}})
                with self.assertRaises(error_class):
                    self.api.get_hostel(1)

    def test_validation_errors_keep_field_messages(self):
        self.reply(400, {"message": "Please fix", "errors": {"rating": ["Too high"]}})
        with self.assertRaises(ValidationError) as caught:
            self.api.get_hostel(1)
        self.assertEqual(caught.exception.errors, {"rating": ["Too high"]})
        self.assertEqual(caught.exception.message, "Please fix")

    def test_authorization_message_is_generic(self):
        self.reply(403, {"message": "role student not in ('admin',)"})
        with self.assertRaises(AuthorizationError) as caught:
            self.api.admin_overview()
        self.assertEqual(caught.exception.message, AuthorizationError.default_message)

    def test_connection_failure_is_transient_and_not_retried(self):
        self.session.request.side_effect = requests.ConnectionError("down")
        with self.assertRaises(TransientError):
            self.api.get_hostel(1)
        self.assertEqual(self.session.request.call_count, 1)

    def test_invalid_input_never_reaches_the_server(self):
        today = utc_today()
        with self.assertRaises(ValidationError):
            self.api.create_booking(1, today, today + timedelta(days=3))
        with self.assertRaises(ValidationError):
            self.api.create_booking(1, today + timedelta(days=5), today + timedelta(days=5))
        with self.assertRaises(ValidationError):
            self.api.decide_booking(1, "reject", " ")
        with self.assertRaises(ValidationError):
            self.api.decide_hostel_verification(1, "rejected")
        with self.assertRaises(ValidationError):
            self.api.disable_hostel(1, "")
        with self.assertRaises(ValidationError):
            self.api.submit_review(1, 6)
        with self.assertRaises(ValidationError):
            self.api.change_user_status(1, "suspended")
        with self.assertRaises(ValidationError):
            self.api.force_cancel_booking(1, "")
        self.session.request.assert_not_called()

    def test_booking_payload_is_camel_case(self):
        self.reply(201, {"data": {"id": 9, "status": "pending"}, "message": ""})
        start = utc_today() + timedelta(days=2)
        self.api.create_booking(4, start, start + timedelta(days=3))
        kwargs = self.session.request.call_args.kwargs
        self.assertEqual(kwargs["json"], {"startDate": start.isoformat(), "endDate": (start + timedelta(days=3)).isoformat()})


class SessionStoreTest(ClientTestCase):
    def test_init_validates_stored_token(self):
        with tempfile.TemporaryDirectory() as directory:
            path = Path(directory) / "session.json"
            path.write_text(json.dumps({"token": "stored", "user": {"id": 1}}), encoding="utf-8")
            self.reply(200, {"data": {"id": 1, "role": "student"}, "message": ""})
            store = SessionStore(self.api, path)
            user = store.init()
            self.assertEqual(user["role"], "student")
            self.assertTrue(store.is_authenticated)
            self.assertEqual(self.api.token, "stored")

    def test_rejected_token_clears_session(self):
        with tempfile.TemporaryDirectory() as directory:
            path = Path(directory) / "session.json"
            path.write_text(json.dumps({"token": "expired"}), encoding="utf-8")
            self.reply(401, {"message": "Invalid token."})
            store = SessionStore(self.api, path)
            self.assertIsNone(store.init())
            self.assertFalse(store.is_authenticated)
            self.assertIsNone(self.api.token)
            self.assertFalse(path.exists())

    def test_logout_clears_token_and_user_together(self):
        self.reply(200, {"data": {"id": 3, "role": "landlord"}, "message": ""})
        store = SessionStore(self.api)
        store.login("fresh")
        self.assertEqual(store.role, "landlord")
        store.logout()
        self.assertIsNone(store.token)
        self.assertIsNone(store.user)
        self.assertIsNone(self.api.token)

    def test_refresh_user_picks_up_changes_and_drops_revoked_tokens(self):
        store = SessionStore(self.api)
        self.assertIsNone(store.refresh_user())
        self.session.request.assert_not_called()

        self.reply(200, {"data": {"id": 3, "status": "pending"}, "message": ""})
        store.login("fresh")
        self.reply(200, {"data": {"id": 3, "status": "active"}, "message": ""})
        self.assertEqual(store.refresh_user()["status"], "active")

        self.reply(401, {"message": "Invalid token."})
        self.assertIsNone(store.refresh_user())
        self.assertFalse(store.is_authenticated)


class SavedHostelsStateTest(ClientTestCase):
    def test_toggle_applies_optimistically(self):
        self.reply(201, {"data": {"hostelId": 5, "saved": True}, "message": ""})
        state = SavedHostelsState(self.api)
        self.assertTrue(state.toggle(5))
        self.assertTrue(state.is_saved(5))

    def test_failed_toggle_is_reverted(self):
        self.reply(503, {"message": "Down"})
        state = SavedHostelsState(self.api, hostel_ids=[5])
        with self.assertRaises(TransientError):
            state.toggle(5)
        self.assertTrue(state.is_saved(5))
        with self.assertRaises(TransientError):
            state.toggle(6)
        self.assertFalse(state.is_saved(6))
