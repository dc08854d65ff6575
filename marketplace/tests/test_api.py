from django.test import TestCase
from rest_framework.authtoken.models import Token
from rest_framework.test import APIClient

from ..lifecycle import BookingStatus, HostelVerificationStatus, LandlordVerificationStatus
from ..models import Booking, SavedHostel
from .factories import (
    booking_dates,
    hostel_payload,
    make_admin,
    make_booking,
    make_hostel,
    make_landlord,
    make_room,
    make_student,
)


class ApiTestCase(TestCase):
    def client_for(self, user=None):
        client = APIClient()
        if user is not None:
            token, _ = Token.objects.get_or_create(user=user)
            client.credentials(HTTP_AUTHORIZATION=f"Bearer {token.key}")
        return client


class AuthenticationApiTest(ApiTestCase):
    def test_me_requires_bearer_token(self):
        response = self.client_for().get("/api/auth/me")
        self.assertEqual(response.status_code, 401)
        self.assertIn("message", response.json())

    def test_me_returns_envelope(self):
        student = make_student(first_name="Amina", last_name="Otieno")
        response = self.client_for(student).get("/api/auth/me")
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(set(body), {"data", "message"})
        self.assertEqual(body["data"]["displayName"], "Amina Otieno")
        self.assertIsNone(body["data"]["landlordProfile"])

    def test_token_keyword_must_be_bearer(self):
        student = make_student()
        token = Token.objects.create(user=student)
        client = APIClient()
        client.credentials(HTTP_AUTHORIZATION=f"Token {token.key}")
        self.assertEqual(client.get("/api/auth/me").status_code, 401)


class CatalogApiTest(ApiTestCase):
    def setUp(self):
        self.landlord = make_landlord()
        self.public = make_hostel(self.landlord, name="Public")
        self.pending = make_hostel(self.landlord, verification_status=HostelVerificationStatus.PENDING, name="Hidden")
        make_room(self.public)

    def test_catalog_lists_public_hostels_only(self):
        response = self.client_for().get("/api/hostels")
        self.assertEqual(response.status_code, 200)
        data = response.json()["data"]
        self.assertEqual([item["name"] for item in data["results"]], ["Public"])
        self.assertEqual(data["pagination"]["total"], 1)
        item = data["results"][0]
        self.assertEqual(item["effectiveStatus"], "verified")
        self.assertEqual(item["priceRange"], "KES 4,500 - 6,000")
        self.assertEqual(item["rating"]["label"], "New")
        self.assertEqual(item["occupancy"]["availableRooms"], 1)

    def test_hidden_hostel_is_not_found_for_outsiders(self):
        response = self.client_for(make_student()).get(f"/api/hostels/{self.pending.pk}")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(self.client_for(self.landlord).get(f"/api/hostels/{self.pending.pk}").status_code, 200)

    def test_detail_contact_only_for_approved_booking(self):
        student = make_student()
        url = f"/api/hostels/{self.public.pk}"
        self.assertNotIn("email", self.client_for(student).get(url).json()["data"]["landlord"])
        make_booking(student, self.public.rooms.first(), status=BookingStatus.APPROVED)
        self.assertEqual(self.client_for(student).get(url).json()["data"]["landlord"]["email"], "landlord@example.com")

    def test_estimate(self):
        room = self.public.rooms.first()
        response = self.client_for().get(
            f"/api/rooms/{room.pk}/estimate", {"startDate": "2025-01-01", "endDate": "2025-01-04"}
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"]["estimate"], "450.00")
        self.assertEqual(response.json()["data"]["days"], 3)

    def test_reversed_estimate_range_is_rejected(self):
        room = self.public.rooms.first()
        response = self.client_for().get(
            f"/api/rooms/{room.pk}/estimate", {"startDate": "2030-01-10", "endDate": "2030-01-01"}
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn("endDate", response.json()["errors"])


class ListingApiTest(ApiTestCase):
    def test_landlord_submits_and_admin_approves(self):
        landlord = make_landlord()
        payload = hostel_payload(distanceFromCampus="1.2", hostelType="female", minPrice="5000", maxPrice="7000")
        for key in ("distance_from_campus", "hostel_type", "min_price", "max_price"):
            payload.pop(key)
        response = self.client_for(landlord).post("/api/hostels", payload, format="json")
        self.assertEqual(response.status_code, 201, response.content)
        hostel_id = response.json()["data"]["id"]
        self.assertEqual(response.json()["data"]["effectiveStatus"], "pending")

        admin = self.client_for(make_admin())
        response = admin.patch(f"/api/hostels/{hostel_id}/verify", {"status": "approved"}, format="json")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"]["effectiveStatus"], "verified")

        response = admin.patch(f"/api/hostels/{hostel_id}/verify", {"status": "approved"}, format="json")
        self.assertEqual(response.status_code, 409)

    def test_validation_errors_are_400_with_field_errors(self):
        response = self.client_for(make_landlord()).post("/api/hostels", {"name": "X"}, format="json")
        self.assertEqual(response.status_code, 400)
        self.assertIn("errors", response.json())

    def test_reject_without_reason_is_400(self):
        landlord = make_landlord("pending-landlord", verification_status=LandlordVerificationStatus.PENDING)
        response = self.client_for(make_admin()).patch(
            f"/api/landlords/{landlord.landlord_profile.pk}/verify",
            {"status": "rejected"},
            format="json",
        )
        self.assertEqual(response.status_code, 400)

    def test_wrong_role_gets_generic_403(self):
        hostel = make_hostel(make_landlord())
        response = self.client_for(make_student()).patch(
            f"/api/hostels/{hostel.pk}/disable",
            {"reason": "Because"},
            format="json",
        )
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()["message"], "You are not permitted to perform this action.")

    def test_other_landlord_gets_generic_403(self):
        hostel = make_hostel(make_landlord())
        response = self.client_for(make_landlord("other")).patch(
            f"/api/hostels/{hostel.pk}/active",
            {"isActive": False},
            format="json",
        )
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()["message"], "You are not permitted to perform this action.")


class BookingApiTest(ApiTestCase):
    def setUp(self):
        self.landlord = make_landlord()
        self.room = make_room(make_hostel(self.landlord))
        self.student = make_student()

    def test_booking_flow(self):
        start, end = booking_dates()
        response = self.client_for(self.student).post(
            f"/api/rooms/{self.room.pk}/book",
            {"startDate": start.isoformat(), "endDate": end.isoformat()},
            format="json",
        )
        self.assertEqual(response.status_code, 201, response.content)
        booking = response.json()["data"]
        self.assertEqual(booking["status"], "pending")
        self.assertIsNone(booking["landlordContact"])

        landlord = self.client_for(self.landlord)
        url = f"/api/bookings/{booking['id']}/decision"
        response = landlord.patch(url, {"action": "reject", "reason": "Room no longer available"}, format="json")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"]["status"], "rejected")

        response = landlord.patch(url, {"action": "approve"}, format="json")
        self.assertEqual(response.status_code, 409)
        self.assertEqual(Booking.objects.get(pk=booking["id"]).status, BookingStatus.REJECTED)

    def test_student_bookings_grouped(self):
        make_booking(self.student, self.room, status=BookingStatus.APPROVED)
        response = self.client_for(self.student).get("/api/bookings/mine")
        data = response.json()["data"]
        self.assertEqual(data["counts"]["approved"], 1)
        self.assertEqual(data["grouped"]["approved"][0]["landlordContact"]["phone"], "+254700000000")

    def test_cancel(self):
        booking = make_booking(self.student, self.room)
        response = self.client_for(self.student).patch(f"/api/bookings/{booking.pk}/cancel", {}, format="json")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"]["status"], "cancelled")

    def test_non_text_reason_is_a_validation_error(self):
        booking = make_booking(self.student, self.room)
        response = self.client_for(self.landlord).patch(
            f"/api/bookings/{booking.pk}/decision",
            {"action": "reject", "reason": 123},
            format="json",
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn("reason", response.json()["errors"])

        response = self.client_for(self.student).patch(f"/api/bookings/{booking.pk}/cancel", {"reason": 5}, format="json")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(Booking.objects.get(pk=booking.pk).status, BookingStatus.PENDING)

    def test_admin_force_cancel_and_listing(self):
        booking = make_booking(self.student, self.room, status=BookingStatus.APPROVED)
        admin = self.client_for(make_admin())
        response = admin.get("/api/admin/bookings", {"status": "approved", "hostelId": self.room.hostel_id})
        self.assertEqual(response.status_code, 200)
        self.assertEqual([item["id"] for item in response.json()["data"]["results"]], [booking.pk])

        url = f"/api/admin/bookings/{booking.pk}/force-cancel"
        self.assertEqual(admin.patch(url, {}, format="json").status_code, 400)
        self.assertEqual(self.client_for(self.landlord).patch(url, {"reason": "x"}, format="json").status_code, 403)
        response = admin.patch(url, {"reason": "Listing under investigation"}, format="json")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"]["status"], "cancelled")
        self.assertEqual(admin.patch(url, {"reason": "Again"}, format="json").status_code, 409)


class ModerationApiTest(ApiTestCase):
    def test_report_resolution_disables_listing(self):
        hostel = make_hostel(make_landlord())
        response = self.client_for(make_student()).post(
            f"/api/hostels/{hostel.pk}/reports",
            {"reason": "scam", "description": "Asked for cash up front"},
            format="json",
        )
        self.assertEqual(response.status_code, 201)
        report_id = response.json()["data"]["id"]

        admin = self.client_for(make_admin())
        response = admin.patch(
            f"/api/admin/reports/{report_id}",
            {"status": "resolved", "adminNotes": "Confirmed scam", "disableListing": True},
            format="json",
        )
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.json()["data"]["hostelDisabled"])
        hostel.refresh_from_db()
        self.assertFalse(hostel.is_active)

        response = admin.patch(
            f"/api/admin/reports/{report_id}",
            {"status": "reviewed", "adminNotes": "Again"},
            format="json",
        )
        self.assertEqual(response.status_code, 409)

    def test_overview_is_camel_case(self):
        response = self.client_for(make_admin()).get("/api/admin/overview")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"]["verificationRate"], 0)


class SavedHostelApiTest(ApiTestCase):
    def test_save_is_idempotent(self):
        student = make_student()
        hostel = make_hostel(make_landlord())
        client = self.client_for(student)
        url = f"/api/students/saved-hostels/{hostel.pk}"
        self.assertEqual(client.post(url).status_code, 201)
        self.assertEqual(client.post(url).status_code, 200)
        self.assertEqual(SavedHostel.objects.count(), 1)
        self.assertEqual(client.delete(url).status_code, 200)
        self.assertEqual(client.delete(url).status_code, 200)
        self.assertEqual(client.get("/api/students/saved-hostels").json()["data"], [])
