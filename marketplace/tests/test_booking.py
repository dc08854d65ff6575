from datetime import timedelta

from django.test import TestCase
from django.utils import timezone

from ..exceptions import AuthorizationError, InvalidTransitionError, NotFoundError, ValidationError
from ..lifecycle import BookingStatus, HostelVerificationStatus
from ..models import Booking, Notification
from ..services.booking import (
    AdminBookingsService,
    BookingCancellationService,
    BookingDecisionService,
    BookingRequestService,
    ForceCancelService,
    StudentBookingsService,
)
from ..services.catalog import can_view_landlord_contact
from .factories import (
    booking_dates,
    make_admin,
    make_booking,
    make_hostel,
    make_landlord,
    make_room,
    make_student,
)


def dates_payload(offset=1, nights=30):
    start, end = booking_dates(offset, nights)
    return {"start_date": start.isoformat(), "end_date": end.isoformat()}


class BookingRequestTest(TestCase):
    def setUp(self):
        self.landlord = make_landlord()
        self.hostel = make_hostel(self.landlord)
        self.room = make_room(self.hostel)
        self.student = make_student()
        self.service = BookingRequestService(self.student)

    def test_creates_pending_booking_without_touching_availability(self):
        booking = self.service.create_booking(self.room, dates_payload())
        self.assertEqual(booking.status, BookingStatus.PENDING)
        self.room.refresh_from_db()
        self.assertTrue(self.room.is_available)
        self.assertEqual(Notification.objects.filter(user=self.student).count(), 1)
        self.assertEqual(Notification.objects.filter(user=self.landlord).count(), 1)

    def test_start_date_must_be_tomorrow_or_later(self):
        today = timezone.now().date()
        with self.assertRaises(ValidationError) as caught:
            self.service.create_booking(
                self.room,
                {"start_date": today.isoformat(), "end_date": (today + timedelta(days=5)).isoformat()},
            )
        self.assertIn("start_date", caught.exception.errors)

    def test_end_date_must_follow_start_date(self):
        payload = dates_payload()
        payload["end_date"] = payload["start_date"]
        with self.assertRaises(ValidationError) as caught:
            self.service.create_booking(self.room, payload)
        self.assertIn("end_date", caught.exception.errors)

    def test_unavailable_or_removed_room_is_not_found(self):
        self.room.is_available = False
        self.room.save()
        with self.assertRaises(NotFoundError):
            self.service.create_booking(self.room, dates_payload())
        removed = make_room(self.hostel, "Z9", is_active=False)
        with self.assertRaises(NotFoundError):
            self.service.create_booking(removed, dates_payload())

    def test_room_disabled_after_form_load_is_not_found(self):
        stale = type(self.room).objects.get(pk=self.room.pk)
        type(self.room).objects.filter(pk=self.room.pk).update(is_active=False)
        with self.assertRaises(NotFoundError):
            self.service.create_booking(stale, dates_payload())

    def test_hostel_must_be_public(self):
        hostel = make_hostel(self.landlord, verification_status=HostelVerificationStatus.PENDING, name="Pending")
        with self.assertRaises(NotFoundError):
            self.service.create_booking(make_room(hostel), dates_payload())

    def test_duplicate_open_request_is_refused(self):
        self.service.create_booking(self.room, dates_payload())
        with self.assertRaises(ValidationError):
            self.service.create_booking(self.room, dates_payload(offset=40))

    def test_several_students_may_request_the_same_room(self):
        self.service.create_booking(self.room, dates_payload())
        BookingRequestService(make_student("second")).create_booking(self.room, dates_payload())
        self.assertEqual(Booking.objects.filter(room=self.room, status=BookingStatus.PENDING).count(), 2)

    def test_only_students_book(self):
        with self.assertRaises(AuthorizationError):
            BookingRequestService(self.landlord).create_booking(self.room, dates_payload())


class BookingDecisionTest(TestCase):
    def setUp(self):
        self.landlord = make_landlord()
        self.hostel = make_hostel(self.landlord)
        self.room = make_room(self.hostel)
        self.student = make_student()
        self.booking = make_booking(self.student, self.room)
        self.service = BookingDecisionService(self.landlord)

    def test_approve_reveals_contact(self):
        self.assertFalse(can_view_landlord_contact(self.student, self.hostel))
        self.service.decide(self.booking, "approve")
        self.booking.refresh_from_db()
        self.assertEqual(self.booking.status, BookingStatus.APPROVED)
        self.assertEqual(self.booking.decided_by, self.landlord)
        self.assertTrue(can_view_landlord_contact(self.student, self.hostel))

    def test_rejected_booking_cannot_be_approved_later(self):
        self.service.decide(self.booking, "reject", "Room no longer available")
        self.booking.refresh_from_db()
        self.assertEqual(self.booking.status, BookingStatus.REJECTED)
        self.assertEqual(self.booking.decision_reason, "Room no longer available")
        with self.assertRaises(InvalidTransitionError):
            self.service.decide(self.booking, "approve")

    def test_reject_requires_reason(self):
        with self.assertRaises(ValidationError):
            self.service.decide(self.booking, "reject")
        self.booking.refresh_from_db()
        self.assertEqual(self.booking.status, BookingStatus.PENDING)

    def test_cancel_is_not_a_landlord_decision(self):
        with self.assertRaises(ValidationError):
            self.service.decide(self.booking, "cancel")

    def test_only_owning_landlord_decides(self):
        with self.assertRaises(AuthorizationError):
            BookingDecisionService(make_landlord("other")).decide(self.booking, "approve")

    def test_stale_copy_loses_the_race(self):
        stale = Booking.objects.get(pk=self.booking.pk)
        self.service.decide(self.booking, "approve")
        with self.assertRaises(InvalidTransitionError):
            self.service.decide(stale, "reject", "Changed my mind")
        self.booking.refresh_from_db()
        self.assertEqual(self.booking.status, BookingStatus.APPROVED)

    def test_student_is_notified(self):
        self.service.decide(self.booking, "approve")
        self.assertTrue(Notification.objects.filter(user=self.student, title="Booking approved").exists())

    def test_approval_needs_a_bookable_room_on_a_public_hostel(self):
        self.room.is_available = False
        self.room.save(update_fields=["is_available"])
        with self.assertRaises(NotFoundError):
            self.service.decide(self.booking, "approve")

        self.room.is_available = True
        self.room.save(update_fields=["is_available"])
        self.hostel.is_active = False
        self.hostel.disable_reason = "Fraud"
        self.hostel.save(update_fields=["is_active", "disable_reason"])
        with self.assertRaises(NotFoundError):
            self.service.decide(self.booking, "approve")
        self.booking.refresh_from_db()
        self.assertEqual(self.booking.status, BookingStatus.PENDING)

    def test_overlapping_approval_is_refused(self):
        self.service.decide(self.booking, "approve")
        rival = make_booking(
            make_student("rival"),
            self.room,
            start_date=self.booking.start_date + timedelta(days=3),
            end_date=self.booking.end_date + timedelta(days=3),
        )
        with self.assertRaises(InvalidTransitionError):
            self.service.decide(rival, "approve")
        rival.refresh_from_db()
        self.assertEqual(rival.status, BookingStatus.PENDING)

    def test_back_to_back_stays_can_both_be_approved(self):
        self.service.decide(self.booking, "approve")
        later = make_booking(
            make_student("later"),
            self.room,
            start_date=self.booking.end_date,
            end_date=self.booking.end_date + timedelta(days=30),
        )
        self.service.decide(later, "approve")
        self.assertEqual(later.status, BookingStatus.APPROVED)

    def test_reason_must_be_text(self):
        with self.assertRaises(ValidationError) as caught:
            self.service.decide(self.booking, "reject", 123)
        self.assertIn("reason", caught.exception.errors)


class BookingCancellationTest(TestCase):
    def setUp(self):
        self.landlord = make_landlord()
        self.room = make_room(make_hostel(self.landlord))
        self.student = make_student()
        self.service = BookingCancellationService(self.student)

    def test_cancel_pending_and_approved(self):
        for status in (BookingStatus.PENDING, BookingStatus.APPROVED):
            booking = make_booking(self.student, self.room, status=status)
            self.service.cancel(booking, "Found another place")
            booking.refresh_from_db()
            self.assertEqual(booking.status, BookingStatus.CANCELLED)
            self.assertEqual(booking.cancellation_reason, "Found another place")

    def test_cancelled_is_terminal(self):
        booking = make_booking(self.student, self.room)
        self.service.cancel(booking)
        with self.assertRaises(InvalidTransitionError):
            self.service.cancel(booking)
        with self.assertRaises(InvalidTransitionError):
            BookingDecisionService(self.landlord).decide(booking, "approve")

    def test_only_the_booking_student_cancels(self):
        booking = make_booking(self.student, self.room)
        with self.assertRaises(AuthorizationError):
            BookingCancellationService(make_student("other")).cancel(booking)


class StudentBookingsTest(TestCase):
    def test_grouped_by_status_with_counts(self):
        student = make_student()
        hostel = make_hostel(make_landlord())
        make_booking(student, make_room(hostel, "A1"))
        make_booking(student, make_room(hostel, "A2"), status=BookingStatus.APPROVED)
        make_booking(student, make_room(hostel, "A3"), status=BookingStatus.APPROVED)
        service = StudentBookingsService(student)
        bookings = list(service.bookings())
        grouped = service.grouped_bookings(bookings)
        counts = service.status_counts(bookings)
        self.assertEqual(len(grouped["approved"]), 2)
        self.assertEqual(counts, {"pending": 1, "approved": 2, "rejected": 0, "cancelled": 0, "all": 3})


class AdminBookingTest(TestCase):
    def setUp(self):
        self.landlord = make_landlord()
        self.hostel = make_hostel(self.landlord)
        self.room = make_room(self.hostel)
        self.student = make_student()
        self.admin = make_admin()
        self.service = ForceCancelService(self.admin)

    def test_force_cancel_open_bookings(self):
        for status in (BookingStatus.PENDING, BookingStatus.APPROVED):
            booking = make_booking(self.student, self.room, status=status)
            self.service.cancel(booking, "Listing under investigation")
            booking.refresh_from_db()
            self.assertEqual(booking.status, BookingStatus.CANCELLED)
            self.assertEqual(booking.cancelled_by, self.admin)
            self.assertEqual(booking.cancellation_reason, "Listing under investigation")
        self.assertEqual(Notification.objects.filter(title="Booking cancelled by admin").count(), 4)

    def test_force_cancel_needs_reason_and_open_booking(self):
        booking = make_booking(self.student, self.room)
        with self.assertRaises(ValidationError):
            self.service.cancel(booking, "  ")
        booking.status = BookingStatus.REJECTED
        booking.save(update_fields=["status"])
        with self.assertRaises(InvalidTransitionError):
            self.service.cancel(booking, "Too late")

    def test_only_admins_force_cancel(self):
        booking = make_booking(self.student, self.room)
        with self.assertRaises(AuthorizationError):
            ForceCancelService(self.landlord).cancel(booking, "Not mine to cancel")

    def test_admin_list_filters_by_status_and_hostel(self):
        other_room = make_room(make_hostel(make_landlord("second")), "B1")
        pending = make_booking(self.student, self.room)
        make_booking(self.student, other_room, status=BookingStatus.APPROVED)
        service = AdminBookingsService(self.admin)
        self.assertEqual(service.bookings().count(), 2)
        self.assertEqual(list(service.bookings(status=BookingStatus.PENDING)), [pending])
        self.assertEqual(list(service.bookings(hostel_id=str(self.hostel.pk))), [pending])
        with self.assertRaises(ValidationError):
            service.bookings(hostel_id="abc")
