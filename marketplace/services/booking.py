from __future__ import annotations

import logging
from typing import Iterable

from django.db import transaction
from django.utils import timezone

from ..access import require_admin, require_landlord, require_self, require_student
from ..exceptions import AuthorizationError, InvalidTransitionError, NotFoundError, ValidationError
from ..forms import BookingDatesForm, clean_reason, require_reason, validated
from ..identity import same_entity
from ..lifecycle import BOOKING, OPEN_BOOKING_STATUSES, BookingAction, BookingStatus, NotificationType
from ..models import Booking, Room
from .common import transition
from .notifications import notify

logger = logging.getLogger(__name__)


def booking_label(booking: Booking) -> str:
    return f"{booking.hostel.name} (Room {booking.room.room_number})"


class BookingRequestService:
    """Validates and records a student's booking request."""

    def __init__(self, student):
        self.student = student

    def create_booking(self, room: Room, data) -> Booking:
        require_student(self.student)
        dates = validated(BookingDatesForm(data)).cleaned_data

        with transaction.atomic():
            # Re-read under lock: the room may have changed since the form was loaded.
            room = Room.objects.select_for_update().select_related("hostel__landlord__user").filter(pk=room.pk).first()
            if room is None or not room.is_bookable:
                raise NotFoundError("This room is no longer available for booking.")
            if not room.hostel.is_public:
                raise NotFoundError("This hostel is not accepting bookings.")
            duplicate = Booking.objects.filter(
                student=self.student,
                room=room,
                status__in=OPEN_BOOKING_STATUSES,
            ).exists()
            if duplicate:
                raise ValidationError(errors={"room": ["You already have an open booking request for this room."]})

            # Availability stays landlord-controlled; several students may hold pending requests.
            booking = Booking.objects.create(
                student=self.student,
                room=room,
                start_date=dates["start_date"],
                end_date=dates["end_date"],
                status=BookingStatus.PENDING,
            )

        label = booking_label(booking)
        logger.info("Student %s requested booking %s for room %s", self.student.pk, booking.pk, room.pk)
        notify(
            self.student,
            "Booking request submitted",
            f"Your booking request for {label} was submitted and is awaiting approval.",
            NotificationType.BOOKING,
        )
        notify(
            room.hostel.landlord.user,
            "New booking request",
            f"{self.student.display_name} submitted a booking request for {label}.",
            NotificationType.BOOKING,
        )
        return booking


class BookingDecisionService:
    """Approve or reject bookings while enforcing ownership rules."""

    DECISIONS = {BookingAction.APPROVE, BookingAction.REJECT}

    def __init__(self, landlord):
        self.landlord = landlord

    def _owns_booking(self, booking: Booking) -> bool:
        profile = require_landlord(self.landlord)
        return same_entity(booking.hostel.landlord_id, profile)

    def decide(self, booking: Booking, action: str, reason: str | None = None) -> Booking:
        if not self._owns_booking(booking):
            logger.warning("Landlord %s tried to decide booking %s of another landlord", self.landlord.pk, booking.pk)
            raise AuthorizationError("booking belongs to another landlord")
        if action not in self.DECISIONS:
            raise ValidationError(errors={"action": ["Action must be approve or reject."]})
        reason = clean_reason(reason)
        if action == BookingAction.REJECT:
            reason = require_reason(reason, label="A rejection reason")
        else:
            reason = ""

        with transaction.atomic():
            if action == BookingAction.APPROVE:
                self._check_room_free(booking)
            transition(
                booking,
                BOOKING,
                action,
                decision_reason=reason,
                decided_by=self.landlord,
                decided_at=timezone.now(),
            )

        status_label = booking.status
        message = f"Your booking request for {booking.hostel.name} was {status_label}."
        if reason:
            message = f"{message} Reason: {reason}"
        notify(booking.student, f"Booking {status_label}", message, NotificationType.BOOKING)
        return booking

    def _check_room_free(self, booking: Booking) -> None:
        """Lock the room and make sure an approval would not double-book it."""
        room = Room.objects.select_for_update().select_related("hostel").filter(pk=booking.room_id).first()
        if room is None or not room.is_bookable or not room.hostel.is_public:
            raise NotFoundError("This room is not available for approval.")
        overlapping = (
            Booking.objects.filter(
                room=room,
                status=BookingStatus.APPROVED,
                start_date__lt=booking.end_date,
                end_date__gt=booking.start_date,
            )
            .exclude(pk=booking.pk)
            .exists()
        )
        if overlapping:
            raise InvalidTransitionError(
                "This room is already booked for these dates.",
                state=booking.status,
                action=BookingAction.APPROVE,
            )


class BookingCancellationService:
    """Student-initiated cancellation of a pending or approved booking."""

    def __init__(self, student):
        self.student = student

    def cancel(self, booking: Booking, reason: str | None = None) -> Booking:
        require_student(self.student)
        require_self(self.student, booking.student_id, "booking")
        transition(
            booking,
            BOOKING,
            BookingAction.CANCEL,
            cancellation_reason=clean_reason(reason),
            cancelled_by=self.student,
            cancelled_at=timezone.now(),
        )

        hostel = booking.hostel
        notify(
            self.student,
            "Booking cancelled",
            f"Your booking request for {hostel.name} has been cancelled.",
            NotificationType.BOOKING,
        )
        notify(
            hostel.landlord.user,
            "Booking cancelled by student",
            f"A booking request for {hostel.name} was cancelled by the student.",
            NotificationType.BOOKING,
        )
        return booking


class StudentBookingsService:
    """Provides booking history grouped by status for students."""

    def __init__(self, student):
        self.student = student

    def bookings(self, status: str | None = None):
        require_student(self.student)
        queryset = Booking.objects.filter(student=self.student).select_related("room__hostel__landlord__user")
        if status:
            queryset = queryset.filter(status=status)
        return queryset

    def grouped_bookings(self, bookings: Iterable[Booking]) -> dict[str, list[Booking]]:
        grouped: dict[str, list[Booking]] = {status: [] for status in BookingStatus.values}
        for booking in bookings:
            grouped[booking.status].append(booking)
        return grouped

    def status_counts(self, bookings: Iterable[Booking]) -> dict[str, int]:
        grouped = self.grouped_bookings(bookings)
        counts = {key: len(value) for key, value in grouped.items()}
        counts["all"] = sum(counts.values())
        return counts


class LandlordBookingsService:
    """Incoming booking requests across a landlord's hostels."""

    def __init__(self, landlord):
        self.landlord = landlord

    def bookings(self, status: str | None = None):
        profile = require_landlord(self.landlord)
        queryset = Booking.objects.filter(room__hostel__landlord=profile).select_related("room__hostel", "student")
        if status:
            queryset = queryset.filter(status=status)
        return queryset


class ForceCancelService:
    """Admin override that cancels a pending or approved booking."""

    def __init__(self, admin):
        self.admin = admin

    def cancel(self, booking: Booking, reason: str | None) -> Booking:
        require_admin(self.admin)
        reason = require_reason(reason)
        transition(
            booking,
            BOOKING,
            BookingAction.CANCEL,
            cancellation_reason=reason,
            cancelled_by=self.admin,
            cancelled_at=timezone.now(),
        )
        logger.info("Admin %s force-cancelled booking %s", self.admin.pk, booking.pk)

        label = booking_label(booking)
        message = f"Your booking for {label} was cancelled by an administrator. Reason: {reason}"
        notify(booking.student, "Booking cancelled by admin", message, NotificationType.ADMIN)
        notify(booking.hostel.landlord.user, "Booking cancelled by admin", message, NotificationType.ADMIN)
        return booking


class AdminBookingsService:
    """Every booking on the platform, for moderation."""

    def __init__(self, admin):
        self.admin = admin

    def bookings(self, status: str | None = None, hostel_id=None):
        require_admin(self.admin)
        queryset = Booking.objects.select_related("room__hostel__landlord__user", "student")
        if status:
            queryset = queryset.filter(status=status)
        if hostel_id not in (None, ""):
            try:
                hostel_id = int(hostel_id)
            except (TypeError, ValueError):
                raise ValidationError(errors={"hostel_id": ["Hostel id must be a number."]}) from None
            queryset = queryset.filter(room__hostel_id=hostel_id)
        return queryset
