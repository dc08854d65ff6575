from __future__ import annotations

from rest_framework import status
from rest_framework.permissions import AllowAny

from ... import projections
from ...forms import EstimateForm, validated
from ...models import Booking, Room
from ...services.booking import (
    AdminBookingsService,
    BookingCancellationService,
    BookingDecisionService,
    BookingRequestService,
    ForceCancelService,
    LandlordBookingsService,
    StudentBookingsService,
)
from ...services.common import get_or_not_found
from ..payload import request_payload, snake_keys
from ..permissions import IsAdmin, IsLandlord, IsStudent
from ..responses import envelope
from ..serializers import BookingSerializer, money
from .base import MarketplaceAPIView

__all__ = [
    "RoomBookView",
    "RoomEstimateView",
    "BookingDecisionView",
    "BookingCancelView",
    "StudentBookingsView",
    "LandlordBookingsView",
    "BookingForceCancelView",
    "AdminBookingListView",
]


def booking_queryset():
    return Booking.objects.select_related("room__hostel__landlord__user", "student")


class RoomBookView(MarketplaceAPIView):
    permission_classes = [IsStudent]
    service_class = BookingRequestService

    def post(self, request, room_id):
        room = get_or_not_found(Room.objects.select_related("hostel"), "Room not found.", pk=room_id)
        booking = self.service_class(request.user).create_booking(room, request_payload(request))
        return envelope(BookingSerializer(booking).data, "Booking request submitted.", status.HTTP_201_CREATED)


class RoomEstimateView(MarketplaceAPIView):
    """Prorated rent for a date range. Nothing is stored."""

    permission_classes = [AllowAny]

    def get(self, request, room_id):
        room = get_or_not_found(Room.objects.filter(is_active=True), "Room not found.", pk=room_id)
        dates = validated(EstimateForm(snake_keys(dict(request.query_params.items())))).cleaned_data
        start, end = dates["start_date"], dates["end_date"]
        data = {
            "roomId": room.pk,
            "monthlyPrice": money(room.monthly_price),
            "days": max(projections.days_between(start, end), 1),
            "estimate": money(projections.estimate_cost(room.monthly_price, start, end)),
        }
        return envelope(data)


class BookingDecisionView(MarketplaceAPIView):
    permission_classes = [IsLandlord]
    service_class = BookingDecisionService

    def patch(self, request, booking_id):
        booking = get_or_not_found(booking_queryset(), "Booking not found.", pk=booking_id)
        payload = request_payload(request)
        action = str(payload.get("action") or "").strip().lower()
        booking = self.service_class(request.user).decide(booking, action, payload.get("reason"))
        return envelope(BookingSerializer(booking).data, f"Booking {booking.status}.")


class BookingCancelView(MarketplaceAPIView):
    permission_classes = [IsStudent]
    service_class = BookingCancellationService

    def patch(self, request, booking_id):
        booking = get_or_not_found(booking_queryset(), "Booking not found.", pk=booking_id)
        booking = self.service_class(request.user).cancel(booking, request_payload(request).get("reason"))
        return envelope(BookingSerializer(booking).data, "Booking cancelled.")


class StudentBookingsView(MarketplaceAPIView):
    """A student's bookings grouped by status, with counts."""

    permission_classes = [IsStudent]
    service_class = StudentBookingsService

    def get(self, request):
        service = self.service_class(request.user)
        bookings = list(service.bookings(request.query_params.get("status")))
        grouped = service.grouped_bookings(bookings)
        data = {
            "bookings": BookingSerializer(bookings, many=True).data,
            "grouped": {key: BookingSerializer(value, many=True).data for key, value in grouped.items()},
            "counts": service.status_counts(bookings),
        }
        return envelope(data)


class LandlordBookingsView(MarketplaceAPIView):
    permission_classes = [IsLandlord]
    service_class = LandlordBookingsService

    def get(self, request):
        queryset = self.service_class(request.user).bookings(request.query_params.get("status"))
        return self.paginated(queryset.select_related("room__hostel__landlord__user"), BookingSerializer)


class BookingForceCancelView(MarketplaceAPIView):
    permission_classes = [IsAdmin]
    service_class = ForceCancelService

    def patch(self, request, booking_id):
        booking = get_or_not_found(booking_queryset(), "Booking not found.", pk=booking_id)
        booking = self.service_class(request.user).cancel(booking, request_payload(request).get("reason"))
        return envelope(BookingSerializer(booking).data, "Booking cancelled by admin.")


class AdminBookingListView(MarketplaceAPIView):
    permission_classes = [IsAdmin]
    service_class = AdminBookingsService

    def get(self, request):
        params = request.query_params
        queryset = self.service_class(request.user).bookings(
            params.get("status"),
            params.get("hostelId") or params.get("hostel_id"),
        )
        return self.paginated(queryset, BookingSerializer)
