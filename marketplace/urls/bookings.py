"""Booking lifecycle URL patterns."""

from django.urls import path

from ..api.views import booking

urlpatterns = [
    path("rooms/<int:room_id>/book", booking.RoomBookView.as_view(), name="room_book"),
    path("rooms/<int:room_id>/estimate", booking.RoomEstimateView.as_view(), name="room_estimate"),
    path("bookings/mine", booking.StudentBookingsView.as_view(), name="student_bookings"),
    path("bookings/incoming", booking.LandlordBookingsView.as_view(), name="landlord_bookings"),
    path("bookings/<int:booking_id>/decision", booking.BookingDecisionView.as_view(), name="booking_decision"),
    path("bookings/<int:booking_id>/cancel", booking.BookingCancelView.as_view(), name="booking_cancel"),
    path("admin/bookings", booking.AdminBookingListView.as_view(), name="admin_bookings"),
    path(
        "admin/bookings/<int:booking_id>/force-cancel",
        booking.BookingForceCancelView.as_view(),
        name="admin_booking_force_cancel",
    ),
]
