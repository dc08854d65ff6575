from django.db import models
from django.db.models import F, Q

from .. import projections
from ..lifecycle import BOOKING, BookingStatus
from .hostel import Room
from .user import User


class Booking(models.Model):
    student = models.ForeignKey(User, on_delete=models.CASCADE, related_name="bookings")
    room = models.ForeignKey(Room, on_delete=models.PROTECT, related_name="bookings")
    start_date = models.DateField()
    end_date = models.DateField()
    status = models.CharField(max_length=10, choices=BookingStatus.choices, default=BookingStatus.PENDING)
    decision_reason = models.TextField(blank=True)
    decided_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name="+")
    decided_at = models.DateTimeField(null=True, blank=True)
    cancellation_reason = models.TextField(blank=True)
    cancelled_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name="+")
    cancelled_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["student", "status"], name="booking_student_status_idx"),
            models.Index(fields=["room", "status"], name="booking_room_status_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(end_date__gt=F("start_date")),
                name="booking_end_after_start",
            ),
        ]

    def __str__(self) -> str:  # pragma: no cover - simple display helper
        return f"Booking for {self.room} by {self.student.display_name}"

    @property
    def hostel(self):
        return self.room.hostel

    @property
    def allowed_actions(self) -> list[str]:
        return sorted(BOOKING.allowed_transitions(self.status))

    @property
    def estimated_cost(self):
        return projections.estimate_cost(self.room.monthly_price, self.start_date, self.end_date)
