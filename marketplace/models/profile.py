from django.db import models
from django.db.models import Q

from ..lifecycle import LandlordVerificationStatus
from .user import User


class LandlordProfile(models.Model):
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name="landlord_profile")
    business_name = models.CharField(max_length=200, blank=True)
    id_number = models.CharField(max_length=50, blank=True)
    verification_status = models.CharField(
        max_length=10,
        choices=LandlordVerificationStatus.choices,
        default=LandlordVerificationStatus.PENDING,
    )
    rejection_reason = models.TextField(blank=True)
    verified_at = models.DateTimeField(null=True, blank=True)
    reviewed_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    reviewed_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.CheckConstraint(
                condition=~Q(verification_status=LandlordVerificationStatus.REJECTED) | ~Q(rejection_reason=""),
                name="landlord_rejection_requires_reason",
            ),
        ]

    def __str__(self) -> str:  # pragma: no cover - simple display helper
        return f"Landlord profile for {self.user.display_name}"
