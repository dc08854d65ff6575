from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.db.models import F, Q
from django.db.models.functions import Lower

from .. import projections
from ..lifecycle import AmenityCategory, HostelType, HostelVerificationStatus, RoomType
from .profile import LandlordProfile
from .user import User


def default_currency() -> str:
    return settings.HOSTEL_CONNECT["CURRENCY"]


class Hostel(models.Model):
    landlord = models.ForeignKey(LandlordProfile, on_delete=models.CASCADE, related_name="hostels")
    name = models.CharField(max_length=200)
    description = models.TextField(max_length=2000)
    street = models.CharField(max_length=200)
    city = models.CharField(max_length=100)
    county = models.CharField(max_length=100)
    postal_code = models.CharField(max_length=20, blank=True)
    landmark = models.CharField(max_length=200, blank=True)
    latitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    longitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    distance_from_campus = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=0,
        help_text="Distance from campus in kilometres",
    )
    university_name = models.CharField(max_length=200, blank=True)
    hostel_type = models.CharField(max_length=10, choices=HostelType.choices)
    min_price = models.DecimalField(max_digits=10, decimal_places=2)
    max_price = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    currency = models.CharField(max_length=3, default=default_currency)
    is_active = models.BooleanField(default=True)
    verification_status = models.CharField(
        max_length=10,
        choices=HostelVerificationStatus.choices,
        default=HostelVerificationStatus.PENDING,
    )
    rejection_reason = models.TextField(blank=True)
    disable_reason = models.TextField(blank=True)
    disabled_at = models.DateTimeField(null=True, blank=True)
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
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["verification_status", "is_active"], name="hostel_status_active_idx"),
            models.Index(fields=["city", "county"], name="hostel_city_county_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(max_price__isnull=True) | Q(max_price__gte=F("min_price")),
                name="hostel_max_price_gte_min_price",
            ),
        ]

    def __str__(self) -> str:  # pragma: no cover - simple display helper
        return self.name

    @property
    def effective_status(self) -> str:
        return projections.hostel_effective_status(self)

    @property
    def is_public(self) -> bool:
        return projections.is_publicly_visible(self)

    @property
    def price_range(self) -> str:
        return projections.price_range_label(self.min_price, self.max_price, self.currency)

    @property
    def primary_image(self) -> str | None:
        images = list(self.images.all())
        for image in images:
            if image.is_primary:
                return image.url
        return images[0].url if images else None

    @property
    def is_admin_disabled(self) -> bool:
        return not self.is_active and bool(self.disable_reason)


class Amenity(models.Model):
    hostel = models.ForeignKey(Hostel, on_delete=models.CASCADE, related_name="amenities")
    name = models.CharField(max_length=100)
    category = models.CharField(max_length=20, choices=AmenityCategory.choices)

    class Meta:
        ordering = ["category", "name"]
        verbose_name_plural = "amenities"

    def __str__(self) -> str:  # pragma: no cover - simple display helper
        return f"{self.name} ({self.category})"


class HostelImage(models.Model):
    hostel = models.ForeignKey(Hostel, on_delete=models.CASCADE, related_name="images")
    url = models.URLField(max_length=500)
    caption = models.CharField(max_length=200, blank=True)
    is_primary = models.BooleanField(default=False)
    uploaded_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-is_primary", "uploaded_at", "id"]
        constraints = [
            models.UniqueConstraint(
                fields=["hostel"],
                condition=Q(is_primary=True),
                name="one_primary_image_per_hostel",
            ),
        ]

    def __str__(self) -> str:  # pragma: no cover - simple display helper
        return f"Image for {self.hostel.name}"


class Room(models.Model):
    hostel = models.ForeignKey(Hostel, on_delete=models.CASCADE, related_name="rooms")
    room_number = models.CharField(max_length=20)
    room_type = models.CharField(max_length=10, choices=RoomType.choices)
    description = models.TextField(blank=True, max_length=1000)
    capacity = models.PositiveSmallIntegerField(
        default=1,
        validators=[MinValueValidator(1), MaxValueValidator(10)],
    )
    monthly_price = models.DecimalField(max_digits=10, decimal_places=2)
    deposit = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    is_available = models.BooleanField(default=True)
    is_active = models.BooleanField(default=True)
    disabled_at = models.DateTimeField(null=True, blank=True)
    disable_reason = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["room_number", "id"]
        constraints = [
            models.UniqueConstraint(
                Lower("room_number"),
                "hostel",
                condition=Q(is_active=True),
                name="unique_active_room_number_per_hostel",
            ),
        ]

    def __str__(self) -> str:  # pragma: no cover - simple display helper
        return f"{self.hostel.name} - Room {self.room_number}"

    @property
    def is_bookable(self) -> bool:
        return self.is_active and self.is_available
