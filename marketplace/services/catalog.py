from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from django.db.models import Prefetch

from .. import projections
from ..exceptions import NotFoundError
from ..identity import same_entity
from ..lifecycle import BookingStatus, HostelType, HostelVerificationStatus, Role
from ..models import Booking, Hostel, Room


@dataclass(frozen=True)
class HostelFilters:
    """Value object holding filter parameters for public catalog queries."""

    city: str = ""
    county: str = ""
    hostel_type: str = ""
    max_price: Decimal | None = None


def public_hostels():
    return Hostel.objects.filter(verification_status=HostelVerificationStatus.APPROVED, is_active=True)


def has_approved_booking(student, hostel) -> bool:
    return Booking.objects.filter(
        student_id=getattr(student, "pk", student),
        room__hostel_id=getattr(hostel, "pk", hostel),
        status=BookingStatus.APPROVED,
    ).exists()


def can_view_landlord_contact(viewer, hostel: Hostel) -> bool:
    """Contact details are for admins, the owner, and students with an approved booking."""
    if viewer is None or not getattr(viewer, "is_authenticated", False) or not viewer.is_operational:
        return False
    if viewer.role == Role.ADMIN:
        return True
    if viewer.role == Role.LANDLORD:
        return same_entity(hostel.landlord.user_id, viewer)
    return has_approved_booking(viewer, hostel)


def visible_hostel(hostel_id, viewer=None) -> Hostel:
    """Fetch a hostel the viewer may see. Non-public listings look missing to outsiders."""
    hostel = Hostel.objects.select_related("landlord__user").filter(pk=hostel_id).first()
    if hostel is None:
        raise NotFoundError("Hostel not found.")
    if hostel.is_public:
        return hostel
    authenticated = viewer is not None and getattr(viewer, "is_authenticated", False)
    if authenticated and (viewer.role == Role.ADMIN or same_entity(hostel.landlord.user_id, viewer)):
        return hostel
    raise NotFoundError("Hostel not found.")


class PublicCatalogService:
    """Encapsulates querying logic for the public hostel catalog."""

    def build_filters(self, data) -> HostelFilters:
        """Return validated filter parameters from raw request data."""
        max_price_raw = (data.get("max_price") or data.get("maxPrice") or "").strip()
        max_price: Decimal | None = None
        if max_price_raw:
            try:
                max_price = Decimal(max_price_raw)
            except (InvalidOperation, TypeError):
                max_price = None
        hostel_type = (data.get("hostel_type") or data.get("hostelType") or "").strip()
        return HostelFilters(
            city=(data.get("city") or "").strip(),
            county=(data.get("county") or "").strip(),
            hostel_type=hostel_type if hostel_type in HostelType.values else "",
            max_price=max_price,
        )

    def get_catalog(self, filters: HostelFilters):
        """Apply filters and return the public catalog queryset."""
        queryset = public_hostels().select_related("landlord__user").prefetch_related(
            Prefetch("rooms", queryset=Room.objects.order_by("room_number")),
            "amenities",
            "images",
            "reviews",
        )
        if filters.city:
            queryset = queryset.filter(city__iexact=filters.city)
        if filters.county:
            queryset = queryset.filter(county__iexact=filters.county)
        if filters.hostel_type:
            queryset = queryset.filter(hostel_type=filters.hostel_type)
        if filters.max_price is not None:
            queryset = queryset.filter(min_price__lte=filters.max_price)
        return queryset


class HostelDetailService:
    """Role-aware view of a single hostel."""

    def __init__(self, hostel: Hostel, viewer=None):
        self.hostel = hostel
        self.viewer = viewer

    def rooms(self):
        rooms = self.hostel.rooms.all()
        if self.viewer is None or not same_entity(self.hostel.landlord.user_id, self.viewer):
            rooms = rooms.filter(is_active=True)
        return rooms

    def occupancy(self) -> projections.RoomOccupancy:
        return projections.room_occupancy(self.hostel.rooms.all())

    def rating(self) -> projections.RatingSummary:
        return projections.rating_summary(review.rating for review in self.hostel.reviews.all())

    def landlord_contact(self) -> dict[str, str]:
        landlord = self.hostel.landlord.user
        contact = {"name": landlord.display_name}
        if can_view_landlord_contact(self.viewer, self.hostel):
            contact.update({"email": landlord.email, "phone": landlord.phone})
        return contact
