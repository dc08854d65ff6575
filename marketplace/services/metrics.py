from __future__ import annotations

from dataclasses import dataclass, field

from django.db.models import Count, Prefetch

from .. import projections
from ..access import require_admin, require_landlord
from ..lifecycle import (
    AccountStatus,
    BookingStatus,
    HostelVerificationStatus,
    LandlordVerificationStatus,
    ReportStatus,
    Role,
)
from ..models import Booking, Hostel, LandlordProfile, Report, Room, User


@dataclass(frozen=True)
class AdminOverview:
    total_students: int
    total_landlords: int
    total_hostels: int
    pending_landlord_verifications: int
    pending_hostel_verifications: int
    pending_verifications: int
    reported_listings: int
    active_listings: int
    suspended_users: int
    verification_rate: int


class AdminOverviewService:
    """Read-only counts for the admin dashboard."""

    def __init__(self, admin):
        self.admin = admin

    def overview(self) -> AdminOverview:
        require_admin(self.admin)
        users = User.objects.all()
        hostels = Hostel.objects.all()
        total_hostels = hostels.count()
        active_listings = hostels.filter(
            verification_status=HostelVerificationStatus.APPROVED,
            is_active=True,
        ).count()
        pending_landlords = LandlordProfile.objects.filter(
            verification_status=LandlordVerificationStatus.PENDING,
        ).count()
        pending_hostels = hostels.filter(verification_status=HostelVerificationStatus.PENDING).count()
        return AdminOverview(
            total_students=users.filter(role=Role.STUDENT).count(),
            total_landlords=users.filter(role=Role.LANDLORD).count(),
            total_hostels=total_hostels,
            pending_landlord_verifications=pending_landlords,
            pending_hostel_verifications=pending_hostels,
            pending_verifications=projections.pending_verifications(pending_landlords, pending_hostels),
            reported_listings=Report.objects.filter(status=ReportStatus.PENDING).count(),
            active_listings=active_listings,
            suspended_users=users.filter(status=AccountStatus.SUSPENDED).count(),
            verification_rate=projections.verification_rate(active_listings, total_hostels),
        )


@dataclass(frozen=True)
class LandlordDashboardStats:
    total_hostels: int
    total_rooms: int
    available_rooms: int
    occupied_rooms: int
    occupancy_rate: float
    bookings_by_status: dict[str, int] = field(default_factory=dict)


class LandlordDashboardService:
    """Aggregate data required for the landlord dashboard."""

    def __init__(self, landlord):
        self.landlord = landlord

    def properties(self) -> list[Hostel]:
        profile = require_landlord(self.landlord)
        hostels = list(
            Hostel.objects.filter(landlord=profile).prefetch_related(
                Prefetch("rooms", queryset=Room.objects.order_by("room_number"))
            )
        )
        for hostel in hostels:
            hostel.occupancy = projections.room_occupancy(hostel.rooms.all())
        return hostels

    def stats(self, properties: list[Hostel] | None = None) -> LandlordDashboardStats:
        profile = require_landlord(self.landlord)
        hostels = self.properties() if properties is None else list(properties)
        total_rooms = sum(hostel.occupancy.total_rooms for hostel in hostels)
        available_rooms = sum(hostel.occupancy.available_rooms for hostel in hostels)
        occupied_rooms = sum(hostel.occupancy.occupied_rooms for hostel in hostels)
        occupancy_rate = round((occupied_rooms / total_rooms) * 100, 2) if total_rooms else 0.0

        counts = {status: 0 for status in BookingStatus.values}
        rows = (
            Booking.objects.filter(room__hostel__landlord=profile)
            .values("status")
            .annotate(total=Count("id"))
            .order_by()
        )
        for row in rows:
            counts[row["status"]] = row["total"]

        return LandlordDashboardStats(
            total_hostels=len(hostels),
            total_rooms=total_rooms,
            available_rooms=available_rooms,
            occupied_rooms=occupied_rooms,
            occupancy_rate=occupancy_rate,
            bookings_by_status=counts,
        )
