"""Pure projections over entity collections.

Nothing here touches the database or mutates its inputs; every aggregate the
API exposes is computed on demand from these functions.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone as dt_timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from .lifecycle import EffectiveStatus, HostelVerificationStatus

DAYS_PER_MONTH = Decimal("30")
CENTS = Decimal("0.01")

_EFFECTIVE_BY_VERIFICATION = {
    str(HostelVerificationStatus.PENDING): EffectiveStatus.PENDING,
    str(HostelVerificationStatus.APPROVED): EffectiveStatus.VERIFIED,
    str(HostelVerificationStatus.REJECTED): EffectiveStatus.REJECTED,
}


@dataclass(frozen=True)
class RoomOccupancy:
    total_rooms: int
    available_rooms: int
    occupied_rooms: int


@dataclass(frozen=True)
class RatingSummary:
    average_rating: float
    total_reviews: int

    @property
    def label(self) -> str:
        # 0 means "no rating yet", never a zero-star score.
        if not self.total_reviews:
            return "New"
        return f"{self.average_rating:.1f}"


def effective_status(verification_status: str, is_active: bool) -> EffectiveStatus:
    if not is_active:
        return EffectiveStatus.DISABLED
    return _EFFECTIVE_BY_VERIFICATION[str(verification_status)]


def hostel_effective_status(hostel) -> EffectiveStatus:
    return effective_status(hostel.verification_status, hostel.is_active)


def is_publicly_visible(hostel) -> bool:
    return hostel_effective_status(hostel) == EffectiveStatus.VERIFIED


def room_occupancy(rooms: Iterable) -> RoomOccupancy:
    """Count rooms by availability. Soft-deleted rooms are ignored entirely."""
    available = occupied = 0
    for room in rooms:
        if not room.is_active:
            continue
        if room.is_available:
            available += 1
        else:
            occupied += 1
    return RoomOccupancy(
        total_rooms=available + occupied,
        available_rooms=available,
        occupied_rooms=occupied,
    )


def price_range_label(min_price, max_price=None, currency: str = "KES") -> str:
    minimum = Decimal(min_price or 0)
    if max_price is None or Decimal(max_price) <= 0 or Decimal(max_price) == minimum:
        return f"{currency} {minimum:,.0f}"
    return f"{currency} {minimum:,.0f} - {Decimal(max_price):,.0f}"


def rating_summary(ratings: Iterable[int]) -> RatingSummary:
    values = list(ratings)
    if not values:
        return RatingSummary(average_rating=0.0, total_reviews=0)
    mean = Decimal(sum(values)) / Decimal(len(values))
    return RatingSummary(
        average_rating=float(mean.quantize(CENTS, rounding=ROUND_HALF_UP)),
        total_reviews=len(values),
    )


def _utc_calendar_date(value: date | datetime) -> date:
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(dt_timezone.utc)
        return value.date()
    return value


def days_between(start: date | datetime, end: date | datetime) -> int:
    """Whole UTC calendar days from ``start`` to ``end``."""
    return (_utc_calendar_date(end) - _utc_calendar_date(start)).days


def estimate_cost(monthly_price, start: date | datetime, end: date | datetime) -> Decimal:
    """Prorated rent for the stay; at least one day is always charged.

    The result is unrounded so a one-day stay is exactly ``monthly_price / 30``.
    Rounding to cents happens when the value is rendered.
    """
    days = max(days_between(start, end), 1)
    return Decimal(monthly_price) / DAYS_PER_MONTH * days


def verification_rate(active_listings: int, total_hostels: int) -> int:
    if not total_hostels:
        return 0
    ratio = Decimal(active_listings) * 100 / Decimal(total_hostels)
    return int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def pending_verifications(pending_landlords: int, pending_hostels: int) -> int:
    return pending_landlords + pending_hostels
