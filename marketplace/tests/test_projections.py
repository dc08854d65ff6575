from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from types import SimpleNamespace

from django.test import SimpleTestCase

from .. import projections
from ..lifecycle import EffectiveStatus


def room(is_active=True, is_available=True):
    return SimpleNamespace(is_active=is_active, is_available=is_available)


class EffectiveStatusTest(SimpleTestCase):
    def test_inactive_is_disabled_regardless_of_verification(self):
        for status in ("pending", "approved", "rejected"):
            self.assertEqual(projections.effective_status(status, False), EffectiveStatus.DISABLED)

    def test_active_mirrors_verification(self):
        self.assertEqual(projections.effective_status("approved", True), EffectiveStatus.VERIFIED)
        self.assertEqual(projections.effective_status("pending", True), EffectiveStatus.PENDING)
        self.assertEqual(projections.effective_status("rejected", True), EffectiveStatus.REJECTED)


class RoomOccupancyTest(SimpleTestCase):
    def test_soft_deleted_rooms_are_ignored(self):
        occupancy = projections.room_occupancy(
            [room(), room(is_available=False), room(is_active=False), room(is_active=False, is_available=False)]
        )
        self.assertEqual(occupancy, projections.RoomOccupancy(total_rooms=2, available_rooms=1, occupied_rooms=1))

    def test_empty_inventory(self):
        self.assertEqual(projections.room_occupancy([]).total_rooms, 0)


class PriceRangeTest(SimpleTestCase):
    def test_single_price(self):
        self.assertEqual(projections.price_range_label(Decimal("4500")), "KES 4,500")
        self.assertEqual(projections.price_range_label(Decimal("4500"), Decimal("4500")), "KES 4,500")

    def test_range(self):
        self.assertEqual(projections.price_range_label(4500, 6000, "KES"), "KES 4,500 - 6,000")


class RatingSummaryTest(SimpleTestCase):
    def test_no_reviews_is_new_not_zero_stars(self):
        summary = projections.rating_summary([])
        self.assertEqual(summary.total_reviews, 0)
        self.assertEqual(summary.label, "New")

    def test_mean_is_rounded_to_two_places(self):
        summary = projections.rating_summary([5, 4, 4])
        self.assertEqual(summary.average_rating, 4.33)
        self.assertEqual(summary.total_reviews, 3)
        self.assertEqual(summary.label, "4.3")


class EstimateTest(SimpleTestCase):
    def test_three_day_stay(self):
        estimate = projections.estimate_cost(Decimal("4500"), date(2025, 1, 1), date(2025, 1, 4))
        self.assertEqual(estimate, Decimal("450"))

    def test_one_day_or_less_is_exactly_a_thirtieth(self):
        price = Decimal("4500")
        self.assertEqual(projections.estimate_cost(price, date(2025, 1, 1), date(2025, 1, 2)), price / 30)
        self.assertEqual(projections.estimate_cost(price, date(2025, 1, 1), date(2025, 1, 1)), price / 30)

    def test_monotonic_in_stay_length(self):
        start = date(2025, 3, 1)
        previous = Decimal("0")
        for days in range(0, 90):
            estimate = projections.estimate_cost(Decimal("5200"), start, start + timedelta(days=days))
            self.assertGreaterEqual(estimate, previous)
            previous = estimate

    def test_days_use_utc_calendar_dates(self):
        nairobi = timezone(timedelta(hours=3))
        start = datetime(2025, 1, 1, 1, 0, tzinfo=nairobi)  # still Dec 31 in UTC
        end = datetime(2025, 1, 1, 23, 0, tzinfo=nairobi)
        self.assertEqual(projections.days_between(start, end), 1)


class AdminRatioTest(SimpleTestCase):
    def test_zero_hostels_gives_zero(self):
        self.assertEqual(projections.verification_rate(0, 0), 0)

    def test_all_verified_gives_hundred(self):
        self.assertEqual(projections.verification_rate(4, 4), 100)

    def test_rounds_half_up(self):
        self.assertEqual(projections.verification_rate(1, 8), 13)
        self.assertEqual(projections.verification_rate(2, 3), 67)

    def test_pending_verifications(self):
        self.assertEqual(projections.pending_verifications(2, 3), 5)
