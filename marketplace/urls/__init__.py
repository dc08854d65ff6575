"""Aggregate URL patterns for the marketplace API."""

from . import accounts, bookings, listings, moderation, students

urlpatterns = [
    *accounts.urlpatterns,
    *listings.urlpatterns,
    *bookings.urlpatterns,
    *moderation.urlpatterns,
    *students.urlpatterns,
]
