"""Marketplace data models exposed as a flat module-level API."""

from .booking import Booking
from .hostel import Amenity, Hostel, HostelImage, Room
from .notification import Notification
from .profile import LandlordProfile
from .report import Report
from .review import Review
from .saved import SavedHostel
from .user import User

__all__ = [
    "User",
    "LandlordProfile",
    "Hostel",
    "Amenity",
    "HostelImage",
    "Room",
    "Booking",
    "Review",
    "Report",
    "SavedHostel",
    "Notification",
]
