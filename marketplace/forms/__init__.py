"""Input validation forms, grouped by workflow."""

from .booking import BookingDatesForm, EstimateForm
from .common import clean_reason, form_errors, require_reason, validated
from .listing import AmenityForm, HostelForm, HostelImageForm, RoomForm
from .moderation import AccountStatusForm, ReportDecisionForm, ReportForm
from .review import ReviewForm

__all__ = [
    "AccountStatusForm",
    "AmenityForm",
    "BookingDatesForm",
    "EstimateForm",
    "HostelForm",
    "HostelImageForm",
    "ReportDecisionForm",
    "ReportForm",
    "ReviewForm",
    "RoomForm",
    "clean_reason",
    "form_errors",
    "require_reason",
    "validated",
]
