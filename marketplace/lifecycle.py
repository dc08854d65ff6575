"""State types and transition tables for every stateful entity.

Each entity gets one :class:`StateMachine`. Services never compare status
strings to decide whether an action is legal; they ask the machine for the
next state and let it raise :class:`InvalidTransitionError`.
"""

from __future__ import annotations

from typing import Mapping

from django.db import models

from .exceptions import InvalidTransitionError


class Role(models.TextChoices):
    STUDENT = "student", "Student"
    LANDLORD = "landlord", "Landlord"
    ADMIN = "admin", "Admin"


class AccountStatus(models.TextChoices):
    ACTIVE = "active", "Active"
    PENDING = "pending", "Pending"
    SUSPENDED = "suspended", "Suspended"
    DEACTIVATED = "deactivated", "Deactivated"


class AccountAction(models.TextChoices):
    ACTIVATE = "activate", "Activate"
    SUSPEND = "suspend", "Suspend"
    DEACTIVATE = "deactivate", "Deactivate"
    REACTIVATE = "reactivate", "Reactivate"


class LandlordVerificationStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    VERIFIED = "verified", "Verified"
    REJECTED = "rejected", "Rejected"


class HostelVerificationStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    APPROVED = "approved", "Approved"
    REJECTED = "rejected", "Rejected"


class VerificationAction(models.TextChoices):
    VERIFY = "verify", "Verify"
    REJECT = "reject", "Reject"
    RESUBMIT = "resubmit", "Resubmit"
    REVISE = "revise", "Revise"


class EffectiveStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    VERIFIED = "verified", "Verified"
    REJECTED = "rejected", "Rejected"
    DISABLED = "disabled", "Disabled"


class HostelType(models.TextChoices):
    MALE = "male", "Male"
    FEMALE = "female", "Female"
    MIXED = "mixed", "Mixed"


class AmenityCategory(models.TextChoices):
    ESSENTIAL = "essential", "Essential"
    COMFORT = "comfort", "Comfort"
    SECURITY = "security", "Security"
    STUDY = "study", "Study"
    ENTERTAINMENT = "entertainment", "Entertainment"


class RoomType(models.TextChoices):
    SINGLE = "single", "Single"
    SHARED = "shared", "Shared"
    BEDSIT = "bedsit", "Bedsitter"
    SELF = "self", "Self-contained"
    STUDIO = "studio", "Studio"
    DOUBLE = "double", "Double"
    TRIPLE = "triple", "Triple"
    QUAD = "quad", "Quad"
    BEDSPACE = "bedspace", "Bedspace"


class BookingStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    APPROVED = "approved", "Approved"
    REJECTED = "rejected", "Rejected"
    CANCELLED = "cancelled", "Cancelled"


class BookingAction(models.TextChoices):
    APPROVE = "approve", "Approve"
    REJECT = "reject", "Reject"
    CANCEL = "cancel", "Cancel"


class ReportReason(models.TextChoices):
    FAKE_LISTING = "fake_listing", "Fake listing"
    PRICING_ISSUE = "pricing_issue", "Pricing issue"
    HARASSMENT = "harassment", "Harassment"
    SAFETY_CONCERN = "safety_concern", "Safety concern"
    SCAM = "scam", "Scam"
    PROPERTY_CONDITION = "property_condition", "Property condition"
    OTHER = "other", "Other"


class ReportStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    REVIEWED = "reviewed", "Reviewed"
    RESOLVED = "resolved", "Resolved"


class ReportAction(models.TextChoices):
    REVIEW = "review", "Review"
    RESOLVE = "resolve", "Resolve"


class NotificationType(models.TextChoices):
    BOOKING = "booking", "Booking"
    SYSTEM = "system", "System"
    COMPLAINT = "complaint", "Complaint"
    ADMIN = "admin", "Admin"


class StateMachine:
    """A transition table: ``{state: {action: next_state}}``."""

    def __init__(self, name: str, table: Mapping[str, Mapping[str, str]]):
        self.name = name
        self.table = {
            str(state): {str(action): str(target) for action, target in actions.items()}
            for state, actions in table.items()
        }

    def allowed_transitions(self, state: str) -> dict[str, str]:
        return dict(self.table.get(str(state), {}))

    def can(self, state: str, action: str) -> bool:
        return str(action) in self.table.get(str(state), {})

    def is_terminal(self, state: str) -> bool:
        return not self.table.get(str(state))

    def next_state(self, state: str, action: str) -> str:
        try:
            return self.table[str(state)][str(action)]
        except KeyError:
            raise InvalidTransitionError(
                f"Cannot {action} a {self.name} that is {state}.",
                state=state,
                action=action,
            ) from None

    def action_for(self, state: str, target: str) -> str:
        """Return the action that moves ``state`` to ``target``."""
        for action, next_state in self.table.get(str(state), {}).items():
            if next_state == target:
                return action
        raise InvalidTransitionError(
            f"A {self.name} cannot move from {state} to {target}.",
            state=state,
        )


ACCOUNT = StateMachine(
    "account",
    {
        AccountStatus.PENDING: {
            AccountAction.ACTIVATE: AccountStatus.ACTIVE,
            AccountAction.SUSPEND: AccountStatus.SUSPENDED,
            AccountAction.DEACTIVATE: AccountStatus.DEACTIVATED,
        },
        AccountStatus.ACTIVE: {
            AccountAction.SUSPEND: AccountStatus.SUSPENDED,
            AccountAction.DEACTIVATE: AccountStatus.DEACTIVATED,
        },
        AccountStatus.SUSPENDED: {
            AccountAction.REACTIVATE: AccountStatus.ACTIVE,
            AccountAction.DEACTIVATE: AccountStatus.DEACTIVATED,
        },
        AccountStatus.DEACTIVATED: {
            AccountAction.REACTIVATE: AccountStatus.ACTIVE,
        },
    },
)

LANDLORD_VERIFICATION = StateMachine(
    "landlord verification",
    {
        LandlordVerificationStatus.PENDING: {
            VerificationAction.VERIFY: LandlordVerificationStatus.VERIFIED,
            VerificationAction.REJECT: LandlordVerificationStatus.REJECTED,
        },
        LandlordVerificationStatus.REJECTED: {
            VerificationAction.RESUBMIT: LandlordVerificationStatus.PENDING,
        },
        LandlordVerificationStatus.VERIFIED: {},
    },
)

HOSTEL_VERIFICATION = StateMachine(
    "hostel verification",
    {
        HostelVerificationStatus.PENDING: {
            VerificationAction.VERIFY: HostelVerificationStatus.APPROVED,
            VerificationAction.REJECT: HostelVerificationStatus.REJECTED,
        },
        HostelVerificationStatus.REJECTED: {
            VerificationAction.RESUBMIT: HostelVerificationStatus.PENDING,
        },
        HostelVerificationStatus.APPROVED: {
            VerificationAction.REVISE: HostelVerificationStatus.PENDING,
        },
    },
)

BOOKING = StateMachine(
    "booking",
    {
        BookingStatus.PENDING: {
            BookingAction.APPROVE: BookingStatus.APPROVED,
            BookingAction.REJECT: BookingStatus.REJECTED,
            BookingAction.CANCEL: BookingStatus.CANCELLED,
        },
        BookingStatus.APPROVED: {
            BookingAction.CANCEL: BookingStatus.CANCELLED,
        },
        BookingStatus.REJECTED: {},
        BookingStatus.CANCELLED: {},
    },
)

REPORT = StateMachine(
    "report",
    {
        ReportStatus.PENDING: {
            ReportAction.REVIEW: ReportStatus.REVIEWED,
            ReportAction.RESOLVE: ReportStatus.RESOLVED,
        },
        ReportStatus.REVIEWED: {
            ReportAction.RESOLVE: ReportStatus.RESOLVED,
        },
        ReportStatus.RESOLVED: {},
    },
)

OPEN_BOOKING_STATUSES = (BookingStatus.PENDING, BookingStatus.APPROVED)
OPEN_REPORT_STATUSES = (ReportStatus.PENDING, ReportStatus.REVIEWED)
