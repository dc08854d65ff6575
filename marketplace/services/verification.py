from __future__ import annotations

import logging

from django.utils import timezone

from ..access import require_admin, require_hostel_owner, require_landlord
from ..exceptions import ValidationError
from ..forms import require_reason
from ..lifecycle import (
    HOSTEL_VERIFICATION,
    LANDLORD_VERIFICATION,
    NotificationType,
    VerificationAction,
)
from ..models import Hostel, LandlordProfile
from .common import transition
from .notifications import notify

logger = logging.getLogger(__name__)

DECISIONS = {VerificationAction.VERIFY, VerificationAction.REJECT}


def _decision(outcome: str, reason: str | None) -> tuple[str, str]:
    if outcome not in DECISIONS:
        raise ValidationError(errors={"status": ["Outcome must be verify or reject."]})
    if outcome == VerificationAction.REJECT:
        return outcome, require_reason(reason, label="A rejection reason")
    return outcome, ""


class VerificationService:
    """Admin decisions on landlord and hostel verification.

    A decision is only legal on a pending record; re-approving is refused so
    every decision leaves its own audit entry.
    """

    def __init__(self, admin):
        self.admin = admin

    def decide_landlord(self, profile: LandlordProfile, outcome: str, reason: str | None = None) -> LandlordProfile:
        require_admin(self.admin)
        outcome, reason = _decision(outcome, reason)
        now = timezone.now()
        changes = {"rejection_reason": reason, "reviewed_by": self.admin, "reviewed_at": now}
        if outcome == VerificationAction.VERIFY:
            changes["verified_at"] = now
        transition(profile, LANDLORD_VERIFICATION, outcome, field="verification_status", **changes)

        if outcome == VerificationAction.VERIFY:
            notify(profile.user, "Account verified", "Your landlord account has been verified.", NotificationType.ADMIN)
        else:
            notify(
                profile.user,
                "Verification rejected",
                f"Your landlord verification was rejected: {reason}",
                NotificationType.ADMIN,
            )
        return profile

    def decide_hostel(self, hostel: Hostel, outcome: str, reason: str | None = None) -> Hostel:
        require_admin(self.admin)
        outcome, reason = _decision(outcome, reason)
        transition(
            hostel,
            HOSTEL_VERIFICATION,
            outcome,
            field="verification_status",
            rejection_reason=reason,
            reviewed_by=self.admin,
            reviewed_at=timezone.now(),
        )

        landlord = hostel.landlord.user
        if outcome == VerificationAction.VERIFY:
            notify(landlord, "Hostel approved", f"{hostel.name} is now listed publicly.", NotificationType.ADMIN)
        else:
            notify(landlord, "Hostel rejected", f"{hostel.name} was rejected: {reason}", NotificationType.ADMIN)
        return hostel


class ResubmissionService:
    """Lets a landlord send a rejected profile or hostel back for review."""

    def __init__(self, landlord):
        self.landlord = landlord

    def resubmit_profile(self) -> LandlordProfile:
        profile = require_landlord(self.landlord)
        transition(
            profile,
            LANDLORD_VERIFICATION,
            VerificationAction.RESUBMIT,
            field="verification_status",
            rejection_reason="",
        )
        return profile

    def resubmit_hostel(self, hostel: Hostel) -> Hostel:
        require_hostel_owner(self.landlord, hostel)
        transition(
            hostel,
            HOSTEL_VERIFICATION,
            VerificationAction.RESUBMIT,
            field="verification_status",
            rejection_reason="",
        )
        return hostel
