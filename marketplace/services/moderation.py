from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from django.db import transaction
from django.utils import timezone

from ..access import require_admin, require_role
from ..exceptions import InvalidTransitionError
from ..forms import ReportDecisionForm, ReportForm, clean_reason, require_reason, validated
from ..lifecycle import OPEN_REPORT_STATUSES, REPORT, NotificationType, ReportAction, ReportStatus
from ..models import Hostel, Report
from .common import transition
from .notifications import notify, notify_admins

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolutionOutcome:
    report: Report
    hostel_disabled: bool = False
    cascaded_reports: list[int] = field(default_factory=list)


class ReportService:
    """Fraud and safety reports filed by any signed-in user."""

    def __init__(self, user):
        self.user = user

    def file_report(self, hostel: Hostel, data: dict[str, Any]) -> Report:
        require_role(self.user)
        cleaned = validated(ReportForm(data)).cleaned_data
        report = Report.objects.create(
            hostel=hostel,
            reporter=self.user,
            reason=cleaned["reason"],
            description=cleaned["description"],
            status=ReportStatus.PENDING,
        )
        logger.info("User %s filed report %s against hostel %s", self.user.pk, report.pk, hostel.pk)
        notify_admins(
            "New hostel report",
            f"{self.user.display_name} reported {hostel.name}: {report.get_reason_display()}.",
            NotificationType.COMPLAINT,
        )
        return report


def _disable_hostel(hostel: Hostel, reason: str) -> None:
    now = timezone.now()
    Hostel.objects.filter(pk=hostel.pk).update(is_active=False, disable_reason=reason, disabled_at=now, updated_at=now)
    hostel.is_active = False
    hostel.disable_reason = reason
    hostel.disabled_at = now
    hostel.updated_at = now


class ReportModerationService:
    """Admin review and resolution of reports."""

    def __init__(self, admin):
        self.admin = admin

    def reports(self, status: str | None = None):
        require_admin(self.admin)
        queryset = Report.objects.select_related("hostel", "reporter")
        if status:
            queryset = queryset.filter(status=status)
        return queryset

    def review_report(self, report: Report, notes: str | None = None) -> Report:
        require_admin(self.admin)
        transition(
            report,
            REPORT,
            ReportAction.REVIEW,
            admin_notes=clean_reason(notes, field="admin_notes"),
            handled_by=self.admin,
            reviewed_at=timezone.now(),
        )
        return report

    @transaction.atomic
    def resolve_report(self, report: Report, notes: str | None = None, disable_listing: bool = False) -> ResolutionOutcome:
        """Resolve ``report``; with ``disable_listing`` take the hostel down too.

        Disabling also resolves every other open report on the same hostel.
        """
        require_admin(self.admin)
        notes = clean_reason(notes, field="admin_notes")
        if disable_listing:
            notes = require_reason(notes, field="admin_notes", label="Admin notes")
        now = timezone.now()
        transition(
            report,
            REPORT,
            ReportAction.RESOLVE,
            admin_notes=notes,
            handled_by=self.admin,
            resolved_at=now,
        )
        if not disable_listing:
            return ResolutionOutcome(report=report)

        hostel = report.hostel
        _disable_hostel(hostel, notes)
        siblings = Report.objects.filter(hostel=hostel, status__in=OPEN_REPORT_STATUSES).exclude(pk=report.pk)
        cascaded = list(siblings.values_list("pk", flat=True))
        if cascaded:
            Report.objects.filter(pk__in=cascaded).update(
                status=ReportStatus.RESOLVED,
                admin_notes=f"Resolved with report #{report.pk}: {notes}",
                handled_by=self.admin,
                resolved_at=now,
                updated_at=now,
            )
        logger.info(
            "Report %s disabled hostel %s; cascaded resolution to reports %s",
            report.pk,
            hostel.pk,
            cascaded,
        )
        notify(
            hostel.landlord.user,
            "Listing disabled",
            f"{hostel.name} was disabled after a report was upheld: {notes}",
            NotificationType.ADMIN,
        )
        return ResolutionOutcome(report=report, hostel_disabled=True, cascaded_reports=cascaded)

    def update_report(self, report: Report, data: dict[str, Any]) -> ResolutionOutcome:
        """Apply a ``{status, adminNotes, disableListing}`` decision payload."""
        require_admin(self.admin)
        cleaned = validated(ReportDecisionForm(data)).cleaned_data
        if cleaned["status"] == ReportStatus.REVIEWED:
            return ResolutionOutcome(report=self.review_report(report, cleaned["admin_notes"]))
        return self.resolve_report(report, cleaned["admin_notes"], cleaned["disable_listing"])


class ListingModerationService:
    """Forced disable and re-enable of hostel listings by an admin."""

    def __init__(self, admin):
        self.admin = admin

    def disable(self, hostel: Hostel, reason: str | None) -> Hostel:
        require_admin(self.admin)
        reason = require_reason(reason)
        now = timezone.now()
        updated = Hostel.objects.filter(pk=hostel.pk, is_active=True).update(
            is_active=False,
            disable_reason=reason,
            disabled_at=now,
            updated_at=now,
        )
        if not updated:
            logger.warning("Admin %s tried to disable already disabled hostel %s", self.admin.pk, hostel.pk)
            raise InvalidTransitionError("This hostel is already disabled.", state="disabled", action="disable")
        hostel.is_active = False
        hostel.disable_reason = reason
        hostel.disabled_at = now
        logger.info("Admin %s disabled hostel %s", self.admin.pk, hostel.pk)
        notify(
            hostel.landlord.user,
            "Listing disabled",
            f"{hostel.name} was disabled by an administrator: {reason}",
            NotificationType.ADMIN,
        )
        return hostel

    def enable(self, hostel: Hostel) -> Hostel:
        require_admin(self.admin)
        now = timezone.now()
        updated = Hostel.objects.filter(pk=hostel.pk, is_active=False).update(
            is_active=True,
            disable_reason="",
            disabled_at=None,
            updated_at=now,
        )
        if not updated:
            raise InvalidTransitionError("This hostel is already enabled.", state="active", action="enable")
        hostel.is_active = True
        hostel.disable_reason = ""
        hostel.disabled_at = None
        logger.info("Admin %s enabled hostel %s", self.admin.pk, hostel.pk)
        notify(hostel.landlord.user, "Listing enabled", f"{hostel.name} is active again.", NotificationType.ADMIN)
        return hostel
