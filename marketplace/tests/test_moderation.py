from django.test import TestCase

from ..exceptions import AuthorizationError, InvalidTransitionError, ValidationError
from ..lifecycle import AccountStatus, NotificationType, ReportStatus
from ..models import Notification, Report
from ..services.accounts import AccountStatusService
from ..services.listing import HostelListingService
from ..services.moderation import ListingModerationService, ReportModerationService, ReportService
from .factories import make_admin, make_hostel, make_landlord, make_student


class ReportFilingTest(TestCase):
    def setUp(self):
        self.admin = make_admin()
        self.hostel = make_hostel(make_landlord())
        self.student = make_student()

    def test_report_starts_pending_and_notifies_admins(self):
        make_admin("gone", status=AccountStatus.DEACTIVATED)
        report = ReportService(self.student).file_report(
            self.hostel,
            {"reason": "scam", "description": "  Asked for a deposit via a personal number.  "},
        )
        self.assertEqual(report.status, ReportStatus.PENDING)
        self.assertEqual(report.description, "Asked for a deposit via a personal number.")
        notifications = Notification.objects.filter(type=NotificationType.COMPLAINT)
        self.assertEqual([n.user for n in notifications], [self.admin])

    def test_description_is_required(self):
        with self.assertRaises(ValidationError):
            ReportService(self.student).file_report(self.hostel, {"reason": "scam", "description": "   "})

    def test_unknown_reason(self):
        with self.assertRaises(ValidationError):
            ReportService(self.student).file_report(self.hostel, {"reason": "vibes", "description": "Bad vibes"})

    def test_suspended_users_cannot_report(self):
        suspended = make_student("suspended", status=AccountStatus.SUSPENDED)
        with self.assertRaises(AuthorizationError):
            ReportService(suspended).file_report(self.hostel, {"reason": "scam", "description": "Scam"})


class ReportModerationTest(TestCase):
    def setUp(self):
        self.admin = make_admin()
        self.landlord = make_landlord()
        self.hostel = make_hostel(self.landlord)
        self.reporter = make_student()
        self.report = self.file()
        self.service = ReportModerationService(self.admin)

    def file(self, reason="fake_listing"):
        return ReportService(self.reporter).file_report(self.hostel, {"reason": reason, "description": "Not real"})

    def test_review_then_resolve(self):
        self.service.review_report(self.report, "Checking with the landlord")
        self.assertEqual(self.report.status, ReportStatus.REVIEWED)
        outcome = self.service.resolve_report(self.report, "Landlord fixed the listing")
        self.assertEqual(outcome.report.status, ReportStatus.RESOLVED)
        self.assertFalse(outcome.hostel_disabled)
        self.hostel.refresh_from_db()
        self.assertTrue(self.hostel.is_active)

    def test_resolve_with_disable_cascades(self):
        sibling = self.file("scam")
        reviewed = self.file("harassment")
        self.service.review_report(reviewed, "Looking into it")

        outcome = self.service.resolve_report(self.report, "Confirmed fake listing", disable_listing=True)

        self.hostel.refresh_from_db()
        self.assertFalse(self.hostel.is_active)
        self.assertEqual(self.hostel.disable_reason, "Confirmed fake listing")
        self.assertEqual(self.hostel.effective_status, "disabled")
        self.assertEqual(sorted(outcome.cascaded_reports), sorted([sibling.pk, reviewed.pk]))
        self.assertFalse(Report.objects.exclude(status=ReportStatus.RESOLVED).exists())
        with self.assertRaises(InvalidTransitionError):
            self.service.review_report(self.report, "Too late")

    def test_disable_requires_notes(self):
        with self.assertRaises(ValidationError):
            self.service.resolve_report(self.report, "", disable_listing=True)
        self.report.refresh_from_db()
        self.assertEqual(self.report.status, ReportStatus.PENDING)

    def test_update_report_payload(self):
        outcome = self.service.update_report(
            self.report,
            {"status": "resolved", "admin_notes": "Scam confirmed", "disable_listing": True},
        )
        self.assertTrue(outcome.hostel_disabled)
        with self.assertRaises(ValidationError):
            self.service.update_report(self.file(), {"status": "reviewed", "disable_listing": True})

    def test_landlord_cannot_reenable_admin_disabled_listing(self):
        self.service.resolve_report(self.report, "Scam confirmed", disable_listing=True)
        self.hostel.refresh_from_db()
        with self.assertRaises(InvalidTransitionError):
            HostelListingService(self.landlord).set_active(self.hostel, True)

    def test_only_admins_moderate(self):
        with self.assertRaises(AuthorizationError):
            ReportModerationService(self.reporter).review_report(self.report, "")


class ListingModerationTest(TestCase):
    def setUp(self):
        self.admin = make_admin()
        self.landlord = make_landlord()
        self.hostel = make_hostel(self.landlord)
        self.service = ListingModerationService(self.admin)

    def test_disable_and_enable(self):
        self.service.disable(self.hostel, "Under investigation")
        self.hostel.refresh_from_db()
        self.assertFalse(self.hostel.is_active)
        self.assertEqual(self.hostel.verification_status, "approved")
        with self.assertRaises(InvalidTransitionError):
            self.service.disable(self.hostel, "Again")
        self.service.enable(self.hostel)
        self.hostel.refresh_from_db()
        self.assertTrue(self.hostel.is_active)
        self.assertEqual(self.hostel.disable_reason, "")

    def test_disable_requires_reason(self):
        with self.assertRaises(ValidationError):
            self.service.disable(self.hostel, "")


class AccountStatusTest(TestCase):
    def setUp(self):
        self.admin = make_admin()
        self.service = AccountStatusService(self.admin)
        self.student = make_student()

    def test_suspend_requires_reason_and_blocks_actions(self):
        with self.assertRaises(ValidationError):
            self.service.change_status(self.student, {"status": "suspended"})
        self.service.change_status(self.student, {"status": "suspended", "reason": "Spam reports"})
        self.student.refresh_from_db()
        self.assertEqual(self.student.status, AccountStatus.SUSPENDED)
        self.assertFalse(self.student.is_operational)
        with self.assertRaises(AuthorizationError):
            ReportService(self.student).file_report(
                make_hostel(make_landlord()),
                {"reason": "scam", "description": "Scam"},
            )

    def test_reactivate(self):
        self.service.change_status(self.student, {"status": "deactivated", "reason": "Left university"})
        self.service.change_status(self.student, {"status": "active"})
        self.student.refresh_from_db()
        self.assertEqual(self.student.status, AccountStatus.ACTIVE)

    def test_same_status_is_invalid(self):
        with self.assertRaises(InvalidTransitionError):
            self.service.change_status(self.student, {"status": "active"})

    def test_admin_cannot_change_own_status(self):
        with self.assertRaises(InvalidTransitionError):
            self.service.change_status(self.admin, {"status": "suspended", "reason": "Testing"})
