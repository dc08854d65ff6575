from __future__ import annotations

from rest_framework import status

from ...models import Report, User
from ...services.accounts import AccountStatusService
from ...services.catalog import visible_hostel
from ...services.common import get_or_not_found
from ...services.metrics import AdminOverviewService
from ...services.moderation import ReportModerationService, ReportService
from ..payload import camel_keys, request_payload
from ..permissions import IsActiveAccount, IsAdmin
from ..responses import envelope
from ..serializers import ReportSerializer, UserSerializer
from .base import MarketplaceAPIView

__all__ = [
    "HostelReportView",
    "AdminReportListView",
    "AdminReportDetailView",
    "AdminOverviewView",
    "AdminUserStatusView",
]


class HostelReportView(MarketplaceAPIView):
    permission_classes = [IsActiveAccount]
    service_class = ReportService

    def post(self, request, hostel_id):
        hostel = visible_hostel(hostel_id, request.user)
        report = self.service_class(request.user).file_report(hostel, request_payload(request))
        return envelope(ReportSerializer(report).data, "Report submitted.", status.HTTP_201_CREATED)


class AdminReportListView(MarketplaceAPIView):
    permission_classes = [IsAdmin]
    service_class = ReportModerationService

    def get(self, request):
        queryset = self.service_class(request.user).reports(request.query_params.get("status"))
        return self.paginated(queryset, ReportSerializer)


class AdminReportDetailView(MarketplaceAPIView):
    permission_classes = [IsAdmin]
    service_class = ReportModerationService

    def patch(self, request, report_id):
        report = get_or_not_found(
            Report.objects.select_related("hostel__landlord__user", "reporter"),
            "Report not found.",
            pk=report_id,
        )
        outcome = self.service_class(request.user).update_report(report, request_payload(request))
        data = {
            "report": ReportSerializer(outcome.report).data,
            "hostelDisabled": outcome.hostel_disabled,
            "cascadedReports": outcome.cascaded_reports,
        }
        return envelope(data, f"Report {outcome.report.status}.")


class AdminOverviewView(MarketplaceAPIView):
    permission_classes = [IsAdmin]
    service_class = AdminOverviewService

    def get(self, request):
        return envelope(camel_keys(self.service_class(request.user).overview()))


class AdminUserStatusView(MarketplaceAPIView):
    permission_classes = [IsAdmin]
    service_class = AccountStatusService

    def patch(self, request, user_id):
        user = get_or_not_found(User.objects.all(), "User not found.", pk=user_id)
        user = self.service_class(request.user).change_status(user, request_payload(request))
        return envelope(UserSerializer(user).data, f"User is now {user.status}.")
