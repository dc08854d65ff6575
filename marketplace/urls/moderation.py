"""Report and admin URL patterns."""

from django.urls import path

from ..api.views import moderation, verification

urlpatterns = [
    path("hostels/<int:hostel_id>/reports", moderation.HostelReportView.as_view(), name="hostel_reports"),
    path("admin/reports", moderation.AdminReportListView.as_view(), name="admin_reports"),
    path("admin/reports/<int:report_id>", moderation.AdminReportDetailView.as_view(), name="admin_report_detail"),
    path("admin/overview", moderation.AdminOverviewView.as_view(), name="admin_overview"),
    path("admin/landlords", verification.LandlordListView.as_view(), name="admin_landlords"),
    path("admin/users/<int:user_id>/status", moderation.AdminUserStatusView.as_view(), name="admin_user_status"),
]
