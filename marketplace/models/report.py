from django.db import models

from ..lifecycle import REPORT, ReportReason, ReportStatus
from .hostel import Hostel
from .user import User


class Report(models.Model):
    hostel = models.ForeignKey(Hostel, on_delete=models.CASCADE, related_name="reports")
    reporter = models.ForeignKey(User, on_delete=models.CASCADE, related_name="reports_filed")
    reason = models.CharField(max_length=20, choices=ReportReason.choices)
    description = models.TextField(max_length=2000)
    status = models.CharField(max_length=10, choices=ReportStatus.choices, default=ReportStatus.PENDING)
    admin_notes = models.TextField(blank=True)
    handled_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name="+")
    reviewed_at = models.DateTimeField(null=True, blank=True)
    resolved_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [models.Index(fields=["status", "created_at"], name="report_status_created_idx")]

    def __str__(self) -> str:  # pragma: no cover - simple display helper
        return f"Report on {self.hostel.name} ({self.get_reason_display()})"

    @property
    def is_terminal(self) -> bool:
        return REPORT.is_terminal(self.status)
