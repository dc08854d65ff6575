from django.db import models

from ..lifecycle import NotificationType
from .user import User


class Notification(models.Model):
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name="notifications")
    title = models.CharField(max_length=200)
    message = models.TextField(max_length=2000)
    type = models.CharField(max_length=10, choices=NotificationType.choices)
    is_read = models.BooleanField(default=False)
    read_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [models.Index(fields=["user", "is_read"], name="notification_user_read_idx")]

    def __str__(self) -> str:  # pragma: no cover - simple display helper
        return f"{self.title} -> {self.user.display_name}"
