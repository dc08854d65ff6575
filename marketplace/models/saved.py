from django.db import models

from .hostel import Hostel
from .user import User


class SavedHostel(models.Model):
    student = models.ForeignKey(User, on_delete=models.CASCADE, related_name="saved_hostels")
    hostel = models.ForeignKey(Hostel, on_delete=models.CASCADE, related_name="saved_by")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        constraints = [
            models.UniqueConstraint(fields=["student", "hostel"], name="unique_saved_hostel"),
        ]

    def __str__(self) -> str:  # pragma: no cover - simple display helper
        return f"{self.hostel.name} saved by {self.student.display_name}"
