from django.contrib.auth.models import AbstractUser
from django.db import models

from ..lifecycle import AccountStatus, Role


class User(AbstractUser):
    role = models.CharField(max_length=10, choices=Role.choices, default=Role.STUDENT)
    status = models.CharField(max_length=12, choices=AccountStatus.choices, default=AccountStatus.ACTIVE)
    phone = models.CharField(max_length=20, blank=True)
    status_reason = models.TextField(blank=True)
    status_changed_at = models.DateTimeField(null=True, blank=True)

    def __str__(self) -> str:  # pragma: no cover - simple display helper
        return f"{self.display_name} ({self.role})"

    @property
    def display_name(self) -> str:
        return self.get_full_name() or self.username

    @property
    def is_operational(self) -> bool:
        """Suspended, deactivated and pending accounts cannot act in any role."""
        return self.status == AccountStatus.ACTIVE

    def has_role(self, *roles: str) -> bool:
        return self.role in roles
