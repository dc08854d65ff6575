from __future__ import annotations

import logging

from django.utils import timezone

from ..exceptions import ValidationError
from ..lifecycle import AccountStatus, NotificationType, Role
from ..models import Notification, User

logger = logging.getLogger(__name__)

TITLE_LIMIT = 200
MESSAGE_LIMIT = 2000


def _normalize(value: str, limit: int) -> str:
    return (value or "").strip()[:limit]


def notify(user, title: str, message: str, type: str = NotificationType.SYSTEM) -> Notification:
    """Store an in-app notification for ``user``. Delivery is someone else's job."""
    title = _normalize(title, TITLE_LIMIT)
    message = _normalize(message, MESSAGE_LIMIT)
    if user is None or not title or not message or type not in NotificationType.values:
        raise ValidationError("Notification payload is invalid.")
    notification = Notification.objects.create(user=user, title=title, message=message, type=type)
    logger.debug("Queued %s notification %s for user %s", type, notification.pk, user.pk)
    return notification


def notify_admins(title: str, message: str, type: str = NotificationType.ADMIN) -> int:
    title = _normalize(title, TITLE_LIMIT)
    message = _normalize(message, MESSAGE_LIMIT)
    if not title or not message or type not in NotificationType.values:
        raise ValidationError("Notification payload is invalid.")
    admins = User.objects.filter(role=Role.ADMIN).exclude(status=AccountStatus.DEACTIVATED)
    created = Notification.objects.bulk_create(
        Notification(user=admin, title=title, message=message, type=type) for admin in admins
    )
    return len(created)


class NotificationService:
    """Read and acknowledge the current user's notifications."""

    def __init__(self, user):
        self.user = user

    def notifications(self, is_read: bool | None = None):
        queryset = Notification.objects.filter(user=self.user)
        if is_read is not None:
            queryset = queryset.filter(is_read=is_read)
        return queryset

    def unread_count(self) -> int:
        return self.notifications(is_read=False).count()

    def mark_read(self, notification_id) -> bool:
        changed = Notification.objects.filter(pk=notification_id, user=self.user, is_read=False).update(
            is_read=True,
            read_at=timezone.now(),
        )
        return changed > 0

    def mark_all_read(self) -> int:
        return self.notifications(is_read=False).update(is_read=True, read_at=timezone.now())
