from __future__ import annotations

from ...exceptions import NotFoundError
from ...services.notifications import NotificationService
from ..payload import parse_bool
from ..permissions import IsActiveAccount
from ..responses import envelope
from ..serializers import NotificationSerializer
from .base import MarketplaceAPIView

__all__ = ["NotificationListView", "NotificationReadView", "NotificationReadAllView"]


class NotificationListView(MarketplaceAPIView):
    permission_classes = [IsActiveAccount]
    service_class = NotificationService

    def get(self, request):
        service = self.service_class(request.user)
        is_read = parse_bool(request.query_params.get("isRead", request.query_params.get("is_read")))
        return self.paginated(
            service.notifications(is_read),
            NotificationSerializer,
            extra={"unreadCount": service.unread_count()},
        )


class NotificationReadView(MarketplaceAPIView):
    permission_classes = [IsActiveAccount]
    service_class = NotificationService

    def patch(self, request, notification_id):
        service = self.service_class(request.user)
        if not service.notifications().filter(pk=notification_id).exists():
            raise NotFoundError("Notification not found.")
        changed = service.mark_read(notification_id)
        return envelope({"id": notification_id, "changed": changed, "unreadCount": service.unread_count()})


class NotificationReadAllView(MarketplaceAPIView):
    permission_classes = [IsActiveAccount]
    service_class = NotificationService

    def patch(self, request):
        service = self.service_class(request.user)
        updated = service.mark_all_read()
        return envelope({"updated": updated, "unreadCount": 0}, f"{updated} notifications marked as read.")
