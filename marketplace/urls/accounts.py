"""Identity, verification and notification URL patterns."""

from django.urls import path

from ..api.views import auth, notifications, verification

urlpatterns = [
    path("auth/me", auth.CurrentUserView.as_view(), name="current_user"),
    path("landlords/me/resubmit", verification.LandlordResubmitView.as_view(), name="landlord_resubmit"),
    path("landlords/<int:landlord_id>/verify", verification.LandlordVerifyView.as_view(), name="landlord_verify"),
    path("notifications", notifications.NotificationListView.as_view(), name="notifications"),
    path("notifications/read-all", notifications.NotificationReadAllView.as_view(), name="notifications_read_all"),
    path(
        "notifications/<int:notification_id>/read",
        notifications.NotificationReadView.as_view(),
        name="notification_read",
    ),
]
