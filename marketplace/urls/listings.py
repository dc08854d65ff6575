"""Hostel listing, room inventory and review URL patterns."""

from django.urls import path

from ..api.views import listing, reviews, verification

urlpatterns = [
    path("hostels", listing.HostelListCreateView.as_view(), name="hostels"),
    path("hostels/<int:hostel_id>", listing.HostelDetailView.as_view(), name="hostel_detail"),
    path("hostels/<int:hostel_id>/verify", verification.HostelVerifyView.as_view(), name="hostel_verify"),
    path("hostels/<int:hostel_id>/resubmit", verification.HostelResubmitView.as_view(), name="hostel_resubmit"),
    path("hostels/<int:hostel_id>/active", listing.HostelActiveView.as_view(), name="hostel_active"),
    path("hostels/<int:hostel_id>/disable", listing.HostelDisableView.as_view(), name="hostel_disable"),
    path("hostels/<int:hostel_id>/enable", listing.HostelEnableView.as_view(), name="hostel_enable"),
    path("hostels/<int:hostel_id>/rooms", listing.HostelRoomsView.as_view(), name="hostel_rooms"),
    path("hostels/<int:hostel_id>/reviews", reviews.HostelReviewsView.as_view(), name="hostel_reviews"),
    path(
        "hostels/<int:hostel_id>/reviews/<int:review_id>",
        reviews.HostelReviewDetailView.as_view(),
        name="hostel_review_detail",
    ),
    path("landlords/me/hostels", listing.LandlordHostelsView.as_view(), name="landlord_hostels"),
    path("rooms/<int:room_id>", listing.RoomDetailView.as_view(), name="room_detail"),
    path("rooms/<int:room_id>/availability", listing.RoomAvailabilityView.as_view(), name="room_availability"),
]
