from __future__ import annotations

from django.db.models import Prefetch
from rest_framework import status
from rest_framework.permissions import AllowAny

from ...exceptions import ValidationError
from ...models import Hostel, Room
from ...services.catalog import HostelDetailService, PublicCatalogService, visible_hostel
from ...services.common import get_or_not_found
from ...services.listing import HostelListingService, RoomInventoryService
from ...services.moderation import ListingModerationService
from ..payload import parse_bool, request_payload
from ..permissions import IsAdmin, IsLandlord
from ..responses import envelope
from ..serializers import HostelDetailSerializer, HostelSummarySerializer, RoomSerializer
from .base import MarketplaceAPIView

__all__ = [
    "HostelListCreateView",
    "HostelDetailView",
    "HostelActiveView",
    "HostelDisableView",
    "HostelEnableView",
    "LandlordHostelsView",
    "HostelRoomsView",
    "RoomDetailView",
    "RoomAvailabilityView",
]


def owned_hostels():
    return Hostel.objects.select_related("landlord__user").prefetch_related(
        Prefetch("rooms", queryset=Room.objects.order_by("room_number")),
        "amenities",
        "images",
        "reviews",
    )


def detail_response(hostel, viewer, message: str = "", status_code: int = status.HTTP_200_OK):
    # Reload so amenities, images and rooms reflect the write that just happened.
    hostel = owned_hostels().get(pk=hostel.pk)
    detail = HostelDetailService(hostel, viewer)
    return envelope(HostelDetailSerializer(hostel, context={"detail": detail}).data, message, status_code)


class HostelListCreateView(MarketplaceAPIView):
    """Public catalog on GET; landlord submission on POST."""

    method_permissions = {"GET": [AllowAny], "POST": [IsLandlord]}
    service_class = PublicCatalogService

    def get(self, request):
        service = self.service_class()
        filters = service.build_filters(request.query_params)
        return self.paginated(service.get_catalog(filters), HostelSummarySerializer)

    def post(self, request):
        payload = request_payload(request)
        hostel = HostelListingService(request.user).create_hostel(payload)
        return detail_response(hostel, request.user, "Hostel submitted for verification.", status.HTTP_201_CREATED)


class HostelDetailView(MarketplaceAPIView):
    method_permissions = {"GET": [AllowAny], "PUT": [IsLandlord], "PATCH": [IsLandlord], "DELETE": [IsLandlord]}
    service_class = HostelListingService

    def get(self, request, hostel_id):
        hostel = visible_hostel(hostel_id, request.user)
        return detail_response(hostel, request.user)

    def put(self, request, hostel_id):
        hostel = get_or_not_found(owned_hostels(), "Hostel not found.", pk=hostel_id)
        hostel = self.service_class(request.user).update_hostel(hostel, request_payload(request))
        return detail_response(hostel, request.user, "Hostel updated.")

    patch = put

    def delete(self, request, hostel_id):
        hostel = get_or_not_found(owned_hostels(), "Hostel not found.", pk=hostel_id)
        self.service_class(request.user).delete_hostel(hostel)
        return envelope(None, "Hostel deleted.")


class HostelActiveView(MarketplaceAPIView):
    permission_classes = [IsLandlord]
    service_class = HostelListingService

    def patch(self, request, hostel_id):
        hostel = get_or_not_found(owned_hostels(), "Hostel not found.", pk=hostel_id)
        is_active = parse_bool(request_payload(request).get("is_active"))
        if is_active is None:
            raise ValidationError(errors={"isActive": ["isActive must be provided as a boolean."]})
        hostel = self.service_class(request.user).set_active(hostel, is_active)
        return detail_response(hostel, request.user, "Hostel activated." if is_active else "Hostel deactivated.")


class HostelDisableView(MarketplaceAPIView):
    permission_classes = [IsAdmin]
    service_class = ListingModerationService

    def patch(self, request, hostel_id):
        hostel = get_or_not_found(owned_hostels(), "Hostel not found.", pk=hostel_id)
        hostel = self.service_class(request.user).disable(hostel, request_payload(request).get("reason"))
        return detail_response(hostel, request.user, "Hostel disabled.")


class HostelEnableView(MarketplaceAPIView):
    permission_classes = [IsAdmin]
    service_class = ListingModerationService

    def patch(self, request, hostel_id):
        hostel = get_or_not_found(owned_hostels(), "Hostel not found.", pk=hostel_id)
        hostel = self.service_class(request.user).enable(hostel)
        return detail_response(hostel, request.user, "Hostel enabled.")


class LandlordHostelsView(MarketplaceAPIView):
    permission_classes = [IsLandlord]
    service_class = HostelListingService

    def get(self, request):
        return self.paginated(self.service_class(request.user).hostels(), HostelSummarySerializer)


class HostelRoomsView(MarketplaceAPIView):
    method_permissions = {"GET": [AllowAny], "POST": [IsLandlord]}
    service_class = RoomInventoryService

    def get(self, request, hostel_id):
        hostel = visible_hostel(hostel_id, request.user)
        rooms = HostelDetailService(hostel, request.user).rooms()
        return envelope(RoomSerializer(rooms, many=True).data)

    def post(self, request, hostel_id):
        hostel = get_or_not_found(owned_hostels(), "Hostel not found.", pk=hostel_id)
        room = self.service_class(request.user).add_room(hostel, request_payload(request))
        return envelope(RoomSerializer(room).data, "Room added.", status.HTTP_201_CREATED)


def owned_room(room_id):
    return get_or_not_found(Room.objects.select_related("hostel__landlord__user"), "Room not found.", pk=room_id)


class RoomDetailView(MarketplaceAPIView):
    permission_classes = [IsLandlord]
    service_class = RoomInventoryService

    def put(self, request, room_id):
        room = self.service_class(request.user).update_room(owned_room(room_id), request_payload(request))
        return envelope(RoomSerializer(room).data, "Room updated.")

    patch = put

    def delete(self, request, room_id):
        outcome = self.service_class(request.user).delete_room(owned_room(room_id))
        message = "Room deleted." if outcome == "deleted" else "Room has booking history and was deactivated."
        return envelope({"outcome": outcome}, message)


class RoomAvailabilityView(MarketplaceAPIView):
    permission_classes = [IsLandlord]
    service_class = RoomInventoryService

    def patch(self, request, room_id):
        is_available = parse_bool(request_payload(request).get("is_available"))
        if is_available is None:
            raise ValidationError(errors={"isAvailable": ["isAvailable must be provided as a boolean."]})
        room = self.service_class(request.user).set_availability(owned_room(room_id), is_available)
        return envelope(RoomSerializer(room).data, "Room availability updated.")
