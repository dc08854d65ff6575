from __future__ import annotations

from rest_framework import status

from ...models import Hostel
from ...services.common import get_or_not_found
from ...services.metrics import LandlordDashboardService
from ...services.saved import SavedHostelService
from ..payload import camel_keys
from ..permissions import IsLandlord, IsStudent
from ..responses import envelope
from ..serializers import HostelSummarySerializer, SavedHostelSerializer
from .base import MarketplaceAPIView

__all__ = ["SavedHostelListView", "SavedHostelView", "LandlordDashboardView"]


class SavedHostelListView(MarketplaceAPIView):
    permission_classes = [IsStudent]
    service_class = SavedHostelService

    def get(self, request):
        entries = self.service_class(request.user).saved_hostels()
        return envelope(SavedHostelSerializer(entries, many=True).data)


class SavedHostelView(MarketplaceAPIView):
    """Idempotent save/remove keyed by hostel id."""

    permission_classes = [IsStudent]
    service_class = SavedHostelService

    def post(self, request, hostel_id):
        hostel = get_or_not_found(Hostel.objects.all(), "Hostel not found.", pk=hostel_id)
        entry, created = self.service_class(request.user).save(hostel)
        data = {"hostelId": hostel.pk, "saved": True, "savedAt": entry.created_at}
        if created:
            return envelope(data, "Hostel saved.", status.HTTP_201_CREATED)
        return envelope(data, "Hostel already saved.")

    def delete(self, request, hostel_id):
        removed = self.service_class(request.user).remove(hostel_id)
        return envelope({"hostelId": hostel_id, "saved": False}, "Hostel removed." if removed else "Hostel was not saved.")


class LandlordDashboardView(MarketplaceAPIView):
    permission_classes = [IsLandlord]
    service_class = LandlordDashboardService

    def get(self, request):
        service = self.service_class(request.user)
        hostels = service.properties()
        data = {
            "hostels": HostelSummarySerializer(hostels, many=True).data,
            "stats": camel_keys(service.stats(hostels)),
        }
        return envelope(data)
