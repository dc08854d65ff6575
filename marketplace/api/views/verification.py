from __future__ import annotations

from ...lifecycle import VerificationAction
from ...models import Hostel, LandlordProfile
from ...services.common import get_or_not_found
from ...services.verification import ResubmissionService, VerificationService
from ..payload import request_payload
from ..permissions import IsAdmin, IsLandlord
from ..responses import envelope
from ..serializers import HostelDetailSerializer, LandlordProfileSerializer
from .base import MarketplaceAPIView

__all__ = [
    "LandlordListView",
    "LandlordVerifyView",
    "LandlordResubmitView",
    "HostelVerifyView",
    "HostelResubmitView",
]

# Both the landlord and hostel vocabularies are accepted for either decision.
OUTCOMES = {
    "verify": VerificationAction.VERIFY,
    "verified": VerificationAction.VERIFY,
    "approved": VerificationAction.VERIFY,
    "approve": VerificationAction.VERIFY,
    "reject": VerificationAction.REJECT,
    "rejected": VerificationAction.REJECT,
}


def outcome_from(payload: dict) -> str:
    status = str(payload.get("status") or "").strip().lower()
    return OUTCOMES.get(status, status)


class LandlordListView(MarketplaceAPIView):
    permission_classes = [IsAdmin]

    def get(self, request):
        queryset = LandlordProfile.objects.select_related("user").order_by("-created_at", "-id")
        status = request.query_params.get("status")
        if status:
            queryset = queryset.filter(verification_status=status)
        return self.paginated(queryset, LandlordProfileSerializer)


class LandlordVerifyView(MarketplaceAPIView):
    permission_classes = [IsAdmin]
    service_class = VerificationService

    def patch(self, request, landlord_id):
        profile = get_or_not_found(
            LandlordProfile.objects.select_related("user"),
            "Landlord not found.",
            pk=landlord_id,
        )
        payload = request_payload(request)
        profile = self.service_class(request.user).decide_landlord(profile, outcome_from(payload), payload.get("reason"))
        return envelope(LandlordProfileSerializer(profile).data, f"Landlord {profile.verification_status}.")


class LandlordResubmitView(MarketplaceAPIView):
    permission_classes = [IsLandlord]
    service_class = ResubmissionService

    def post(self, request):
        profile = self.service_class(request.user).resubmit_profile()
        return envelope(LandlordProfileSerializer(profile).data, "Verification request resubmitted.")


class HostelVerifyView(MarketplaceAPIView):
    permission_classes = [IsAdmin]
    service_class = VerificationService

    def patch(self, request, hostel_id):
        hostel = get_or_not_found(Hostel.objects.select_related("landlord__user"), "Hostel not found.", pk=hostel_id)
        payload = request_payload(request)
        hostel = self.service_class(request.user).decide_hostel(hostel, outcome_from(payload), payload.get("reason"))
        return envelope(HostelDetailSerializer(hostel).data, f"Hostel {hostel.verification_status}.")


class HostelResubmitView(MarketplaceAPIView):
    permission_classes = [IsLandlord]
    service_class = ResubmissionService

    def post(self, request, hostel_id):
        hostel = get_or_not_found(Hostel.objects.select_related("landlord__user"), "Hostel not found.", pk=hostel_id)
        hostel = self.service_class(request.user).resubmit_hostel(hostel)
        return envelope(HostelDetailSerializer(hostel).data, "Hostel resubmitted for verification.")
