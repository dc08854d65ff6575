from rest_framework.permissions import IsAuthenticated

from ...lifecycle import Role
from ..responses import envelope
from ..serializers import LandlordProfileSerializer, UserSerializer
from .base import MarketplaceAPIView

__all__ = ["CurrentUserView"]


class CurrentUserView(MarketplaceAPIView):
    """Return the authenticated user's profile information.

    The client calls this on start-up to validate a stored token.
    """

    permission_classes = [IsAuthenticated]

    def get(self, request):
        data = dict(UserSerializer(request.user).data)
        profile = getattr(request.user, "landlord_profile", None) if request.user.role == Role.LANDLORD else None
        data["landlordProfile"] = LandlordProfileSerializer(profile).data if profile is not None else None
        return envelope(data)
