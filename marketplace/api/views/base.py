from __future__ import annotations

from rest_framework.permissions import IsAuthenticated
from rest_framework.views import APIView

from ...services.common import paginate
from ..responses import envelope


class MarketplaceAPIView(APIView):
    """APIView with per-method permissions and paginated envelopes."""

    permission_classes = [IsAuthenticated]
    method_permissions: dict[str, list] = {}

    def get_permissions(self):
        classes = self.method_permissions.get(self.request.method, self.permission_classes)
        return [permission() for permission in classes]

    def paginated(self, queryset, serializer_class, message: str = "", extra: dict | None = None, **context):
        page = paginate(queryset, self.request.query_params.get("page"), self.request.query_params.get("limit"))
        serializer = serializer_class(page.items, many=True, context={"request": self.request, **context})
        data = {"results": serializer.data, "pagination": page.meta()}
        if extra:
            data.update(extra)
        return envelope(data, message)
