from __future__ import annotations

from rest_framework import status
from rest_framework.permissions import AllowAny

from ...models import Review
from ...services.catalog import visible_hostel
from ...services.common import get_or_not_found
from ...services.review import ReviewService, hostel_rating
from ..payload import request_payload
from ..permissions import IsStudent
from ..responses import envelope
from ..serializers import ReviewSerializer
from .base import MarketplaceAPIView

__all__ = ["HostelReviewsView", "HostelReviewDetailView"]


def rating_data(hostel) -> dict:
    summary = hostel_rating(hostel)
    return {"averageRating": summary.average_rating, "totalReviews": summary.total_reviews, "label": summary.label}


class HostelReviewsView(MarketplaceAPIView):
    method_permissions = {"GET": [AllowAny], "POST": [IsStudent]}
    service_class = ReviewService

    def get(self, request, hostel_id):
        hostel = visible_hostel(hostel_id, request.user)
        reviews = Review.objects.filter(hostel=hostel).select_related("student")
        extra = {"rating": rating_data(hostel)}
        if request.user.is_authenticated:
            extra["hasReviewed"] = self.service_class(request.user).has_reviewed(hostel)
        return self.paginated(reviews, ReviewSerializer, extra=extra)

    def post(self, request, hostel_id):
        hostel = visible_hostel(hostel_id, request.user)
        review = self.service_class(request.user).submit(hostel, request_payload(request))
        data = {"review": ReviewSerializer(review).data, "rating": rating_data(hostel)}
        return envelope(data, "Review submitted.", status.HTTP_201_CREATED)


class HostelReviewDetailView(MarketplaceAPIView):
    permission_classes = [IsStudent]
    service_class = ReviewService

    def get_review(self, hostel_id, review_id) -> Review:
        return get_or_not_found(
            Review.objects.select_related("hostel", "student"),
            "Review not found.",
            pk=review_id,
            hostel_id=hostel_id,
        )

    def put(self, request, hostel_id, review_id):
        review = self.service_class(request.user).update(self.get_review(hostel_id, review_id), request_payload(request))
        data = {"review": ReviewSerializer(review).data, "rating": rating_data(review.hostel)}
        return envelope(data, "Review updated.")

    patch = put

    def delete(self, request, hostel_id, review_id):
        review = self.get_review(hostel_id, review_id)
        hostel = review.hostel
        self.service_class(request.user).delete(review)
        return envelope({"rating": rating_data(hostel)}, "Review deleted.")
