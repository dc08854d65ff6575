from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from django.db import IntegrityError, transaction

from .. import projections
from ..access import require_self, require_student
from ..exceptions import InvalidTransitionError, NotFoundError
from ..forms import ReviewForm, validated
from ..lifecycle import Role
from ..models import Hostel, Review

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReviewEligibility:
    can_review: bool
    reason: str | None = None


def hostel_rating(hostel: Hostel) -> projections.RatingSummary:
    """Recompute ``{average_rating, total_reviews}`` from the stored reviews."""
    return projections.rating_summary(Review.objects.filter(hostel=hostel).values_list("rating", flat=True))


class ReviewService:
    """One review per student per hostel, editable only by its author."""

    def __init__(self, student):
        self.student = student

    def user_review(self, hostel: Hostel) -> Review | None:
        if not getattr(self.student, "is_authenticated", False):
            return None
        return Review.objects.filter(hostel=hostel, student=self.student).first()

    def has_reviewed(self, hostel: Hostel) -> bool:
        return self.user_review(hostel) is not None

    def eligibility(self, hostel: Hostel) -> ReviewEligibility:
        if not getattr(self.student, "is_authenticated", False):
            return ReviewEligibility(False, "You must be logged in to review this hostel.")
        if not self.student.has_role(Role.STUDENT):
            return ReviewEligibility(False, "Only students can review hostels.")
        if self.has_reviewed(hostel):
            return ReviewEligibility(False, "You have already reviewed this hostel.")
        return ReviewEligibility(True, None)

    def submit(self, hostel: Hostel, data: dict[str, Any]) -> Review:
        require_student(self.student)
        if not hostel.is_public:
            raise NotFoundError("Hostel not found.")
        if self.has_reviewed(hostel):
            raise InvalidTransitionError("You have already reviewed this hostel.")
        form = validated(ReviewForm(data=data))
        review = form.save(commit=False)
        review.hostel = hostel
        review.student = self.student
        try:
            with transaction.atomic():
                review.save()
        except IntegrityError:
            # Lost a race against a concurrent submission by the same student.
            raise InvalidTransitionError("You have already reviewed this hostel.") from None
        logger.info("Student %s reviewed hostel %s (%s stars)", self.student.pk, hostel.pk, review.rating)
        return review

    def update(self, review: Review, data: dict[str, Any]) -> Review:
        require_student(self.student)
        require_self(self.student, review.student_id, "review")
        payload = {"rating": review.rating, "comment": review.comment}
        payload.update({key: value for key, value in data.items() if key in payload})
        review = validated(ReviewForm(data=payload, instance=review)).save()
        logger.info("Student %s updated review %s", self.student.pk, review.pk)
        return review

    def delete(self, review: Review) -> None:
        require_student(self.student)
        require_self(self.student, review.student_id, "review")
        review_id = review.pk
        review.delete()
        logger.info("Student %s deleted review %s", self.student.pk, review_id)
