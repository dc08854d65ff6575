from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.db.models import Q

from .hostel import Hostel
from .user import User


class Review(models.Model):
    hostel = models.ForeignKey(Hostel, on_delete=models.PROTECT, related_name="reviews")
    student = models.ForeignKey(User, on_delete=models.CASCADE, related_name="reviews")
    rating = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(5)])
    comment = models.TextField(blank=True, max_length=1000)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        constraints = [
            models.UniqueConstraint(fields=["hostel", "student"], name="one_review_per_student_per_hostel"),
            models.CheckConstraint(condition=Q(rating__gte=1) & Q(rating__lte=5), name="review_rating_range"),
        ]

    def __str__(self) -> str:  # pragma: no cover - simple display helper
        return f"Review for {self.hostel.name} by {self.student.display_name}"
