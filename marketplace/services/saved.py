from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from ..access import require_student
from ..exceptions import ValidationError
from ..models import Hostel, SavedHostel

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SavedEntry:
    hostel: Hostel
    saved_at: datetime

    @property
    def is_available(self) -> bool:
        """Saved hostels stay saved when disabled; they just render as unavailable."""
        return self.hostel.is_public


class SavedHostelService:
    """Idempotent bookmark set keyed by (student, hostel)."""

    def __init__(self, student):
        self.student = student

    def is_saved(self, hostel) -> bool:
        return SavedHostel.objects.filter(student=self.student, hostel_id=getattr(hostel, "pk", hostel)).exists()

    def save(self, hostel: Hostel) -> tuple[SavedHostel, bool]:
        """Return ``(entry, created)``. Saving an already saved hostel is a no-op."""
        require_student(self.student)
        existing = SavedHostel.objects.filter(student=self.student, hostel=hostel).first()
        if existing is not None:
            return existing, False
        if not hostel.is_public:
            raise ValidationError(errors={"hostel": ["Only listed hostels can be saved."]})
        entry, created = SavedHostel.objects.get_or_create(student=self.student, hostel=hostel)
        if created:
            logger.info("Student %s saved hostel %s", self.student.pk, hostel.pk)
        return entry, created

    def remove(self, hostel_id) -> bool:
        """Return whether an entry was removed. Removing twice is a no-op."""
        require_student(self.student)
        deleted, _ = SavedHostel.objects.filter(student=self.student, hostel_id=getattr(hostel_id, "pk", hostel_id)).delete()
        if deleted:
            logger.info("Student %s removed saved hostel %s", self.student.pk, hostel_id)
        return bool(deleted)

    def saved_hostels(self) -> list[SavedEntry]:
        require_student(self.student)
        entries = SavedHostel.objects.filter(student=self.student).select_related("hostel").prefetch_related(
            "hostel__images", "hostel__rooms", "hostel__reviews"
        )
        return [SavedEntry(hostel=entry.hostel, saved_at=entry.created_at) for entry in entries]
