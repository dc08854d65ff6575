from __future__ import annotations

import logging

from django.db import transaction
from django.forms.models import model_to_dict
from django.utils import timezone

from ..access import require_hostel_owner, require_landlord
from ..exceptions import InvalidTransitionError
from ..forms import HostelForm, RoomForm, validated
from ..lifecycle import HOSTEL_VERIFICATION, OPEN_BOOKING_STATUSES, VerificationAction
from ..models import Booking, Hostel, Room
from .common import transition
from .notifications import notify_admins

logger = logging.getLogger(__name__)


def _merged(instance, form_class, payload: dict) -> dict:
    """Current field values overlaid with the edited ones, for partial updates."""
    data = model_to_dict(instance, fields=form_class._meta.fields)
    data.update({key: value for key, value in payload.items() if key in form_class._meta.fields})
    return data


class HostelListingService:
    """Create and maintain a landlord's hostel listings."""

    def __init__(self, landlord):
        self.landlord = landlord

    def hostels(self):
        profile = require_landlord(self.landlord)
        return Hostel.objects.filter(landlord=profile).prefetch_related("rooms", "amenities", "images")

    @transaction.atomic
    def create_hostel(self, payload: dict) -> Hostel:
        profile = require_landlord(self.landlord)
        form = validated(
            HostelForm(
                payload,
                landlord=profile,
                amenities=payload.get("amenities"),
                images=payload.get("images"),
            )
        )
        hostel = form.save()
        logger.info("Landlord %s submitted hostel %s for verification", self.landlord.pk, hostel.pk)
        return hostel

    @transaction.atomic
    def update_hostel(self, hostel: Hostel, payload: dict) -> Hostel:
        """Apply a landlord edit. Changed content on an approved listing sends it back for verification."""
        require_hostel_owner(self.landlord, hostel)
        if hostel.is_admin_disabled:
            raise InvalidTransitionError("This listing was disabled by an administrator and cannot be edited.")
        form = validated(
            HostelForm(
                _merged(hostel, HostelForm, payload),
                instance=hostel,
                amenities=payload.get("amenities"),
                images=payload.get("images"),
            )
        )
        content_changed = (
            form.has_changed() or form.cleaned_amenities is not None or form.cleaned_images is not None
        )
        hostel = form.save()
        logger.info("Landlord %s updated hostel %s", self.landlord.pk, hostel.pk)
        if content_changed and HOSTEL_VERIFICATION.can(hostel.verification_status, VerificationAction.REVISE):
            transition(
                hostel,
                HOSTEL_VERIFICATION,
                VerificationAction.REVISE,
                field="verification_status",
                reviewed_by=None,
                reviewed_at=None,
            )
            notify_admins(
                "Hostel changed after approval",
                f"{hostel.name} was edited by its landlord and needs verification again.",
            )
        return hostel

    def set_active(self, hostel: Hostel, is_active: bool) -> Hostel:
        """Landlord on/off switch. Verification status is left alone."""
        require_hostel_owner(self.landlord, hostel)
        if is_active and hostel.is_admin_disabled:
            raise InvalidTransitionError("This listing was disabled by an administrator and cannot be re-enabled here.")
        hostel.is_active = is_active
        hostel.disabled_at = None if is_active else timezone.now()
        hostel.save(update_fields=["is_active", "disabled_at", "updated_at"])
        logger.info("Landlord %s set hostel %s active=%s", self.landlord.pk, hostel.pk, is_active)
        return hostel

    def delete_hostel(self, hostel: Hostel) -> None:
        """Hard delete, allowed only while nothing references the listing."""
        require_hostel_owner(self.landlord, hostel)
        if Booking.objects.filter(room__hostel=hostel).exists() or hostel.reviews.exists():
            raise InvalidTransitionError("Hostels with bookings or reviews cannot be deleted; disable the listing instead.")
        hostel_id = hostel.pk
        hostel.delete()
        logger.info("Landlord %s deleted hostel %s", self.landlord.pk, hostel_id)


class RoomInventoryService:
    """Per-room maintenance for an owning landlord."""

    def __init__(self, landlord):
        self.landlord = landlord

    def add_room(self, hostel: Hostel, payload: dict) -> Room:
        require_hostel_owner(self.landlord, hostel)
        if not hostel.is_active:
            raise InvalidTransitionError("Cannot add rooms to an inactive hostel.")
        if not hostel.is_public:
            raise InvalidTransitionError(
                f"Cannot add rooms to a hostel that is {hostel.verification_status}; it must be approved first."
            )
        room = validated(RoomForm(payload, hostel=hostel)).save()
        logger.info("Room %s added to hostel %s", room.pk, hostel.pk)
        return room

    def update_room(self, room: Room, payload: dict) -> Room:
        require_hostel_owner(self.landlord, room.hostel)
        form = validated(RoomForm(_merged(room, RoomForm, payload), instance=room, hostel=room.hostel))
        return form.save()

    def set_availability(self, room: Room, is_available: bool) -> Room:
        require_hostel_owner(self.landlord, room.hostel)
        if not room.is_active:
            raise InvalidTransitionError("This room has been removed.")
        room.is_available = is_available
        room.save(update_fields=["is_available", "updated_at"])
        logger.info("Room %s availability set to %s", room.pk, is_available)
        return room

    @transaction.atomic
    def delete_room(self, room: Room) -> str:
        """Remove a room; returns ``"deleted"`` or ``"deactivated"``.

        Open bookings block removal. A room with only closed bookings keeps its
        row for history and is soft-deleted instead.
        """
        require_hostel_owner(self.landlord, room.hostel)
        bookings = Booking.objects.filter(room=room)
        if bookings.filter(status__in=OPEN_BOOKING_STATUSES).exists():
            raise InvalidTransitionError("Rooms with pending or approved bookings cannot be deleted.")
        if bookings.exists():
            room.is_active = False
            room.is_available = False
            room.disabled_at = timezone.now()
            room.disable_reason = "Removed by landlord"
            room.save(update_fields=["is_active", "is_available", "disabled_at", "disable_reason", "updated_at"])
            logger.info("Room %s soft-deleted (has booking history)", room.pk)
            return "deactivated"
        room_id = room.pk
        room.delete()
        logger.info("Room %s deleted", room_id)
        return "deleted"
