from __future__ import annotations

import logging

from ..exceptions import MarketplaceError
from .http import ApiClient

logger = logging.getLogger(__name__)


class SavedHostelsState:
    """Local mirror of a student's saved hostels.

    Toggling applies locally first and reverts if the server call fails; every
    other client action waits for the server before changing local state.
    """

    def __init__(self, client: ApiClient, hostel_ids=None):
        self.client = client
        self.hostel_ids: set[int] = set(hostel_ids or ())

    def load(self) -> set[int]:
        entries = self.client.saved_hostels() or []
        self.hostel_ids = {entry["hostel"]["id"] for entry in entries}
        return set(self.hostel_ids)

    def is_saved(self, hostel_id: int) -> bool:
        return hostel_id in self.hostel_ids

    def save(self, hostel_id: int) -> None:
        was_saved = hostel_id in self.hostel_ids
        self.hostel_ids.add(hostel_id)
        try:
            self.client.save_hostel(hostel_id)
        except MarketplaceError:
            if not was_saved:
                self.hostel_ids.discard(hostel_id)
            raise

    def remove(self, hostel_id: int) -> None:
        was_saved = hostel_id in self.hostel_ids
        self.hostel_ids.discard(hostel_id)
        try:
            self.client.remove_saved_hostel(hostel_id)
        except MarketplaceError:
            if was_saved:
                self.hostel_ids.add(hostel_id)
            raise

    def toggle(self, hostel_id: int) -> bool:
        """Flip the saved flag; returns the new state."""
        if self.is_saved(hostel_id):
            self.remove(hostel_id)
            return False
        self.save(hostel_id)
        return True
