"""
Resolve who should receive a reservation's status-change message.
"""

from typing import Optional

from portal.core.logging import get_logger
from portal.models.base.enums import EntityKind
from portal.repositories.record_store import RecordStore

logger = get_logger(__name__)


class RecipientResolver:
    """
    Picks the notification recipient for a reservation.

    Preference order: the linked profile's email, then the requester name
    stored on the reservation. Returns None when neither is available.
    """

    def __init__(self, store: RecordStore):
        self.store = store

    def resolve(self, reservation) -> Optional[str]:
        profile_id = getattr(reservation, "profile_id", None)
        if profile_id:
            try:
                profile = self.store.read(EntityKind.PROFILE, profile_id)
                email = (profile.email or "").strip()
                if email:
                    return email
            except Exception as e:
                logger.warning(
                    f"Could not read profile for recipient resolution: {e}",
                    extra={"profile_id": profile_id, "reservation_id": reservation.id},
                )

        name = (getattr(reservation, "requester_name", None) or "").strip()
        return name or None


__all__ = ["RecipientResolver"]
