"""
Database models.

Importing this package registers every model with ``Base.metadata``.
"""

from portal.models.base import Base
from portal.models.user import Profile
from portal.models.room import Room
from portal.models.reservation import Reservation
from portal.models.event import Event
from portal.models.notification import Notification

__all__ = [
    "Base",
    "Profile",
    "Room",
    "Reservation",
    "Event",
    "Notification",
]
