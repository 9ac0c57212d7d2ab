"""
Enumerations shared by the models, schemas and services.
"""

import enum


class UserRole(str, enum.Enum):
    """Caller roles known to the portal."""
    SUPER_ADMIN = "super_admin"
    REVIEWER = "reviewer"
    ORGANIZATION = "organization"
    STUDENT = "student"


class ReservationKind(str, enum.Enum):
    """Kind of space being reserved."""
    ROOM = "room"
    AUDITORIUM = "auditorium"

    @property
    def label(self) -> str:
        return "Auditorium" if self is ReservationKind.AUDITORIUM else "Room"


class ReservationStatus(str, enum.Enum):
    """Reservation review lifecycle status."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


class EventApprovalStatus(str, enum.Enum):
    """Approval status mirrored onto derived events."""
    APPROVED = "approved"


class NotificationLevel(str, enum.Enum):
    """Severity shown alongside an in-app notification."""
    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class NotificationChannelType(str, enum.Enum):
    """Notification delivery channels."""
    IN_APP = "in_app"
    EMAIL = "email"


class EntityKind(str, enum.Enum):
    """Entity kinds addressable through the record store."""
    RESERVATION = "reservation"
    EVENT = "event"
    ROOM = "room"
    PROFILE = "profile"
    NOTIFICATION = "notification"
