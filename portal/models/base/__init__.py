"""
Base models package.

Provides base classes and enums for all database models.
"""

from portal.models.base.base_model import (
    Base,
    BaseModel,
    UUIDModel,
    TimestampModel,
)

from portal.models.base.enums import (
    UserRole,
    ReservationKind,
    ReservationStatus,
    EventApprovalStatus,
    NotificationLevel,
    NotificationChannelType,
    EntityKind,
)

__all__ = [
    "Base",
    "BaseModel",
    "UUIDModel",
    "TimestampModel",
    "UserRole",
    "ReservationKind",
    "ReservationStatus",
    "EventApprovalStatus",
    "NotificationLevel",
    "NotificationChannelType",
    "EntityKind",
]
