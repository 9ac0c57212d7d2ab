# portal/models/room/room.py
"""
Physical room that can be bound to an approved reservation.
"""

from typing import Optional

from sqlalchemy import Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from portal.models.base.base_model import BaseModel

__all__ = ["Room"]


class Room(BaseModel):
    """
    Room with descriptive attributes.

    The approval workflow only ever writes ``reservation_id``, the
    back-reference to the reservation currently occupying the room.
    """

    __tablename__ = "rooms"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    label: Mapped[str] = mapped_column(String(100), nullable=False)
    building: Mapped[str] = mapped_column(String(100), nullable=False)
    floor: Mapped[str] = mapped_column(String(50), nullable=False)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    reservation_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True, index=True)

    __table_args__ = (
        UniqueConstraint("label", "building", name="uq_rooms_label_building"),
    )

    @property
    def location_label(self) -> str:
        return f"{self.label} - {self.building} ({self.floor})"
