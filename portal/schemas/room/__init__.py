from portal.schemas.room.room_attributes import RoomAttributes, CapacityCheck

__all__ = ["RoomAttributes", "CapacityCheck"]
