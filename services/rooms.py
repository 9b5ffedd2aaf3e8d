from dataclasses import dataclass

from models.room import Room
from utils.codec import room_sort_key


@dataclass(frozen=True)
class RoomInfo:
    id: str
    type: str
    bed: str
    floor: int

    @classmethod
    def from_model(cls, room: Room) -> "RoomInfo":
        return cls(id=room.room_number, type=room.room_type, bed=room.bed_type, floor=room.floor)

    def to_dict(self) -> dict:
        return {"id": self.id, "type": self.type, "bed": self.bed, "floor": self.floor}


def list_rooms() -> list[RoomInfo]:
    """Every room, sorted by numeric room number."""
    rooms = [RoomInfo.from_model(r) for r in Room.query.all()]
    return sorted(rooms, key=lambda r: room_sort_key(r.id))


def rooms_by_number(room_numbers=None) -> dict:
    """room_number -> Room row, optionally restricted to the given numbers."""
    q = Room.query
    if room_numbers is not None:
        q = q.filter(Room.room_number.in_(list(room_numbers)))
    return {r.room_number: r for r in q.all()}
