from datetime import datetime

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from models import db
from models.cleaning_status import CleaningStatus
from models.room import Room
from services.errors import NotFoundError, StorageError, ValidationError
from services.occupancy import room_status_board
from utils.codec import (
    CLEANING_STATUSES,
    from_storage_cleaning_status,
    from_storage_date,
    room_sort_key,
    to_storage_cleaning_status,
)

# Rooms without a stored row are reported as clean
UNRECORDED_STATUS = "CLEAN"


def get_cleaning_statuses() -> dict:
    """room number -> CLEAN/DIRTY for every room in the directory."""
    stored = {
        room_number: label
        for room_number, label in (
            db.session.query(Room.room_number, CleaningStatus.status)
            .join(CleaningStatus, CleaningStatus.room_id == Room.id)
            .all()
        )
    }
    rooms = sorted((r.room_number for r in Room.query.all()), key=room_sort_key)
    return {
        number: from_storage_cleaning_status(stored[number]) if number in stored else UNRECORDED_STATUS
        for number in rooms
    }


def set_cleaning_status(room_number: str, status: str) -> str:
    """Last write wins. Returns the stored external status."""
    try:
        label = to_storage_cleaning_status(status)
    except ValueError:
        raise ValidationError(f"status must be one of {', '.join(CLEANING_STATUSES)}")

    room = Room.query.filter_by(room_number=str(room_number)).first()
    if not room:
        raise NotFoundError("Room not found")

    row = db.session.get(CleaningStatus, room.id)
    if row is None:
        row = CleaningStatus(room_id=room.id)
        db.session.add(row)
    row.status = label
    row.last_updated = datetime.utcnow()

    try:
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        current_app.logger.exception("Cleaning status update failed for room %s", room_number)
        raise StorageError("Storage failure") from exc

    return from_storage_cleaning_status(label)


def room_day_statuses(rooms, bookings, day) -> list:
    """
    What housekeeping needs to know per room for ``day``:
    CHECK_IN, CHECK_OUT, IN_HOUSE, or VACANT when nothing touches the room.
    """
    display_day = from_storage_date(day)
    return [
        {
            "roomId": row["room"].id,
            "type": row["room"].type,
            "date": display_day,
            "statuses": ["IN_HOUSE" if s == "OCCUPIED" else s for s in row["statuses"]],
        }
        for row in room_status_board(rooms, bookings, day)
    ]
