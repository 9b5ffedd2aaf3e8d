from flask import Blueprint, request, jsonify

from services.bookings import list_bookings
from services.cleaning import get_cleaning_statuses, room_day_statuses, set_cleaning_status
from services.errors import ValidationError
from services.rooms import list_rooms
from utils.audit import log_event
from utils.auth_context import login_required
from utils.codec import to_storage_date

cleaning_bp = Blueprint("cleaning", __name__, url_prefix="/cleaning-status")


@cleaning_bp.get("")
@login_required
def get_statuses():
    return jsonify(get_cleaning_statuses()), 200


@cleaning_bp.put("/<room_id>")
@login_required
def put_status(room_id: str):
    data = request.get_json(silent=True) or {}
    status = data.get("status")
    if not status:
        raise ValidationError("Room ID and status are required")

    stored = set_cleaning_status(room_id, status)
    log_event("CLEANING_STATUS_SET", entity="room", entity_id=room_id, metadata={"status": stored})
    return jsonify(roomId=room_id, status=stored), 200


@cleaning_bp.get("/board")
@login_required
def get_board():
    # Missing or malformed ?date= means today
    day = to_storage_date(request.args.get("date"))
    statuses = get_cleaning_statuses()
    rows = room_day_statuses(list_rooms(), list_bookings(), day)
    for row in rows:
        row["cleaningStatus"] = statuses.get(row["roomId"], "CLEAN")
    return jsonify(rows), 200
