from datetime import date

from flask import Blueprint, request, jsonify

from models.room import ROOM_TYPES
from services.bookings import list_bookings
from services.errors import ValidationError
from services.occupancy import (
    OCCUPANCY_MODES,
    ROOM_SORT_KEYS,
    day_overview,
    month_calendar,
    occupancy_series,
    popular_rooms,
    room_status_board,
)
from services.rooms import list_rooms
from utils.auth_context import login_required
from utils.codec import to_storage_date

dashboard_bp = Blueprint("dashboard", __name__, url_prefix="/dashboard")


def _view_date():
    # Views default to today when ?date= is absent or garbled
    return to_storage_date(request.args.get("date"))


@dashboard_bp.get("/overview")
@login_required
def overview():
    data = day_overview(list_bookings(), _view_date())
    return jsonify(
        date=data["date"],
        checkIns=[b.to_dict() for b in data["checkIns"]],
        checkOuts=[b.to_dict() for b in data["checkOuts"]],
        inHouse=[b.to_dict() for b in data["inHouse"]],
    ), 200


@dashboard_bp.get("/calendar")
@login_required
def month_view():
    today = date.today()
    year = request.args.get("year", default=today.year, type=int)
    month = request.args.get("month", default=today.month, type=int)
    if not 1 <= month <= 12 or not 1 <= year <= 9999:
        raise ValidationError("Invalid year/month")

    rooms = list_rooms()
    return jsonify(
        year=year,
        month=month,
        totalRooms=len(rooms),
        days=month_calendar(list_bookings(), year, month, len(rooms)),
    ), 200


@dashboard_bp.get("/occupancy")
@login_required
def occupancy():
    mode = (request.args.get("mode") or "daily").strip().lower()
    if mode not in OCCUPANCY_MODES:
        raise ValidationError(f"mode must be one of {', '.join(OCCUPANCY_MODES)}")
    return jsonify(mode=mode, data=occupancy_series(list_bookings(), mode, date.today())), 200


@dashboard_bp.get("/popular-rooms")
@login_required
def popular():
    room_type = request.args.get("type") or None
    if room_type and room_type not in ROOM_TYPES:
        raise ValidationError(f"type must be one of {', '.join(ROOM_TYPES)}")
    return jsonify(popular_rooms(list_bookings(), list_rooms(), room_type=room_type)), 200


@dashboard_bp.get("/room-status")
@login_required
def room_status():
    sort = (request.args.get("sort") or "id").strip().lower()
    if sort not in ROOM_SORT_KEYS:
        raise ValidationError(f"sort must be one of {', '.join(ROOM_SORT_KEYS)}")

    day = _view_date()
    rows = room_status_board(list_rooms(), list_bookings(), day, sort=sort)
    return jsonify([
        {
            "room": row["room"].to_dict(),
            "statuses": row["statuses"],
            "bookings": [b.to_dict() for b in row["bookings"]],
        }
        for row in rows
    ]), 200
