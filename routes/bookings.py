from datetime import timedelta

from flask import Blueprint, request, jsonify

from services.availability import available_rooms, booked_room_count, is_fully_booked
from services.bookings import BookingInput, create_booking, get_booking, list_bookings, update_booking
from services.errors import ConflictError, ValidationError
from services.rooms import list_rooms
from utils.audit import log_event
from utils.auth_context import login_required
from utils.codec import from_storage_date, parse_display_date

booking_bp = Blueprint("bookings", __name__)


# ---------- logical bookings ----------
@booking_bp.get("/bookings")
@login_required
def get_bookings():
    bookings = list_bookings(search=request.args.get("q"))
    return jsonify([b.to_dict() for b in bookings]), 200


@booking_bp.get("/bookings/<booking_id>")
@login_required
def get_single_booking(booking_id: str):
    return jsonify(get_booking(booking_id).to_dict()), 200


@booking_bp.post("/bookings")
@login_required
def post_booking():
    data = BookingInput.from_payload(request.get_json(silent=True))
    try:
        booking = create_booking(data)
    except ConflictError as exc:
        log_event("BOOKING_FAIL_CONFLICT", entity="room", metadata=exc.details)
        raise

    log_event(
        "BOOKING_CREATE",
        entity="booking",
        entity_id=booking.id,
        metadata={"room_ids": booking.room_ids},
    )
    return jsonify(booking.to_dict()), 201


@booking_bp.put("/bookings/<booking_id>")
@login_required
def put_booking(booking_id: str):
    data = BookingInput.from_payload(request.get_json(silent=True))
    try:
        booking = update_booking(booking_id, data)
    except ConflictError as exc:
        log_event("BOOKING_FAIL_CONFLICT", entity="booking", entity_id=booking_id, metadata=exc.details)
        raise

    log_event(
        "BOOKING_UPDATE",
        entity="booking",
        entity_id=booking.id,
        metadata={"requested_id": booking_id, "room_ids": booking.room_ids},
    )
    return jsonify(booking.to_dict()), 200


# ---------- availability ----------
@booking_bp.get("/availability")
@login_required
def get_availability():
    # Any member id stands for its whole booking, as on /bookings/<id>
    exclude_id = request.args.get("excludeBookingId") or None
    if exclude_id is not None:
        exclude_id = get_booking(exclude_id).id

    # An unparseable or empty range simply has no free rooms
    rooms = available_rooms(
        list_rooms(),
        list_bookings(),
        request.args.get("checkIn", ""),
        request.args.get("checkOut", ""),
        exclude_booking_id=exclude_id,
    )
    return jsonify([r.to_dict() for r in rooms]), 200


@booking_bp.get("/availability/day")
@login_required
def get_day_availability():
    """Rooms free for one night starting on ?date=, refused when the day is full."""
    try:
        day = parse_display_date(request.args.get("date") or "")
        next_day = day + timedelta(days=1)
    except ValueError:
        raise ValidationError("date must be a date in dd/mm/yyyy format")
    except OverflowError:
        raise ValidationError("date must have a following day")

    rooms = list_rooms()
    bookings = list_bookings()
    if is_fully_booked(bookings, day, len(rooms)):
        raise ConflictError("Fully booked", details={"date": from_storage_date(day)})

    free = available_rooms(rooms, bookings, day, next_day)
    return jsonify(
        date=from_storage_date(day),
        booked=booked_room_count(bookings, day),
        total=len(rooms),
        rooms=[r.to_dict() for r in free],
    ), 200
