"""
Room availability over half-open stays [check_in, check_out).

Works on logical bookings (anything with ``id``, ``check_in``,
``check_out`` and ``room_ids``) and room directory entries; nothing here
touches the database.
"""
from datetime import date

from utils.codec import parse_display_date


def _as_date(value) -> date:
    return parse_display_date(value)


def overlaps(a_start, a_end, b_start, b_end) -> bool:
    """[a_start, a_end) and [b_start, b_end) share at least one night."""
    return _as_date(a_start) < _as_date(b_end) and _as_date(b_start) < _as_date(a_end)


def is_valid_range(check_in, check_out) -> bool:
    try:
        return _as_date(check_out) > _as_date(check_in)
    except ValueError:
        return False


def booked_room_ids(bookings, check_in, check_out, exclude_booking_id=None) -> set:
    """Room ids held by any booking overlapping the range."""
    booked = set()
    for b in bookings:
        if exclude_booking_id is not None and b.id == exclude_booking_id:
            continue
        if overlaps(b.check_in, b.check_out, check_in, check_out):
            booked.update(b.room_ids)
    return booked


def available_rooms(rooms, bookings, check_in, check_out, exclude_booking_id=None) -> list:
    """
    Rooms free for the whole range. An invalid range (unparseable dates or
    check-out not after check-in) has no available rooms.
    """
    if not is_valid_range(check_in, check_out):
        return []
    booked = booked_room_ids(bookings, check_in, check_out, exclude_booking_id)
    return [r for r in rooms if r.id not in booked]


def occupies(booking, day) -> bool:
    day = _as_date(day)
    return _as_date(booking.check_in) <= day < _as_date(booking.check_out)


def booked_room_count(bookings, day) -> int:
    return sum(len(b.room_ids) for b in bookings if occupies(b, day))


def is_fully_booked(bookings, day, total_rooms: int) -> bool:
    return booked_room_count(bookings, day) >= total_rooms
