import calendar
from datetime import date, timedelta

from services.availability import booked_room_count, occupies
from utils.codec import from_storage_date, room_sort_key

OCCUPANCY_MODES = ("daily", "monthly", "yearly")
ROOM_SORT_KEYS = ("id", "type", "bed")


def day_overview(bookings, day: date) -> dict:
    return {
        "date": from_storage_date(day),
        "checkIns": [b for b in bookings if b.check_in == day],
        "checkOuts": [b for b in bookings if b.check_out == day],
        "inHouse": [b for b in bookings if occupies(b, day)],
    }


def month_calendar(bookings, year: int, month: int, total_rooms: int) -> list:
    days_in_month = calendar.monthrange(year, month)[1]
    out = []
    for day_number in range(1, days_in_month + 1):
        day = date(year, month, day_number)
        booked = booked_room_count(bookings, day)
        vacant = total_rooms - booked
        out.append({
            "date": from_storage_date(day),
            "booked": booked,
            "vacant": vacant,
            "fullyBooked": vacant <= 0,
        })
    return out


def _shift_month(day: date, months: int) -> date:
    index = day.year * 12 + (day.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def _room_nights_between(bookings, start: date, end: date) -> int:
    """Occupied room-nights falling inside [start, end)."""
    total = 0
    for b in bookings:
        lo = max(b.check_in, start)
        hi = min(b.check_out, end)
        if lo < hi:
            total += (hi - lo).days * len(b.room_ids)
    return total


def occupancy_series(bookings, mode: str, today: date) -> list:
    """
    daily:   rooms occupied on each of the last 30 days
    monthly: average rooms occupied per day, last 12 months
    yearly:  average rooms occupied per day, last 5 years
    """
    data = []
    if mode == "daily":
        for i in range(29, -1, -1):
            day = today - timedelta(days=i)
            data.append({"name": from_storage_date(day), "occupancy": booked_room_count(bookings, day)})
    elif mode == "monthly":
        for i in range(11, -1, -1):
            start = _shift_month(date(today.year, today.month, 1), -i)
            end = _shift_month(start, 1)
            days = (end - start).days
            data.append({
                "name": start.strftime("%m/%Y"),
                "occupancy": _room_nights_between(bookings, start, end) / days,
            })
    elif mode == "yearly":
        for year in range(today.year - 4, today.year + 1):
            start = date(year, 1, 1)
            end = date(year + 1, 1, 1)
            days = (end - start).days
            data.append({
                "name": str(year),
                "occupancy": _room_nights_between(bookings, start, end) / days,
            })
    else:
        raise ValueError(f"Unknown occupancy mode: {mode}")
    return data


def popular_rooms(bookings, rooms, room_type=None, limit: int = 10) -> list:
    room_map = {r.id: r for r in rooms}
    counts = {}
    for b in bookings:
        for room_id in b.room_ids:
            room = room_map.get(room_id)
            if room is None:
                continue
            if room_type and room.type != room_type:
                continue
            counts[room_id] = counts.get(room_id, 0) + 1

    ranked = sorted(counts.items(), key=lambda kv: (-kv[1], room_sort_key(kv[0])))
    return [{"roomId": room_id, "bookings": count} for room_id, count in ranked[:limit]]


def room_status_board(rooms, bookings, day: date, sort: str = "id") -> list:
    rows = []
    for room in rooms:
        relevant = [
            b for b in bookings
            if room.id in b.room_ids and (occupies(b, day) or b.check_out == day)
        ]
        labels = []
        if not relevant:
            labels.append("VACANT")
        else:
            if any(b.check_in == day for b in relevant):
                labels.append("CHECK_IN")
            if any(b.check_out == day for b in relevant):
                labels.append("CHECK_OUT")
            if any(b.check_in < day < b.check_out for b in relevant):
                labels.append("OCCUPIED")
        rows.append({"room": room, "bookings": relevant, "statuses": labels})

    if sort == "type":
        rows.sort(key=lambda r: (r["room"].type, room_sort_key(r["room"].id)))
    elif sort == "bed":
        rows.sort(key=lambda r: (r["room"].bed, room_sort_key(r["room"].id)))
    else:
        rows.sort(key=lambda r: room_sort_key(r["room"].id))
    return rows
