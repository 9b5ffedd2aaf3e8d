from datetime import date
from types import SimpleNamespace

import pytest

from services.occupancy import (
    day_overview,
    month_calendar,
    occupancy_series,
    popular_rooms,
    room_status_board,
)
from services.rooms import RoomInfo

ROOMS = [
    RoomInfo("101", "Standard view", "Double bed", 1),
    RoomInfo("102", "Standard view", "Twin bed", 1),
    RoomInfo("20", "Cottage", "Double bed", 0),
]


def stay(booking_id, check_in, check_out, *room_ids):
    return SimpleNamespace(id=booking_id, check_in=check_in, check_out=check_out, room_ids=list(room_ids))


BOOKINGS = [
    stay("BK1", date(2024, 2, 27), date(2024, 3, 2), "101", "102"),
    stay("BK3", date(2024, 3, 1), date(2024, 3, 3), "20"),
    stay("BK4", date(2024, 3, 10), date(2024, 3, 11), "101"),
]


def test_day_overview():
    data = day_overview(BOOKINGS, date(2024, 3, 1))
    assert data["date"] == "01/03/2024"
    assert [b.id for b in data["checkIns"]] == ["BK3"]
    assert data["checkOuts"] == []
    assert [b.id for b in data["inHouse"]] == ["BK1", "BK3"]


def test_month_calendar_flags_full_days():
    days = month_calendar(BOOKINGS, 2024, 3, len(ROOMS))
    assert len(days) == 31
    assert days[0] == {"date": "01/03/2024", "booked": 3, "vacant": 0, "fullyBooked": True}
    assert days[1] == {"date": "02/03/2024", "booked": 1, "vacant": 2, "fullyBooked": False}
    assert days[9]["booked"] == 1


def test_occupancy_series():
    daily = occupancy_series(BOOKINGS, "daily", date(2024, 3, 10))
    assert len(daily) == 30
    assert daily[-1] == {"name": "10/03/2024", "occupancy": 1}

    monthly = occupancy_series(BOOKINGS, "monthly", date(2024, 3, 15))
    assert len(monthly) == 12
    assert monthly[-1]["name"] == "03/2024"
    # 2 rooms x 1 night (01/03) + 1 room x 2 nights + 1 room x 1 night
    assert monthly[-1]["occupancy"] == pytest.approx(5 / 31)
    assert monthly[-2]["occupancy"] == pytest.approx(4 / 29)

    yearly = occupancy_series(BOOKINGS, "yearly", date(2024, 6, 1))
    assert [y["name"] for y in yearly] == ["2020", "2021", "2022", "2023", "2024"]
    assert yearly[-1]["occupancy"] == pytest.approx(11 / 366)

    with pytest.raises(ValueError):
        occupancy_series(BOOKINGS, "hourly", date(2024, 3, 10))


def test_popular_rooms():
    assert popular_rooms(BOOKINGS, ROOMS) == [
        {"roomId": "101", "bookings": 2},
        {"roomId": "20", "bookings": 1},
        {"roomId": "102", "bookings": 1},
    ]
    assert popular_rooms(BOOKINGS, ROOMS, room_type="Cottage") == [{"roomId": "20", "bookings": 1}]


def test_room_status_board_sorting_and_labels():
    rows = room_status_board(ROOMS, BOOKINGS, date(2024, 3, 2))
    assert [r["room"].id for r in rows] == ["20", "101", "102"]
    assert [r["statuses"] for r in rows] == [["OCCUPIED"], ["CHECK_OUT"], ["CHECK_OUT"]]

    by_bed = room_status_board(ROOMS, BOOKINGS, date(2024, 3, 2), sort="bed")
    assert [r["room"].id for r in by_bed] == ["20", "101", "102"]

    by_type = room_status_board(ROOMS, BOOKINGS, date(2024, 3, 20), sort="type")
    assert [r["room"].id for r in by_type] == ["20", "101", "102"]
    assert all(r["statuses"] == ["VACANT"] for r in by_type)
