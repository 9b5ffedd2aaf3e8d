from datetime import date, datetime, timedelta

import pytest

from utils.codec import (
    DATE_FALLBACK_POLICY,
    DEFAULT_PAYMENT_STATUS,
    PAYMENT_STATUSES,
    from_storage_cleaning_status,
    from_storage_date,
    from_storage_payment_status,
    parse_display_date,
    room_sort_key,
    to_storage_cleaning_status,
    to_storage_date,
    to_storage_payment_status,
)


def test_to_storage_date_parses_day_first():
    assert to_storage_date("03/06/2024") == date(2024, 6, 3)
    assert to_storage_date("3/6/2024") == date(2024, 6, 3)


@pytest.mark.parametrize("bad", ["", None, "2024-06-03", "31/02/2024", "03/06", "aa/bb/cccc"])
def test_to_storage_date_falls_back_to_today(bad):
    assert DATE_FALLBACK_POLICY == "today"
    assert to_storage_date(bad) == date.today()


@pytest.mark.parametrize("bad", ["", "2024-06-03", "31/02/2024", "03/06"])
def test_parse_display_date_is_strict(bad):
    with pytest.raises(ValueError):
        parse_display_date(bad)


def test_from_storage_date_formats_and_rejects_garbage():
    assert from_storage_date(date(2024, 1, 9)) == "09/01/2024"
    assert from_storage_date(datetime(2024, 1, 9, 23, 59)) == "09/01/2024"
    assert from_storage_date("2024-01-09") == "09/01/2024"
    assert from_storage_date("not a date") == ""
    assert from_storage_date(None) == ""


def test_date_round_trip():
    start = date(2023, 12, 25)
    for offset in range(0, 800, 7):
        day = start + timedelta(days=offset)
        assert to_storage_date(from_storage_date(day)) == day


def test_payment_status_round_trip():
    for status in PAYMENT_STATUSES:
        assert from_storage_payment_status(to_storage_payment_status(status)) == status
    assert to_storage_payment_status("DEPOSIT") == "Deposit"


@pytest.mark.parametrize("bad", ["REFUNDED", "", None, 3])
def test_unknown_payment_status_defaults_to_unpaid(bad):
    assert DEFAULT_PAYMENT_STATUS == "UNPAID"
    assert to_storage_payment_status(bad) == "Unpaid"
    assert from_storage_payment_status(bad) == "UNPAID"


def test_cleaning_status_mapping():
    assert to_storage_cleaning_status("CLEAN") == "Clean"
    assert to_storage_cleaning_status("DIRTY") == "Needs Cleaning"
    assert from_storage_cleaning_status("Clean") == "CLEAN"
    assert from_storage_cleaning_status("Needs Cleaning") == "DIRTY"
    # anything unknown in storage reads as needing attention
    assert from_storage_cleaning_status("Being Cleaned") == "DIRTY"

    with pytest.raises(ValueError):
        to_storage_cleaning_status("SPARKLING")


def test_room_sort_key_is_numeric():
    assert sorted(["110", "20", "101", "9", "10A", "10"], key=room_sort_key) == [
        "9", "10", "10A", "20", "101", "110",
    ]
