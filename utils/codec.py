"""
Conversions between the values the front desk sends/receives (JSON)
and the values stored in the database.

Display dates are "dd/mm/yyyy" strings; stored dates are ``datetime.date``.
Payment and cleaning statuses are upper-case enums externally and
title-case labels in storage.
"""
import re
from datetime import date, datetime

DISPLAY_DATE_FORMAT = "%d/%m/%Y"

_DISPLAY_DATE_RE = re.compile(r"^\s*(\d{1,2})/(\d{1,2})/(\d{4})\s*$")

# Fallback policies for malformed input. Kept as named values so tests
# pin them and callers can see what they get.
DATE_FALLBACK_POLICY = "today"
DEFAULT_PAYMENT_STATUS = "UNPAID"
DEFAULT_CLEANING_STATUS = "DIRTY"  # for unknown storage labels

PAYMENT_STATUSES = ("UNPAID", "DEPOSIT", "PAID")
CLEANING_STATUSES = ("CLEAN", "DIRTY")

_PAYMENT_TO_STORAGE = {
    "UNPAID": "Unpaid",
    "DEPOSIT": "Deposit",
    "PAID": "Paid",
}
_PAYMENT_FROM_STORAGE = {v: k for k, v in _PAYMENT_TO_STORAGE.items()}

_CLEANING_TO_STORAGE = {
    "CLEAN": "Clean",
    "DIRTY": "Needs Cleaning",
}
_CLEANING_FROM_STORAGE = {v: k for k, v in _CLEANING_TO_STORAGE.items()}


def parse_display_date(value) -> date:
    """Strict dd/mm/yyyy parse. Raises ValueError on anything else."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Invalid date: {value!r}")

    match = _DISPLAY_DATE_RE.match(value)
    if not match:
        raise ValueError(f"Invalid date: {value!r}. Use dd/mm/yyyy")
    day, month, year = (int(part) for part in match.groups())
    return date(year, month, day)


def to_storage_date(display) -> date:
    """
    Lenient conversion: malformed or missing input becomes today's date.
    Write paths use parse_display_date instead and reject bad input.
    """
    try:
        return parse_display_date(display)
    except ValueError:
        return date.today()


def from_storage_date(value) -> str:
    if isinstance(value, datetime):
        value = value.date()
    elif isinstance(value, str):
        try:
            value = date.fromisoformat(value[:10])
        except ValueError:
            return ""
    if not isinstance(value, date):
        return ""
    return value.strftime(DISPLAY_DATE_FORMAT)


def to_storage_payment_status(status) -> str:
    key = (status or "").strip().upper() if isinstance(status, str) else ""
    return _PAYMENT_TO_STORAGE.get(key, _PAYMENT_TO_STORAGE[DEFAULT_PAYMENT_STATUS])


def from_storage_payment_status(label) -> str:
    return _PAYMENT_FROM_STORAGE.get(label, DEFAULT_PAYMENT_STATUS)


def to_storage_cleaning_status(status) -> str:
    key = (status or "").strip().upper() if isinstance(status, str) else ""
    if key not in _CLEANING_TO_STORAGE:
        raise ValueError(f"Unknown cleaning status: {status!r}")
    return _CLEANING_TO_STORAGE[key]


def from_storage_cleaning_status(label) -> str:
    return _CLEANING_FROM_STORAGE.get(label, DEFAULT_CLEANING_STATUS)


def room_sort_key(room_id):
    """Numeric-aware key so "9" < "10" < "10A"."""
    parts = re.split(r"(\d+)", str(room_id))
    return [(0, int(p), "") if p.isdigit() else (1, 0, p.lower()) for p in parts if p]
