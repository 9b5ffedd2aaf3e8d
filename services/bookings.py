"""
Logical bookings: one customer, one stay, one or more rooms.

Each room is stored as its own ``Booking`` row; rows created together
share a ``group_id`` and are always written together. Create and update
run as a single transaction on ``db.session``: either every row change
commits or none does.
"""
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Optional

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import joinedload

from models import db
from models.booking import Booking
from models.booking_counter import next_booking_id
from models.customer import Customer
from services.errors import ConflictError, FrontDeskError, NotFoundError, StorageError, ValidationError
from services.rooms import rooms_by_number
from utils.codec import (
    from_storage_date,
    from_storage_payment_status,
    parse_display_date,
    room_sort_key,
    to_storage_payment_status,
)


def _id_key(booking_id: str):
    # ids are zero padded; the length check keeps order once the padding is outgrown
    return (len(booking_id), booking_id)


@dataclass
class LogicalBooking:
    id: str
    timestamp: datetime
    customer_name: str
    phone: str
    check_in: date
    check_out: date
    room_ids: list
    payment_status: str
    price_per_night: Decimal
    deposit_amount: Decimal = Decimal("0")
    email: Optional[str] = None
    address: Optional[str] = None
    tax_id: Optional[str] = None
    group_id: Optional[str] = field(default=None, compare=False)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "timestamp": self.timestamp.replace(tzinfo=timezone.utc).isoformat(),
            "customerName": self.customer_name,
            "phone": self.phone,
            "checkIn": from_storage_date(self.check_in),
            "checkOut": from_storage_date(self.check_out),
            "roomIds": list(self.room_ids),
            "paymentStatus": self.payment_status,
            "depositAmount": float(self.deposit_amount),
            "pricePerNight": float(self.price_per_night),
            "email": self.email,
            "address": self.address,
            "taxId": self.tax_id,
        }


@dataclass
class BookingInput:
    customer_name: str
    phone: str
    check_in: date
    check_out: date
    room_ids: list
    price_per_night: Decimal
    payment_status: str = "UNPAID"
    deposit_amount: Decimal = Decimal("0")
    email: Optional[str] = None
    address: Optional[str] = None
    tax_id: Optional[str] = None

    @classmethod
    def from_payload(cls, data) -> "BookingInput":
        if not isinstance(data, dict):
            raise ValidationError("Request body must be a JSON object")

        customer_name = _required_text(data, "customerName")
        phone = _required_text(data, "phone")
        check_in = _required_date(data, "checkIn")
        check_out = _required_date(data, "checkOut")
        if check_out <= check_in:
            raise ValidationError("Check-out date must be after check-in date")

        room_ids = data.get("roomIds")
        if not isinstance(room_ids, list) or not room_ids:
            raise ValidationError("Select at least one room")
        cleaned = []
        for rid in room_ids:
            if isinstance(rid, bool) or not isinstance(rid, (str, int)) or not str(rid).strip():
                raise ValidationError("roomIds must be a list of room numbers")
            rid = str(rid).strip()
            if rid not in cleaned:
                cleaned.append(rid)

        if data.get("pricePerNight") is None:
            raise ValidationError("pricePerNight is required")
        price = _amount(data.get("pricePerNight"), "pricePerNight")
        deposit = _amount(data.get("depositAmount") or 0, "depositAmount")

        # Unknown payment statuses fall back to UNPAID
        payment_status = from_storage_payment_status(to_storage_payment_status(data.get("paymentStatus")))

        return cls(
            customer_name=customer_name,
            phone=phone,
            check_in=check_in,
            check_out=check_out,
            room_ids=sorted(cleaned, key=room_sort_key),
            price_per_night=price,
            payment_status=payment_status,
            deposit_amount=deposit,
            email=_optional_text(data, "email"),
            address=_optional_text(data, "address"),
            tax_id=_optional_text(data, "taxId"),
        )


def _required_text(data: dict, key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{key} is required")
    return value.strip()


def _optional_text(data: dict, key: str):
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{key} must be a string")
    return value.strip() or None


def _required_date(data: dict, key: str) -> date:
    value = data.get(key)
    if not value:
        raise ValidationError(f"{key} is required")
    try:
        return parse_display_date(value)
    except ValueError:
        raise ValidationError(f"{key} must be a date in dd/mm/yyyy format")


def _amount(value, key: str) -> Decimal:
    if isinstance(value, bool):
        raise ValidationError(f"{key} must be a number")
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{key} must be a number")
    if not amount.is_finite() or amount < 0:
        raise ValidationError(f"{key} must be a non-negative number")
    return amount


# ---------- read side ----------

def _booking_query():
    return Booking.query.options(joinedload(Booking.customer), joinedload(Booking.room))


def _to_logical(members) -> LogicalBooking:
    first = members[0]
    customer = first.customer
    return LogicalBooking(
        id=min((m.booking_id for m in members), key=_id_key),
        timestamp=min(m.created_at for m in members),
        customer_name=customer.customer_name,
        phone=customer.phone,
        check_in=first.check_in_date,
        check_out=first.check_out_date,
        room_ids=sorted((m.room.room_number for m in members), key=room_sort_key),
        payment_status=from_storage_payment_status(first.status),
        price_per_night=Decimal(first.price_per_night),
        deposit_amount=Decimal(first.deposit or 0),
        email=customer.email,
        address=customer.address,
        tax_id=customer.tax_id,
        group_id=first.group_id,
    )


def _group_rows(rows) -> list:
    groups = {}
    for row in rows:
        groups.setdefault(row.group_id, []).append(row)
    return [_to_logical(members) for members in groups.values()]


def _load_group(group_id: str) -> LogicalBooking:
    rows = _booking_query().filter(Booking.group_id == group_id).all()
    if not rows:
        raise NotFoundError("Booking not found")
    return _to_logical(rows)


def _matches(booking: LogicalBooking, term: str) -> bool:
    term = term.lower()
    return (
        term in booking.customer_name.lower()
        or term in booking.phone
        or term in from_storage_date(booking.check_in)
        or term in booking.id.lower()
    )


def list_bookings(search: Optional[str] = None) -> list:
    """All logical bookings, newest first."""
    bookings = _group_rows(_booking_query().all())
    bookings.sort(key=lambda b: (b.timestamp, _id_key(b.id)), reverse=True)

    term = (search or "").strip()
    if term:
        bookings = [b for b in bookings if _matches(b, term)]
    return bookings


def get_booking(booking_id: str) -> LogicalBooking:
    """Logical booking containing the given booking id (any member id works)."""
    record = db.session.get(Booking, booking_id)
    if record is None:
        raise NotFoundError("Booking not found")
    return _load_group(record.group_id)


# ---------- write side ----------

def _resolve_rooms(room_numbers) -> dict:
    rooms = rooms_by_number(room_numbers)
    missing = [n for n in room_numbers if n not in rooms]
    if missing:
        raise ValidationError(f"Unknown room(s): {', '.join(missing)}", details={"roomIds": missing})
    return rooms


def _conflicting_rooms(room_pks, check_in: date, check_out: date, exclude_group_id=None) -> list:
    q = _booking_query().filter(
        Booking.room_id.in_(room_pks),
        Booking.check_in_date < check_out,
        Booking.check_out_date > check_in,
    )
    if exclude_group_id is not None:
        q = q.filter(Booking.group_id != exclude_group_id)
    return sorted({b.room.room_number for b in q.all()}, key=room_sort_key)


def _ensure_available(rooms: dict, data: BookingInput, exclude_group_id=None):
    conflicts = _conflicting_rooms(
        [r.id for r in rooms.values()], data.check_in, data.check_out, exclude_group_id
    )
    if conflicts:
        raise ConflictError(
            f"Room(s) already booked for these dates: {', '.join(conflicts)}",
            details={"roomIds": conflicts},
        )


def _find_or_create_customer(data: BookingInput) -> Customer:
    customer = Customer.query.filter_by(customer_name=data.customer_name, phone=data.phone).first()
    if customer:
        # Latest booking wins for contact details
        customer.email = data.email
        customer.address = data.address
        customer.tax_id = data.tax_id
        return customer

    customer = Customer(
        customer_name=data.customer_name,
        phone=data.phone,
        email=data.email,
        address=data.address,
        tax_id=data.tax_id,
    )
    db.session.add(customer)
    db.session.flush()
    return customer


def _new_record(group_id: str, customer_id: int, room_pk: int, data: BookingInput, created_at: datetime) -> Booking:
    return Booking(
        booking_id=next_booking_id(),
        group_id=group_id,
        customer_id=customer_id,
        room_id=room_pk,
        check_in_date=data.check_in,
        check_out_date=data.check_out,
        status=to_storage_payment_status(data.payment_status),
        price_per_night=data.price_per_night,
        deposit=data.deposit_amount,
        created_at=created_at,
    )


def _rollback_and_raise(exc: Exception, action: str):
    db.session.rollback()
    if isinstance(exc, FrontDeskError):
        raise exc
    current_app.logger.exception("Booking %s failed; transaction rolled back", action)
    raise StorageError("Storage failure") from exc


def create_booking(data: BookingInput) -> LogicalBooking:
    group_id = str(uuid.uuid4())
    try:
        rooms = _resolve_rooms(data.room_ids)
        _ensure_available(rooms, data)

        customer = _find_or_create_customer(data)
        created_at = datetime.utcnow()
        for number in data.room_ids:
            db.session.add(_new_record(group_id, customer.id, rooms[number].id, data, created_at))

        db.session.commit()
    except (FrontDeskError, SQLAlchemyError) as exc:
        _rollback_and_raise(exc, "create")

    current_app.logger.info("Created booking group %s for rooms %s", group_id, ", ".join(data.room_ids))
    return _load_group(group_id)


def update_booking(booking_id: str, data: BookingInput) -> LogicalBooking:
    """
    Rewrites the whole logical booking that ``booking_id`` belongs to.
    Rooms dropped from the selection lose their rows, new rooms get fresh
    rows and ids, kept rooms are updated in place.
    """
    try:
        record = db.session.get(Booking, booking_id)
        if record is None:
            raise NotFoundError("Booking not found")
        group_id = record.group_id

        members = Booking.query.filter_by(group_id=group_id).all()
        current = {m.room.room_number: m for m in members}
        wanted = set(data.room_ids)

        rooms = _resolve_rooms(data.room_ids)
        _ensure_available(rooms, data, exclude_group_id=group_id)

        customer = record.customer
        customer.customer_name = data.customer_name
        customer.phone = data.phone
        customer.email = data.email
        customer.address = data.address
        customer.tax_id = data.tax_id

        rooms_to_remove = set(current) - wanted
        rooms_to_add = [n for n in data.room_ids if n not in current]

        for number in rooms_to_remove:
            db.session.delete(current[number])

        created_at = datetime.utcnow()
        for number in rooms_to_add:
            db.session.add(_new_record(group_id, customer.id, rooms[number].id, data, created_at))

        status = to_storage_payment_status(data.payment_status)
        for number, row in current.items():
            if number in wanted:
                row.check_in_date = data.check_in
                row.check_out_date = data.check_out
                row.status = status
                row.price_per_night = data.price_per_night
                row.deposit = data.deposit_amount

        db.session.commit()
    except (FrontDeskError, SQLAlchemyError) as exc:
        _rollback_and_raise(exc, "update")

    current_app.logger.info(
        "Updated booking group %s: +%s -%s", group_id, sorted(rooms_to_add), sorted(rooms_to_remove)
    )
    return _load_group(group_id)
