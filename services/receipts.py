"""
Receipt line items for a set of selected bookings.

Pure and read-only: the same bookings and rooms always produce the same
receipt. Rooms of the same kind, stay and nightly price collapse into one
line.
"""
from dataclasses import dataclass, field
from decimal import Decimal

from utils.codec import from_storage_date


def room_type_description(room_type: str, bed_type: str) -> str:
    if room_type == "River view":
        return "River Sunrise Room"
    if room_type == "Standard view" and bed_type == "Twin bed":
        return "Standard Twin Room"
    if room_type == "Standard view" and bed_type == "Double bed":
        return "Standard Double Room"
    if room_type == "Cottage":
        return "Cottage Room"
    return f"{room_type} {bed_type}"


def count_nights(check_in, check_out) -> int:
    """Whole nights between the dates, 0 for an empty or reversed stay."""
    try:
        nights = (check_out - check_in).days
    except TypeError:
        return 0
    return max(nights, 0)


@dataclass
class LineItem:
    description: str
    check_in: object
    check_out: object
    unit_price: Decimal
    nights: int
    room_count: int = 0
    total: Decimal = Decimal("0")

    def to_dict(self) -> dict:
        return {
            "description": self.description,
            "checkIn": from_storage_date(self.check_in),
            "checkOut": from_storage_date(self.check_out),
            "roomCount": self.room_count,
            "nights": self.nights,
            "unitPrice": float(self.unit_price),
            "total": float(self.total),
        }


@dataclass
class Receipt:
    receipt_no: str
    customer: dict
    line_items: list = field(default_factory=list)
    total: Decimal = Decimal("0")

    def to_dict(self) -> dict:
        return {
            "receiptNo": self.receipt_no,
            "customer": self.customer,
            "lineItems": [item.to_dict() for item in self.line_items],
            "totalAmount": float(self.total),
        }


def build_receipt(bookings, rooms) -> Receipt:
    room_map = {r.id: r for r in rooms}
    grouped = {}

    for booking in bookings:
        nights = count_nights(booking.check_in, booking.check_out)
        price = Decimal(booking.price_per_night)
        for room_id in booking.room_ids:
            room = room_map.get(room_id)
            if room is None:
                continue
            description = room_type_description(room.type, room.bed)
            key = (description, booking.check_in, booking.check_out, price)
            item = grouped.get(key)
            if item is None:
                item = LineItem(
                    description=description,
                    check_in=booking.check_in,
                    check_out=booking.check_out,
                    unit_price=price,
                    nights=nights,
                )
                grouped[key] = item
            item.room_count += 1
            item.total += nights * price

    line_items = list(grouped.values())
    customer = {}
    if bookings:
        first = bookings[0]
        customer = {
            "customerName": first.customer_name,
            "phone": first.phone,
            "address": first.address,
            "taxId": first.tax_id,
        }

    return Receipt(
        receipt_no=", ".join(b.id for b in bookings),
        customer=customer,
        line_items=line_items,
        total=sum((item.total for item in line_items), Decimal("0")),
    )
