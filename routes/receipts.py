from flask import Blueprint, request, jsonify

from services.bookings import get_booking
from services.errors import ValidationError
from services.receipts import build_receipt
from services.rooms import list_rooms
from utils.audit import log_event
from utils.auth_context import login_required

receipt_bp = Blueprint("receipts", __name__, url_prefix="/receipts")


@receipt_bp.post("")
@login_required
def post_receipt():
    data = request.get_json(silent=True) or {}
    booking_ids = data.get("bookingIds")
    if not isinstance(booking_ids, list) or not booking_ids:
        raise ValidationError("Select at least one booking")

    bookings = []
    seen = set()
    for booking_id in booking_ids:
        booking = get_booking(str(booking_id))
        if booking.group_id in seen:
            continue
        seen.add(booking.group_id)
        bookings.append(booking)

    receipt = build_receipt(bookings, list_rooms())
    log_event("RECEIPT_VIEW", entity="booking", entity_id=receipt.receipt_no)
    return jsonify(receipt.to_dict()), 200
