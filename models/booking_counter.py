from flask import current_app
from sqlalchemy import select, update

from models.db import db

BOOKING_COUNTER = "bookings"

class BookingCounter(db.Model):
    __tablename__ = "booking_counters"

    name = db.Column(db.String(40), primary_key=True)
    value = db.Column(db.Integer, nullable=False, default=0)


def next_booking_id() -> str:
    """
    Returns a fresh booking id inside the caller's transaction.
    The increment is a single UPDATE, so the counter row stays locked
    until the caller commits or rolls back.
    """
    result = db.session.execute(
        update(BookingCounter)
        .where(BookingCounter.name == BOOKING_COUNTER)
        .values(value=BookingCounter.value + 1)
    )
    if result.rowcount == 0:
        # First id ever issued; a concurrent first insert fails on the primary key
        db.session.add(BookingCounter(name=BOOKING_COUNTER, value=1))
        db.session.flush()

    value = db.session.execute(
        select(BookingCounter.value).where(BookingCounter.name == BOOKING_COUNTER)
    ).scalar_one()

    prefix = current_app.config.get("BOOKING_ID_PREFIX", "BK")
    width = current_app.config.get("BOOKING_ID_WIDTH", 6)
    return f"{prefix}{value:0{width}d}"
