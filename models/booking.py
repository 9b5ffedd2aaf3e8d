from datetime import datetime
from models.db import db

class Booking(db.Model):
    """One room for one stay. A logical booking is every row sharing a group_id."""

    __tablename__ = "bookings"

    booking_id = db.Column(db.String(20), primary_key=True)
    group_id = db.Column(db.String(36), nullable=False, index=True)

    customer_id = db.Column(db.Integer, db.ForeignKey("customers.id"), nullable=False, index=True)
    room_id = db.Column(db.Integer, db.ForeignKey("rooms.id"), nullable=False, index=True)

    check_in_date = db.Column(db.Date, nullable=False, index=True)
    check_out_date = db.Column(db.Date, nullable=False, index=True)

    status = db.Column(db.String(20), nullable=False, default="Unpaid")
    # status values: Unpaid, Deposit, Paid

    price_per_night = db.Column(db.Numeric(10, 2), nullable=False)
    deposit = db.Column(db.Numeric(10, 2), nullable=False, default=0)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    customer = db.relationship("Customer")
    room = db.relationship("Room")

    __table_args__ = (
        db.CheckConstraint("check_out_date > check_in_date", name="ck_booking_dates"),
        # A room appears at most once in a logical booking
        db.UniqueConstraint("group_id", "room_id", name="uq_booking_group_room"),
    )
