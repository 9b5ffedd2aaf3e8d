from models.db import db

ROOM_TYPES = ("River view", "Standard view", "Cottage")
BED_TYPES = ("Double bed", "Twin bed")


class Room(db.Model):
    __tablename__ = "rooms"

    id = db.Column(db.Integer, primary_key=True)

    # Public identifier, e.g. "101". Kept as text, sorted numerically.
    room_number = db.Column(db.String(10), unique=True, nullable=False, index=True)
    room_type = db.Column(db.String(30), nullable=False)
    bed_type = db.Column(db.String(30), nullable=False)
    floor = db.Column(db.Integer, nullable=False, default=1)
