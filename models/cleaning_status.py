from datetime import datetime
from models.db import db

class CleaningStatus(db.Model):
    __tablename__ = "cleaning_statuses"

    room_id = db.Column(db.Integer, db.ForeignKey("rooms.id"), primary_key=True)

    status = db.Column(db.String(20), nullable=False, default="Clean")
    # status values: Clean, Needs Cleaning

    last_updated = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
