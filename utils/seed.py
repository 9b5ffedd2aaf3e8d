from models import db
from models.booking_counter import BookingCounter, BOOKING_COUNTER
from models.cleaning_status import CleaningStatus
from models.room import Room
from models.user import User
from security.password import hash_password

# (room number, room type, bed type, floor)
DEFAULT_ROOMS = [
    ("101", "Standard view", "Double bed", 1),
    ("102", "Standard view", "Double bed", 1),
    ("103", "Standard view", "Twin bed", 1),
    ("104", "Standard view", "Twin bed", 1),
    ("105", "River view", "Double bed", 1),
    ("106", "River view", "Double bed", 1),
    ("201", "Standard view", "Double bed", 2),
    ("202", "Standard view", "Twin bed", 2),
    ("203", "River view", "Double bed", 2),
    ("204", "River view", "Twin bed", 2),
    ("301", "Cottage", "Double bed", 1),
    ("302", "Cottage", "Twin bed", 1),
]

def seed_rooms(rooms=None) -> int:
    """Adds missing rooms plus their cleaning rows. Safe to run repeatedly."""
    existing = {r.room_number for r in Room.query.all()}
    added = 0
    for number, room_type, bed_type, floor in rooms or DEFAULT_ROOMS:
        if number in existing:
            continue
        room = Room(room_number=number, room_type=room_type, bed_type=bed_type, floor=floor)
        db.session.add(room)
        db.session.flush()
        db.session.add(CleaningStatus(room_id=room.id, status="Clean"))
        added += 1

    if db.session.get(BookingCounter, BOOKING_COUNTER) is None:
        db.session.add(BookingCounter(name=BOOKING_COUNTER, value=0))

    db.session.commit()
    return added

def upsert_user(username: str, password: str) -> User:
    user = User.query.filter_by(username=username).first()
    if not user:
        user = User(username=username, password_hash=hash_password(password))
        db.session.add(user)
    else:
        user.password_hash = hash_password(password)
        user.is_active = True
    db.session.commit()
    return user
