from .db import db
from .user import User
from .audit_log import AuditLog
from .session import StaffSession
from .login_attempt import LoginAttempt
from .room import Room
from .customer import Customer
from .booking import Booking
from .booking_counter import BookingCounter
from .cleaning_status import CleaningStatus
