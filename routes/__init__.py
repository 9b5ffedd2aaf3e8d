from .health import health_bp
from .auth import auth_bp
from .rooms import room_bp
from .bookings import booking_bp
from .cleaning import cleaning_bp
from .receipts import receipt_bp
from .dashboard import dashboard_bp
