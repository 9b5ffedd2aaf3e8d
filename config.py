import os

BASE_DIR = os.path.abspath(os.path.dirname(__file__))

class Config:
    # Secrets
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-only-change-me")

    # SQLite file next to the app unless DATABASE_URL points at PostgreSQL
    SQLALCHEMY_DATABASE_URI = os.getenv(
        "DATABASE_URL",
        "sqlite:///" + os.path.join(BASE_DIR, "frontdesk.db")
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Session cookie name for our auth token
    AUTH_COOKIE_NAME = "frontdesk_session"

    # A front-desk shift: 12 hours absolute, 1 hour idle
    SESSION_LIFETIME_SECONDS = 12 * 60 * 60
    IDLE_TIMEOUT_SECONDS = 60 * 60

    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = "Lax"
    SESSION_COOKIE_SECURE = os.getenv("SESSION_COOKIE_SECURE", "false").lower() == "true"

    # Double-submit CSRF cookie and the header that must echo it
    CSRF_COOKIE_NAME = "csrf_token"
    CSRF_HEADER_NAME = "X-CSRF-Token"

    # Brute-force protection
    MAX_LOGIN_ATTEMPTS = 5
    LOCKOUT_MINUTES = 5

    BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))

    # Booking ids look like BK000042
    BOOKING_ID_PREFIX = os.getenv("BOOKING_ID_PREFIX", "BK")
    BOOKING_ID_WIDTH = int(os.getenv("BOOKING_ID_WIDTH", "6"))

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    DEBUG = False


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    BCRYPT_ROUNDS = 4
    SESSION_COOKIE_SECURE = False
    LOG_LEVEL = "WARNING"
