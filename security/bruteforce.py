from datetime import datetime, timedelta
from flask import request, current_app

from models import db
from models.login_attempt import LoginAttempt

def _client_ip() -> str:
    return request.headers.get("X-Forwarded-For", request.remote_addr) or "unknown"

def _attempt_row(username: str):
    return LoginAttempt.query.filter_by(username=username, ip=_client_ip()).first()

def is_locked(username: str) -> tuple[bool, int]:
    """
    Returns (locked, seconds_remaining) for this username from this address.
    """
    row = _attempt_row(username)
    if not row:
        return False, 0
    seconds_left = row.seconds_locked(datetime.utcnow())
    return seconds_left > 0, seconds_left

def register_failure(username: str) -> tuple[int, bool]:
    """
    Counts a failed sign-in. Returns (fail_count, locked_now); the lock
    starts once MAX_LOGIN_ATTEMPTS is reached.
    """
    now = datetime.utcnow()
    row = _attempt_row(username)
    if not row:
        row = LoginAttempt(username=username, ip=_client_ip(), fail_count=0)
        db.session.add(row)

    row.fail_count += 1
    row.last_fail_at = now

    locked_now = row.fail_count >= current_app.config.get("MAX_LOGIN_ATTEMPTS", 5)
    if locked_now:
        row.locked_until = now + timedelta(minutes=current_app.config.get("LOCKOUT_MINUTES", 5))

    db.session.commit()
    return row.fail_count, locked_now

def reset_attempts(username: str):
    row = _attempt_row(username)
    if row:
        db.session.delete(row)
        db.session.commit()
