import hashlib
import secrets
from datetime import datetime, timedelta
from flask import request, current_app

from models import db
from models.session import StaffSession

def _hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()

def _cookie_name() -> str:
    return current_app.config.get("AUTH_COOKIE_NAME", "frontdesk_session")

def create_session(user_id: int) -> str:
    """
    Opens a shift session and returns the raw token for the cookie.
    """
    raw_token = secrets.token_urlsafe(32)
    now = datetime.utcnow()
    lifetime = current_app.config.get("SESSION_LIFETIME_SECONDS", 12 * 60 * 60)

    db.session.add(StaffSession(
        user_id=user_id,
        token_hash=_hash_token(raw_token),
        created_at=now,
        last_seen_at=now,
        expires_at=now + timedelta(seconds=lifetime),
        ip=request.headers.get("X-Forwarded-For", request.remote_addr),
    ))
    db.session.commit()
    return raw_token

def get_session_from_request():
    """The live session behind the request cookie, touching its idle clock; None otherwise."""
    raw_token = request.cookies.get(_cookie_name())
    if not raw_token:
        return None

    sess = StaffSession.query.filter_by(token_hash=_hash_token(raw_token)).first()
    now = datetime.utcnow()
    if not sess or not sess.is_live(now, current_app.config.get("IDLE_TIMEOUT_SECONDS", 60 * 60)):
        return None

    sess.last_seen_at = now
    db.session.commit()
    return sess

def revoke_session(raw_token: str) -> bool:
    if not raw_token:
        return False
    sess = StaffSession.query.filter_by(token_hash=_hash_token(raw_token), revoked_at=None).first()
    if not sess:
        return False
    sess.revoked_at = datetime.utcnow()
    db.session.commit()
    return True

def revoke_all_sessions(user_id: int) -> int:
    """Ends every open shift for the account; returns how many were open."""
    now = datetime.utcnow()
    open_sessions = StaffSession.query.filter_by(user_id=user_id, revoked_at=None).all()
    for sess in open_sessions:
        sess.revoked_at = now
    db.session.commit()
    return len(open_sessions)
