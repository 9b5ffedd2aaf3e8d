from flask import Blueprint, request, jsonify, current_app, g

from models.user import User
from security.password import verify_password
from security.session import create_session, revoke_session, revoke_all_sessions
from security.bruteforce import is_locked, register_failure, reset_attempts
from security.csrf import issue_csrf_token, clear_csrf_token
from utils.audit import log_event
from utils.auth_context import login_required, clear_current_user


auth_bp = Blueprint("auth", __name__, url_prefix="/auth")


@auth_bp.post("/login")
def login():
    data = request.get_json(silent=True) or {}
    username = (data.get("username") or "").strip()
    password = data.get("password") or ""

    if not username or not password:
        return jsonify(error="Username and password are required"), 400

    locked, seconds_left = is_locked(username)
    if locked:
        log_event("LOGIN_LOCKED", metadata={"username": username, "seconds_left": seconds_left})
        return jsonify(error="Account temporarily locked. Try again later.", retry_after_seconds=seconds_left), 429

    user = User.query.filter_by(username=username).first()
    if not user or not user.is_active or not verify_password(password, user.password_hash):
        fail_count, locked_now = register_failure(username)
        log_event(
            "LOGIN_FAIL",
            user_id=user.id if user else None,
            metadata={"username": username, "fail_count": fail_count, "locked_now": locked_now},
        )
        if locked_now:
            return jsonify(error="Too many failed attempts. Account locked.", lockout_minutes=current_app.config.get("LOCKOUT_MINUTES", 5)), 429
        return jsonify(error="Invalid credentials"), 401

    reset_attempts(username)

    # One active session per staff account
    revoked_count = revoke_all_sessions(user.id)
    raw_token = create_session(user.id)

    resp = jsonify(message="Login successful", username=user.username)
    resp.set_cookie(
        current_app.config.get("AUTH_COOKIE_NAME", "frontdesk_session"),
        raw_token,
        httponly=True,
        secure=current_app.config.get("SESSION_COOKIE_SECURE", False),
        samesite=current_app.config.get("SESSION_COOKIE_SAMESITE", "Lax"),
        max_age=current_app.config.get("SESSION_LIFETIME_SECONDS", 12 * 60 * 60),
        path="/",
    )
    resp = issue_csrf_token(resp)

    log_event("LOGIN_SUCCESS", user_id=user.id, metadata={"revoked_sessions": revoked_count})
    return resp, 200


@auth_bp.get("/me")
@login_required
def me():
    return jsonify(id=g.user.id, username=g.user.username), 200


@auth_bp.post("/logout")
@login_required
def logout():
    cookie_name = current_app.config.get("AUTH_COOKIE_NAME", "frontdesk_session")
    revoke_session(request.cookies.get(cookie_name))
    log_event("LOGOUT")
    clear_current_user()

    resp = jsonify(message="Logged out")
    resp.delete_cookie(cookie_name, path="/")
    return clear_csrf_token(resp), 200
