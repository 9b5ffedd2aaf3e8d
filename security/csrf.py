import secrets
from flask import request, jsonify, current_app

# Double-submit: the desk UI copies the readable cookie into a request header.

def _names() -> tuple[str, str]:
    return (
        current_app.config.get("CSRF_COOKIE_NAME", "csrf_token"),
        current_app.config.get("CSRF_HEADER_NAME", "X-CSRF-Token"),
    )

def issue_csrf_token(resp):
    """Attaches a fresh token to a sign-in response."""
    cookie_name, _ = _names()
    resp.set_cookie(
        cookie_name,
        secrets.token_urlsafe(32),
        httponly=False,
        secure=current_app.config.get("SESSION_COOKIE_SECURE", False),
        samesite=current_app.config.get("SESSION_COOKIE_SAMESITE", "Lax"),
        max_age=current_app.config.get("SESSION_LIFETIME_SECONDS", 12 * 60 * 60),
        path="/",
    )
    return resp

def clear_csrf_token(resp):
    resp.delete_cookie(_names()[0], path="/")
    return resp

def require_csrf():
    """None when the header echoes the cookie, otherwise a 403 response."""
    cookie_name, header_name = _names()
    expected = request.cookies.get(cookie_name) or ""
    sent = request.headers.get(header_name) or ""
    if expected and sent and secrets.compare_digest(expected, sent):
        return None
    return jsonify(error="CSRF validation failed"), 403
