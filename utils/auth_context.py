from functools import wraps
from flask import g, jsonify
from security.session import get_session_from_request

def load_current_user():
    """Runs before every request; leaves g.user as None unless a live shift session is presented."""
    clear_current_user()

    sess = get_session_from_request()
    if sess is None or not sess.user.is_active:
        return
    g.session = sess
    g.user = sess.user

def clear_current_user():
    g.user = None
    g.session = None

def login_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        if g.get("user") is None:
            return jsonify(error="Authentication required"), 401
        return fn(*args, **kwargs)
    return wrapper
