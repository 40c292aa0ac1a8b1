from functools import wraps
from flask import g, jsonify

from models import db
from models.user import User
from security.session import get_session_from_request
from services.lifecycle import Actor

def load_current_user():
    sess = get_session_from_request()
    if not sess:
        g.user = None
        g.session = None
        return
    g.session = sess
    g.user = db.session.get(User, sess.user_id)

def login_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        if getattr(g, "user", None) is None:
            return jsonify(error="Authentication required", kind="unauthenticated"), 401
        return fn(*args, **kwargs)
    return wrapper

def current_actor() -> Actor:
    """Identity of the logged-in user as the booking services see it."""
    user = g.user
    return Actor(user_id=user.id, role="admin" if user.is_admin else "user")
