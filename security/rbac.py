from functools import wraps
from flask import g, jsonify

def require_roles(*role_names: str):
    """
    Usage: @require_roles("ADMIN")
    """
    allowed = set(role_names)

    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            user = getattr(g, "user", None)
            if user is None:
                return jsonify(error="Authentication required", kind="unauthenticated"), 401

            if not {r.name for r in user.roles} & allowed:
                return jsonify(error="Access denied. Admin privileges required.", kind="forbidden"), 403

            return fn(*args, **kwargs)
        return wrapper
    return decorator
