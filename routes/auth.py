from flask import Blueprint, request, jsonify, g, make_response, current_app

from models import db
from models.user import User, Role
from security.password import hash_password, verify_password, password_problems
from security.session import (
    create_session,
    revoke_session,
    set_auth_cookie,
    clear_auth_cookie,
    current_raw_token,
)
from security.csrf import issue_csrf_token
from utils.audit import log_event
from utils.auth_context import login_required
from utils.roles import USER, filter_role_names


auth_bp = Blueprint("auth", __name__, url_prefix="/auth")


def _is_valid_email(email: str) -> bool:
    return isinstance(email, str) and "@" in email and len(email) <= 255


def _user_payload(user: User):
    return {
        "id": user.id,
        "email": user.email,
        "name": user.name,
        "phone_number": user.phone_number,
        "roles": filter_role_names(user.role_names),
        "created_at": user.created_at.isoformat(),
    }


@auth_bp.post("/register")
def register():
    data = request.get_json(silent=True) or {}
    email = (data.get("email") or "").strip().lower()
    password = data.get("password") or ""
    name = (data.get("name") or "").strip()
    phone_number = (data.get("phone_number") or "").strip() or None

    if not _is_valid_email(email):
        return jsonify(error="Invalid email", kind="validation_error"), 422
    if not name or len(name) > 120:
        return jsonify(error="Name is required (max 120 characters)", kind="validation_error"), 422
    problems = password_problems(password)
    if problems:
        return jsonify(error="Password does not meet policy", kind="validation_error", details=problems), 422

    if User.query.filter_by(email=email).first():
        log_event("REGISTER_FAIL_EMAIL_EXISTS", metadata={"email": email})
        return jsonify(error="Email already registered", kind="conflict"), 409

    pw_hash = hash_password(password, rounds=current_app.config.get("BCRYPT_ROUNDS", 12))
    user = User(email=email, password_hash=pw_hash, name=name, phone_number=phone_number)
    db.session.add(user)
    db.session.flush()

    user_role = Role.query.filter_by(name=USER).first()
    if user_role:
        user.roles.append(user_role)

    db.session.commit()
    log_event("REGISTER_SUCCESS", user_id=user.id)

    return jsonify(message="Registered successfully", user=_user_payload(user)), 201


@auth_bp.post("/login")
def login():
    data = request.get_json(silent=True) or {}
    email = (data.get("email") or "").strip().lower()
    password = data.get("password") or ""

    user = User.query.filter_by(email=email).first()
    if not user or not verify_password(password, user.password_hash):
        log_event("LOGIN_FAIL", user_id=user.id if user else None, metadata={"email": email})
        return jsonify(error="Invalid credentials", kind="unauthenticated"), 401

    raw_token = create_session(user.id)
    log_event("LOGIN_SUCCESS", user_id=user.id)

    resp = make_response(jsonify(message="Logged in", user=_user_payload(user)), 200)
    set_auth_cookie(resp, raw_token)
    issue_csrf_token(resp)
    return resp


@auth_bp.post("/logout")
@login_required
def logout():
    revoke_session(current_raw_token())
    log_event("LOGOUT", user_id=g.user.id)

    resp = make_response(jsonify(message="Logged out"), 200)
    clear_auth_cookie(resp)
    return resp


@auth_bp.get("/me")
@login_required
def me():
    return jsonify(user=_user_payload(g.user)), 200
