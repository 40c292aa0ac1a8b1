from datetime import date

from flask import Blueprint, request, jsonify, current_app, g

from models.booking import Booking
from services import get_engine, get_lifecycle
from services.errors import ValidationError
from services.validation import parse_booking_payload, parse_date, parse_time, parse_guests, parse_status
from utils.auth_context import login_required, current_actor

booking_bp = Blueprint("booking", __name__, url_prefix="/bookings")


def _max_guests():
    return current_app.extensions["restaurant_config"].max_guests


def _page_args(default_per_page):
    page = request.args.get("page", 1, type=int) or 1
    per_page = request.args.get("per_page", default_per_page, type=int) or default_per_page
    return max(page, 1), max(1, min(per_page, 100))


def paginated(pagination, items):
    return {
        "items": items,
        "page": pagination.page,
        "per_page": pagination.per_page,
        "total": pagination.total,
        "pages": pagination.pages,
    }


# ---------- USERS: my bookings ----------
@booking_bp.get("")
@login_required
def my_bookings():
    page, per_page = _page_args(10)
    q = Booking.query.filter_by(user_id=g.user.id)
    status = request.args.get("status")
    if status:
        q = q.filter_by(status=parse_status(status).value)

    pagination = (
        q.order_by(Booking.date.desc(), Booking.time.desc())
        .paginate(page=page, per_page=per_page, error_out=False)
    )
    return jsonify(bookings=paginated(pagination, [b.to_dict() for b in pagination.items])), 200


# ---------- USERS: create booking (capacity checked under the date lock) ----------
@booking_bp.post("")
@login_required
def create_booking():
    data = parse_booking_payload(request.get_json(silent=True), max_guests=_max_guests())
    booking = get_lifecycle().create(
        current_actor(),
        data["date"],
        data["time"],
        data["guests"],
        special_requests=data.get("special_requests"),
    )
    return jsonify(message="Booking created successfully", booking=booking.to_dict()), 201


@booking_bp.get("/<int:booking_id>")
@login_required
def get_booking(booking_id: int):
    booking = get_lifecycle().get_for_owner(booking_id, g.user.id)
    return jsonify(booking=booking.to_dict()), 200


@booking_bp.put("/<int:booking_id>")
@login_required
def update_booking(booking_id: int):
    changes = parse_booking_payload(request.get_json(silent=True), partial=True, max_guests=_max_guests())
    booking = get_lifecycle().update(current_actor(), booking_id, changes)
    return jsonify(message="Booking updated successfully", booking=booking.to_dict()), 200


@booking_bp.delete("/<int:booking_id>")
@login_required
def cancel_booking(booking_id: int):
    booking = get_lifecycle().cancel(current_actor(), booking_id)
    return jsonify(message="Booking cancelled successfully", booking=booking.to_dict()), 200


# ---------- USERS: availability ----------
@booking_bp.post("/check-availability")
@login_required
def check_availability():
    data = request.get_json(silent=True) or {}
    missing = {k: "Required" for k in ("date", "time", "guests") if data.get(k) is None}
    if missing:
        raise ValidationError("Validation failed", missing)

    day = parse_date(data["date"], not_before=date.today())
    at = parse_time(data["time"])
    guests = parse_guests(data["guests"], max_guests=_max_guests())

    available = get_engine().is_slot_available(day, at, guests)
    return jsonify(
        date=day.isoformat(),
        time=at.strftime("%H:%M"),
        guests=guests,
        available=available,
    ), 200


@booking_bp.get("/available-slots")
@login_required
def available_slots():
    if not request.args.get("date") or not request.args.get("guests"):
        raise ValidationError("Validation failed", {"date": "Required", "guests": "Required"})

    day = parse_date(request.args["date"], not_before=date.today())
    guests = parse_guests(request.args["guests"], max_guests=_max_guests())

    slots = get_engine().list_slots(day, guests)
    return jsonify(
        date=day.isoformat(),
        guests=guests,
        time_slots=[s.to_dict() for s in slots],
    ), 200
