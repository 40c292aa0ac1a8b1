import calendar
from datetime import date

from flask import Blueprint, jsonify, g, request
from sqlalchemy import func

from models import db
from models.user import User
from models.booking import Booking, BookingStatus
from models.notification import Notification
from routes.booking import paginated
from security.rbac import require_roles
from services import get_engine, get_lifecycle
from services.errors import ValidationError
from services.validation import parse_date, parse_status
from utils.audit import log_event
from utils.auth_context import current_actor
from utils.roles import ADMIN

admin_bp = Blueprint("admin", __name__, url_prefix="/admin")

WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]


def _date_range(required: bool):
    start_raw = request.args.get("start_date")
    end_raw = request.args.get("end_date")
    if required and (not start_raw or not end_raw):
        raise ValidationError("Validation failed", {"start_date": "Required", "end_date": "Required"})

    today = date.today()
    start = parse_date(start_raw, field="start_date") if start_raw else today.replace(day=1)
    if end_raw:
        end = parse_date(end_raw, field="end_date")
    else:
        end = today.replace(day=calendar.monthrange(today.year, today.month)[1])
    if end < start:
        raise ValidationError("Validation failed", {"end_date": "Must be on or after start_date"})
    return start, end


@admin_bp.get("/dashboard")
@require_roles(ADMIN)
def dashboard():
    today = date.today()
    counts = dict(
        db.session.query(Booking.status, func.count(Booking.id)).group_by(Booking.status).all()
    )
    todays = Booking.query.filter(
        Booking.date == today, Booking.status != BookingStatus.CANCELLED.value
    )
    log_event("ADMIN_DASHBOARD_VIEW", user_id=g.user.id)
    return jsonify(
        users=User.query.count(),
        bookings={s: counts.get(s, 0) for s in BookingStatus.values()},
        today={
            "date": today.isoformat(),
            "bookings": todays.count(),
            "guests": todays.with_entities(func.coalesce(func.sum(Booking.guests), 0)).scalar(),
        },
        unread_notifications=Notification.query.filter_by(user_id=g.user.id, is_read=False).count(),
    ), 200


@admin_bp.get("/bookings")
@require_roles(ADMIN)
def list_bookings():
    page = max(request.args.get("page", 1, type=int) or 1, 1)
    per_page = max(1, min(request.args.get("per_page", 15, type=int) or 15, 100))

    q = Booking.query
    status = request.args.get("status")
    if status:
        q = q.filter(Booking.status == parse_status(status).value)
    date_str = request.args.get("date")
    if date_str:
        q = q.filter(Booking.date == parse_date(date_str))
    user_id = request.args.get("user_id", type=int)
    if user_id is not None:
        q = q.filter(Booking.user_id == user_id)

    pagination = (
        q.order_by(Booking.date.desc(), Booking.time.desc())
        .paginate(page=page, per_page=per_page, error_out=False)
    )
    return jsonify(bookings=paginated(
        pagination, [b.to_dict(include_user=True) for b in pagination.items]
    )), 200


@admin_bp.get("/bookings/<int:booking_id>")
@require_roles(ADMIN)
def get_booking(booking_id: int):
    booking = get_lifecycle().get(booking_id)
    return jsonify(booking=booking.to_dict(include_user=True)), 200


@admin_bp.put("/bookings/<int:booking_id>/status")
@require_roles(ADMIN)
def update_status(booking_id: int):
    data = request.get_json(silent=True) or {}
    if data.get("status") is None:
        raise ValidationError("Validation failed", {"status": "Required"})
    status = parse_status(data["status"])

    booking = get_lifecycle().set_status(current_actor(), booking_id, status)
    return jsonify(message="Booking status updated successfully", booking=booking.to_dict()), 200


@admin_bp.get("/bookings/calendar")
@require_roles(ADMIN)
def calendar_view():
    start, end = _date_range(required=True)
    engine = get_engine()
    rows = (
        Booking.query
        .filter(Booking.date >= start, Booking.date <= end)
        .order_by(Booking.date.asc(), Booking.time.asc())
        .all()
    )
    return jsonify(events=[
        {
            "id": b.id,
            "title": f"{b.guests} guests - {b.user.name if b.user else 'unknown'}",
            "start": b.scheduled_at.isoformat(),
            "end": engine.window_end(b.date, b.time).isoformat(),
            "status": b.status,
        }
        for b in rows
    ]), 200


@admin_bp.get("/bookings/date/<date_str>")
@require_roles(ADMIN)
def bookings_by_date(date_str: str):
    day = parse_date(date_str)
    rows = Booking.query.filter(Booking.date == day).order_by(Booking.time.asc()).all()
    return jsonify(
        date=day.isoformat(),
        bookings=[b.to_dict(include_user=True) for b in rows],
        total=len(rows),
        total_guests=sum(b.guests for b in rows),
    ), 200


@admin_bp.get("/bookings/stats")
@require_roles(ADMIN)
def booking_stats():
    start, end = _date_range(required=False)
    rows = Booking.query.filter(Booking.date >= start, Booking.date <= end).all()

    by_status = {s: 0 for s in BookingStatus.values()}
    by_weekday = {name: 0 for name in WEEKDAYS}
    total_guests = 0
    for b in rows:
        by_status[b.status] = by_status.get(b.status, 0) + 1
        by_weekday[WEEKDAYS[b.date.weekday()]] += 1
        total_guests += b.guests

    total = len(rows)
    return jsonify(
        period={"start_date": start.isoformat(), "end_date": end.isoformat()},
        total_bookings=total,
        confirmed_bookings=by_status[BookingStatus.CONFIRMED.value],
        pending_bookings=by_status[BookingStatus.PENDING.value],
        cancelled_bookings=by_status[BookingStatus.CANCELLED.value],
        by_status=by_status,
        total_guests=total_guests,
        average_party_size=round(total_guests / total, 1) if total else 0,
        bookings_by_day_of_week=by_weekday,
    ), 200
