from datetime import date, time, timedelta

from models import db
from models.booking import Booking


def _book(client, day, at="19:00", guests=4, **extra):
    body = {"date": day.isoformat(), "time": at, "guests": guests}
    body.update(extra)
    return client.post("/bookings", json=body)


def test_requires_login(app):
    client = app.test_client()
    resp = client.get("/bookings")
    assert resp.status_code == 401


def test_create_and_fetch_booking(user_client, future_day):
    resp = _book(user_client, future_day, special_requests="High chair")
    assert resp.status_code == 201
    booking = resp.get_json()["booking"]
    assert booking["status"] == "pending"
    assert booking["time"] == "19:00"
    assert booking["special_requests"] == "High chair"

    resp = user_client.get(f"/bookings/{booking['id']}")
    assert resp.status_code == 200
    assert resp.get_json()["booking"]["date"] == future_day.isoformat()


def test_create_validation(user_client, future_day):
    cases = [
        {"date": future_day.isoformat(), "time": "7pm", "guests": 2},
        {"date": future_day.isoformat(), "time": "24:00", "guests": 2},
        {"date": "2030/01/01", "time": "19:00", "guests": 2},
        {"date": (date.today() - timedelta(days=1)).isoformat(), "time": "19:00", "guests": 2},
        {"date": future_day.isoformat(), "time": "19:00", "guests": 0},
        {"date": future_day.isoformat(), "time": "19:00", "guests": 21},
        {"date": future_day.isoformat(), "time": "19:00", "guests": True},
        {"date": future_day.isoformat(), "time": "19:00", "guests": 2, "special_requests": "x" * 501},
        {"time": "19:00", "guests": 2},
    ]
    for body in cases:
        resp = user_client.post("/bookings", json=body)
        assert resp.status_code == 422, body
        assert resp.get_json()["kind"] == "validation_error"


def test_full_slot_is_rejected(user_client, future_day):
    assert _book(user_client, future_day, "10:00", 20).status_code == 201
    assert _book(user_client, future_day, "10:00", 20).status_code == 201
    resp = _book(user_client, future_day, "11:00", 11)
    assert resp.status_code == 400
    assert resp.get_json()["kind"] == "slot_unavailable"


def test_outside_opening_hours_is_rejected(user_client, future_day):
    assert _book(user_client, future_day, "09:30").get_json()["kind"] == "slot_unavailable"
    assert _book(user_client, future_day, "22:00").get_json()["kind"] == "slot_unavailable"


def test_my_bookings_only_lists_my_own(user_client, other_client, future_day):
    _book(user_client, future_day, "12:00")
    _book(user_client, future_day + timedelta(days=1), "13:00")
    _book(other_client, future_day, "14:00")

    data = user_client.get("/bookings").get_json()["bookings"]
    assert data["total"] == 2
    # newest date first
    assert [b["time"] for b in data["items"]] == ["13:00", "12:00"]


def test_cannot_see_or_touch_someone_elses_booking(user_client, other_client, future_day):
    booking_id = _book(user_client, future_day).get_json()["booking"]["id"]

    assert other_client.get(f"/bookings/{booking_id}").status_code == 404
    assert other_client.put(f"/bookings/{booking_id}", json={"guests": 2}).status_code == 404
    assert other_client.delete(f"/bookings/{booking_id}").status_code == 404


def test_update_pending_booking(user_client, future_day):
    booking_id = _book(user_client, future_day).get_json()["booking"]["id"]

    resp = user_client.put(f"/bookings/{booking_id}", json={"time": "20:30", "guests": 6})
    assert resp.status_code == 200
    booking = resp.get_json()["booking"]
    assert booking["time"] == "20:30"
    assert booking["guests"] == 6


def test_update_confirmed_booking_fails(app, user_client, admin_client, future_day):
    booking_id = _book(user_client, future_day).get_json()["booking"]["id"]
    admin_client.put(f"/admin/bookings/{booking_id}/status", json={"status": "confirmed"})

    resp = user_client.put(f"/bookings/{booking_id}", json={"time": "12:00"})
    assert resp.status_code == 400
    assert resp.get_json()["kind"] == "illegal_state_transition"


def test_cancel_restores_availability(user_client, future_day):
    booking_id = _book(user_client, future_day, "19:00", 20).get_json()["booking"]["id"]
    _book(user_client, future_day, "19:00", 20)
    check = {"date": future_day.isoformat(), "time": "19:30", "guests": 15}

    assert user_client.post("/bookings/check-availability", json=check).get_json()["available"] is False

    resp = user_client.delete(f"/bookings/{booking_id}")
    assert resp.status_code == 200
    assert resp.get_json()["booking"]["status"] == "cancelled"

    assert user_client.post("/bookings/check-availability", json=check).get_json()["available"] is True


def test_cancel_past_booking_fails(app, user_client, user_id):
    yesterday = date.today() - timedelta(days=1)
    with app.app_context():
        booking = Booking(user_id=user_id, date=yesterday, time=time(19, 0), guests=2, status="pending")
        db.session.add(booking)
        db.session.commit()
        booking_id = booking.id

    resp = user_client.delete(f"/bookings/{booking_id}")
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "Cannot cancel past bookings"


def test_available_slots(user_client, future_day):
    _book(user_client, future_day, "12:00", 20)
    _book(user_client, future_day, "12:00", 20)

    resp = user_client.get(f"/bookings/available-slots?date={future_day.isoformat()}&guests=15")
    assert resp.status_code == 200
    slots = resp.get_json()["time_slots"]
    assert len(slots) == 24
    assert slots[0] == {"time": "10:00", "available": True}
    assert slots[-1]["time"] == "21:30"
    closed = [s["time"] for s in slots if not s["available"]]
    assert closed == ["11:00", "11:30", "12:00", "12:30", "13:00"]


def test_available_slots_requires_params(user_client):
    resp = user_client.get("/bookings/available-slots")
    assert resp.status_code == 422


def test_trailing_newline_is_not_a_valid_time_or_date(user_client, future_day):
    bad_time = {"date": future_day.isoformat(), "time": "19:00\n", "guests": 2}
    resp = user_client.post("/bookings/check-availability", json=bad_time)
    assert resp.status_code == 422
    assert resp.get_json()["details"] == {"time": "Use HH:MM (24h)"}

    bad_date = {"date": future_day.isoformat() + "\n", "time": "19:00", "guests": 2}
    resp = user_client.post("/bookings", json=bad_date)
    assert resp.status_code == 422
    assert resp.get_json()["details"] == {"date": "Use YYYY-MM-DD"}


def test_my_bookings_rejects_unknown_status(user_client, future_day):
    _book(user_client, future_day)

    resp = user_client.get("/bookings?status=seated")
    assert resp.status_code == 422
    assert resp.get_json()["kind"] == "validation_error"

    pending = user_client.get("/bookings?status=pending").get_json()["bookings"]
    assert pending["total"] == 1
