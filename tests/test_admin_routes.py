from datetime import timedelta


def _book(client, day, at="19:00", guests=4):
    resp = client.post("/bookings", json={"date": day.isoformat(), "time": at, "guests": guests})
    assert resp.status_code == 201
    return resp.get_json()["booking"]["id"]


def test_admin_routes_reject_regular_users(user_client):
    assert user_client.get("/admin/bookings").status_code == 403
    assert user_client.put("/admin/bookings/1/status", json={"status": "confirmed"}).status_code == 403


def test_status_update_notifies_owner(user_client, admin_client, future_day):
    booking_id = _book(user_client, future_day)

    resp = admin_client.put(f"/admin/bookings/{booking_id}/status", json={"status": "confirmed"})
    assert resp.status_code == 200
    assert resp.get_json()["booking"]["status"] == "confirmed"

    notes = user_client.get("/notifications").get_json()
    assert notes["unread_count"] == 1
    assert notes["notifications"][0]["message"] == "Your booking status has been updated to confirmed"
    assert notes["notifications"][0]["reference_id"] == booking_id


def test_owner_actions_notify_admins(user_client, admin_client, future_day):
    booking_id = _book(user_client, future_day)
    user_client.put(f"/bookings/{booking_id}", json={"guests": 5})
    user_client.delete(f"/bookings/{booking_id}")

    titles = [n["title"] for n in admin_client.get("/notifications").get_json()["notifications"]]
    assert sorted(titles) == ["Booking cancelled", "Booking updated", "New booking created"]


def test_status_update_validation(user_client, admin_client, future_day):
    booking_id = _book(user_client, future_day)

    resp = admin_client.put(f"/admin/bookings/{booking_id}/status", json={"status": "seated"})
    assert resp.status_code == 422
    resp = admin_client.put(f"/admin/bookings/{booking_id}/status", json={})
    assert resp.status_code == 422
    resp = admin_client.put("/admin/bookings/9999/status", json={"status": "confirmed"})
    assert resp.status_code == 404


def test_cancelled_booking_status_is_final(user_client, admin_client, future_day):
    booking_id = _book(user_client, future_day)
    admin_client.put(f"/admin/bookings/{booking_id}/status", json={"status": "cancelled"})

    resp = admin_client.put(f"/admin/bookings/{booking_id}/status", json={"status": "pending"})
    assert resp.status_code == 400
    assert resp.get_json()["kind"] == "illegal_state_transition"


def test_list_and_filter(user_client, admin_client, future_day):
    first = _book(user_client, future_day, "12:00")
    _book(user_client, future_day + timedelta(days=1), "13:00")
    admin_client.put(f"/admin/bookings/{first}/status", json={"status": "confirmed"})

    everything = admin_client.get("/admin/bookings").get_json()["bookings"]
    assert everything["total"] == 2
    assert everything["items"][0]["user"]["email"] == "guest@example.com"

    confirmed = admin_client.get("/admin/bookings?status=confirmed").get_json()["bookings"]
    assert [b["id"] for b in confirmed["items"]] == [first]

    by_date = admin_client.get(f"/admin/bookings?date={future_day.isoformat()}").get_json()["bookings"]
    assert [b["id"] for b in by_date["items"]] == [first]

    assert admin_client.get(f"/admin/bookings/{first}").get_json()["booking"]["status"] == "confirmed"


def test_calendar_events_span_the_seating(user_client, admin_client, future_day):
    _book(user_client, future_day, "21:00", 6)
    day = future_day.isoformat()

    resp = admin_client.get(f"/admin/bookings/calendar?start_date={day}&end_date={day}")
    events = resp.get_json()["events"]
    assert len(events) == 1
    assert events[0]["title"] == "6 guests - Guest One"
    assert events[0]["start"] == f"{day}T21:00:00"
    assert events[0]["end"] == f"{day}T22:30:00"

    assert admin_client.get("/admin/bookings/calendar").status_code == 422


def test_bookings_by_date_and_stats(user_client, admin_client, future_day):
    _book(user_client, future_day, "12:00", 4)
    _book(user_client, future_day, "18:00", 6)
    day = future_day.isoformat()

    data = admin_client.get(f"/admin/bookings/date/{day}").get_json()
    assert data["total"] == 2
    assert data["total_guests"] == 10
    assert [b["time"] for b in data["bookings"]] == ["12:00", "18:00"]

    stats = admin_client.get(f"/admin/bookings/stats?start_date={day}&end_date={day}").get_json()
    assert stats["total_bookings"] == 2
    assert stats["pending_bookings"] == 2
    assert stats["average_party_size"] == 5.0
    weekday = future_day.strftime("%A").lower()
    assert stats["bookings_by_day_of_week"][weekday] == 2


def test_dashboard(user_client, admin_client, future_day):
    _book(user_client, future_day)
    data = admin_client.get("/admin/dashboard").get_json()
    assert data["users"] == 2
    assert data["bookings"]["pending"] == 1
