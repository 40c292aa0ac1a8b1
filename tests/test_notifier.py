from types import SimpleNamespace

import smtplib

from models.notification import Notification
from services.notifier import Notifier
from utils.emailer import send_email


class FakeSMTP:
    sent = []

    def __init__(self, host, port, timeout=None):
        self.host = host

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self):
        pass

    def login(self, username, password):
        pass

    def send_message(self, msg):
        FakeSMTP.sent.append(msg)


def test_send_email_without_smtp_config(ctx):
    assert send_email("a@example.com", "Hi", "Body") == (False, "Email not configured")


def test_notify_stores_and_emails(ctx, user_id, monkeypatch):
    FakeSMTP.sent = []
    monkeypatch.setattr(smtplib, "SMTP", FakeSMTP)
    ctx.config.update(SMTP_HOST="smtp.test", SMTP_FROM_EMAIL="bookings@example.com")

    assert Notifier().notify(user_id, "Booking status updated", "Confirmed", booking_id=42)

    row = Notification.query.filter_by(user_id=user_id).one()
    assert (row.title, row.reference_id, row.is_read) == ("Booking status updated", 42, False)
    assert len(FakeSMTP.sent) == 1
    assert FakeSMTP.sent[0]["To"] == "guest@example.com"
    assert FakeSMTP.sent[0]["Subject"] == "Booking status updated"


def test_smtp_errors_are_reported_not_raised(ctx, monkeypatch):
    def refuse(host, port, timeout=None):
        raise ConnectionRefusedError("no server")

    monkeypatch.setattr(smtplib, "SMTP", refuse)
    ctx.config.update(SMTP_HOST="smtp.test", SMTP_FROM_EMAIL="bookings@example.com")

    ok, error = send_email("a@example.com", "Hi", "Body")
    assert ok is False
    assert "no server" in error


def test_notify_admins_without_admins(ctx, user_id):
    booking = SimpleNamespace(id=7)
    assert Notifier().notify_admins("New booking created", "msg", booking) == 0


def test_notify_admins_fans_out(ctx, make_user):
    first = make_user("boss1@example.com", admin=True)
    second = make_user("boss2@example.com", admin=True)

    sent = Notifier(mailer=lambda *a: (True, None)).notify_admins("Booking updated", "msg", SimpleNamespace(id=3))

    assert sent == 2
    assert {n.user_id for n in Notification.query.all()} == {first, second}
