from datetime import date, timedelta

import pytest

from app import create_app
from config import TestConfig
from models import db
from models.user import User, Role
from security.password import hash_password
from utils.roles import USER, ADMIN

PASSWORD = "s3cretpass"


@pytest.fixture
def app(tmp_path):
    # File-backed SQLite so threads get their own connections
    class _Config(TestConfig):
        SQLALCHEMY_DATABASE_URI = "sqlite:///" + str(tmp_path / "tablebook-test.db")

    app = create_app(_Config)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def ctx(app):
    with app.app_context():
        yield app


@pytest.fixture
def make_user(app):
    def _make(email, admin=False, name="Test User"):
        with app.app_context():
            user = User(email=email, password_hash=hash_password(PASSWORD, rounds=4), name=name)
            names = [USER, ADMIN] if admin else [USER]
            user.roles = Role.query.filter(Role.name.in_(names)).all()
            db.session.add(user)
            db.session.commit()
            return user.id
    return _make


def _logged_in_client(app, email):
    client = app.test_client()
    resp = client.post("/auth/login", json={"email": email, "password": PASSWORD})
    assert resp.status_code == 200, resp.get_json()
    return client


@pytest.fixture
def user_id(make_user):
    return make_user("guest@example.com", name="Guest One")


@pytest.fixture
def admin_id(make_user):
    return make_user("admin@example.com", admin=True, name="Admin")


@pytest.fixture
def user_client(app, user_id):
    return _logged_in_client(app, "guest@example.com")


@pytest.fixture
def admin_client(app, admin_id):
    return _logged_in_client(app, "admin@example.com")


@pytest.fixture
def other_client(app, make_user):
    make_user("other@example.com", name="Other Guest")
    return _logged_in_client(app, "other@example.com")


@pytest.fixture
def future_day():
    return date.today() + timedelta(days=14)


class RecordingNotifier:
    def __init__(self):
        self.events = []

    def notify(self, recipient_user_id, title, message, booking_id=None, type="booking"):
        self.events.append(("user", recipient_user_id, title, booking_id))
        return True

    def notify_admins(self, title, message, booking):
        self.events.append(("admins", None, title, booking.id))
        return 1


@pytest.fixture
def notifier():
    return RecordingNotifier()
