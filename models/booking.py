from datetime import datetime
from enum import Enum

from models.db import db


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    REJECTED = "rejected"

    @classmethod
    def values(cls):
        return [s.value for s in cls]


# No further transitions are accepted out of these.
TERMINAL_STATUSES = frozenset({
    BookingStatus.CANCELLED,
    BookingStatus.REJECTED,
    BookingStatus.COMPLETED,
})


class Booking(db.Model):
    __tablename__ = "bookings"

    id = db.Column(db.Integer, primary_key=True)

    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)

    # Local restaurant date/time, stored as given
    date = db.Column(db.Date, nullable=False)
    time = db.Column(db.Time, nullable=False)
    guests = db.Column(db.Integer, nullable=False)
    special_requests = db.Column(db.String(500), nullable=True)

    status = db.Column(db.String(20), nullable=False, default=BookingStatus.PENDING.value)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    user = db.relationship("User", back_populates="bookings")

    __table_args__ = (
        db.Index("ix_bookings_date_status", "date", "status"),
        db.CheckConstraint("guests > 0", name="ck_booking_guests_positive"),
        db.CheckConstraint(
            "status IN ('pending', 'confirmed', 'completed', 'cancelled', 'rejected')",
            name="ck_booking_status",
        ),
    )

    @property
    def status_enum(self) -> BookingStatus:
        return BookingStatus(self.status)

    @property
    def scheduled_at(self) -> datetime:
        return datetime.combine(self.date, self.time)

    def to_dict(self, include_user=False):
        out = {
            "id": self.id,
            "user_id": self.user_id,
            "date": self.date.isoformat(),
            "time": self.time.strftime("%H:%M"),
            "guests": self.guests,
            "special_requests": self.special_requests,
            "status": self.status,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
        if include_user and self.user is not None:
            out["user"] = {"id": self.user.id, "name": self.user.name, "email": self.user.email}
        return out

    def __repr__(self):
        return f"<Booking {self.id}: {self.date} {self.time} x{self.guests} - {self.status}>"
