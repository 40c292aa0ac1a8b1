from models import db
from models.booking import Booking, BookingStatus


class BookingStore:
    """Read side of the bookings table used by the availability checks."""

    def active_on(self, day, exclude_booking_id=None, for_update=False):
        """Return (time, guests) rows of non-cancelled bookings on ``day``."""
        q = (
            db.session.query(Booking.id, Booking.time, Booking.guests)
            .filter(Booking.date == day, Booking.status != BookingStatus.CANCELLED.value)
        )
        if exclude_booking_id is not None:
            q = q.filter(Booking.id != exclude_booking_id)
        if for_update:
            # no-op on SQLite; row locks on Postgres/MySQL
            q = q.with_for_update()
        return [(row.time, row.guests) for row in q.all()]
