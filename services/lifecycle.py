from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from models import db
from models.booking import Booking, BookingStatus, TERMINAL_STATUSES
from services.errors import (
    BookingError,
    NotFoundError,
    SlotUnavailableError,
    IllegalStateTransitionError,
    AuthorizationError,
    StorageError,
)
from services.validation import parse_status
from utils.audit import log_event


@dataclass(frozen=True)
class Actor:
    """The authenticated caller, as supplied by the identity layer."""
    user_id: int
    role: str = "user"  # user | admin

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


class BookingLifecycle:
    """
    Owns every status change of a booking.

    Owners create, edit (while pending) and cancel (before the start time).
    Admins may move a non-terminal booking to any status without an
    availability re-check. Capacity checks and the write that depends on
    them run under the date lock; notifications go out after commit.
    """

    def __init__(self, engine, locks, notifier, clock=datetime.now):
        self.engine = engine
        self.locks = locks
        self.notifier = notifier
        self.clock = clock

    # ---------- reads ----------
    def get(self, booking_id: int) -> Booking:
        booking = db.session.get(Booking, booking_id)
        if booking is None:
            raise NotFoundError("Booking not found")
        return booking

    def get_for_owner(self, booking_id: int, user_id: int) -> Booking:
        booking = db.session.get(Booking, booking_id)
        # Someone else's booking looks exactly like a missing one
        if booking is None or booking.user_id != user_id:
            raise NotFoundError("Booking not found")
        return booking

    # ---------- owner transitions ----------
    def create(self, actor: Actor, day, at, guests, special_requests=None) -> Booking:
        try:
            with self._atomic("create", day):
                if not self.engine.is_slot_available(day, at, guests, for_update=True):
                    raise SlotUnavailableError("The selected time slot is not available")
                booking = Booking(
                    user_id=actor.user_id,
                    date=day,
                    time=at,
                    guests=guests,
                    special_requests=special_requests,
                    status=BookingStatus.PENDING.value,
                )
                db.session.add(booking)
                db.session.commit()
        except SlotUnavailableError:
            log_event(
                "BOOKING_FAIL_UNAVAILABLE",
                user_id=actor.user_id,
                entity="booking",
                metadata={"date": day, "time": at, "guests": guests},
            )
            raise

        current_app.logger.info("Booking %s created for %s %s x%s", booking.id, day, at, guests)
        log_event("BOOKING_CREATE", user_id=actor.user_id, entity="booking", entity_id=booking.id)
        self.notifier.notify_admins(
            "New booking created",
            "A new booking has been created and requires your attention.",
            booking,
        )
        return booking

    def update(self, actor: Actor, booking_id: int, changes: dict) -> Booking:
        booking = self.get_for_owner(booking_id, actor.user_id)
        self._require_pending(booking, "Only pending bookings can be updated")

        new_date = changes.get("date", booking.date)
        new_time = changes.get("time", booking.time)
        new_guests = changes.get("guests", booking.guests)
        moved = (new_date, new_time, new_guests) != (booking.date, booking.time, booking.guests)
        if not moved and changes.get("special_requests", booking.special_requests) == booking.special_requests:
            return booking

        # Old date too, so a concurrent cancel or status change on this booking waits
        with self._atomic("update", booking.date, new_date):
            db.session.refresh(booking)
            self._require_pending(booking, "Only pending bookings can be updated")
            if moved and not self.engine.is_slot_available(
                new_date, new_time, new_guests, exclude_booking_id=booking.id, for_update=True
            ):
                raise SlotUnavailableError("The selected time slot is not available")

            booking.date = new_date
            booking.time = new_time
            booking.guests = new_guests
            if "special_requests" in changes:
                booking.special_requests = changes["special_requests"]
            db.session.commit()

        log_event(
            "BOOKING_UPDATE",
            user_id=actor.user_id,
            entity="booking",
            entity_id=booking.id,
            metadata={"moved": moved},
        )
        self.notifier.notify_admins(
            "Booking updated",
            "A booking has been updated and requires your attention.",
            booking,
        )
        return booking

    def cancel(self, actor: Actor, booking_id: int) -> Booking:
        booking = self.get_for_owner(booking_id, actor.user_id)

        with self._atomic("cancel", booking.date):
            db.session.refresh(booking)
            if booking.scheduled_at <= self.clock():
                raise IllegalStateTransitionError("Cannot cancel past bookings")
            self._require_pending(booking, "Only pending bookings can be cancelled")
            booking.status = BookingStatus.CANCELLED.value
            db.session.commit()

        log_event("BOOKING_CANCEL", user_id=actor.user_id, entity="booking", entity_id=booking.id)
        self.notifier.notify_admins(
            "Booking cancelled",
            "A booking has been cancelled by the user.",
            booking,
        )
        return booking

    # ---------- admin transitions ----------
    def set_status(self, actor: Actor, booking_id: int, status) -> Booking:
        if not actor.is_admin:
            raise AuthorizationError("Admin privileges required")
        if not isinstance(status, BookingStatus):
            status = parse_status(status)

        booking = self.get(booking_id)
        with self._atomic("set_status", booking.date):
            db.session.refresh(booking)
            old_status = booking.status_enum
            if old_status in TERMINAL_STATUSES:
                raise IllegalStateTransitionError(
                    f"Booking is {old_status.value}; its status can no longer change"
                )
            booking.status = status.value
            db.session.commit()

        log_event(
            "BOOKING_STATUS_UPDATE",
            user_id=actor.user_id,
            entity="booking",
            entity_id=booking.id,
            metadata={"from": old_status.value, "to": status.value},
        )
        self.notifier.notify(
            booking.user_id,
            "Booking status updated",
            f"Your booking status has been updated to {status.value}",
            booking.id,
        )
        return booking

    # ---------- helpers ----------
    @staticmethod
    def _require_pending(booking: Booking, message: str):
        if booking.status != BookingStatus.PENDING.value:
            raise IllegalStateTransitionError(message)

    @contextmanager
    def _atomic(self, action: str, *days):
        with self.locks.hold(*days):
            try:
                yield
            except BookingError:
                db.session.rollback()
                raise
            except SQLAlchemyError as exc:
                db.session.rollback()
                current_app.logger.exception("Storage failure during booking %s", action)
                raise StorageError("Could not save booking") from exc
