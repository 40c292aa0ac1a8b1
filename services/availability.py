from dataclasses import dataclass
from datetime import datetime, timedelta, date as date_type, time as time_type

from services.restaurant import RestaurantConfig
from services.store import BookingStore


@dataclass(frozen=True)
class SlotAvailability:
    time: time_type
    available: bool

    def to_dict(self):
        return {"time": self.time.strftime("%H:%M"), "available": self.available}


class AvailabilityEngine:
    """
    Answers whether a party can be seated at a given date/time.

    Each booking occupies the half-open window [time, time + duration).
    Capacity counts guests across overlapping non-cancelled bookings of
    the same date. The answer is a point-in-time read; callers that act
    on it must hold the date lock (see services.locks).
    """

    def __init__(self, config: RestaurantConfig = None, store=None):
        self.config = config or RestaurantConfig()
        self.store = store or BookingStore()

    @property
    def duration(self) -> timedelta:
        return timedelta(minutes=self.config.booking_duration_minutes)

    def window(self, day: date_type, start: time_type):
        begin = datetime.combine(day, start)
        return begin, begin + self.duration

    def window_end(self, day: date_type, start: time_type) -> datetime:
        return self.window(day, start)[1]

    def within_hours(self, at: time_type) -> bool:
        # A seating may not start at closing time
        return self.config.opening_time <= at < self.config.closing_time

    def _load(self, rows, day, at) -> int:
        start, end = self.window(day, at)
        load = 0
        for other_time, other_guests in rows:
            other_start, other_end = self.window(day, other_time)
            if other_start < end and start < other_end:
                load += other_guests
        return load

    def existing_load(self, day, at, exclude_booking_id=None, for_update=False) -> int:
        rows = self.store.active_on(day, exclude_booking_id=exclude_booking_id, for_update=for_update)
        return self._load(rows, day, at)

    def is_slot_available(self, day, at, guests, exclude_booking_id=None, for_update=False) -> bool:
        if not self.within_hours(at):
            return False
        load = self.existing_load(day, at, exclude_booking_id=exclude_booking_id, for_update=for_update)
        return load + guests <= self.config.max_capacity

    def slot_times(self):
        step = timedelta(minutes=self.config.slot_granularity_minutes)
        anchor = date_type(2000, 1, 1)
        current = datetime.combine(anchor, self.config.opening_time)
        closing = datetime.combine(anchor, self.config.closing_time)
        while current < closing:
            yield current.time()
            current += step

    def list_slots(self, day, guests):
        # One read for the whole day; each slot gets the same answer
        # is_slot_available would give.
        rows = self.store.active_on(day)
        return [
            SlotAvailability(
                time=at,
                available=self._load(rows, day, at) + guests <= self.config.max_capacity,
            )
            for at in self.slot_times()
        ]
