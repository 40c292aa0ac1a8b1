from dataclasses import dataclass
from datetime import time


def _parse_clock(value) -> time:
    if isinstance(value, time):
        return value
    hours, minutes = str(value).split(":")
    return time(int(hours), int(minutes))


@dataclass(frozen=True)
class RestaurantConfig:
    opening_time: time = time(10, 0)
    closing_time: time = time(22, 0)
    booking_duration_minutes: int = 90
    max_capacity: int = 50
    slot_granularity_minutes: int = 30
    max_guests: int = 20

    def __post_init__(self):
        if self.closing_time <= self.opening_time:
            raise ValueError("closing_time must be after opening_time")
        if self.booking_duration_minutes <= 0 or self.slot_granularity_minutes <= 0:
            raise ValueError("durations must be positive")
        if self.max_capacity <= 0 or self.max_guests <= 0:
            raise ValueError("capacities must be positive")

    @classmethod
    def from_config(cls, config) -> "RestaurantConfig":
        """Build from a Flask config mapping, falling back to the defaults."""
        defaults = cls()
        return cls(
            opening_time=_parse_clock(config.get("OPENING_TIME", defaults.opening_time)),
            closing_time=_parse_clock(config.get("CLOSING_TIME", defaults.closing_time)),
            booking_duration_minutes=int(config.get("BOOKING_DURATION_MINUTES", defaults.booking_duration_minutes)),
            max_capacity=int(config.get("MAX_CAPACITY", defaults.max_capacity)),
            slot_granularity_minutes=int(config.get("SLOT_GRANULARITY_MINUTES", defaults.slot_granularity_minutes)),
            max_guests=int(config.get("MAX_GUESTS_PER_BOOKING", defaults.max_guests)),
        )
