from flask import current_app

from services.availability import AvailabilityEngine, SlotAvailability
from services.errors import (
    BookingError,
    ValidationError,
    SlotUnavailableError,
    NotFoundError,
    IllegalStateTransitionError,
    AuthorizationError,
    StorageError,
)
from services.lifecycle import Actor, BookingLifecycle
from services.locks import DateLockRegistry
from services.notifier import Notifier
from services.restaurant import RestaurantConfig


def init_app(app):
    app.extensions["booking_locks"] = DateLockRegistry()
    app.extensions["restaurant_config"] = RestaurantConfig.from_config(app.config)


def get_engine() -> AvailabilityEngine:
    return AvailabilityEngine(current_app.extensions["restaurant_config"])


def get_lifecycle() -> BookingLifecycle:
    return BookingLifecycle(
        engine=get_engine(),
        locks=current_app.extensions["booking_locks"],
        notifier=Notifier(),
    )
