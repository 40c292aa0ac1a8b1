class BookingError(Exception):
    """Base for every failure a booking operation reports to its caller."""

    kind = "booking_error"
    status_code = 400

    def __init__(self, message: str, details=None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self):
        out = {"error": self.message, "kind": self.kind}
        if self.details:
            out["details"] = self.details
        return out


class ValidationError(BookingError):
    kind = "validation_error"
    status_code = 422


class SlotUnavailableError(BookingError):
    kind = "slot_unavailable"
    status_code = 400


class NotFoundError(BookingError):
    kind = "not_found"
    status_code = 404


class IllegalStateTransitionError(BookingError):
    kind = "illegal_state_transition"
    status_code = 400


class AuthorizationError(BookingError):
    kind = "forbidden"
    status_code = 403


class StorageError(BookingError):
    kind = "storage_error"
    status_code = 500
