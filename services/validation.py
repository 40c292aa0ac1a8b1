import re
from datetime import date, datetime

from models.booking import BookingStatus
from services.errors import ValidationError

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_TIME_RE = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")

SPECIAL_REQUESTS_MAX_LENGTH = 500


def parse_date(value, field="date", not_before=None):
    if not isinstance(value, str) or not _DATE_RE.fullmatch(value):
        raise ValidationError("Validation failed", {field: "Use YYYY-MM-DD"})
    try:
        day = datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError("Validation failed", {field: "Not a calendar date"})
    if not_before is not None and day < not_before:
        raise ValidationError("Validation failed", {field: "Must be today or later"})
    return day


def parse_time(value, field="time"):
    if not isinstance(value, str):
        raise ValidationError("Validation failed", {field: "Use HH:MM (24h)"})
    m = _TIME_RE.fullmatch(value)
    if not m:
        raise ValidationError("Validation failed", {field: "Use HH:MM (24h)"})
    return datetime.strptime(m.group(0), "%H:%M").time()


def parse_guests(value, max_guests=20, field="guests"):
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool):
        raise ValidationError("Validation failed", {field: "Must be an integer"})
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())
    if not isinstance(value, int):
        raise ValidationError("Validation failed", {field: "Must be an integer"})
    if value < 1 or value > max_guests:
        raise ValidationError("Validation failed", {field: f"Must be between 1 and {max_guests}"})
    return value


def parse_special_requests(value, field="special_requests"):
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError("Validation failed", {field: "Must be a string"})
    value = value.strip()
    if len(value) > SPECIAL_REQUESTS_MAX_LENGTH:
        raise ValidationError(
            "Validation failed",
            {field: f"At most {SPECIAL_REQUESTS_MAX_LENGTH} characters"},
        )
    return value or None


def parse_status(value, field="status"):
    try:
        return BookingStatus(value)
    except ValueError:
        raise ValidationError(
            "Validation failed",
            {field: "Must be one of " + ", ".join(BookingStatus.values())},
        )


def parse_booking_payload(data, partial=False, today=None, max_guests=20):
    """
    Validate a create/update body. With ``partial`` only the keys that are
    present are parsed; otherwise date, time and guests are required.
    """
    if not isinstance(data, dict):
        raise ValidationError("Validation failed", {"body": "JSON object required"})
    today = today or date.today()

    if not partial:
        missing = {k: "Required" for k in ("date", "time", "guests") if data.get(k) is None}
        if missing:
            raise ValidationError("Validation failed", missing)

    out = {}
    if "date" in data:
        out["date"] = parse_date(data["date"], not_before=today)
    if "time" in data:
        out["time"] = parse_time(data["time"])
    if "guests" in data:
        out["guests"] = parse_guests(data["guests"], max_guests=max_guests)
    if "special_requests" in data:
        out["special_requests"] = parse_special_requests(data["special_requests"])
    return out
