"""
Booking errors.

Raised by the slot query service and the ledgers, translated into
``{"error": ..., "code": ...}`` responses by the handler in main.py.
"""


class BookingError(Exception):
    """Base exception for all booking errors."""
    code = "booking_error"
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.message, "code": self.code}


class ValidationError(BookingError):
    """Missing or malformed input. Nothing was changed."""
    code = "validation_error"


class MissingFieldError(ValidationError):
    """A required booking field is absent or blank."""
    code = "missing_field"

    def __init__(self, field: str):
        super().__init__(f"{field} is required")
        self.field = field


class PastDateError(BookingError):
    """Requested date lies before today."""
    code = "past_date"


class InvalidSlotError(BookingError):
    """Requested time is malformed or not in the slot catalog."""
    code = "invalid_slot"


class SlotConflictError(BookingError):
    """The (date, time) slot already holds a booking."""
    code = "slot_conflict"
    status_code = 409

    def __init__(self, message: str = "slot already booked"):
        super().__init__(message)


class PersistenceError(BookingError):
    """The ledger could not be written; the booking was not recorded."""
    code = "persistence_error"
    status_code = 500
