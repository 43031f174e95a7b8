from datetime import date
from typing import Callable, Optional

from salon_backend.errors import PastDateError
from salon_backend.ledger import BookingLedger, parse_date
from salon_backend.schemas import AvailableSlots
from salon_backend.services import SLOT_CATALOG, get_service_duration


class SlotQueryService:
    """Reports which catalog slots are still free on a given day."""

    def __init__(self, ledger: BookingLedger, today: Callable[[], date] = date.today):
        self.ledger = ledger
        self.today = today

    def get_available_slots(self, day: Optional[str], service: Optional[str] = None) -> AvailableSlots:
        """
        Free slots for ``day`` in catalog order.

        ``service`` only adds its duration to the answer, it does not filter.
        Raises ValidationError for a missing or malformed date and
        PastDateError for dates before today.
        """
        requested = parse_date(day)
        if requested < self.today():
            raise PastDateError(f"{requested.isoformat()} is in the past")

        day_str = requested.isoformat()
        booked = {b.time for b in self.ledger.list_bookings() if b.date == day_str}
        result = AvailableSlots(
            date=day_str,
            slots=[t for t in SLOT_CATALOG if t not in booked],
        )

        service = (service or "").strip()
        if service:
            result.service = service
            result.duration_mins = get_service_duration(service)
        return result
