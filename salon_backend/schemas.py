from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BookingRequest(CamelModel):
    """Body of POST /api/appointments. Presence is checked by the ledger, not here."""
    full_name: Optional[str] = None
    client_email: Optional[str] = None
    contact_detail: Optional[str] = None
    service: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None
    notes: Optional[str] = None
    # honeypot, real clients leave it empty
    website: Optional[str] = None


class Booking(CamelModel):
    id: int
    full_name: str
    client_email: str
    contact_detail: str
    service: str
    date: str
    time: str
    notes: str = ""
    created_at: str


class AvailableSlots(CamelModel):
    date: str
    slots: List[str]
    service: Optional[str] = None
    duration_mins: Optional[int] = None
