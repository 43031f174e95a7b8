import pytest

from salon_backend.errors import PastDateError, ValidationError
from salon_backend.services import DEFAULT_DURATION, SLOT_CATALOG
from salon_backend.slots import SlotQueryService

from conftest import FIXED_TODAY, make_request


@pytest.fixture
def slot_service(ledger):
    return SlotQueryService(ledger, today=lambda: FIXED_TODAY)


def test_empty_day_returns_full_catalog(slot_service):
    result = slot_service.get_available_slots("2025-06-01")
    assert result.slots == list(SLOT_CATALOG)
    assert result.date == "2025-06-01"
    assert result.service is None
    assert result.duration_mins is None


def test_booked_times_are_excluded(ledger, slot_service):
    ledger.create_booking(make_request(time="10:00"))
    ledger.create_booking(make_request(time="15:30"))
    ledger.create_booking(make_request(date="2025-06-02", time="11:00"))

    slots = slot_service.get_available_slots("2025-06-01").slots

    assert "10:00" not in slots
    assert "15:30" not in slots
    assert "11:00" in slots
    assert slots == [t for t in SLOT_CATALOG if t not in ("10:00", "15:30")]


def test_fully_booked_day_is_empty(ledger, slot_service):
    for t in SLOT_CATALOG:
        ledger.create_booking(make_request(time=t))
    assert slot_service.get_available_slots("2025-06-01").slots == []


def test_today_is_bookable(slot_service):
    assert slot_service.get_available_slots(FIXED_TODAY.isoformat()).slots == list(SLOT_CATALOG)


def test_past_date_rejected(slot_service):
    with pytest.raises(PastDateError):
        slot_service.get_available_slots("2024-12-31")


def test_past_date_with_real_clock(ledger):
    with pytest.raises(PastDateError):
        SlotQueryService(ledger).get_available_slots("2000-01-01")


@pytest.mark.parametrize("value", [None, "", "  ", "2025/06/01", "tomorrow", "2025-02-29"])
def test_bad_date_rejected(slot_service, value):
    with pytest.raises(ValidationError):
        slot_service.get_available_slots(value)


def test_known_service_reports_duration(slot_service):
    result = slot_service.get_available_slots("2025-06-01", "acrylic")
    assert result.service == "acrylic"
    assert result.duration_mins == 90
    assert result.slots == list(SLOT_CATALOG)


def test_unknown_service_falls_back_to_default(slot_service):
    result = slot_service.get_available_slots("2025-06-01", "mystery")
    assert result.duration_mins == DEFAULT_DURATION


def test_catalog_is_ordered_and_unique():
    assert list(SLOT_CATALOG) == sorted(set(SLOT_CATALOG))
    assert "09:15" not in SLOT_CATALOG
