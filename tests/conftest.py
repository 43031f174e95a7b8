from datetime import date

import pytest

from salon_backend.ledger import JsonFileLedger, SqlLedger
from salon_backend.schemas import BookingRequest

FIXED_TODAY = date(2025, 1, 1)


def make_request(**overrides) -> BookingRequest:
    fields = {
        "fullName": "A",
        "clientEmail": "a@x.com",
        "contactDetail": "555",
        "service": "gel",
        "date": "2025-06-01",
        "time": "11:00",
    }
    fields.update(overrides)
    return BookingRequest(**fields)


@pytest.fixture
def bookings_file(tmp_path):
    return tmp_path / "data" / "bookings.json"


@pytest.fixture
def json_ledger(bookings_file):
    return JsonFileLedger(str(bookings_file))


@pytest.fixture
def sql_ledger(tmp_path):
    ledger = SqlLedger(f"sqlite:///{tmp_path / 'bookings.db'}")
    yield ledger
    ledger.dispose()


@pytest.fixture(params=["json", "sql"])
def ledger(request):
    return request.getfixturevalue(f"{request.param}_ledger")
