"""
Booking ledger: the durable collection of bookings.

Public API:
  BookingLedger.create_booking(request)
  BookingLedger.list_bookings()
  build_ledger(settings)

Two storages share the same validation and id assignment:
  JsonFileLedger  one JSON array on disk, rewritten on every booking
  SqlLedger       SQLAlchemy table with a unique (date, time) constraint
"""
import json
import os
import re
import stat
import tempfile
import threading
import time as time_mod
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import ValidationError as SchemaError
from sqlalchemy import create_engine, func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from salon_backend.errors import (
    InvalidSlotError,
    MissingFieldError,
    PersistenceError,
    SlotConflictError,
    ValidationError,
)
from salon_backend.logger import logger
from salon_backend.models import Base, BookingRow
from salon_backend.schemas import Booking, BookingRequest
from salon_backend.services import SLOT_CATALOG

REQUIRED_FIELDS = (
    ("full_name", "fullName"),
    ("client_email", "clientEmail"),
    ("contact_detail", "contactDetail"),
    ("service", "service"),
    ("date", "date"),
    ("time", "time"),
)

TIME_RE = re.compile(r"^\d{2}:\d{2}$")


def parse_date(value: Optional[str]):
    """Parse YYYY-MM-DD into a date, raising ValidationError."""
    if not value or not value.strip():
        raise ValidationError("date is required (YYYY-MM-DD)")
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"invalid date '{value}', expected YYYY-MM-DD")


def validate_request(request: BookingRequest) -> dict:
    """Return trimmed booking fields or raise the first validation error."""
    fields = {}
    for attr, wire_name in REQUIRED_FIELDS:
        value = (getattr(request, attr) or "").strip()
        if not value:
            raise MissingFieldError(wire_name)
        fields[attr] = value

    if request.website and request.website.strip():
        raise ValidationError("spam check failed")

    fields["date"] = parse_date(fields["date"]).isoformat()

    if not TIME_RE.match(fields["time"]):
        raise InvalidSlotError("time must be in HH:MM (e.g. 15:00)")
    if fields["time"] not in SLOT_CATALOG:
        raise InvalidSlotError(f"time {fields['time']} is not a valid slot")

    fields["notes"] = (request.notes or "").strip()
    return fields


class BookingLedger(ABC):
    """
    Owns the bookings and the writer lock.

    create_booking runs validation outside the lock, then the conflict check,
    the append and the persist step together under it.
    """

    def __init__(self):
        self._lock = threading.Lock()

    @abstractmethod
    def list_bookings(self) -> List[Booking]:
        ...

    def create_booking(self, request: BookingRequest) -> Booking:
        fields = validate_request(request)
        with self._lock:
            booking = Booking(
                id=self._next_id(),
                created_at=datetime.now(timezone.utc).isoformat(timespec="milliseconds"),
                **fields
            )
            self._insert(booking)
        logger.info(f"Booked {booking.date} {booking.time} for {booking.full_name} (id {booking.id})")
        return booking

    @abstractmethod
    def _last_id(self) -> int:
        ...

    @abstractmethod
    def _insert(self, booking: Booking):
        """Conflict check and write. Called with the writer lock held."""

    def _next_id(self) -> int:
        # creation timestamp in ms, kept strictly increasing
        return max(int(time_mod.time() * 1000), self._last_id() + 1)


class JsonFileLedger(BookingLedger):
    def __init__(self, path: str):
        super().__init__()
        self.path = os.path.abspath(path)
        self._bookings: Optional[List[Booking]] = None
        self._load_lock = threading.Lock()

    def _load(self) -> List[Booking]:
        if self._bookings is not None:
            return self._bookings
        with self._load_lock:
            if self._bookings is None:
                self._bookings = self._read_file()
        return self._bookings

    def _read_file(self) -> List[Booking]:
        """
        Missing or blank file means no bookings yet. Anything else that does
        not parse raises PersistenceError and the ledger stays unloaded, so it
        is never rewritten from a partial view.
        """
        if not os.path.exists(self.path):
            return []
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                content = f.read()
        except OSError as e:
            logger.error(f"Failed to read bookings from {self.path}: {e}")
            raise PersistenceError("Failed to read bookings")

        if not content.strip():
            return []

        try:
            raw = json.loads(content)
        except json.JSONDecodeError as e:
            logger.error(f"{self.path} is not valid JSON: {e}")
            raise PersistenceError("Bookings file is corrupted")

        if not isinstance(raw, list):
            logger.error(f"{self.path} does not hold a JSON array")
            raise PersistenceError("Bookings file is corrupted")

        bookings = []
        for index, item in enumerate(raw):
            try:
                bookings.append(Booking.model_validate(item))
            except SchemaError as e:
                logger.error(f"Malformed booking record #{index} in {self.path}: {e}")
                raise PersistenceError("Bookings file is corrupted")
        logger.info(f"Loaded {len(bookings)} bookings from {self.path}")
        return bookings

    def _file_mode(self) -> int:
        try:
            return stat.S_IMODE(os.stat(self.path).st_mode)
        except FileNotFoundError:
            return 0o644

    def _write_file(self, bookings: List[Booking]):
        data = [b.model_dump(by_alias=True) for b in bookings]
        folder = os.path.dirname(self.path)
        tmp_name = None
        try:
            os.makedirs(folder, exist_ok=True)
            # Atomic write
            with tempfile.NamedTemporaryFile("w", delete=False, encoding="utf-8", dir=folder, suffix=".tmp") as tf:
                tmp_name = tf.name
                json.dump(data, tf, ensure_ascii=False, indent=2)
            # temp files are created 0600
            os.chmod(tmp_name, self._file_mode())
            os.replace(tmp_name, self.path)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                os.remove(tmp_name)
            logger.error(f"Failed to save bookings to {self.path}: {e}")
            raise PersistenceError("Failed to save booking")

    def list_bookings(self) -> List[Booking]:
        return list(self._load())

    def _last_id(self) -> int:
        return max((b.id for b in self._load()), default=0)

    def _insert(self, booking: Booking):
        bookings = self._load()
        if any(b.date == booking.date and b.time == booking.time for b in bookings):
            raise SlotConflictError()

        # readers only see the booking once it is on disk
        self._write_file(bookings + [booking])
        bookings.append(booking)


class SqlLedger(BookingLedger):
    def __init__(self, database_url: str):
        super().__init__()
        connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
        self.engine = create_engine(database_url, connect_args=connect_args)
        self.SessionLocal = sessionmaker(bind=self.engine)
        Base.metadata.create_all(self.engine)

    @staticmethod
    def _to_booking(row: BookingRow) -> Booking:
        return Booking(
            id=row.id,
            full_name=row.full_name,
            client_email=row.client_email,
            contact_detail=row.contact_detail,
            service=row.service,
            date=row.date,
            time=row.time,
            notes=row.notes or "",
            created_at=row.created_at,
        )

    def list_bookings(self) -> List[Booking]:
        db = self.SessionLocal()
        try:
            rows = db.query(BookingRow).order_by(BookingRow.id).all()
            return [self._to_booking(r) for r in rows]
        finally:
            db.close()

    def _last_id(self) -> int:
        db = self.SessionLocal()
        try:
            return db.query(func.max(BookingRow.id)).scalar() or 0
        finally:
            db.close()

    def _insert(self, booking: Booking):
        db = self.SessionLocal()
        try:
            db.add(BookingRow(**booking.model_dump()))
            db.commit()
        except IntegrityError:
            # uq_booking_slot
            db.rollback()
            raise SlotConflictError()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to save booking {booking.date} {booking.time}: {e}")
            raise PersistenceError("Failed to save booking")
        finally:
            db.close()

    def dispose(self):
        self.engine.dispose()


def build_ledger(settings) -> BookingLedger:
    backend = settings.LEDGER_BACKEND.lower()
    if backend == "json":
        logger.info(f"Using JSON ledger at {os.path.abspath(settings.BOOKINGS_FILE)}")
        return JsonFileLedger(settings.BOOKINGS_FILE)
    if backend == "sql":
        logger.info(f"Using SQL ledger at {settings.DATABASE_URL}")
        return SqlLedger(settings.DATABASE_URL)
    raise ValueError(f"Unknown LEDGER_BACKEND '{settings.LEDGER_BACKEND}', expected 'json' or 'sql'")
