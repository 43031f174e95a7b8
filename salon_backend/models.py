from sqlalchemy import BigInteger, Column, String, Text, UniqueConstraint
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class BookingRow(Base):
    __tablename__ = "bookings"
    __table_args__ = (
        UniqueConstraint("date", "time", name="uq_booking_slot"),
    )

    id = Column(BigInteger, primary_key=True, autoincrement=False)
    full_name = Column(String, nullable=False)
    client_email = Column(String, nullable=False)
    contact_detail = Column(String, nullable=False)
    service = Column(String, nullable=False)
    date = Column(String(10), nullable=False, index=True)
    time = Column(String(5), nullable=False)
    notes = Column(Text, default="")
    created_at = Column(String, nullable=False)
