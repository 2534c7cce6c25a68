from datetime import datetime, timezone
from typing import Optional

from sqlmodel import SQLModel, Field
from sqlalchemy import UniqueConstraint


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Booking(SQLModel, table=True):
    __tablename__ = "bookings"
    __table_args__ = (
        # Database-level protection against double booking
        UniqueConstraint("date", "time", name="unique_booking_slot"),
        # Never hand a deleted booking's id to a new one
        {"sqlite_autoincrement": True},
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    customer_name: str
    phone: str
    date: str = Field(index=True)  # YYYY-MM-DD
    time: str  # HH:MM, one of slots.TIME_SLOTS
    created_at: datetime = Field(default_factory=utcnow)


class Notification(SQLModel, table=True):
    __tablename__ = "notifications"

    # Feed order; the highest seq is the newest entry
    seq: Optional[int] = Field(default=None, primary_key=True)
    id: int = Field(index=True)  # booking id
    customer_name: str
    phone: str
    date: str
    time: str
    created_at: datetime
    read: bool = False
