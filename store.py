"""
Booking store.

Bookings are kept one row per slot; the store presents them the way the
owner dashboard reads them, as a mapping of date -> bookings in the order
they were made. Reads degrade to "nothing stored" when the database can't be
reached, writes that must not be lost raise StorageError.
"""
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from sqlalchemy import delete as sql_delete
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import select

from errors import BookingNotFound, DateNotFound, SlotConflict, StorageError
from models import Booking
from schemas import BookingRead
from slots import TIME_SLOTS

logger = logging.getLogger(__name__)

BookingMap = Dict[str, List[Booking]]
BookingInput = Mapping[str, Iterable[Union[Booking, BookingRead, Mapping[str, Any]]]]


def booking_rows(bookings: BookingInput) -> List[Booking]:
    """Build rows from Booking rows, BookingRead models or camelCase dicts.

    The bucket key is authoritative for the date. Raises TypeError for a
    bucket that isn't a list and ValidationError for a malformed item.
    """
    rows = []
    for day, items in bookings.items():
        if not isinstance(items, (list, tuple)):
            raise TypeError(f"bookings for {day!r} must be a list, got {type(items).__name__}")
        for item in items:
            if not isinstance(item, (Booking, BookingRead)):
                item = BookingRead.model_validate(item)
            rows.append(
                Booking(
                    id=item.id,
                    customer_name=item.customer_name,
                    phone=item.phone,
                    date=day,
                    time=item.time,
                    created_at=item.created_at,
                )
            )
    return rows


class BookingStore:
    def __init__(self, session_factory):
        self.session_factory = session_factory

    async def load(self) -> BookingMap:
        statement = select(Booking).order_by(Booking.date, Booking.id)
        try:
            async with self.session_factory() as session:
                result = await session.execute(statement)
                rows = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error("Error loading bookings: %s", e)
            return {}

        bookings: BookingMap = {}
        for row in rows:
            bookings.setdefault(row.date, []).append(row)
        return bookings

    async def save(self, bookings: BookingInput) -> bool:
        """Replace everything stored with ``bookings``. Returns False if the write failed."""
        rows = booking_rows(bookings)
        try:
            async with self.session_factory() as session:
                await session.execute(sql_delete(Booking))
                session.add_all(rows)
                await session.commit()
        except SQLAlchemyError as e:
            logger.error("Error saving bookings: %s", e)
            return False
        return True

    async def booked_times(self, day: str) -> List[str]:
        statement = select(Booking.time).where(Booking.date == day)
        try:
            async with self.session_factory() as session:
                result = await session.execute(statement)
                return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Error loading bookings for %s: %s", day, e)
            return []

    async def available_slots(self, day: str) -> List[str]:
        booked = set(await self.booked_times(day))
        return [slot for slot in TIME_SLOTS if slot not in booked]

    async def create(self, day: str, time: str, customer_name: str, phone: str) -> Booking:
        booking = Booking(customer_name=customer_name, phone=phone, date=day, time=time)
        async with self.session_factory() as session:
            try:
                session.add(booking)
                await session.commit()
                await session.refresh(booking)
            except IntegrityError:
                # The unique (date, time) constraint caught a double booking
                await session.rollback()
                raise SlotConflict()
            except SQLAlchemyError as e:
                await session.rollback()
                logger.error("Error saving booking for %s %s: %s", day, time, e)
                raise StorageError()
        return booking

    async def delete(self, day: str, booking_id: Optional[int]) -> Booking:
        statement = select(Booking).where(Booking.date == day)
        async with self.session_factory() as session:
            try:
                result = await session.execute(statement)
                bucket = result.scalars().all()
            except SQLAlchemyError as e:
                logger.error("Error loading bookings for %s: %s", day, e)
                raise StorageError()
            if not bucket:
                raise DateNotFound()

            booking = next((b for b in bucket if b.id == booking_id), None)
            if booking is None:
                raise BookingNotFound()

            try:
                await session.delete(booking)
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                logger.error("Error deleting booking %s: %s", booking_id, e)
                raise StorageError()
        return booking

    async def reclaim(self, today: str) -> int:
        """Drop every bucket dated before ``today``; dates are ISO so they sort as text."""
        statement = sql_delete(Booking).where(Booking.date < today)
        try:
            async with self.session_factory() as session:
                result = await session.execute(statement)
                await session.commit()
        except SQLAlchemyError as e:
            logger.error("Error clearing bookings before %s: %s", today, e)
            return 0
        return result.rowcount or 0
