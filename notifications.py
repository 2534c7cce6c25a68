"""
Owner notifications: a newest-first feed of booking events for the dashboard,
plus console announcements when bookings come and go.
"""
import logging
from typing import Any, List, Mapping, Sequence, Union

from sqlalchemy import delete as sql_delete, update
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select

from models import Booking, Notification
from schemas import NotificationRead
from slots import format_date, format_time

logger = logging.getLogger(__name__)

BANNER_WIDTH = 42

NotificationInput = Sequence[Union[NotificationRead, Mapping[str, Any]]]


class NotificationLog:
    def __init__(self, session_factory):
        self.session_factory = session_factory

    async def record(self, booking: Booking) -> None:
        notification = Notification(
            id=booking.id,
            customer_name=booking.customer_name,
            phone=booking.phone,
            date=booking.date,
            time=booking.time,
            created_at=booking.created_at,
        )
        try:
            async with self.session_factory() as session:
                session.add(notification)
                await session.commit()
        except SQLAlchemyError as e:
            # The booking itself is already stored; only the feed entry is lost
            logger.error("Error saving notification for booking %s: %s", booking.id, e)

    async def list(self) -> List[Notification]:
        statement = select(Notification).order_by(Notification.seq.desc())
        try:
            async with self.session_factory() as session:
                result = await session.execute(statement)
                return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Error loading notifications: %s", e)
            return []

    async def mark_all_read(self) -> int:
        statement = update(Notification).where(Notification.read.is_(False)).values(read=True)
        try:
            async with self.session_factory() as session:
                result = await session.execute(statement)
                await session.commit()
        except SQLAlchemyError as e:
            logger.error("Error marking notifications read: %s", e)
            return 0
        return result.rowcount or 0

    async def save(self, items: NotificationInput) -> bool:
        """Replace the feed with ``items``, given newest first. Returns False if the write failed."""
        rows = notification_rows(items)
        try:
            async with self.session_factory() as session:
                await session.execute(sql_delete(Notification))
                session.add_all(rows)
                await session.commit()
        except SQLAlchemyError as e:
            logger.error("Error saving notifications: %s", e)
            return False
        return True


def notification_rows(items: NotificationInput) -> List[Notification]:
    """Build rows oldest first, so the newest entry gets the highest seq.

    Raises TypeError if ``items`` isn't a list and ValidationError for a
    malformed entry.
    """
    if not isinstance(items, (list, tuple)):
        raise TypeError(f"notifications must be a list, got {type(items).__name__}")
    parsed = [
        item if isinstance(item, NotificationRead) else NotificationRead.model_validate(item)
        for item in items
    ]
    return [
        Notification(
            id=item.id,
            customer_name=item.customer_name,
            phone=item.phone,
            date=item.date,
            time=item.time,
            created_at=item.created_at,
            read=item.read,
        )
        for item in reversed(parsed)
    ]


def _banner(title: str, rows: List[str]) -> str:
    inner = BANNER_WIDTH
    lines = [
        "╔" + "═" * inner + "╗",
        "║" + title.center(inner) + "║",
        "╠" + "═" * inner + "╣",
    ]
    lines += ["║  " + row.ljust(inner - 2)[: inner - 2] + "║" for row in rows]
    lines.append("╚" + "═" * inner + "╝")
    return "\n".join(lines)


def announce_booking(booking: Booking) -> str:
    message = _banner(
        "NEW APPOINTMENT BOOKED!",
        [
            f"Customer: {booking.customer_name}",
            f"Phone: {booking.phone}",
            f"Date: {format_date(booking.date)}",
            f"Time: {format_time(booking.time)}",
        ],
    )
    logger.info("\n%s", message)
    return message


def announce_removal(booking: Booking) -> str:
    message = _banner(
        "APPOINTMENT REMOVED BY OWNER",
        [
            f"Customer: {booking.customer_name}",
            f"Date: {format_date(booking.date)}",
            f"Time: {format_time(booking.time)}",
        ],
    )
    logger.info("\n%s", message)
    return message
