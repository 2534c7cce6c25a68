"""
Import data left behind by the JSON-file version of the shop:
``bookings.json`` (date -> bookings) and ``notifications.json`` (newest first).

Both files are checked before anything is written, and both collections go
in one transaction, so an import either lands whole or not at all.
"""
import json
import logging
from pathlib import Path

from pydantic import ValidationError
from sqlalchemy import delete as sql_delete
from sqlalchemy.exc import SQLAlchemyError

from models import Notification
from notifications import notification_rows
from store import BookingStore, booking_rows

logger = logging.getLogger(__name__)

BOOKINGS_FILE = "bookings.json"
NOTIFICATIONS_FILE = "notifications.json"


def _read_json(path: Path, empty):
    if not path.exists():
        return empty
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.error("Error reading %s: %s", path, e)
        return empty
    if not isinstance(data, type(empty)):
        logger.error("Ignoring %s: expected a JSON %s", path, type(empty).__name__)
        return empty
    return data


async def import_legacy_data(data_dir: Path, store: BookingStore) -> bool:
    """Copy the JSON files into an empty store. Returns True only if the import was committed."""
    if await store.load():
        logger.info("Store already has bookings; skipping import from %s", data_dir)
        return False

    bookings = _read_json(data_dir / BOOKINGS_FILE, {})
    notifications = _read_json(data_dir / NOTIFICATIONS_FILE, [])
    if not bookings and not notifications:
        return False

    try:
        booking_list = booking_rows(bookings)
        notification_list = notification_rows(notifications)
    except (TypeError, ValidationError) as e:
        logger.error("Malformed data in %s, nothing imported: %s", data_dir, e)
        return False

    try:
        async with store.session_factory() as session:
            await session.execute(sql_delete(Notification))
            session.add_all(booking_list)
            session.add_all(notification_list)
            await session.commit()
    except SQLAlchemyError as e:
        logger.error("Error importing from %s, nothing imported: %s", data_dir, e)
        return False

    logger.info(
        "Imported %s bookings and %s notifications from %s",
        len(booking_list),
        len(notification_list),
        data_dir,
    )
    return True
