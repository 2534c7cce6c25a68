"""
Nightly reclamation: at local midnight drop every booking dated before today.

A fire missed while the process was down is skipped; the next one prunes
everything that piled up in one pass.
"""
import logging
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from slots import today_iso
from store import BookingStore

logger = logging.getLogger(__name__)

RECLAIM_JOB_ID = "reclaim_past_bookings"


async def reclaim_past_bookings(store: BookingStore, today: Optional[str] = None) -> int:
    today = today or today_iso()
    logger.info("Midnight - clearing bookings before %s", today)
    removed = await store.reclaim(today)
    logger.info("Old bookings cleared (%s removed). Ready for a new day!", removed)
    return removed


def build_scheduler(store: BookingStore) -> AsyncIOScheduler:
    scheduler = AsyncIOScheduler()
    scheduler.add_job(
        reclaim_past_bookings,
        "cron",
        hour=0,
        minute=0,
        args=[store],
        id=RECLAIM_JOB_ID,
        coalesce=True,
        misfire_grace_time=60,
    )
    return scheduler
