import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Dict, List, Optional

from fastapi import FastAPI, Depends, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles

from config import configure_logging, load_settings
from database import create_engine, init_db, make_session_factory
from errors import (
    BookingError,
    BookingNotFound,
    DateNotFound,
    InvalidField,
    MissingField,
    MissingParameter,
    SlotConflict,
    StorageError,
)
from legacy import import_legacy_data
from notifications import NotificationLog, announce_booking, announce_removal
from scheduler import build_scheduler
from schemas import (
    ActionResponse,
    AvailableSlots,
    BookingCreate,
    BookingRead,
    BookResponse,
    MarkReadResponse,
    NotificationRead,
    TimeSlots,
)
from slots import TIME_SLOTS, is_valid_date, today_iso
from store import BookingStore

logger = logging.getLogger(__name__)

PUBLIC_DIR = Path(__file__).resolve().parent / "public"


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = load_settings()
    configure_logging(settings.log_level)

    engine = create_engine(settings.database_url)
    await init_db(engine)
    session_factory = make_session_factory(engine)
    app.state.store = BookingStore(session_factory)
    app.state.notifications = NotificationLog(session_factory)

    if settings.legacy_data_dir is not None:
        await import_legacy_data(settings.legacy_data_dir, app.state.store)

    scheduler = build_scheduler(app.state.store)
    scheduler.start()
    app.state.scheduler = scheduler
    logger.info("Barber Shop Reservation System ready")
    logger.info("Customer booking: http://localhost:%s", settings.port)
    logger.info("Owner dashboard:  http://localhost:%s/owner", settings.port)
    yield
    scheduler.shutdown(wait=False)
    await engine.dispose()


app = FastAPI(title="Barber Shop Reservation System", lifespan=lifespan)


def get_store(request: Request) -> BookingStore:
    return request.app.state.store


def get_notifications(request: Request) -> NotificationLog:
    return request.app.state.notifications


# --- Error responses ---
# A taken slot is a normal outcome the booking form branches on, so it is a
# 200 with success=false; incomplete input and unknown bookings are HTTP errors.

@app.exception_handler(MissingParameter)
async def missing_parameter_handler(request: Request, exc: MissingParameter):
    return JSONResponse(status_code=400, content={"error": exc.message})


@app.exception_handler(SlotConflict)
async def slot_conflict_handler(request: Request, exc: SlotConflict):
    return JSONResponse(status_code=200, content={"success": False, "message": exc.message})


@app.exception_handler(BookingError)
async def booking_error_handler(request: Request, exc: BookingError):
    if isinstance(exc, (MissingField, InvalidField)):
        status_code = 400
    elif isinstance(exc, (DateNotFound, BookingNotFound)):
        status_code = 404
    elif isinstance(exc, StorageError):
        status_code = 500
    else:
        status_code = 400
    return JSONResponse(status_code=status_code, content={"success": False, "message": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    # The booking form reads success/message; other routes keep FastAPI's 422
    if request.url.path == "/api/book":
        return JSONResponse(
            status_code=400,
            content={"success": False, "message": InvalidField.message},
        )
    return await request_validation_exception_handler(request, exc)


# --- Booking API ---

@app.get("/api/time-slots", response_model=TimeSlots)
async def get_time_slots():
    return TimeSlots(time_slots=list(TIME_SLOTS))


@app.get("/api/available-slots", response_model=AvailableSlots)
async def get_available_slots(
    date: Optional[str] = None,
    store: BookingStore = Depends(get_store),
):
    if not date:
        raise MissingParameter()
    available = await store.available_slots(date)
    return AvailableSlots(date=date, available_slots=available)


@app.post("/api/book", response_model=BookResponse, response_model_exclude_none=True)
async def book_appointment(
    booking_data: Optional[BookingCreate] = None,
    store: BookingStore = Depends(get_store),
    notifications: NotificationLog = Depends(get_notifications),
):
    booking_data = booking_data or BookingCreate()
    if not (booking_data.customer_name and booking_data.phone and booking_data.date and booking_data.time):
        raise MissingField()
    if not is_valid_date(booking_data.date):
        raise InvalidField("Invalid date, expected YYYY-MM-DD")
    if booking_data.time not in TIME_SLOTS:
        raise InvalidField("Invalid time slot. Open 08:00-23:00 on the hour")

    booking = await store.create(
        booking_data.date,
        booking_data.time,
        booking_data.customer_name,
        booking_data.phone,
    )

    await notifications.record(booking)
    announce_booking(booking)

    return BookResponse(
        success=True,
        message="Booking confirmed!",
        booking=BookingRead.model_validate(booking),
    )


@app.get("/api/bookings", response_model=Dict[str, List[BookingRead]])
async def get_bookings(store: BookingStore = Depends(get_store)):
    return await store.load()


@app.get("/api/bookings/today", response_model=List[BookingRead])
async def get_today_bookings(store: BookingStore = Depends(get_store)):
    bookings = await store.load()
    return bookings.get(today_iso(), [])


@app.get("/api/notifications", response_model=List[NotificationRead])
async def get_notifications_feed(notifications: NotificationLog = Depends(get_notifications)):
    return await notifications.list()


@app.post("/api/notifications/read", response_model=MarkReadResponse)
async def mark_notifications_read(notifications: NotificationLog = Depends(get_notifications)):
    updated = await notifications.mark_all_read()
    return MarkReadResponse(success=True, updated=updated)


@app.delete("/api/bookings/{date}/{booking_id}", response_model=ActionResponse)
async def delete_booking(
    date: str,
    booking_id: str,
    store: BookingStore = Depends(get_store),
):
    try:
        parsed_id = int(booking_id)
    except ValueError:
        # Still report a missing date before a bad id
        parsed_id = None
    removed = await store.delete(date, parsed_id)
    announce_removal(removed)
    return ActionResponse(success=True, message="Booking removed successfully")


# --- Pages ---

@app.get("/owner", include_in_schema=False)
async def owner_dashboard():
    return FileResponse(PUBLIC_DIR / "owner.html", media_type="text/html")


@app.get("/health")
async def health() -> Dict[str, str]:
    return {"status": "ok"}


app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Last, so the API routes above win over static files
app.mount("/", StaticFiles(directory=PUBLIC_DIR, html=True), name="public")


if __name__ == "__main__":
    import uvicorn

    settings = load_settings()
    uvicorn.run("main:app", host=settings.host, port=settings.port)
