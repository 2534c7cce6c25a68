from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )


class BookingRead(CamelModel):
    id: int
    customer_name: str
    phone: str
    date: str
    time: str
    created_at: datetime


class NotificationRead(BookingRead):
    read: bool = False


class BookingCreate(CamelModel):
    # Optional so that missing fields get the booking error body, not a 422
    customer_name: Optional[str] = None
    phone: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None


class AvailableSlots(CamelModel):
    date: str
    available_slots: List[str]


class TimeSlots(CamelModel):
    time_slots: List[str]


class BookResponse(CamelModel):
    success: bool
    message: str
    booking: Optional[BookingRead] = None


class ActionResponse(BaseModel):
    success: bool
    message: str


class MarkReadResponse(BaseModel):
    success: bool
    updated: int = Field(ge=0)
