"""Booking errors raised by the store and turned into responses by main.py."""


class BookingError(Exception):
    message = "Booking error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        self.message = message or self.message


class MissingParameter(BookingError):
    message = "Date is required"


class MissingField(BookingError):
    message = "All fields are required"


class InvalidField(BookingError):
    message = "Invalid booking details"


class SlotConflict(BookingError):
    message = "This time slot is no longer available"


class DateNotFound(BookingError):
    message = "Date not found"


class BookingNotFound(BookingError):
    message = "Booking not found"


class StorageError(BookingError):
    message = "Could not save changes, please try again"
