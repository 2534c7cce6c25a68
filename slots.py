from datetime import date, datetime

# Bookable hours, one slot per hour from 8 AM to 11 PM
TIME_SLOTS = (
    "08:00", "09:00", "10:00", "11:00", "12:00", "13:00", "14:00", "15:00",
    "16:00", "17:00", "18:00", "19:00", "20:00", "21:00", "22:00", "23:00",
)


def today_iso() -> str:
    return date.today().isoformat()


def is_valid_date(value: str) -> bool:
    try:
        parsed = datetime.strptime(value, "%Y-%m-%d")
    except ValueError:
        return False
    # strptime accepts "2024-6-1"; keys must stay zero padded to sort correctly
    return parsed.strftime("%Y-%m-%d") == value


def format_time(value: str) -> str:
    """'13:00' -> '1:00 PM'"""
    try:
        hours, minutes = value.split(":")
        hour = int(hours)
    except ValueError:
        return value
    suffix = "PM" if hour >= 12 else "AM"
    return f"{hour % 12 or 12}:{minutes} {suffix}"


def format_date(value: str) -> str:
    """'2024-06-01' -> 'Sat, Jun 1'"""
    try:
        parsed = datetime.strptime(value, "%Y-%m-%d")
    except ValueError:
        return value
    return f"{parsed:%a}, {parsed:%b} {parsed.day}"
