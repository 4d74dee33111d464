from datetime import datetime, date, time, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def today_utc() -> date:
    return datetime.now(timezone.utc).date()


def start_of_day(d: date) -> datetime:
    """Return start of day as a UTC datetime."""
    return datetime.combine(d, time.min, tzinfo=timezone.utc)


def end_of_day(d: date) -> datetime:
    """Return the last representable instant of the day as a UTC datetime."""
    return datetime.combine(d, time.max, tzinfo=timezone.utc)


def as_date(value) -> date:
    """Coerce a date, datetime or ISO string to a calendar date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def as_utc(value: datetime) -> datetime:
    """Convert an aware datetime to UTC. Naive values are taken to be UTC already."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc)
