"""Datetime helpers. All timestamps are stored as naive UTC."""

from datetime import date, datetime, time, timedelta, timezone


def now_utc() -> datetime:
    """Get current UTC datetime as NAIVE for PostgreSQL storage."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def today_utc() -> date:
    return now_utc().date()


def start_of_day(day: date) -> datetime:
    """Midnight at the start of ``day``."""
    return datetime.combine(day, time.min)


def end_of_day(day: date) -> datetime:
    """Last representable instant of ``day`` (23:59:59.999999)."""
    return datetime.combine(day, time.min) + timedelta(days=1) - timedelta(microseconds=1)
