"""Local calendar-day helpers.

The current time is always passed in explicitly so callers and tests can
simulate any day without touching the system clock.
"""

from datetime import datetime, timedelta


def local_now() -> datetime:
    """Return the current time as an aware datetime in the local timezone."""
    return datetime.now().astimezone()


def as_local(ts: datetime) -> datetime:
    """Convert a timestamp to local time; naive values are taken as local."""
    return ts.astimezone()


def start_of_day(now: datetime) -> datetime:
    """Local midnight at the start of the day containing ``now``."""
    return as_local(now).replace(hour=0, minute=0, second=0, microsecond=0)


def end_of_day(now: datetime) -> datetime:
    return start_of_day(now) + timedelta(days=1)


def is_same_day(ts: datetime, now: datetime) -> bool:
    """True when ``ts`` falls on the same local calendar day as ``now``."""
    return as_local(ts).date() == as_local(now).date()
