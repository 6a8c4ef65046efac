# /educenter/core/clock.py

"""
Calendar helpers shared by the scheduling, billing and reporting services.

All "today"/"now" decisions are made in the center's local time zone
(`APP_TIMEZONE`). Weekday names are always English, independent of the
process locale.
"""

import calendar
import datetime
import re
from typing import Iterator, Optional, Tuple
from zoneinfo import ZoneInfo

from .config import settings
from .exceptions import BadRequestError

WEEKDAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]
MONTH_ABBREVIATIONS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_MONTH_FOR_RE = re.compile(r"^\d{4}-\d{2}$")


def app_timezone() -> ZoneInfo:
    return ZoneInfo(settings.APP_TIMEZONE)


def now_local() -> datetime.datetime:
    return datetime.datetime.now(app_timezone())


def today_local() -> datetime.date:
    return now_local().date()


def weekday_name(day: datetime.date) -> str:
    return WEEKDAYS[day.weekday()]


def parse_date(value: str) -> datetime.date:
    """Parses a strict YYYY-MM-DD string."""
    if not isinstance(value, str) or not _DATE_RE.match(value):
        raise BadRequestError("Invalid date format, use YYYY-MM-DD")
    try:
        return datetime.date.fromisoformat(value)
    except ValueError:
        raise BadRequestError("Invalid date format, use YYYY-MM-DD")


def parse_month_for(value: Optional[str]) -> Tuple[int, int]:
    """Parses a billing month (YYYY-MM) into (year, month)."""
    if not value or not _MONTH_FOR_RE.match(value):
        raise BadRequestError("monthFor must be in YYYY-MM format")
    year, month = int(value[:4]), int(value[5:])
    if not 1 <= month <= 12:
        raise BadRequestError("monthFor must be in YYYY-MM format")
    return year, month


def month_key(year: int, month: int) -> str:
    return f"{year:04d}-{month:02d}"


def next_month(year: int, month: int) -> Tuple[int, int]:
    return (year + 1, 1) if month == 12 else (year, month + 1)


def previous_month(year: int, month: int) -> Tuple[int, int]:
    return (year - 1, 12) if month == 1 else (year, month - 1)


def month_end(year: int, month: int) -> datetime.date:
    return datetime.date(year, month, calendar.monthrange(year, month)[1])


def iter_months(start: Tuple[int, int], end: Tuple[int, int]) -> Iterator[Tuple[int, int]]:
    """Yields (year, month) pairs from `start` to `end`, both inclusive."""
    current = start
    while current <= end:
        yield current
        current = next_month(*current)


def to_local_date(moment: Optional[datetime.datetime]) -> Optional[datetime.date]:
    """
    Local calendar date of a stored timestamp. Naive values come back from
    the database in UTC.
    """
    if moment is None:
        return None
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=datetime.timezone.utc)
    return moment.astimezone(app_timezone()).date()
