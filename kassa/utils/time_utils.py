"""
kassa/utils/time_utils.py

Purpose: Time helpers

- Conversion between stored UTC timestamps and the report timezone
- "Today" boundaries for dashboard filters
- Timestamp formatting for reports
"""

from datetime import datetime, time, timedelta, timezone
from typing import Optional, Tuple
from zoneinfo import ZoneInfo

from kassa.core.config import settings


def report_zone() -> ZoneInfo:
    return ZoneInfo(settings.REPORT_TIMEZONE)


def to_utc_naive(dt: datetime) -> datetime:
    """
    Normalizes a datetime for storage and queries.
    Naive values are taken to be UTC already.
    """
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(timezone.utc).replace(tzinfo=None)


def local_to_utc_naive(dt: datetime) -> datetime:
    """
    Like to_utc_naive, but naive values are read as wall-clock time in
    the report timezone. Used for date filters typed by the merchant.
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=report_zone())
    return to_utc_naive(dt)


def to_local(dt: datetime) -> datetime:
    """
    Converts a stored (naive UTC) timestamp to the report timezone.
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(report_zone())


def local_now() -> datetime:
    return datetime.now(report_zone())


def today_range(now: Optional[datetime] = None) -> Tuple[datetime, datetime]:
    """
    Returns the current day in the report timezone as a naive UTC
    [start, end) pair.
    """
    now = to_local(now) if now else local_now()
    start_local = datetime.combine(now.date(), time.min, tzinfo=now.tzinfo)
    end_local = start_local + timedelta(days=1)
    return to_utc_naive(start_local), to_utc_naive(end_local)


def format_timestamp(dt: Optional[datetime], format_str: str = "%Y-%m-%d %H:%M:%S") -> str:
    """
    Formats a stored timestamp in the report timezone.
    """
    if not dt:
        return "N/A"
    return to_local(dt).strftime(format_str)
