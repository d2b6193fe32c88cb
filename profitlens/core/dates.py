"""
Store Calendar Helpers

Order timestamps arrive as UTC instants; ad spend is booked per store-local
calendar day. Both must land on the same date key, so every conversion goes
through the configured store timezone and never the machine's local zone.
"""
from datetime import date, datetime, timezone
from functools import lru_cache
from typing import Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dateutil import tz as dateutil_tz

from .config import settings
from .errors import ConfigurationError


@lru_cache(maxsize=8)
def resolve_timezone(tz_name: Optional[str] = None):
    name = tz_name or settings.STORE_TIMEZONE
    if name in ("UTC", "Z", "Etc/UTC"):
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        # Windows hosts without tzdata
        alt = dateutil_tz.gettz(name)
        if alt is not None:
            return alt
        raise ConfigurationError(f"Unknown store timezone: {name}")


def ensure_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def store_date(value: Union[datetime, date], tz_name: Optional[str] = None) -> date:
    """Calendar date of an instant in the store timezone. Plain dates pass through."""
    if isinstance(value, datetime):
        return ensure_utc(value).astimezone(resolve_timezone(tz_name)).date()
    return value


def month_key(day: date) -> str:
    return day.strftime("%Y-%m")
