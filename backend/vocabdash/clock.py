"""Time helpers: timezone-aware UTC timestamps and local calendar days."""

from datetime import date, datetime, timezone, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def as_utc(timestamp: datetime) -> datetime:
    """Treat a naive timestamp as UTC; SQLite hands stored values back without tzinfo."""
    if timestamp.tzinfo is None:
        return timestamp.replace(tzinfo=timezone.utc)
    return timestamp.astimezone(timezone.utc)


def get_timezone(name: str) -> Optional[tzinfo]:
    """Resolve an IANA zone name; empty means the server's local zone (None)."""
    return ZoneInfo(name) if name else None


def local_date(timestamp: datetime, tz: Optional[tzinfo] = None) -> date:
    """Calendar day of a stored timestamp in the given zone."""
    return as_utc(timestamp).astimezone(tz).date()


def local_today(tz: Optional[tzinfo] = None) -> date:
    return datetime.now(tz).date()
