import re
from datetime import UTC, date, datetime, timedelta
from zoneinfo import ZoneInfo

from app.core.errors import DateOutOfRange, InvalidDate

_DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


def utc_now() -> datetime:
    return datetime.now(UTC)


def today_iso(timezone: str, now: datetime | None = None) -> str:
    """Civil date (YYYY-MM-DD) in `timezone` at `now` (defaults to the current instant)."""
    now = now or utc_now()
    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)
    return now.astimezone(ZoneInfo(timezone)).date().isoformat()


def add_days_iso(date_iso: str, days: int) -> str:
    return (date.fromisoformat(date_iso) + timedelta(days=days)).isoformat()


def booking_window(timezone: str, max_days_ahead: int, now: datetime | None = None) -> tuple[str, str]:
    """Return (first, last) bookable dates, both inclusive."""
    today = today_iso(timezone, now)
    return today, add_days_iso(today, max_days_ahead)


def parse_date_iso(value: str) -> str:
    if not isinstance(value, str) or not _DATE_RE.fullmatch(value):
        raise InvalidDate()
    try:
        date.fromisoformat(value)
    except ValueError:
        raise InvalidDate() from None
    return value


def validate_booking_date(
    date_iso: str, timezone: str, max_days_ahead: int, now: datetime | None = None
) -> str:
    date_iso = parse_date_iso(date_iso)
    first, last = booking_window(timezone, max_days_ahead, now)
    # Zero-padded ISO dates compare correctly as strings
    if date_iso < first or date_iso > last:
        raise DateOutOfRange()
    return date_iso
