"""
Date helpers for query windows and chart buckets.

Post windows are whole days: [start 00:00:00.000, end 23:59:59.999].
"""
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import List, Optional

from portal.core.exceptions import BadRequestError

DATE_FORMAT = "%Y-%m-%d"


@dataclass(frozen=True)
class DateWindow:
    start_date: date
    end_date: date

    @property
    def start(self) -> datetime:
        return start_of_day(self.start_date)

    @property
    def end(self) -> datetime:
        return end_of_day(self.end_date)

    def as_strings(self):
        return format_date(self.start_date), format_date(self.end_date)


def format_date(value: date) -> str:
    return value.strftime(DATE_FORMAT)


def start_of_day(value: date) -> datetime:
    return datetime.combine(value, time.min)


def end_of_day(value: date) -> datetime:
    return datetime.combine(value, time(23, 59, 59, 999000))


def parse_date(value: str) -> date:
    """Parse YYYY-MM-DD (a trailing time part is ignored)"""
    try:
        return datetime.strptime(value.strip()[:10], DATE_FORMAT).date()
    except (ValueError, AttributeError):
        raise BadRequestError("Invalid date format")


def parse_datetime(value: str) -> datetime:
    """
    Parse a chart date parameter.

    Accepts "YYYY-MM-DD HH:MM:SS", "YYYY-MM-DD" and ISO 8601 with or without
    an offset. Aware values are converted to naive UTC.
    """
    raw = (value or "").strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        raise BadRequestError("Invalid date format")

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def resolve_window(
    start: Optional[str],
    end: Optional[str],
    default_days: int = 7,
    today: Optional[date] = None,
) -> DateWindow:
    """
    Resolve the post listing window.

    Defaults to the trailing `default_days` days excluding today. An end date
    on or after today is clamped to yesterday.
    """
    today = today or date.today()
    yesterday = today - timedelta(days=1)

    start_date = parse_date(start) if start else today - timedelta(days=default_days)
    end_date = parse_date(end) if end else yesterday
    if end_date >= today:
        end_date = yesterday

    return DateWindow(start_date=start_date, end_date=end_date)


def day_keys(start: datetime, end: datetime) -> List[str]:
    """Every calendar day touched by [start, end], as YYYY-MM-DD"""
    keys = []
    current = start
    while current <= end:
        keys.append(current.strftime(DATE_FORMAT))
        current += timedelta(days=1)
    return keys


def format_display_date(value: Optional[datetime]) -> Optional[str]:
    """e.g. "Mar 5, 2:07 PM" """
    if value is None:
        return None
    hour = value.hour % 12 or 12
    suffix = "AM" if value.hour < 12 else "PM"
    return f"{value.strftime('%b')} {value.day}, {hour}:{value.minute:02d} {suffix}"
