from __future__ import annotations

import calendar
from datetime import date, datetime
from typing import Optional, Union

MONTHS = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

# Rows written by older clients carry JS `toDateString()` values ("Mon Oct 19 2026").
_DATE_FORMATS = ("%Y-%m-%d", "%a %b %d %Y", "%B %d, %Y")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def coerce_date(value: Union[date, datetime, str, None]) -> Optional[date]:
    """Normalize a stored calendar date (date, datetime or text) into a date."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = str(value).strip()
    # ISO timestamps ("2026-10-19T00:00:00+00:00") keep only the date part.
    if len(text) > 10 and text[4] == "-" and text[10] in "T ":
        text = text[:10]
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    raise ValueError(f"Invalid date value: {value!r}")


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def today_local() -> date:
    return now_local().date()


def add_months(day: date, months: int) -> date:
    """Same day-of-month `months` later, clamped to the last day of the month."""
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def to_appointment_date(day: Union[date, datetime]) -> str:
    """Date-only storage format (YYYY-MM-DD)."""
    if isinstance(day, datetime):
        day = day.date()
    return day.strftime("%Y-%m-%d")


def format_date(day: Union[date, datetime]) -> str:
    """'October 19, 2026'"""
    return f"{MONTHS[day.month - 1]} {day.day}, {day.year}"


def format_date_string(value: str) -> str:
    """Format a stored YYYY-MM-DD string for display."""
    return format_date(parse_iso_date(value))


def format_time(value: Optional[str]) -> str:
    """'13:05' -> '01:05 PM'"""
    if not value:
        return ""
    hour, minute = (int(part) for part in value.split(":")[:2])
    period = "PM" if hour >= 12 else "AM"
    return f"{(hour % 12 or 12):02d}:{minute:02d} {period}"


def format_date_and_time(moment: datetime, separator: str = "at") -> str:
    """'October 19, 2026 at 01:05:09 PM'"""
    hour = moment.hour % 12 or 12
    period = "PM" if moment.hour >= 12 else "AM"
    return (
        f"{MONTHS[moment.month - 1]} {moment.day:02d}, {moment.year} {separator} "
        f"{hour:02d}:{moment.minute:02d}:{moment.second:02d} {period}"
    )
