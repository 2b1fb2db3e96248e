from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Callable, List, Optional, Tuple, Union

from pydantic import TypeAdapter

from src.core.errors import BadRequestError

WEEKDAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
MONTH_NAMES = (
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

Clock = Callable[[], datetime]

# Accepts the trimmed fractional seconds Postgres emits for timestamptz.
TIMESTAMP_ADAPTER = TypeAdapter(datetime)


@dataclass(frozen=True)
class DateRange:
    """Inclusive local-calendar window, clamped to whole days."""

    start: datetime
    end: datetime

    @property
    def start_date(self) -> date:
        return self.start.date()

    @property
    def end_date(self) -> date:
        return self.end.date()

    def contains(self, value: Optional[date]) -> bool:
        return value is not None and self.start_date <= value <= self.end_date


@dataclass(frozen=True)
class CalendarDay:
    date: date
    weekday: str

    @property
    def iso(self) -> str:
        return self.date.isoformat()


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def local_today(tz: tzinfo, clock: Optional[Clock] = None) -> date:
    now = (clock or utc_now)()
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(tz).date()


def parse_month(value: str) -> Tuple[int, int]:
    try:
        year_part, month_part = value.strip().split("-", 1)
        year, month = int(year_part), int(month_part)
    except ValueError as exc:
        raise BadRequestError("month must be formatted as YYYY-MM") from exc
    if not 1 <= month <= 12:
        raise BadRequestError("month must be formatted as YYYY-MM")
    return year, month


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def resolve_range(
    month: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    *,
    tz: tzinfo,
    today: date,
) -> DateRange:
    if month:
        first, last = month_bounds(*parse_month(month))
    elif start_date and end_date:
        first, last = start_date, end_date
    else:
        first, last = month_bounds(today.year, today.month)
    return DateRange(
        start=datetime.combine(first, time.min, tzinfo=tz),
        end=datetime.combine(last, time(23, 59, 59, 999000), tzinfo=tz),
    )


def enumerate_days(start: date, end: date) -> List[CalendarDay]:
    days: List[CalendarDay] = []
    current = start
    while current <= end:
        days.append(CalendarDay(date=current, weekday=WEEKDAY_NAMES[current.weekday()]))
        current += timedelta(days=1)
    return days


def enumerate_months(start: date, end: date) -> List[str]:
    months: List[str] = []
    year, month = start.year, start.month
    while (year, month) <= (end.year, end.month):
        months.append(f"{year:04d}-{month:02d}")
        month += 1
        if month > 12:
            month = 1
            year += 1
    return months


def month_label(value: date) -> str:
    return f"{MONTH_NAMES[value.month - 1]} {value.year}"


def to_local_date(value: Union[str, date, datetime, None], tz: tzinfo) -> Optional[date]:
    """Calendar date of a stored value in the report zone.

    Date-only values are already calendar dates. Naive timestamps are read as UTC,
    which is how the store serialises ``timestamp`` columns.
    """
    if value is None or value == "":
        return None
    if isinstance(value, str):
        text = value.strip()
        if len(text) == 10:
            return date.fromisoformat(text)
        value = TIMESTAMP_ADAPTER.validate_python(text)
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(tz).date()
    return value
