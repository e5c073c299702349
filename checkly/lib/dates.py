import calendar
import re
from datetime import date, datetime, timedelta

from dateutil import parser as dateutil_parser
from dateutil.parser import ParserError
from dateutil.relativedelta import relativedelta

from . import clock

__all__ = [
    "MONTH_NAMES",
    "add_days",
    "add_months",
    "add_years",
    "days_in_month",
    "format_nice",
    "from_iso",
    "is_before",
    "parse_due_date",
    "to_iso",
    "week_start_day",
]

MONTH_NAMES = tuple(calendar.month_name[1:])


def to_iso(d: date) -> str:
    return d.isoformat()


def from_iso(value: str) -> date:
    """Parse a canonical YYYY-MM-DD string. A trailing time component is ignored."""
    return date.fromisoformat(value.split("T")[0])


def is_before(a: date, b: date) -> bool:
    return a < b


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def week_start_day(year: int, month: int, week: int) -> int:
    """Day number that opens week-of-month `week` (1-5). Week 5 of a short month is its last day."""
    return min(1 + (week - 1) * 7, days_in_month(year, month))


def add_days(d: date, days: int) -> date:
    return d + timedelta(days=days)


def add_months(d: date, months: int) -> date:
    """Add calendar months, clamping to the end of the target month (Jan 31 + 1 -> Feb 28/29)."""
    return d + relativedelta(months=months)


def add_years(d: date, years: int) -> date:
    """Add calendar years. Feb 29 rolls over to Mar 1 when the target year is not a leap year."""
    year = d.year + years
    if d.month == 2 and d.day == 29 and not calendar.isleap(year):
        return date(year, 3, 1)
    return d.replace(year=year)


def format_nice(d: date) -> str:
    return f"{d.strftime('%A, %b')} {d.day}"


_WEEKDAYS = {"mon": 0, "tue": 1, "wed": 2, "thu": 3, "fri": 4, "sat": 5, "sun": 6}
_WEEKDAY_ALIASES = {name.lower(): name[:3].lower() for name in calendar.day_name}


def parse_due_date(due_str: str) -> date | None:
    """Parses a due date string (e.g., 'today', 'tomorrow', 'fri', 'YYYY-MM-DD')."""
    text = due_str.strip().lower()
    today = clock.today()

    if text == "today":
        return today
    if text == "yesterday":
        return today - timedelta(days=1)
    if text == "tomorrow":
        return today + timedelta(days=1)
    weekday = _WEEKDAYS.get(_WEEKDAY_ALIASES.get(text, text))
    if weekday is not None:
        return today + timedelta(days=(weekday - today.weekday()) % 7)
    if re.match(r"^\d{1,2}:\d{2}$", text):
        return None
    try:
        return dateutil_parser.parse(
            due_str, default=datetime(today.year, today.month, today.day)
        ).date()
    except (ParserError, ValueError, OverflowError):
        return None
