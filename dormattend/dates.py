from __future__ import annotations
from datetime import date, datetime, timedelta
from typing import Any, Iterable, Iterator, List, Optional, Tuple
from dateutil import parser as dtparser
from dateutil.rrule import rrule, DAILY
from .errors import InvalidRangeError
from .models import AttendanceRecord

ISO_FMT = "%Y-%m-%d"

def parse_iso(value: Any) -> Optional[date]:
    # accepts date/datetime objects and ISO-ish strings; None for anything else
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    txt = str(value).strip()
    if not txt:
        return None
    try:
        return datetime.strptime(txt, ISO_FMT).date()
    except ValueError:
        pass
    try:
        return dtparser.isoparse(txt).date()
    except (ValueError, OverflowError):
        return None


def to_iso(d: date) -> str:
    return d.strftime(ISO_FMT)


def current_date() -> str:
    return to_iso(date.today())


def yesterday() -> str:
    return to_iso(date.today() - timedelta(days=1))


def quick_range(days: int, today: Optional[date] = None) -> Tuple[str, str]:
    """Range ending today and starting `days` calendar days earlier."""
    end = today or date.today()
    start = end - timedelta(days=days)
    return to_iso(start), to_iso(end)


def enumerate_dates(start: Any, end: Any) -> Iterator[str]:
    """
    Every calendar date from start to end inclusive, ascending, as ISO strings.

    Steps by calendar day (rrule), never by fixed 24h ticks, so DST shifts and
    month/year boundaries are irrelevant. start > end yields nothing; ordering
    is validated by validate_range, not here.
    """
    s = parse_iso(start)
    e = parse_iso(end)
    if s is None or e is None or s > e:
        return iter(())
    days = rrule(
        DAILY,
        dtstart=datetime(s.year, s.month, s.day),
        until=datetime(e.year, e.month, e.day),
    )
    return (to_iso(dt.date()) for dt in days)


def filter_by_date_range(records: Iterable[AttendanceRecord], start: Any, end: Any) -> List[AttendanceRecord]:
    in_range = set(enumerate_dates(start, end))
    return [r for r in records if r.date in in_range]


def validate_range(start: Any, end: Any) -> Tuple[str, str]:
    # the one place report ranges are checked
    if start in (None, "") or end in (None, ""):
        raise InvalidRangeError("Please select both a start date and an end date.")

    s = parse_iso(start)
    e = parse_iso(end)
    if s is None or e is None:
        raise InvalidRangeError("Dates must be in YYYY-MM-DD format.")
    if s > e:
        raise InvalidRangeError("The start date cannot be after the end date.")
    return to_iso(s), to_iso(e)


def format_date(iso: str) -> str:
    # January 4, 2025
    d = parse_iso(iso)
    if d is None:
        return str(iso)
    return f"{d.strftime('%B')} {d.day}, {d.year}"


def format_short(iso: str) -> str:
    # Jan 4
    d = parse_iso(iso)
    if d is None:
        return str(iso)
    return f"{d.strftime('%b')} {d.day}"


def format_us(iso: str) -> str:
    # 1/4/2025
    d = parse_iso(iso)
    if d is None:
        return str(iso)
    return f"{d.month}/{d.day}/{d.year}"
