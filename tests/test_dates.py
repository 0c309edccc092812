from __future__ import annotations

from datetime import date

import pytest

from dormattend.dates import (
    enumerate_dates,
    filter_by_date_range,
    format_date,
    format_short,
    format_us,
    parse_iso,
    quick_range,
    validate_range,
)
from dormattend.errors import InvalidRangeError
from dormattend.models import AttendanceRecord


def test_enumerate_crosses_month_boundary():
    assert list(enumerate_dates("2025-01-30", "2025-02-02")) == [
        "2025-01-30",
        "2025-01-31",
        "2025-02-01",
        "2025-02-02",
    ]


def test_enumerate_single_day():
    assert list(enumerate_dates("2025-03-09", "2025-03-09")) == ["2025-03-09"]


def test_enumerate_crosses_year_and_leap_day():
    days = list(enumerate_dates("2023-12-30", "2024-03-01"))

    assert days[0] == "2023-12-30"
    assert days[-1] == "2024-03-01"
    assert "2024-02-29" in days
    assert len(days) == (date(2024, 3, 1) - date(2023, 12, 30)).days + 1


def test_enumerate_over_dst_change_has_no_gaps():
    # US DST starts 2025-03-09, EU 2025-03-30
    days = list(enumerate_dates("2025-03-01", "2025-03-31"))

    assert len(days) == 31
    assert len(set(days)) == 31


def test_enumerate_inverted_is_empty():
    assert list(enumerate_dates("2025-02-02", "2025-01-30")) == []


def test_enumerate_accepts_date_objects():
    assert list(enumerate_dates(date(2025, 1, 1), date(2025, 1, 2))) == ["2025-01-01", "2025-01-02"]


def test_filter_by_date_range():
    records = [
        AttendanceRecord("s1", "2024-12-31", True, True),
        AttendanceRecord("s1", "2025-01-01", True, False),
        AttendanceRecord("s1", "2025-01-05", False, True),
        AttendanceRecord("s1", "2025-01-06", False, False),
    ]

    kept = filter_by_date_range(records, "2025-01-01", "2025-01-05")

    assert [r.date for r in kept] == ["2025-01-01", "2025-01-05"]


@pytest.mark.parametrize(
    "start,end",
    [(None, "2025-01-01"), ("2025-01-01", ""), ("2025-01-02", "2025-01-01"), ("garbage", "2025-01-01")],
)
def test_validate_range_rejects(start, end):
    with pytest.raises(InvalidRangeError):
        validate_range(start, end)


def test_validate_range_normalizes():
    assert validate_range(date(2025, 1, 1), "2025-01-01") == ("2025-01-01", "2025-01-01")


def test_quick_range():
    assert quick_range(7, today=date(2025, 1, 3)) == ("2024-12-27", "2025-01-03")


def test_formatting():
    assert format_date("2025-01-04") == "January 4, 2025"
    assert format_short("2025-01-04") == "Jan 4"
    assert format_us("2025-01-04") == "1/4/2025"
    assert parse_iso("not a date") is None
