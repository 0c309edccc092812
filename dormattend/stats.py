from __future__ import annotations
import logging
import math
from typing import Any, Dict, Iterable, List, Sequence
import pandas as pd
from .dates import filter_by_date_range, validate_range
from .models import (AttendanceRecord, AttendanceStats, AttendanceSummary, Dataset, DateRange, ReportData, Student)
from .store import records_for_date

logger = logging.getLogger(__name__)

STATS_COLUMNS = ["Student Name", "Total Sessions", "Attended Sessions", "Attendance %"]


def round_half_up(x: float, ndigits: int = 2) -> float:
    # round() is banker's rounding; 3.125 must become 3.13
    factor = 10 ** ndigits
    return math.floor(x * factor + 0.5) / factor


def compute_stats(student: Student, records: Iterable[AttendanceRecord]) -> AttendanceStats:
    own = [r for r in records if r.student_id == student.id]
    total = len(own) * 2  # morning + evening
    attended = sum(r.attended for r in own)
    pct = (attended / total) * 100 if total > 0 else 0.0

    return AttendanceStats(
        student_id=student.id,
        student_name=student.name,
        total_sessions=total,
        attended_sessions=attended,
        attendance_percentage=round_half_up(pct, 2),
    )


def compute_all_stats(students: Iterable[Student], records: Iterable[AttendanceRecord]) -> List[AttendanceStats]:
    records = list(records)
    return [compute_stats(s, records) for s in students]


def aggregate(stats_list: Sequence[AttendanceStats]) -> AttendanceSummary:
    """
    Dataset-level summary.

    averageAttendance is the mean of the per-student percentages, so every
    student weighs the same whatever their number of recorded days. It is not
    attended/total over the summed sessions.
    """
    if not stats_list:
        return AttendanceSummary()

    total = sum(s.total_sessions for s in stats_list)
    attended = sum(s.attended_sessions for s in stats_list)
    average = sum(s.attendance_percentage for s in stats_list) / len(stats_list)
    return AttendanceSummary(
        total_sessions=total,
        attended_sessions=attended,
        average_attendance=average,
        total_students=len(stats_list),
    )


def classify(stats_list: Sequence[AttendanceStats]) -> Dict[str, int]:
    return {
        "fully_present": sum(1 for s in stats_list if s.attendance_percentage == 100),
        "partially_present": sum(1 for s in stats_list if 0 < s.attendance_percentage < 100),
        "absent": sum(1 for s in stats_list if s.attendance_percentage == 0),
    }


def daily_summary(dataset: Dataset, date: str) -> Dict[str, Any]:
    # every student counts for two sessions that day, recorded or not
    day_records = records_for_date(dataset.records, date)
    total_students = len(dataset.students)
    total_sessions = total_students * 2
    attended = sum(r.attended for r in day_records)
    pct = (attended / total_sessions) * 100 if total_sessions > 0 else 0.0
    return {
        "total_students": total_students,
        "total_sessions": total_sessions,
        "attended_sessions": attended,
        "attendance_percentage": pct,
    }


def build_report(dataset: Dataset, start: Any, end: Any) -> ReportData:
    """Validated range -> filtered records -> per-student stats -> report."""
    start_iso, end_iso = validate_range(start, end)
    scoped = filter_by_date_range(dataset.records, start_iso, end_iso)
    stats = compute_all_stats(dataset.students, scoped)
    summary = aggregate(stats)
    logger.info(
        "Report %s..%s: %d records in range, %d students",
        start_iso, end_iso, len(scoped), summary.total_students,
    )
    return ReportData(
        date_range=DateRange(start=start_iso, end=end_iso),
        stats=stats,
        total_students=len(stats),
        average_attendance=summary.average_attendance,
    )


def stats_frame(stats_list: Sequence[AttendanceStats]) -> pd.DataFrame:
    if not stats_list:
        return pd.DataFrame(columns=STATS_COLUMNS)
    return pd.DataFrame(
        [[s.student_name, s.total_sessions, s.attended_sessions, s.attendance_percentage] for s in stats_list],
        columns=STATS_COLUMNS,
    )
