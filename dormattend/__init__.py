"""
This package contains:
- the dataset model (students, per-day morning/evening records)
- the record store (upsert, cascade delete, add)
- attendance statistics and report building
- calendar date ranges
- student import from Excel/JSON files
- Excel report export
- local key-value persistence
"""
from .models import (Student, AttendanceRecord, AttendanceStats, AttendanceSummary, Dataset, DateRange, ReportData, ImportResult)
from .store import (upsert_attendance, remove_student, add_students, add_manual_student, replace_with_sample)
from .stats import compute_stats, compute_all_stats, aggregate, build_report
from .dates import enumerate_dates, filter_by_date_range, validate_range
from .ingest import parse_student_file, import_students_file, UploadSlot
from .export import export_report_to_excel_bytes, report_filename
from .storage import LocalStorage, load_dataset, save_dataset

__all__ = [
    "Student",
    "AttendanceRecord",
    "AttendanceStats",
    "AttendanceSummary",
    "Dataset",
    "DateRange",
    "ReportData",
    "ImportResult",
    "upsert_attendance",
    "remove_student",
    "add_students",
    "add_manual_student",
    "replace_with_sample",
    "compute_stats",
    "compute_all_stats",
    "aggregate",
    "build_report",
    "enumerate_dates",
    "filter_by_date_range",
    "validate_range",
    "parse_student_file",
    "import_students_file",
    "UploadSlot",
    "export_report_to_excel_bytes",
    "report_filename",
    "LocalStorage",
    "load_dataset",
    "save_dataset",
]
