from __future__ import annotations
from io import BytesIO
from typing import Sequence
import pandas as pd
from .dates import format_us
from .models import ReportData, Student
from .stats import STATS_COLUMNS, stats_frame

XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

SUMMARY_SHEET = "Summary"
DETAIL_SHEET = "Detailed Stats"
STUDENTS_SHEET = "Students"

REPORT_TITLE = "Dorm Attendance Report"
DETAIL_COLUMNS = ["Student Name", "Total Sessions", "Attended Sessions", "Attendance Percentage"]


def _pct_text(v: float) -> str:
    # 50.0 -> "50%", 33.33 -> "33.33%"
    return f"{float(v):g}%"


def report_filename(start: str, end: str) -> str:
    name = f"attendance-report-{format_us(start)}-to-{format_us(end)}.xlsx"
    return name.replace("/", "-")


def export_report_to_excel_bytes(report: ReportData) -> bytes:
    """
    Two sheets:
      Summary        - title block, then one row per student (input order)
      Detailed Stats - plain table with the same four fields
    An empty stats list still yields both sheets, headers only.
    """
    bio = BytesIO()
    detail_df = stats_frame(report.stats)
    detail_df.columns = DETAIL_COLUMNS

    with pd.ExcelWriter(bio, engine="xlsxwriter") as writer:
        wb = writer.book

        fmt_title = wb.add_format({"bold": True, "font_size": 14})
        fmt_meta = wb.add_format({"font_color": "#555555"})
        fmt_header = wb.add_format({"bold": True, "bg_color": "#F2F2F2", "border": 1, "valign": "vcenter"})
        fmt_text = wb.add_format({"border": 1, "valign": "top"})
        fmt_int = wb.add_format({"border": 1, "valign": "top", "num_format": "0"})
        fmt_num = wb.add_format({"border": 1, "valign": "top", "num_format": "0.00"})

        ws = wb.add_worksheet(SUMMARY_SHEET)
        writer.sheets[SUMMARY_SHEET] = ws

        ws.write(0, 0, REPORT_TITLE, fmt_title)
        ws.write(1, 0, f"Date Range: {report.date_range.start} to {report.date_range.end}", fmt_meta)
        ws.write(2, 0, f"Total Students: {report.total_students}", fmt_meta)
        ws.write(3, 0, f"Average Attendance: {report.average_attendance:.2f}%", fmt_meta)
        # row 4 stays blank

        header_row = 5
        for c, n in enumerate(STATS_COLUMNS):
            ws.write(header_row, c, n, fmt_header)

        r = header_row + 1
        for s in report.stats:
            ws.write(r, 0, s.student_name, fmt_text)
            ws.write_number(r, 1, s.total_sessions, fmt_int)
            ws.write_number(r, 2, s.attended_sessions, fmt_int)
            ws.write(r, 3, _pct_text(s.attendance_percentage), fmt_text)
            r += 1

        ws.set_column(0, 0, 32)
        ws.set_column(1, 3, 18)

        detail_df.to_excel(writer, index=False, sheet_name=DETAIL_SHEET)
        wsd = writer.sheets[DETAIL_SHEET]
        wsd.freeze_panes(1, 0)
        for col, name in enumerate(detail_df.columns):
            wsd.write(0, col, name, fmt_header)
        wsd.set_column(0, 0, 32)
        wsd.set_column(1, 2, 18)
        wsd.set_column(3, 3, 22, fmt_num)

    return bio.getvalue()


def students_to_excel_bytes(students: Sequence[Student]) -> bytes:
    df = pd.DataFrame(
        [[s.student_id or "", s.name] for s in students],
        columns=["Student ID", "Name"],
    )
    bio = BytesIO()
    with pd.ExcelWriter(bio, engine="xlsxwriter") as writer:
        df.to_excel(writer, index=False, sheet_name=STUDENTS_SHEET)
        ws = writer.sheets[STUDENTS_SHEET]
        ws.set_column(0, 0, 16)
        ws.set_column(1, 1, 32)
    return bio.getvalue()
