from __future__ import annotations
import asyncio
import hashlib
import logging
import streamlit as st
import pandas as pd
from dormattend.dates import current_date, format_date, format_short, parse_iso, quick_range, to_iso, yesterday
from dormattend.errors import InvalidRangeError
from dormattend.export import XLSX_MIME, export_report_to_excel_bytes, report_filename, students_to_excel_bytes
from dormattend.ingest import UploadSlot
from dormattend.models import Dataset
from dormattend.stats import aggregate, build_report, classify, compute_all_stats, daily_summary, stats_frame
from dormattend.storage import LocalStorage, load_dataset, save_dataset
from dormattend.store import (add_manual_student, add_students, get_student_record_for_date, remove_student, replace_with_sample, unique_dates, upsert_attendance)
from dormattend.utils import LOG_LEVEL

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

st.set_page_config(page_title="Dorm Attendance Tracker", layout="wide")
st.title("Dorm Attendance Tracker")
# =========================

# State
# =========================
storage = LocalStorage()

if "dataset" not in st.session_state:
    st.session_state["dataset"] = load_dataset(storage)
st.session_state.setdefault("upload_slot", UploadSlot())
st.session_state.setdefault("imported_uploads", set())
st.session_state.setdefault("selected_date", current_date())
st.session_state.setdefault("report", None)
st.session_state.setdefault("report_start", None)
st.session_state.setdefault("report_end", None)
st.session_state.setdefault("status", None)


def _data() -> Dataset:
    return st.session_state["dataset"]


def _commit(ds: Dataset) -> None:
    # every mutation is persisted right away; a built report is now stale
    st.session_state["dataset"] = ds
    st.session_state["report"] = None
    save_dataset(storage, ds)


def _upload_key(upload) -> str:
    return hashlib.md5(upload.name.encode("utf-8") + upload.getvalue()).hexdigest()


def _fmt_pct(v: float) -> str:
    return f"{v:.1f}%"


if st.session_state["status"]:
    st.success(st.session_state["status"])
    st.session_state["status"] = None

tab_students, tab_attendance, tab_reports = st.tabs(["Students", "Attendance", "Reports"])
# =========================

# Students
# =========================
with tab_students:
    st.subheader("Import students")
    slot: UploadSlot = st.session_state["upload_slot"]
    upload = st.file_uploader(
        "Drop an Excel (.xlsx, .xls) or JSON file with a Name column",
        type=["xlsx", "xls", "json"],
        accept_multiple_files=False,
        disabled=slot.processing,
    )

    if upload is not None:
        key = _upload_key(upload)
        if key not in st.session_state["imported_uploads"]:
            with st.spinner("Processing file..."):
                result = asyncio.run(slot.submit(upload.name, upload.getvalue()))
            if result.success:
                st.session_state["imported_uploads"].add(key)
                _commit(add_students(_data(), result.students))
                st.success(f"Imported {len(result.students)} students from {upload.name}.")
            else:
                st.error(result.error)

    with st.form("manual_add_form", clear_on_submit=True):
        name = st.text_input("Student name", value="")
        if st.form_submit_button("Add student"):
            if not name.strip():
                st.error("Name is required")
            else:
                _commit(add_manual_student(_data(), name))
                st.session_state["status"] = f"Added {name.strip()}."
                st.rerun()

    with st.expander("Sample data", expanded=False):
        st.caption("Replaces all current students and records with the sample dataset.")
        confirm = st.checkbox("I understand the current data will be replaced", key="confirm_sample")
        if st.button("Load sample data", disabled=not confirm):
            _commit(replace_with_sample(_data()))
            st.session_state["status"] = "Sample data loaded."
            st.rerun()

    ds = _data()
    st.subheader(f"Students ({len(ds.students)})")
    if not ds.students:
        st.info("No students yet. Import a file or add one manually.")
    else:
        all_stats = compute_all_stats(ds.students, ds.records)
        summary = aggregate(all_stats)
        groups = classify(all_stats)

        c1, c2, c3, c4 = st.columns(4)
        with c1:
            st.metric("Students", summary.total_students)
        with c2:
            st.metric("Average attendance", _fmt_pct(summary.average_attendance))
        with c3:
            st.metric("Fully present", groups["fully_present"])
        with c4:
            st.metric("Never present", groups["absent"])

        st.dataframe(stats_frame(all_stats), width="stretch", hide_index=True)

        for i, s in enumerate(ds.students):
            r1, r2 = st.columns([5, 1])
            with r1:
                label = s.name if not s.student_id else f"{s.name} ({s.student_id})"
                st.write(label)
            with r2:
                if st.button("Remove", key=f"rm__{i}__{s.id}"):
                    _commit(remove_student(_data(), s.id))
                    st.session_state["status"] = f"Removed {s.name} and their records."
                    st.rerun()

        st.download_button(
            "Download student list",
            data=students_to_excel_bytes(ds.students),
            file_name="students.xlsx",
            mime=XLSX_MIME,
        )
# =========================

# Attendance
# =========================
with tab_attendance:
    ds = _data()
    if not ds.students:
        st.info("Add students before taking attendance.")
    else:
        a1, a2 = st.columns([2, 3])
        with a1:
            picked = st.date_input("Date", value=parse_iso(st.session_state["selected_date"]))
            if picked is not None and to_iso(picked) != st.session_state["selected_date"]:
                st.session_state["selected_date"] = to_iso(picked)
                st.rerun()
            q1, q2 = st.columns(2)
            with q1:
                if st.button("Today"):
                    st.session_state["selected_date"] = current_date()
                    st.rerun()
            with q2:
                if st.button("Yesterday"):
                    st.session_state["selected_date"] = yesterday()
                    st.rerun()

        selected = st.session_state["selected_date"]
        day = daily_summary(ds, selected)
        with a2:
            st.write(f"**{format_date(selected)}**")
            m1, m2, m3 = st.columns(3)
            with m1:
                st.metric("Students", day["total_students"])
            with m2:
                st.metric("Sessions attended", f'{day["attended_sessions"]}/{day["total_sessions"]}')
            with m3:
                st.metric("Attendance", _fmt_pct(day["attendance_percentage"]))

        rows = []
        for s in ds.students:
            rec = get_student_record_for_date(ds.records, s.id, selected)
            rows.append({
                "id": s.id,
                "Student": s.name,
                "Morning": bool(rec.morning) if rec else False,
                "Evening": bool(rec.evening) if rec else False,
            })
        sheet = pd.DataFrame(rows)

        edited = st.data_editor(
            sheet,
            width="stretch",
            hide_index=True,
            column_config={"id": None},
            disabled=["Student"],
            key=f"att__{selected}",
        )

        # only rows the user actually toggled become records
        changed = False
        new_ds = ds
        for before, after in zip(sheet.to_dict(orient="records"), edited.to_dict(orient="records")):
            if before["Morning"] != after["Morning"] or before["Evening"] != after["Evening"]:
                new_ds = upsert_attendance(new_ds, before["id"], selected, bool(after["Morning"]), bool(after["Evening"]))
                changed = True
        if changed:
            _commit(new_ds)
            st.rerun()

        recent = list(reversed(unique_dates(ds.records)))[:10]
        if recent:
            st.caption("Recent dates")
            cols = st.columns(len(recent))
            for col, d in zip(cols, recent):
                with col:
                    if st.button(format_short(d), key=f"recent__{d}", type="primary" if d == selected else "secondary"):
                        st.session_state["selected_date"] = d
                        st.rerun()
# =========================

# Reports
# =========================
with tab_reports:
    ds = _data()
    if not ds.students:
        st.info("Add students and take attendance before building reports.")
    else:
        st.subheader("Date range")
        b1, b2, b3 = st.columns(3)
        for col, days in zip((b1, b2, b3), (7, 14, 30)):
            with col:
                if st.button(f"Last {days} days", key=f"quick__{days}"):
                    s_iso, e_iso = quick_range(days)
                    st.session_state["report_start"] = parse_iso(s_iso)
                    st.session_state["report_end"] = parse_iso(e_iso)
                    st.rerun()

        d1, d2 = st.columns(2)
        with d1:
            start = st.date_input("Start date", key="report_start")
        with d2:
            end = st.date_input("End date", key="report_end")

        if st.button("Build report", type="primary"):
            try:
                st.session_state["report"] = build_report(ds, start, end)
            except InvalidRangeError as e:
                st.session_state["report"] = None
                st.error(str(e))

        report = st.session_state.get("report")
        if report is None:
            all_stats = compute_all_stats(ds.students, ds.records)
            st.caption("All recorded dates")
            st.dataframe(stats_frame(all_stats), width="stretch", hide_index=True)
        else:
            summary = aggregate(report.stats)
            st.write(f"**{format_date(report.date_range.start)} to {format_date(report.date_range.end)}**")
            o1, o2, o3, o4 = st.columns(4)
            with o1:
                st.metric("Students", summary.total_students)
            with o2:
                st.metric("Sessions", summary.total_sessions)
            with o3:
                st.metric("Attended", summary.attended_sessions)
            with o4:
                st.metric("Average attendance", _fmt_pct(summary.average_attendance))

            st.dataframe(stats_frame(report.stats), width="stretch", hide_index=True)

            st.download_button(
                "Download Excel report",
                data=export_report_to_excel_bytes(report),
                file_name=report_filename(report.date_range.start, report.date_range.end),
                mime=XLSX_MIME,
            )
