from __future__ import annotations
import asyncio
import json
import logging
from io import BytesIO
from typing import Any, Dict, List, Mapping, Optional, Sequence
import pandas as pd
from .errors import EmptyImportError, IngestError, UnsupportedFormatError
from .models import ImportResult, Student
from .store import timestamp_id
from .utils import clean_cell, load_json, norm_text, rules_path

logger = logging.getLogger(__name__)

RULES = load_json(rules_path(), {})

EXCEL_EXTENSIONS = (".xlsx", ".xls")
JSON_EXTENSIONS = (".json",)

NAME_HEADERS: List[str] = RULES.get("import", {}).get(
    "name_headers", ["Name", "name", "Student Name", "student_name"]
)
STUDENT_ID_HEADERS: List[str] = RULES.get("import", {}).get(
    "student_id_headers", ["Student ID", "student_id", "ID", "id"]
)

UNSUPPORTED_MSG = "Unsupported file format. Please upload .xlsx, .xls or .json files."
EMPTY_MSG = "No valid student data found in the file."
BUSY_MSG = "Another file is still being processed."
# =========================

# Header alias lookup
# =========================
def lookup_alias(row: Mapping[str, Any], candidates: Sequence[str]) -> Optional[Any]:
    """
    First non-empty value among candidate headers.

    Exact header names are tried first in candidate order, then a normalized
    comparison (case, spacing, underscores) so "STUDENT  NAME" still resolves.
    Returns None when nothing matches.
    """
    for key in candidates:
        if key in row and clean_cell(row[key]):
            return row[key]

    by_norm: Dict[str, Any] = {}
    for k, v in row.items():
        by_norm.setdefault(norm_text(k), v)

    for key in candidates:
        nk = norm_text(key)
        if nk in by_norm and clean_cell(by_norm[nk]):
            return by_norm[nk]
    return None


def _code_text(v: Any) -> Optional[str]:
    # Excel turns 1001 into 1001.0 once the column has a blank
    if v is None:
        return None
    if isinstance(v, float) and v.is_integer():
        return str(int(v))
    s = clean_cell(v)
    return s or None
# =========================

# Spreadsheet
# =========================
def _read_first_sheet(data: bytes) -> pd.DataFrame:
    try:
        xls = pd.ExcelFile(BytesIO(data))
        first = xls.sheet_names[0]
        return pd.read_excel(xls, sheet_name=first, dtype=object)
    except Exception as e:
        raise UnsupportedFormatError("Failed to parse Excel file") from e


def parse_excel_students(data: bytes) -> List[Student]:
    df = _read_first_sheet(data)
    students: List[Student] = []
    for index, row in enumerate(df.to_dict(orient="records")):
        name = lookup_alias(row, NAME_HEADERS)
        if not name:
            continue
        code = lookup_alias(row, STUDENT_ID_HEADERS)
        students.append(Student(
            id=timestamp_id(index),
            name=str(name).strip(),
            student_id=_code_text(code),
        ))
    return students
# =========================

# JSON
# =========================
def parse_json_students(data: bytes) -> List[Student]:
    try:
        payload = json.loads(data.decode("utf-8-sig"))
    except (UnicodeDecodeError, ValueError) as e:
        raise UnsupportedFormatError("Invalid JSON format") from e

    if not isinstance(payload, list):
        return []

    students: List[Student] = []
    seen = set()
    for index, entry in enumerate(payload):
        if not isinstance(entry, dict):
            continue
        name = clean_cell(entry.get("name"))
        if not name:
            continue
        given_id = _code_text(entry.get("id"))
        code = _code_text(entry.get("studentId")) or given_id
        students.append(Student(
            id=given_id if given_id and given_id not in seen else timestamp_id(index),
            name=name,
            student_id=code,
        ))
        seen.add(students[-1].id)
    return students
# =========================

# Main: upload -> students
# =========================
def parse_student_file(name: str, data: bytes) -> List[Student]:
    """
    Students from an uploaded file. Raises UnsupportedFormatError for unknown
    extensions or unreadable content and EmptyImportError when nothing usable
    is left. The dataset is never touched; merge with store.add_students.
    """
    lower = (name or "").lower()
    if lower.endswith(EXCEL_EXTENSIONS):
        students = parse_excel_students(data)
    elif lower.endswith(JSON_EXTENSIONS):
        students = parse_json_students(data)
    else:
        raise UnsupportedFormatError(UNSUPPORTED_MSG)

    if not students:
        raise EmptyImportError(EMPTY_MSG)
    return students


def import_students_file(name: str, data: bytes) -> ImportResult:
    try:
        students = parse_student_file(name, data)
    except IngestError as e:
        logger.warning("Import of %r rejected: %s", name, e)
        return ImportResult.failed(str(e))
    logger.info("Imported %d students from %r", len(students), name)
    return ImportResult.ok(students)


def load_students_from_upload(upload) -> ImportResult:
    # Streamlit UploadedFile or anything with .name and .getvalue()
    return import_students_file(upload.name, upload.getvalue())


class UploadSlot:
    """
    One import in flight at a time.

    `processing` is set while a file is parsed; a second submit during that
    window is rejected with a busy result, never queued.
    """

    def __init__(self):
        self.processing = False

    async def submit(self, name: str, data: bytes) -> ImportResult:
        if self.processing:
            return ImportResult.failed(BUSY_MSG)
        self.processing = True
        try:
            return await asyncio.to_thread(import_students_file, name, data)
        finally:
            self.processing = False
