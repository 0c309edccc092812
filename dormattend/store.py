"""
Record store: pure functions over a Dataset value.

Every mutation returns a new Dataset; the caller keeps it (session state) and
hands it to the persistence gateway. Passing `storage=` does that in one step.
"""
from __future__ import annotations
import random
import string
import time
from dataclasses import replace
from typing import Iterable, List, Optional, Set
from .models import AttendanceRecord, Dataset, Student
from .sample import sample_dataset
from .storage import LocalStorage, save_dataset

_BASE36 = string.digits + string.ascii_lowercase


def generate_id(length: int = 9) -> str:
    # random base-36 token
    return "".join(random.choice(_BASE36) for _ in range(length))


def timestamp_id(index: Optional[int] = None) -> str:
    millis = int(time.time() * 1000)
    if index is None:
        return f"student-{millis}"
    return f"student-{millis}-{index}"


def validate_student(student: Student) -> bool:
    return bool(student.name and student.name.strip())


def _persist(dataset: Dataset, storage: Optional[LocalStorage]) -> Dataset:
    if storage is not None:
        save_dataset(storage, dataset)
    return dataset


def upsert_attendance(
    dataset: Dataset,
    student_id: str,
    date: str,
    morning: bool,
    evening: bool,
    *,
    storage: Optional[LocalStorage] = None,
) -> Dataset:
    """
    One record per (student_id, date): an existing record keeps its position and
    gets the new morning/evening values, otherwise a record is appended.
    """
    records = list(dataset.records)
    for i, r in enumerate(records):
        if r.student_id == student_id and r.date == date:
            records[i] = replace(r, morning=bool(morning), evening=bool(evening))
            break
    else:
        records.append(AttendanceRecord(student_id=student_id, date=date, morning=bool(morning), evening=bool(evening)))

    return _persist(replace(dataset, records=records), storage)


def remove_student(dataset: Dataset, student_id: str, *, storage: Optional[LocalStorage] = None) -> Dataset:
    # cascade: the student's records go with it
    students = [s for s in dataset.students if s.id != student_id]
    records = [r for r in dataset.records if r.student_id != student_id]
    return _persist(Dataset(students=students, records=records), storage)


def _fresh_id(taken: Set[str], index: int) -> str:
    candidate = timestamp_id(index)
    while candidate in taken:
        candidate = f"{timestamp_id(index)}-{generate_id(4)}"
    return candidate


def add_students(dataset: Dataset, new_students: Iterable[Student], *, storage: Optional[LocalStorage] = None) -> Dataset:
    """
    Append students. Names may repeat; ids may not: an incoming id already held
    by the dataset or by an earlier student in the batch is replaced with a
    fresh one.
    """
    students = list(dataset.students)
    taken = {s.id for s in students}
    for index, s in enumerate(new_students):
        if not s.id or s.id in taken:
            s = replace(s, id=_fresh_id(taken, index))
        taken.add(s.id)
        students.append(s)
    return _persist(replace(dataset, students=students), storage)


def add_manual_student(dataset: Dataset, name: Optional[str], *, storage: Optional[LocalStorage] = None) -> Dataset:
    name = (name or "").strip()
    if not name:
        return dataset
    return add_students(dataset, [Student(id=timestamp_id(), name=name)], storage=storage)


def replace_with_sample(dataset: Dataset, *, storage: Optional[LocalStorage] = None) -> Dataset:
    # the current dataset is discarded; confirmation happens in the UI
    return _persist(sample_dataset(), storage)


def get_student_record_for_date(
    records: Iterable[AttendanceRecord], student_id: str, date: str
) -> Optional[AttendanceRecord]:
    for r in records:
        if r.student_id == student_id and r.date == date:
            return r
    return None


def records_for_date(records: Iterable[AttendanceRecord], date: str) -> List[AttendanceRecord]:
    return [r for r in records if r.date == date]


def unique_dates(records: Iterable[AttendanceRecord]) -> List[str]:
    return sorted({r.date for r in records})
