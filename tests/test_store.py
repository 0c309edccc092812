from __future__ import annotations

from dormattend.models import AttendanceRecord, Dataset, Student
from dormattend.storage import LocalStorage, load_dataset
from dormattend.store import (
    add_manual_student,
    add_students,
    generate_id,
    get_student_record_for_date,
    records_for_date,
    remove_student,
    replace_with_sample,
    timestamp_id,
    unique_dates,
    upsert_attendance,
    validate_student,
)


def _two_students() -> Dataset:
    return Dataset(
        students=[Student(id="s1", name="A"), Student(id="s2", name="B")],
        records=[
            AttendanceRecord("s1", "2025-01-01", True, False),
            AttendanceRecord("s2", "2025-01-01", True, True),
            AttendanceRecord("s1", "2025-01-02", False, True),
        ],
    )


def test_upsert_appends_new_record():
    ds = upsert_attendance(Dataset.empty(), "s1", "2025-01-01", True, False)

    assert ds.records == [AttendanceRecord("s1", "2025-01-01", True, False)]


def test_upsert_updates_in_place_and_keeps_position():
    ds = upsert_attendance(_two_students(), "s1", "2025-01-01", False, True)

    assert len(ds.records) == 3
    assert ds.records[0] == AttendanceRecord("s1", "2025-01-01", False, True)
    assert ds.records[1].student_id == "s2"


def test_upsert_twice_is_idempotent():
    once = upsert_attendance(Dataset.empty(), "s1", "2025-01-01", True, True)
    twice = upsert_attendance(once, "s1", "2025-01-01", True, True)

    assert twice.records == once.records
    keys = [r.key for r in twice.records]
    assert len(keys) == len(set(keys))


def test_upsert_does_not_mutate_input():
    original = _two_students()
    upsert_attendance(original, "s1", "2025-01-01", False, False)

    assert original.records[0] == AttendanceRecord("s1", "2025-01-01", True, False)


def test_untouched_record_is_kept_as_explicit_state():
    ds = upsert_attendance(Dataset.empty(), "s1", "2025-01-01", False, False)

    assert get_student_record_for_date(ds.records, "s1", "2025-01-01") is not None
    assert get_student_record_for_date(ds.records, "s1", "2025-01-02") is None


def test_remove_student_cascades_records():
    ds = remove_student(_two_students(), "s1")

    assert [s.id for s in ds.students] == ["s2"]
    assert all(r.student_id != "s1" for r in ds.records)
    assert len(ds.records) == 1


def test_remove_missing_student_is_noop():
    ds = _two_students()

    assert remove_student(ds, "nope") == ds


def test_add_students_appends_and_allows_duplicate_names():
    ds = add_students(_two_students(), [Student(id="s3", name="A"), Student(id="s4", name="C")])

    assert [s.id for s in ds.students] == ["s1", "s2", "s3", "s4"]
    assert [s.name for s in ds.students].count("A") == 2


def test_add_students_replaces_ids_already_taken():
    ds = add_students(_two_students(), [Student(id="s1", name="C"), Student(id="s5", name="D"), Student(id="s5", name="E")])

    ids = [s.id for s in ds.students]
    assert len(set(ids)) == 5
    assert ids[:2] == ["s1", "s2"]
    assert ids[3] == "s5"
    assert ids[2].startswith("student-")
    assert ids[4].startswith("student-")

    ds = remove_student(ds, "s1")
    assert [s.name for s in ds.students] == ["B", "C", "D", "E"]


def test_import_onto_sample_keeps_ids_unique():
    ds = replace_with_sample(Dataset.empty())
    ds = add_students(ds, [Student(id="student-1", name="New")])

    ids = [s.id for s in ds.students]
    assert len(ids) == len(set(ids)) == 9
    assert ds.students[-1].name == "New"
    assert ds.students[-1].id != "student-1"


def test_add_manual_student_trims_and_ignores_blank():
    ds = add_manual_student(Dataset.empty(), "  Zed  ")
    assert [s.name for s in ds.students] == ["Zed"]
    assert ds.students[0].id.startswith("student-")

    assert add_manual_student(ds, "   ") is ds
    assert add_manual_student(ds, None) is ds


def test_mutation_persists_when_storage_given(tmp_path):
    storage = LocalStorage(tmp_path)

    ds = upsert_attendance(Dataset.empty(), "s1", "2025-01-01", True, False, storage=storage)

    assert load_dataset(storage) == ds


def test_replace_with_sample_discards_current_data():
    ds = replace_with_sample(_two_students())

    assert len(ds.students) == 8
    assert len(ds.records) == 32
    assert all(s.id.startswith("student-") for s in ds.students)


def test_lookup_helpers():
    records = _two_students().records

    assert unique_dates(records) == ["2025-01-01", "2025-01-02"]
    assert len(records_for_date(records, "2025-01-01")) == 2
    assert records_for_date(records, "2030-01-01") == []


def test_ids():
    token = generate_id()
    assert len(token) == 9
    assert token.isalnum() and token == token.lower()
    assert timestamp_id(3).endswith("-3")


def test_validate_student():
    assert validate_student(Student(id="x", name="Bob"))
    assert not validate_student(Student(id="x", name="   "))
