from __future__ import annotations
from .models import AttendanceRecord, Dataset, Student

SAMPLE_STUDENTS = [
    ("student-1", "Ahmet Yılmaz"),
    ("student-2", "Ayşe Demir"),
    ("student-3", "Mehmet Kaya"),
    ("student-4", "Fatma Özkan"),
    ("student-5", "Mustafa Çelik"),
    ("student-6", "Zeynep Arslan"),
    ("student-7", "Yusuf Şahin"),
    ("student-8", "Elif Doğan"),
]

# date -> (morning, evening) per student, in SAMPLE_STUDENTS order
SAMPLE_DAYS = {
    "2025-01-04": [(1, 1), (1, 0), (1, 1), (0, 1), (1, 1), (1, 1), (0, 0), (1, 1)],
    "2025-01-03": [(1, 1), (1, 1), (1, 1), (1, 1), (0, 1), (1, 1), (1, 1), (1, 1)],
    "2025-01-02": [(1, 1), (1, 1), (0, 1), (1, 0), (1, 1), (1, 1), (1, 1), (1, 1)],
    "2025-01-01": [(1, 1), (1, 1), (1, 1), (1, 1), (1, 1), (1, 1), (0, 0), (1, 1)],
}


def sample_dataset() -> Dataset:
    students = [Student(id=sid, name=name) for sid, name in SAMPLE_STUDENTS]
    records = []
    for day, marks in SAMPLE_DAYS.items():
        for (sid, _), (m, e) in zip(SAMPLE_STUDENTS, marks):
            records.append(AttendanceRecord(student_id=sid, date=day, morning=bool(m), evening=bool(e)))
    return Dataset(students=students, records=records)
