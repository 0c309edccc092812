from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class Student:
    id: str
    name: str
    student_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"id": self.id, "name": self.name}
        if self.student_id is not None:
            out["studentId"] = self.student_id
        return out

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Student":
        sid = d.get("studentId")
        return cls(
            id=str(d["id"]),
            name=str(d["name"]),
            student_id=None if sid is None else str(sid),
        )


@dataclass(frozen=True)
class AttendanceRecord:
    student_id: str
    date: str  # YYYY-MM-DD
    morning: bool = False
    evening: bool = False

    @property
    def key(self):
        return (self.student_id, self.date)

    @property
    def attended(self) -> int:
        return int(self.morning) + int(self.evening)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "studentId": self.student_id,
            "date": self.date,
            "morning": self.morning,
            "evening": self.evening,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "AttendanceRecord":
        return cls(
            student_id=str(d["studentId"]),
            date=str(d["date"]),
            morning=bool(d.get("morning", False)),
            evening=bool(d.get("evening", False)),
        )


@dataclass(frozen=True)
class AttendanceStats:
    student_id: str
    student_name: str
    total_sessions: int
    attended_sessions: int
    attendance_percentage: float


@dataclass(frozen=True)
class AttendanceSummary:
    total_sessions: int = 0
    attended_sessions: int = 0
    average_attendance: float = 0.0
    total_students: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalSessions": self.total_sessions,
            "attendedSessions": self.attended_sessions,
            "averageAttendance": self.average_attendance,
            "totalStudents": self.total_students,
        }


@dataclass(frozen=True)
class Dataset:
    students: List[Student] = field(default_factory=list)
    records: List[AttendanceRecord] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "students": [s.to_dict() for s in self.students],
            "records": [r.to_dict() for r in self.records],
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Dataset":
        students = d.get("students", [])
        records = d.get("records", [])
        if not isinstance(students, list) or not isinstance(records, list):
            raise ValueError("students and records must be lists")
        return cls(
            students=[Student.from_dict(s) for s in students],
            records=[AttendanceRecord.from_dict(r) for r in records],
        )

    @classmethod
    def empty(cls) -> "Dataset":
        return cls(students=[], records=[])


@dataclass(frozen=True)
class DateRange:
    start: str
    end: str


@dataclass(frozen=True)
class ReportData:
    date_range: DateRange
    stats: List[AttendanceStats]
    total_students: int
    average_attendance: float


@dataclass(frozen=True)
class ImportResult:
    """Outcome of one upload: either students or a user-facing error message."""
    success: bool
    students: List[Student] = field(default_factory=list)
    error: Optional[str] = None

    @classmethod
    def ok(cls, students: List[Student]) -> "ImportResult":
        return cls(success=True, students=list(students))

    @classmethod
    def failed(cls, message: str) -> "ImportResult":
        return cls(success=False, students=[], error=message)
