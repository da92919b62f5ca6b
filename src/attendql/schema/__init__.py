"""ORM mappings of the attendance store."""

from attendql.schema.models import (
    AttendanceRecord,
    Base,
    Department,
    Semester,
    Student,
    Subject,
)

__all__ = [
    "Base",
    "Department",
    "Semester",
    "Subject",
    "Student",
    "AttendanceRecord",
]
