"""SQLAlchemy ORM models for the attendance store.

The store is owned by the surrounding application; AttendQL only reads it.
These mappings exist so that generated queries can be mapped back onto
``Student`` objects with their department, semester and attendance records.
"""

from __future__ import annotations

import datetime as dt

from sqlalchemy import Boolean, Date, ForeignKey, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all AttendQL models."""

    pass


class Department(Base):
    """A named academic department (e.g. "GÉNIE CIVIL")."""

    __tablename__ = "departments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)

    students: Mapped[list[Student]] = relationship("Student", back_populates="department")
    subjects: Mapped[list[Subject]] = relationship("Subject", back_populates="department")


class Semester(Base):
    """A named semester (e.g. "S1 2024")."""

    __tablename__ = "semesters"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)

    students: Mapped[list[Student]] = relationship("Student", back_populates="semester")
    subjects: Mapped[list[Subject]] = relationship("Subject", back_populates="semester")


class Subject(Base):
    """A taught subject, owned by a department and a semester."""

    __tablename__ = "subjects"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    code: Mapped[str | None] = mapped_column(String(50), nullable=True)
    department_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("departments.id"), nullable=True
    )
    semester_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("semesters.id"), nullable=True
    )

    department: Mapped[Department | None] = relationship("Department", back_populates="subjects")
    semester: Mapped[Semester | None] = relationship("Semester", back_populates="subjects")
    attendance_records: Mapped[list[AttendanceRecord]] = relationship(
        "AttendanceRecord", back_populates="subject"
    )


class Student(Base):
    """A student. Department and semester are mandatory."""

    __tablename__ = "students"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    student_code: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    department_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("departments.id"), nullable=False, index=True
    )
    semester_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("semesters.id"), nullable=False, index=True
    )

    department: Mapped[Department] = relationship("Department", back_populates="students")
    semester: Mapped[Semester] = relationship("Semester", back_populates="students")
    attendance_records: Mapped[list[AttendanceRecord]] = relationship(
        "AttendanceRecord",
        back_populates="student",
        order_by="AttendanceRecord.date",
    )

    def absence_minutes(self, start: dt.date | None = None, end: dt.date | None = None) -> int:
        """Sum the duration of absent records, optionally within [start, end]."""
        total = 0
        for record in self.attendance_records:
            if record.is_present:
                continue
            if start is not None and record.date < start:
                continue
            if end is not None and record.date > end:
                continue
            total += record.duration or 0
        return total

    def absence_hours(self, start: dt.date | None = None, end: dt.date | None = None) -> int:
        """Whole absence hours, floor of absent minutes / 60."""
        return self.absence_minutes(start, end) // 60

    def has_absence(self) -> bool:
        """Whether any attendance record is marked absent."""
        return any(not record.is_present for record in self.attendance_records)


class AttendanceRecord(Base):
    """One class session for one student. Duration is stored in minutes."""

    __tablename__ = "attendance_records"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    student_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("students.id"), nullable=False, index=True
    )
    subject_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("subjects.id"), nullable=False, index=True
    )
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    duration: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_present: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    student: Mapped[Student] = relationship("Student", back_populates="attendance_records")
    subject: Mapped[Subject] = relationship("Subject", back_populates="attendance_records")
