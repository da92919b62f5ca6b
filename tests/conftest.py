"""Shared test fixtures for AttendQL."""

from __future__ import annotations

import datetime as dt
import itertools
import os
import tempfile
from collections.abc import Callable, Generator

import pytest

from attendql.core.connection import DatabaseConnection
from attendql.core.types import TranslationResult, TranslationSuccess
from attendql.schema.models import AttendanceRecord, Department, Semester, Student, Subject
from attendql.translation.gateway import TranslationGateway


class StubGateway(TranslationGateway):
    """Translation gateway that returns a fixed result and records prompts."""

    def __init__(self, result: TranslationResult | str = "") -> None:
        if isinstance(result, str):
            result = TranslationSuccess(result)
        self.result = result
        self.prompts: list[str] = []

    def reply(self, raw_text: str) -> None:
        """Answer every following prompt with raw_text."""
        self.result = TranslationSuccess(raw_text)

    def translate(self, prompt: str) -> TranslationResult:
        self.prompts.append(prompt)
        return self.result

    @property
    def model_name(self) -> str:
        return "stub"


# (code, name, department, [(date, minutes, present), ...])
ATTENDANCE_FIXTURE = [
    (
        "CS001",
        "Alice Martin",
        "Computer Science",
        [
            ("2024-04-10", 300, False),
            ("2024-04-11", 120, True),
            ("2024-04-15", 300, False),
        ],
    ),
    ("CS002", "Bruno Diallo", "Computer Science", [("2024-04-10", 300, False)]),
    (
        "CS003",
        "Chloé Petit",
        "Computer Science",
        [("2024-04-20", 360, False), ("2024-05-02", 360, False)],
    ),
    ("GC001", "David Ngo", "GÉNIE CIVIL", [("2024-03-05", 900, False)]),
    ("GC002", "Emma Roux", "GÉNIE CIVIL", [("2024-04-10", 90, True)]),
    ("GC003", "Farid Benali", "GÉNIE CIVIL", []),
]
"""Absence hours: CS001=10, CS002=5, CS003=12, GC001=15, GC002=0, GC003=0."""


def seed_attendance(connection: DatabaseConnection) -> None:
    """Create the tables and load ATTENDANCE_FIXTURE."""
    connection.create_tables()
    with connection.get_session() as session:
        semester = Semester(name="S1 2024")
        departments: dict[str, Department] = {}
        subjects: dict[str, Subject] = {}
        for code, name, department_name, records in ATTENDANCE_FIXTURE:
            if department_name not in departments:
                department = Department(name=department_name)
                departments[department_name] = department
                subjects[department_name] = Subject(
                    name=f"{department_name} Fundamentals",
                    department=department,
                    semester=semester,
                )
            student = Student(
                student_code=code,
                full_name=name,
                email=f"{code.lower()}@school.example",
                department=departments[department_name],
                semester=semester,
            )
            for date, minutes, present in records:
                student.attendance_records.append(
                    AttendanceRecord(
                        subject=subjects[department_name],
                        date=dt.date.fromisoformat(date),
                        duration=minutes,
                        is_present=present,
                    )
                )
            session.add(student)
        session.commit()


@pytest.fixture
def memory_connection() -> Generator[DatabaseConnection, None, None]:
    """Create a DatabaseConnection with SQLite in-memory and empty tables."""
    connection = DatabaseConnection("sqlite:///:memory:")
    connection.create_tables()
    yield connection
    connection.close()


@pytest.fixture
def seeded_connection() -> Generator[DatabaseConnection, None, None]:
    """Create a DatabaseConnection with SQLite in-memory loaded with the fixture."""
    connection = DatabaseConnection("sqlite:///:memory:")
    seed_attendance(connection)
    yield connection
    connection.close()


@pytest.fixture
def temp_db() -> Generator[str, None, None]:
    """Create a temporary SQLite database file."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = f.name
    yield f"sqlite:///{db_path}"
    # Cleanup
    if os.path.exists(db_path):
        os.remove(db_path)


@pytest.fixture
def seeded_db(temp_db: str) -> str:
    """Temporary SQLite database file loaded with the fixture."""
    connection = DatabaseConnection(temp_db)
    seed_attendance(connection)
    connection.close()
    return temp_db


@pytest.fixture
def make_student() -> Callable[..., Student]:
    """Factory for transient students with absence records.

    Each entry of ``absences`` is a duration in minutes, recorded as absent.
    """
    ids = itertools.count(1)

    def factory(
        code: str,
        department: str = "Computer Science",
        absences: list[int] | None = None,
        present: list[int] | None = None,
    ) -> Student:
        student = Student(
            id=next(ids),
            student_code=code,
            full_name=f"Student {code}",
            department=Department(name=department),
            semester=Semester(name="S1 2024"),
        )
        day = dt.date(2024, 4, 1)
        for minutes in absences or []:
            student.attendance_records.append(
                AttendanceRecord(date=day, duration=minutes, is_present=False)
            )
        for minutes in present or []:
            student.attendance_records.append(
                AttendanceRecord(date=day, duration=minutes, is_present=True)
            )
        return student

    return factory


@pytest.fixture
def stub_gateway() -> StubGateway:
    """Gateway stub answering with an empty completion unless reconfigured."""
    return StubGateway()
