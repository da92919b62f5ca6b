"""Static schema context for SQL generation.

Describes the queryable entities of the attendance store, their columns and
relationships, in a form the prompt builder can render. The description is
versioned: bump SCHEMA_VERSION whenever the mapped tables change.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

SCHEMA_VERSION = "1"


@dataclass(frozen=True)
class ColumnContext:
    """One column of an entity table."""

    name: str
    type: str
    description: str


@dataclass(frozen=True)
class EntityContext:
    """One queryable entity."""

    name: str
    table: str
    columns: tuple[ColumnContext, ...]
    relationships: tuple[str, ...] = ()


@dataclass(frozen=True)
class SchemaContext:
    """The full set of queryable entities."""

    version: str
    entities: tuple[EntityContext, ...]
    notes: tuple[str, ...] = field(default_factory=tuple)

    def entity(self, name: str) -> EntityContext:
        """Look up an entity by name."""
        for entity in self.entities:
            if entity.name == name:
                return entity
        available = ", ".join(e.name for e in self.entities)
        raise KeyError(f"Entity '{name}' not found. Available entities: {available}")

    def to_dict(self) -> dict[str, Any]:
        """Return the context as a JSON-serializable dict."""
        return {
            "version": self.version,
            "entities": [
                {
                    "name": e.name,
                    "table": e.table,
                    "columns": [
                        {"name": c.name, "type": c.type, "description": c.description}
                        for c in e.columns
                    ],
                    "relationships": list(e.relationships),
                }
                for e in self.entities
            ],
            "notes": list(self.notes),
        }


ATTENDANCE_SCHEMA = SchemaContext(
    version=SCHEMA_VERSION,
    entities=(
        EntityContext(
            name="Student",
            table="students",
            columns=(
                ColumnContext("id", "integer", "Primary key"),
                ColumnContext("student_code", "string", "Student's ID number"),
                ColumnContext("full_name", "string", "Student's full name"),
                ColumnContext("email", "string", "Student's email address"),
                ColumnContext("department_id", "integer", "Foreign key to departments.id"),
                ColumnContext("semester_id", "integer", "Foreign key to semesters.id"),
            ),
            relationships=(
                "Many-to-one with Department (students.department_id = departments.id)",
                "Many-to-one with Semester (students.semester_id = semesters.id)",
                "One-to-many with AttendanceRecord (attendance_records.student_id = students.id)",
            ),
        ),
        EntityContext(
            name="Department",
            table="departments",
            columns=(
                ColumnContext("id", "integer", "Primary key"),
                ColumnContext("name", "string", "Department name"),
            ),
            relationships=(
                "One-to-many with Student (students.department_id)",
                "One-to-many with Subject (subjects.department_id)",
            ),
        ),
        EntityContext(
            name="Semester",
            table="semesters",
            columns=(
                ColumnContext("id", "integer", "Primary key"),
                ColumnContext("name", "string", "Semester name"),
            ),
            relationships=(
                "One-to-many with Student (students.semester_id)",
                "One-to-many with Subject (subjects.semester_id)",
            ),
        ),
        EntityContext(
            name="Subject",
            table="subjects",
            columns=(
                ColumnContext("id", "integer", "Primary key"),
                ColumnContext("name", "string", "Subject name"),
                ColumnContext("code", "string", "Subject code"),
                ColumnContext("department_id", "integer", "Foreign key to departments.id"),
                ColumnContext("semester_id", "integer", "Foreign key to semesters.id"),
            ),
            relationships=(
                "Many-to-one with Department (subjects.department_id)",
                "Many-to-one with Semester (subjects.semester_id)",
                "One-to-many with AttendanceRecord (attendance_records.subject_id)",
            ),
        ),
        EntityContext(
            name="AttendanceRecord",
            table="attendance_records",
            columns=(
                ColumnContext("id", "integer", "Primary key"),
                ColumnContext("student_id", "integer", "Foreign key to students.id"),
                ColumnContext("subject_id", "integer", "Foreign key to subjects.id"),
                ColumnContext("date", "date", "Date of the attendance record"),
                ColumnContext("duration", "integer", "Duration in minutes"),
                ColumnContext(
                    "is_present",
                    "boolean",
                    "Whether the student was present (true) or absent (false)",
                ),
            ),
            relationships=(
                "Many-to-one with Student (attendance_records.student_id)",
                "Many-to-one with Subject (attendance_records.subject_id)",
            ),
        ),
    ),
    notes=(
        "duration is stored in minutes: multiply hour thresholds by 60 before filtering",
        "absence hours are never stored; derive them from SUM(duration) of absent records",
    ),
)


def get_schema_context() -> SchemaContext:
    """Return the schema context of the attendance store."""
    return ATTENDANCE_SCHEMA
