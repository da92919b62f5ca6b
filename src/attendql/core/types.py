"""Core types for the AttendQL question pipeline.

Pipeline-internal values (plans, translation outcomes, validation reports)
are plain frozen dataclasses scoped to one question. The caller-facing
views are pydantic models so they serialize to JSON directly.
"""

from __future__ import annotations

import datetime as dt
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from sqlalchemy import Select

    from attendql.schema.models import Student


class FailureKind(StrEnum):
    """Ways the translation gateway can fail."""

    UNREACHABLE = "unreachable"  # network error, timeout, refused request
    MALFORMED_RESPONSE = "malformed_response"  # expected fields missing
    EMPTY = "empty"  # completion carried no text


@dataclass(frozen=True)
class TranslationSuccess:
    """Raw completion text returned by the text-generation service."""

    raw_text: str


@dataclass(frozen=True)
class TranslationFailure:
    """The text-generation service produced nothing usable."""

    kind: FailureKind
    reason: str


TranslationResult = TranslationSuccess | TranslationFailure


@dataclass(frozen=True)
class QueryPlan:
    """A query ready for execution, created once per question."""

    query_text: str
    """SQL text shown to callers; the executed text for translated plans."""

    parameter_bindings: Mapping[str, dt.date] = field(default_factory=dict)
    """Named placeholder values, bound at execution time."""

    statement: Select[Any] | None = None
    """Query-builder statement for canonical plans."""

    @property
    def canonical(self) -> bool:
        """Whether the plan was constructed internally rather than generated."""
        return self.statement is not None


@dataclass(frozen=True)
class ValidationReport:
    """Outcome of post-hoc consistency checks on a result set."""

    applied: bool = False
    """Whether any check applied to the question."""

    inconsistent_students: list[str] = field(default_factory=list)
    """Student codes that contradict the question's zero-absence claim."""

    @property
    def consistent(self) -> bool:
        """True when no inconsistency was detected."""
        return not self.inconsistent_students


@dataclass
class QueryOutcome:
    """What the pipeline hands back for one question."""

    students: list[Student]
    summary: str
    generated_query: str | None = None
    error: str | None = None
    validation: ValidationReport = field(default_factory=ValidationReport)

    @property
    def failed(self) -> bool:
        """Whether the pipeline stopped on a handled failure."""
        return self.error is not None


class StudentView(BaseModel):
    """Flattened student for API and CLI consumers."""

    id: int
    student_code: str
    full_name: str
    email: str | None = None
    department: str | None = None
    semester: str | None = None
    absence_hours: int = Field(
        default=0, description="Absent minutes / 60, rounded to the nearest hour"
    )

    @classmethod
    def from_student(cls, student: Student) -> StudentView:
        """Build a view from a loaded Student."""
        return cls(
            id=student.id,
            student_code=student.student_code,
            full_name=student.full_name,
            email=student.email,
            department=student.department.name if student.department else None,
            semester=student.semester.name if student.semester else None,
            absence_hours=(student.absence_minutes() + 30) // 60,
        )


class QueryResponse(BaseModel):
    """Response to a natural language question."""

    students: list[StudentView] = Field(default_factory=list)
    summary: str
    original_query: str
    total_results: int = 0
    generated_query: str | None = None
    error: str | None = None

    @classmethod
    def from_outcome(cls, question: str, outcome: QueryOutcome) -> QueryResponse:
        """Build a response from a pipeline outcome."""
        views = [StudentView.from_student(s) for s in outcome.students]
        return cls(
            students=views,
            summary=outcome.summary,
            original_query=question,
            total_results=len(views),
            generated_query=outcome.generated_query,
            error=outcome.error,
        )
