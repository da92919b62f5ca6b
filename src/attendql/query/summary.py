"""Deterministic prose summaries of query results."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from attendql.query.classifier import is_zero_absence_question

if TYPE_CHECKING:
    from attendql.schema.models import Student

NO_RESULTS = "No students found matching your query."
PERFECT_ATTENDANCE = "These students have perfect attendance with zero recorded absences."
ABSENCE_TERMS = ("absence", "absent", "miss")


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}" if count == 1 else f"{count} {noun}s"


def department_breakdown(students: Sequence[Student]) -> dict[str, int]:
    """Count students per department name, in order of first appearance."""
    counts: dict[str, int] = {}
    for student in students:
        name = student.department.name
        counts[name] = counts.get(name, 0) + 1
    return counts


def summarize(students: Sequence[Student], question: str) -> str:
    """Describe a result set in a few sentences.

    Args:
        students: Students returned for the question
        question: Original question text

    Returns:
        Summary text. Absence totals are whole hours, and the average
        divides that total by the number of students.
    """
    if not students:
        return NO_RESULTS

    lines = [f"Found {_plural(len(students), 'student')} matching your query."]

    if is_zero_absence_question(question):
        lines += ["", PERFECT_ATTENDANCE]

    lines += ["", "Department breakdown:"]
    for department, count in department_breakdown(students).items():
        lines.append(f"- {department}: {_plural(count, 'student')}")

    lowered = question.lower()
    if any(term in lowered for term in ABSENCE_TERMS):
        total_hours = sum(student.absence_minutes() for student in students) // 60
        average_hours = total_hours / len(students)
        lines += [
            "",
            f"Total absence hours: {total_hours}",
            f"Average absence hours per student: {average_hours:.1f}",
        ]

    return "\n".join(lines)
