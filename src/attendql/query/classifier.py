"""Lexical classification of questions with a known-correct query plan.

"Students with zero absences" is easy for a translator to get subtly wrong
(it needs a negated existence, not a filtered count), so questions carrying
a zero-absence signal never reach the translator.
"""

from __future__ import annotations

import logging

from sqlalchemy import false, select

from attendql.core.types import QueryPlan
from attendql.schema.models import AttendanceRecord, Student

logger = logging.getLogger(__name__)

ZERO_ABSENCE_PHRASES = ("zero absence", "0 absence", "no absence")


def is_zero_absence_question(question: str) -> bool:
    """Check whether a question asks for students without any absence.

    Args:
        question: Raw question text

    Returns:
        True if any zero-absence signal is present (case-insensitive)
    """
    lowered = question.lower()
    if any(phrase in lowered for phrase in ZERO_ABSENCE_PHRASES):
        return True
    return "perfect" in lowered and "attendance" in lowered


def zero_absence_plan() -> QueryPlan:
    """Every student with no absent attendance record."""
    absent = select(AttendanceRecord.id).where(
        AttendanceRecord.student_id == Student.id,
        AttendanceRecord.is_present == false(),
    )
    statement = select(Student).where(~absent.exists())
    return QueryPlan(query_text=str(statement), statement=statement)


def classify(question: str) -> QueryPlan | None:
    """Return the canonical plan for a recognized question, else None."""
    if is_zero_absence_question(question):
        logger.info("Zero absence question detected, using canonical plan")
        return zero_absence_plan()
    return None
