"""Post-hoc consistency checks on returned students.

Checks are informational: inconsistencies are logged and reported, and the
students are still returned.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from attendql.core.types import ValidationReport
from attendql.query.classifier import is_zero_absence_question

if TYPE_CHECKING:
    from attendql.schema.models import Student

logger = logging.getLogger(__name__)


class ResultValidator:
    """Re-checks zero-absence results against their attendance records."""

    def validate(self, students: Sequence[Student], question: str) -> ValidationReport:
        """Validate query results against the question.

        Args:
            students: Students returned by the executor
            question: Original question text

        Returns:
            ValidationReport listing the codes of inconsistent students
        """
        if not is_zero_absence_question(question):
            return ValidationReport()

        logger.info("Validating zero absence results")
        inconsistent = []
        for student in students:
            if student.has_absence():
                logger.warning(
                    "Potential data inconsistency: student "
                    f"{student.full_name} ({student.student_code}) reported as having "
                    "zero absences but has absence records"
                )
                inconsistent.append(student.student_code)

        return ValidationReport(applied=True, inconsistent_students=inconsistent)


def validate_results(students: Sequence[Student], question: str) -> ValidationReport:
    """Convenience function to validate a result set."""
    return ResultValidator().validate(students, question)
