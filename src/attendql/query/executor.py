"""Read-only execution of query plans against the attendance store."""

from __future__ import annotations

import datetime as dt
import logging
import time
from collections.abc import Mapping
from typing import TYPE_CHECKING

from sqlalchemy import Date, bindparam, select, text
from sqlalchemy.exc import SQLAlchemyError

from attendql.core.types import QueryPlan
from attendql.exceptions import (
    QueryExecutionError,
    UnboundParameterError,
    UnsafeQueryRejectedError,
)
from attendql.query.parameters import find_placeholders
from attendql.query.validator import QueryValidator
from attendql.schema.models import Student

if TYPE_CHECKING:
    from sqlalchemy import Executable

    from attendql.core.connection import DatabaseConnection

logger = logging.getLogger(__name__)


class QueryExecutor:
    """Runs query plans and returns fully loaded Student objects.

    Translated plans pass through the safety gate first; canonical plans
    are built internally and skip it. Nothing is ever committed.
    """

    def __init__(
        self,
        connection: DatabaseConnection,
        validator: QueryValidator | None = None,
    ) -> None:
        """Initialize the executor.

        Args:
            connection: Connection to the attendance store
            validator: Safety gate for generated SQL (defaults to QueryValidator())
        """
        self._connection = connection
        self._validator = validator or QueryValidator()

    def execute(self, plan: QueryPlan) -> list[Student]:
        """Execute a query plan.

        Args:
            plan: Canonical or translated plan

        Returns:
            Matching students with department, semester and attendance records loaded

        Raises:
            UnsafeQueryRejectedError: If generated SQL fails the safety gate
            UnboundParameterError: If the SQL references placeholders with no value
            QueryExecutionError: If the store rejects or fails on the query
        """
        statement = plan.statement if plan.statement is not None else self._prepare(plan)

        start_time = time.perf_counter()
        try:
            with self._connection.get_session() as session:
                students = list(session.scalars(statement).unique().all())
                for student in students:
                    self._resolve_relations(student)
        except SQLAlchemyError as e:
            logger.error(f"Query execution failed: {e}", exc_info=True)
            raise QueryExecutionError(
                f"Query execution failed: {e}", {"sql": plan.query_text}
            ) from e

        execution_time_ms = (time.perf_counter() - start_time) * 1000
        logger.info(f"Query returned {len(students)} students in {execution_time_ms:.2f}ms")
        return students

    def run_read_query(
        self, query_text: str, params: Mapping[str, dt.date] | None = None
    ) -> list[Student]:
        """Validate and run generated SQL with named date parameters."""
        return self.execute(QueryPlan(query_text=query_text, parameter_bindings=params or {}))

    def _prepare(self, plan: QueryPlan) -> Executable:
        """Gate, bind and map generated SQL onto the Student entity."""
        validation = self._validator.validate(plan.query_text)
        if not validation.valid:
            reason = validation.error or "invalid query"
            logger.warning(f"Rejected generated query ({reason}): {plan.query_text}")
            raise UnsafeQueryRejectedError(reason, plan.query_text)
        for warning in validation.warnings:
            logger.warning(warning)

        placeholders = find_placeholders(validation.sql)
        missing = [name for name in placeholders if name not in plan.parameter_bindings]
        if missing:
            raise UnboundParameterError(missing)

        params = [
            bindparam(name, plan.parameter_bindings[name], type_=Date) for name in placeholders
        ]
        sql = text(validation.sql).bindparams(*params)
        return select(Student).from_statement(sql)

    def _resolve_relations(self, student: Student) -> None:
        """Load the relations callers read after the session closes."""
        _ = student.department
        _ = student.semester
        for record in student.attendance_records:
            _ = record.subject
