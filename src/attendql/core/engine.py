"""Question pipeline: natural language in, students and a summary out.

Flow for one question:
    classify -> (canonical plan) or (prompt -> translate -> normalize ->
    bind date parameters) -> execute -> validate results -> summarize

Every stage failure caused by external data (the translator or the store)
is logged in full and answered with a generic failure summary; raw query
text and error strings never reach the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from attendql.core.connection import DatabaseConnection
from attendql.core.types import (
    QueryOutcome,
    QueryPlan,
    QueryResponse,
    TranslationFailure,
)
from attendql.exceptions import AttendQLError, TranslationUnavailableError
from attendql.query.classifier import classify
from attendql.query.executor import QueryExecutor
from attendql.query.normalizer import normalize
from attendql.query.parameters import extract_date_params
from attendql.query.prompt import PromptBuilder
from attendql.query.results import ResultValidator
from attendql.query.summary import summarize
from attendql.translation.openai import OpenAIGateway

if TYPE_CHECKING:
    from attendql.core.config import Settings
    from attendql.schema.models import Student
    from attendql.translation.gateway import TranslationGateway

logger = logging.getLogger(__name__)

ERROR_SUMMARY = "Error processing your query. Please try again."
EMPTY_QUESTION_SUMMARY = "Please provide a valid search query."


class QuestionPipeline:
    """Answers attendance questions against the store.

    Holds only immutable collaborators, so one instance can serve
    concurrent questions.

    Example:
        >>> pipeline = QuestionPipeline.from_settings(Settings.from_env())
        >>> outcome = pipeline.process_question("students absent on 2024-04-10")
        >>> print(outcome.summary)
    """

    def __init__(
        self,
        connection: DatabaseConnection,
        gateway: TranslationGateway,
        prompt_builder: PromptBuilder | None = None,
        executor: QueryExecutor | None = None,
        result_validator: ResultValidator | None = None,
    ) -> None:
        """Initialize the pipeline.

        Args:
            connection: Connection to the attendance store
            gateway: Text-generation service used for translation
            prompt_builder: Prompt builder (defaults to the attendance schema)
            executor: Query executor (defaults to one bound to connection)
            result_validator: Post-hoc result checks
        """
        self._connection = connection
        self._gateway = gateway
        self._prompt_builder = prompt_builder or PromptBuilder()
        self._executor = executor or QueryExecutor(connection)
        self._result_validator = result_validator or ResultValidator()

    @classmethod
    def from_settings(cls, settings: Settings, echo: bool = False) -> QuestionPipeline:
        """Build a pipeline wired to the OpenAI gateway.

        Args:
            settings: Process-wide configuration
            echo: Whether to echo SQL statements

        Returns:
            QuestionPipeline instance
        """
        connection = DatabaseConnection(settings.database_url, echo=echo)
        return cls(connection, OpenAIGateway.from_settings(settings))

    @property
    def connection(self) -> DatabaseConnection:
        """The store connection."""
        return self._connection

    def plan(self, question: str) -> QueryPlan:
        """Produce the query plan for a question.

        Args:
            question: Natural language question

        Returns:
            Canonical plan for recognized questions, otherwise a translated plan

        Raises:
            TranslationUnavailableError: If the gateway fails
            QueryNormalizationError: If the completion holds no query
        """
        canonical = classify(question)
        if canonical is not None:
            return canonical

        prompt = self._prompt_builder.build(question)
        result = self._gateway.translate(prompt)
        if isinstance(result, TranslationFailure):
            raise TranslationUnavailableError(result.kind.value, result.reason)

        query_text = normalize(result.raw_text)
        bindings = extract_date_params(question, query_text)
        return QueryPlan(query_text=query_text, parameter_bindings=bindings)

    def process_question(self, question: str) -> QueryOutcome:
        """Answer a natural language question.

        Args:
            question: Natural language question

        Returns:
            QueryOutcome with students, summary and the executed query text.
            Handled failures yield no students, a generic summary, no query
            text and ``error`` set to the failure type.
        """
        if not question or not question.strip():
            return QueryOutcome(
                students=[], summary=EMPTY_QUESTION_SUMMARY, error="EmptyQuestion"
            )

        logger.info(f"Processing natural language query: {question}")
        try:
            plan = self.plan(question)
            source = "canonical" if plan.canonical else "translated"
            logger.info(f"Executing {source} query: {plan.query_text}")
            students = self._executor.execute(plan)
        except AttendQLError as e:
            logger.error(f"Error processing natural language query: {e.message}", exc_info=True)
            return QueryOutcome(students=[], summary=ERROR_SUMMARY, error=type(e).__name__)

        validation = self._result_validator.validate(students, question)
        logger.info(f"Found {len(students)} students matching query: {question}")
        return QueryOutcome(
            students=students,
            summary=self.summarize(students, question),
            generated_query=plan.query_text,
            validation=validation,
        )

    def summarize(self, students: Sequence[Student], question: str) -> str:
        """Describe a result set in prose."""
        return summarize(students, question)

    def ask(self, question: str) -> QueryResponse:
        """Answer a question as a serializable response."""
        return QueryResponse.from_outcome(question, self.process_question(question))

    def close(self) -> None:
        """Close the store connection."""
        self._connection.close()

    def __enter__(self) -> QuestionPipeline:
        """Context manager entry."""
        return self

    def __exit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        """Context manager exit."""
        self.close()
